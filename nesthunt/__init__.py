"""Take-home pay and rent affordability for apartment-hunting households."""

__version__ = "0.1.0"
