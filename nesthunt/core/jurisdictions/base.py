from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from nesthunt.core.brackets import BracketConfigError, TaxBracket, validate_brackets

D = Decimal


@dataclass(frozen=True)
class TaxLevel:
    name: str
    brackets: tuple[TaxBracket, ...]
    basic_personal_amount: D
    # None means the credit is taken at this level's lowest bracket rate.
    credit_rate: D | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "brackets", validate_brackets(self.brackets))
        if self.basic_personal_amount < 0:
            raise BracketConfigError(f"{self.name}: basic personal amount must be non-negative")
        if self.credit_rate is not None and self.credit_rate < 0:
            raise BracketConfigError(f"{self.name}: credit rate must be non-negative")

    @property
    def effective_credit_rate(self) -> D:
        if self.credit_rate is not None:
            return self.credit_rate
        return self.brackets[0].rate


@dataclass(frozen=True)
class JurisdictionConfig:
    code: str
    name: str
    tax_year: int
    federal: TaxLevel
    provincial: TaxLevel
    currency: str = field(default="CAD")

    def __post_init__(self) -> None:
        object.__setattr__(self, "code", self.code.upper())


__all__ = ["JurisdictionConfig", "TaxLevel"]
