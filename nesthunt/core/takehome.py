from __future__ import annotations

from dataclasses import asdict, dataclass
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal, InvalidOperation

from nesthunt.core.brackets import compute_bracket_tax
from nesthunt.core.jurisdictions import JurisdictionConfig, get_jurisdiction

D = Decimal
_ZERO = D("0")
_HALF = D("0.5")
_MONTHS = D("12")


class InvalidAmountError(ValueError):
    pass


def to_amount(value: object, field: str = "amount") -> D:
    """Coerce a caller-supplied number to ``Decimal`` or fail loudly."""
    if isinstance(value, bool):
        raise InvalidAmountError(f"{field} must be a number, got a boolean")
    if isinstance(value, D):
        amount = value
    elif isinstance(value, (int, float)):
        amount = D(str(value))
    elif isinstance(value, str):
        try:
            amount = D(value.strip().replace(",", ""))
        except InvalidOperation as exc:
            raise InvalidAmountError(f"{field} must be numeric, got {value!r}") from exc
    else:
        raise InvalidAmountError(f"{field} must be a number, got {type(value).__name__}")
    if not amount.is_finite():
        raise InvalidAmountError(f"{field} must be finite, got {value!r}")
    return amount


def round_half_up(value: D) -> int:
    # Halves go toward positive infinity, so -0.5 rounds to 0 and -1.5 to -1.
    return int((value + _HALF).to_integral_value(rounding=ROUND_FLOOR))


def effective_tax_rate(total_tax: object, annual_salary: object) -> float:
    """Total tax as a percentage of gross salary, one decimal place."""
    salary = to_amount(annual_salary, "annual_salary")
    if salary <= 0:
        return 0.0
    pct = to_amount(total_tax, "total_tax") / salary * D("100")
    return float(pct.quantize(D("0.1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class TakeHomeResult:
    federal_tax: int
    provincial_tax: int
    total_tax: int
    annual_take_home: int
    monthly_take_home: int

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


def net_federal_tax(annual_salary: D, config: JurisdictionConfig) -> D:
    level = config.federal
    gross = compute_bracket_tax(annual_salary, level.brackets)
    return max(_ZERO, gross - level.basic_personal_amount * level.effective_credit_rate)


def net_provincial_tax(annual_salary: D, config: JurisdictionConfig) -> D:
    level = config.provincial
    gross = compute_bracket_tax(annual_salary, level.brackets)
    return max(_ZERO, gross - level.basic_personal_amount * level.brackets[0].rate)


def compute_take_home(annual_salary: object, config: JurisdictionConfig | None = None) -> TakeHomeResult:
    salary = to_amount(annual_salary, "annual_salary")
    jurisdiction = config if config is not None else get_jurisdiction()

    federal = net_federal_tax(salary, jurisdiction)
    provincial = net_provincial_tax(salary, jurisdiction)
    total = federal + provincial
    annual = salary - total
    # Each field is rounded on its own; total_tax may differ from the sum of
    # the rounded parts by one unit.
    return TakeHomeResult(
        federal_tax=round_half_up(federal),
        provincial_tax=round_half_up(provincial),
        total_tax=round_half_up(total),
        annual_take_home=round_half_up(annual),
        monthly_take_home=round_half_up(annual / _MONTHS),
    )


__all__ = [
    "InvalidAmountError",
    "TakeHomeResult",
    "compute_take_home",
    "effective_tax_rate",
    "net_federal_tax",
    "net_provincial_tax",
    "round_half_up",
    "to_amount",
]
