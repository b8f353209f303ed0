from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping

from nesthunt.core.takehome import InvalidAmountError, to_amount

D = Decimal
_ZERO = D("0")

COMFORTABLE_PERCENT = D("33")
TIGHT_PERCENT = D("40")


@dataclass(frozen=True)
class ExpenseDefault:
    expense_id: str
    label: str
    default: D
    description: str


DEFAULT_EXPENSES: tuple[ExpenseDefault, ...] = (
    ExpenseDefault("hydro", "Hydro (Electricity)", D("50"), "Average for a 1-2 bedroom apartment"),
    ExpenseDefault("internet", "Internet", D("75"), "Standard internet plan"),
    ExpenseDefault("renters_insurance", "Renter's Insurance", D("35"), "Basic tenant insurance"),
    ExpenseDefault("transit", "Transit Pass", D("110"), "1-zone monthly pass"),
    ExpenseDefault("parking", "Parking", D("150"), "Monthly parking if not included"),
    ExpenseDefault("water_laundry", "Laundry / Water", D("30"), "Coin laundry if not in-unit"),
)

_EXPENSE_IDS = frozenset(item.expense_id for item in DEFAULT_EXPENSES)


@dataclass(frozen=True)
class ExpenseLine:
    expense_id: str
    label: str
    amount: D
    edited: bool


@dataclass(frozen=True)
class ExpenseEstimate:
    rent: D
    items: list[ExpenseLine]
    total_extras: D
    total_monthly: D
    percent_of_income: float | None
    comfort: str | None


def _baseline(item: ExpenseDefault, has_parking: bool) -> D:
    if item.expense_id == "parking" and has_parking:
        return _ZERO
    return item.default


def comfort_level(percent: D | None) -> str | None:
    if percent is None:
        return None
    if percent <= COMFORTABLE_PERCENT:
        return "comfortable"
    if percent <= TIGHT_PERCENT:
        return "tight"
    return "strained"


def estimate_monthly_costs(
    rent: object,
    monthly_take_home: object = None,
    has_parking: bool = False,
    overrides: Mapping[str, object] | None = None,
) -> ExpenseEstimate:
    rent_amount = max(_ZERO, to_amount(rent, "rent")) if rent is not None else _ZERO
    overrides = dict(overrides or {})
    unknown = sorted(set(overrides) - _EXPENSE_IDS)
    if unknown:
        raise InvalidAmountError(f"Unknown expense ids: {', '.join(unknown)}")

    lines: list[ExpenseLine] = []
    for item in DEFAULT_EXPENSES:
        baseline = _baseline(item, has_parking)
        if item.expense_id in overrides:
            amount = max(_ZERO, to_amount(overrides[item.expense_id], item.expense_id))
        else:
            amount = baseline
        lines.append(ExpenseLine(item.expense_id, item.label, amount, amount != baseline))

    extras = sum((line.amount for line in lines), _ZERO)
    total = rent_amount + extras

    percent: D | None = None
    if monthly_take_home is not None:
        income = to_amount(monthly_take_home, "monthly_take_home")
        if income > 0:
            percent = (total / income * D("100")).quantize(D("0.1"), rounding=ROUND_HALF_UP)

    return ExpenseEstimate(
        rent=rent_amount,
        items=lines,
        total_extras=extras,
        total_monthly=total,
        percent_of_income=float(percent) if percent is not None else None,
        comfort=comfort_level(percent),
    )


__all__ = [
    "DEFAULT_EXPENSES",
    "ExpenseEstimate",
    "ExpenseLine",
    "comfort_level",
    "estimate_monthly_costs",
]
