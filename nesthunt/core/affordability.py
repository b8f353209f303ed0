from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Iterable, Sequence

from nesthunt.core.jurisdictions import JurisdictionConfig, get_jurisdiction
from nesthunt.core.takehome import (
    TakeHomeResult,
    compute_take_home,
    effective_tax_rate,
    round_half_up,
    to_amount,
)

D = Decimal

AFFORDABILITY_RATIO = D("0.33")
STRETCH_FACTOR = D("1.15")


@dataclass(frozen=True)
class RentTierSpec:
    percent: int
    label: str


RENT_TIERS: tuple[RentTierSpec, ...] = (
    RentTierSpec(25, "Conservative"),
    RentTierSpec(30, "Recommended"),
    RentTierSpec(33, "Sweet Spot"),
    RentTierSpec(35, "Stretching"),
    RentTierSpec(40, "Maximum"),
)


@dataclass(frozen=True)
class RentTier:
    percent: int
    label: str
    max_rent: int
    recommended: bool


class BudgetStatus(str, Enum):
    WITHIN_BUDGET = "within_budget"
    STRETCHING = "stretching"
    OVER_BUDGET = "over_budget"


def compute_affordable_rent(monthly_take_home_combined: object) -> int:
    monthly = to_amount(monthly_take_home_combined, "monthly_take_home_combined")
    return round_half_up(monthly * AFFORDABILITY_RATIO)


def rent_tiers(monthly_take_home_combined: object) -> list[RentTier]:
    monthly = to_amount(monthly_take_home_combined, "monthly_take_home_combined")
    sweet_spot = int(AFFORDABILITY_RATIO * 100)
    return [
        RentTier(
            percent=spec.percent,
            label=spec.label,
            max_rent=round_half_up(monthly * D(spec.percent) / D(100)),
            recommended=spec.percent == sweet_spot,
        )
        for spec in RENT_TIERS
    ]


def budget_status(budget_max: object, affordable_rent: object) -> BudgetStatus | None:
    if budget_max is None or affordable_rent is None:
        return None
    ceiling = to_amount(budget_max, "budget_max")
    affordable = to_amount(affordable_rent, "affordable_rent")
    if not ceiling or not affordable:
        return None
    if ceiling <= affordable:
        return BudgetStatus.WITHIN_BUDGET
    if ceiling <= affordable * STRETCH_FACTOR:
        return BudgetStatus.STRETCHING
    return BudgetStatus.OVER_BUDGET


@dataclass(frozen=True)
class HouseholdMember:
    member_id: str
    display_name: str
    annual_salary: D | int | float | None = None


@dataclass(frozen=True)
class MemberBreakdown:
    member_id: str
    display_name: str
    annual_salary: D | None
    breakdown: TakeHomeResult | None
    effective_rate: float | None


@dataclass(frozen=True)
class HouseholdSummary:
    jurisdiction: str
    members: list[MemberBreakdown]
    combined_monthly_take_home: int
    affordable_rent: int
    tiers: list[RentTier] = field(default_factory=list)
    budget_min: D | None = None
    budget_max: D | None = None
    budget_status: BudgetStatus | None = None
    partial: bool = False


def _member_breakdown(member: HouseholdMember, config: JurisdictionConfig) -> MemberBreakdown:
    if member.annual_salary is None:
        return MemberBreakdown(member.member_id, member.display_name, None, None, None)
    salary = to_amount(member.annual_salary, f"annual_salary[{member.member_id}]")
    if salary <= 0:
        return MemberBreakdown(member.member_id, member.display_name, salary, None, None)
    result = compute_take_home(salary, config)
    return MemberBreakdown(
        member_id=member.member_id,
        display_name=member.display_name,
        annual_salary=salary,
        breakdown=result,
        effective_rate=effective_tax_rate(result.total_tax, salary),
    )


def summarize_household(
    members: Iterable[HouseholdMember],
    config: JurisdictionConfig | None = None,
    budget_min: object = None,
    budget_max: object = None,
) -> HouseholdSummary:
    """Combine every member's take-home pay into one affordability picture.

    Members without a positive salary are reported but contribute nothing to
    the combined figure; ``partial`` flags a household where only some
    salaries are known.
    """
    jurisdiction = config if config is not None else get_jurisdiction()
    rows: Sequence[MemberBreakdown] = [_member_breakdown(m, jurisdiction) for m in members]
    counted = [row.breakdown for row in rows if row.breakdown is not None]

    combined = sum(result.monthly_take_home for result in counted)
    affordable = compute_affordable_rent(combined) if combined > 0 else 0
    floor = to_amount(budget_min, "budget_min") if budget_min is not None else None
    ceiling = to_amount(budget_max, "budget_max") if budget_max is not None else None

    return HouseholdSummary(
        jurisdiction=jurisdiction.code,
        members=list(rows),
        combined_monthly_take_home=combined,
        affordable_rent=affordable,
        tiers=rent_tiers(combined) if counted else [],
        budget_min=floor,
        budget_max=ceiling,
        budget_status=budget_status(ceiling, affordable),
        partial=0 < len(counted) < len(rows),
    )


__all__ = [
    "AFFORDABILITY_RATIO",
    "BudgetStatus",
    "HouseholdMember",
    "HouseholdSummary",
    "MemberBreakdown",
    "RENT_TIERS",
    "RentTier",
    "budget_status",
    "compute_affordable_rent",
    "rent_tiers",
    "summarize_household",
]
