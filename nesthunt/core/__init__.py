from nesthunt.core.affordability import (
    AFFORDABILITY_RATIO,
    BudgetStatus,
    HouseholdMember,
    compute_affordable_rent,
    rent_tiers,
    summarize_household,
)
from nesthunt.core.brackets import BracketConfigError, TaxBracket, compute_bracket_tax
from nesthunt.core.takehome import InvalidAmountError, TakeHomeResult, compute_take_home

__all__ = [
    "AFFORDABILITY_RATIO",
    "BracketConfigError",
    "BudgetStatus",
    "HouseholdMember",
    "InvalidAmountError",
    "TakeHomeResult",
    "TaxBracket",
    "compute_affordable_rent",
    "compute_bracket_tax",
    "compute_take_home",
    "rent_tiers",
    "summarize_household",
]
