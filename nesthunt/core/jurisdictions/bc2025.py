from __future__ import annotations

from decimal import Decimal

from nesthunt.core.brackets import bracket
from nesthunt.core.jurisdictions.base import JurisdictionConfig, TaxLevel
from nesthunt.core.jurisdictions.federal2025 import FEDERAL_2025

D = Decimal

BC_BRACKETS_2025 = (
    bracket(0,       47_937,  "0.0506"),
    bracket(47_937,  95_875,  "0.077"),
    bracket(95_875,  110_076, "0.105"),
    bracket(110_076, 133_664, "0.1229"),
    bracket(133_664, 181_232, "0.147"),
    bracket(181_232, None,    "0.168"),
)

BC_BPA_2025 = D("12580")

config = JurisdictionConfig(
    code="BC",
    name="British Columbia",
    tax_year=2025,
    federal=FEDERAL_2025,
    provincial=TaxLevel(
        name="BC Provincial",
        brackets=BC_BRACKETS_2025,
        basic_personal_amount=BC_BPA_2025,
    ),
)
