from __future__ import annotations

from decimal import Decimal

from nesthunt.core.brackets import bracket
from nesthunt.core.jurisdictions.base import JurisdictionConfig, TaxLevel
from nesthunt.core.jurisdictions.federal2025 import FEDERAL_2025

D = Decimal

ON_BRACKETS_2025 = (
    bracket(0,       52_886,  "0.0505"),
    bracket(52_886,  105_775, "0.0915"),
    bracket(105_775, 150_000, "0.1116"),
    bracket(150_000, 220_000, "0.1216"),
    bracket(220_000, None,    "0.1316"),
)

ON_BPA_2025 = D("12747")

# Surtax and health premium are not modelled; this is a rent-planning estimate.
config = JurisdictionConfig(
    code="ON",
    name="Ontario",
    tax_year=2025,
    federal=FEDERAL_2025,
    provincial=TaxLevel(
        name="Ontario Provincial",
        brackets=ON_BRACKETS_2025,
        basic_personal_amount=ON_BPA_2025,
    ),
)
