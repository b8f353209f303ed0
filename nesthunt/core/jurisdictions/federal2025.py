from __future__ import annotations

from decimal import Decimal

from nesthunt.core.brackets import bracket
from nesthunt.core.jurisdictions.base import TaxLevel

D = Decimal

FEDERAL_BRACKETS_2025 = (
    bracket(0,       57_375,  "0.15"),
    bracket(57_375,  114_750, "0.205"),
    bracket(114_750, 158_468, "0.26"),
    bracket(158_468, 220_000, "0.29"),
    bracket(220_000, None,    "0.33"),
)

FEDERAL_BPA_2025 = D("16129")
# Fixed lowest federal marginal rate; not derived from the table above.
FEDERAL_CREDIT_RATE = D("0.15")

FEDERAL_2025 = TaxLevel(
    name="Federal",
    brackets=FEDERAL_BRACKETS_2025,
    basic_personal_amount=FEDERAL_BPA_2025,
    credit_rate=FEDERAL_CREDIT_RATE,
)
