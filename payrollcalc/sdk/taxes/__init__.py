"""taxes - Statutory contribution and PAYE logic.

Scope:
- Progressive PAYE (canonical and legacy variants)
- Pension, maternity, RAMA and CBHI contributions
- Stock tax configuration for new companies

Constraints:
- Pure calculation - no profile or file access
- Rates are percentages, amounts are Decimal

Usage:
    from payrollcalc.sdk.taxes import compute_statutory, calculate_paye

    statutory = compute_statutory(500000, 300000, 50000, tax_settings)
    paye = calculate_paye(80000, tax_settings.paye_bands)
"""

from .paye import (
    calculate_paye,
    calculate_paye_legacy,
    check_paye_bands,
)

from .statutory import compute_statutory

from .defaults import (
    DEFAULT_TAX_SETTINGS,
    DEFAULT_PAYMENT_TYPES,
    default_tax_settings,
    default_payment_types,
)

__all__ = [
    # PAYE
    "calculate_paye",
    "calculate_paye_legacy",
    "check_paye_bands",
    # Statutory
    "compute_statutory",
    # Defaults
    "DEFAULT_TAX_SETTINGS",
    "DEFAULT_PAYMENT_TYPES",
    "default_tax_settings",
    "default_payment_types",
]
