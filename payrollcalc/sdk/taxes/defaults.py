"""Stock tax configuration and payment types for a new company.

Used by `payroll-calc profile init` to seed profile.yaml. The engine never
falls back to these on its own: a run without tax settings is an error.
"""

from typing import Any, Dict, List

from ..schemas import PaymentTypeDefinition, TaxSettings


DEFAULT_TAX_SETTINGS: Dict[str, Any] = {
    "pension_employer_rate": 8,
    "pension_employee_rate": 6,
    "maternity_employer_rate": 0.3,
    "maternity_employee_rate": 0.3,
    "rama_employer_rate": 7.5,
    "rama_employee_rate": 7.5,
    "cbhi_rate": 0.5,
    "paye_bands": [
        {"min": 0, "max": 60000, "rate": 0},
        {"min": 60001, "max": 100000, "rate": 10},
        {"min": 100001, "max": 200000, "rate": 20},
        {"min": 200001, "max": None, "rate": 30},
    ],
}

DEFAULT_PAYMENT_TYPES: List[Dict[str, Any]] = [
    {"id": "basic_pay", "name": "Basic Pay", "kind": "gross", "order": 1},
    {"id": "transport_allowance", "name": "Transport Allowance", "kind": "gross", "order": 2},
]


def default_tax_settings() -> TaxSettings:
    """Return a fresh TaxSettings built from the stock configuration."""
    return TaxSettings.model_validate(DEFAULT_TAX_SETTINGS)


def default_payment_types() -> List[PaymentTypeDefinition]:
    """Return the two payment types every company starts with."""
    return [PaymentTypeDefinition.model_validate(p) for p in DEFAULT_PAYMENT_TYPES]
