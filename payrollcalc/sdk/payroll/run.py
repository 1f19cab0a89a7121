"""Company payroll run.

Calculates every staff member independently. A malformed staff record is
reported and skipped so one bad row does not stop the run; missing tax
settings stop the whole run since no result would be meaningful.
"""

import logging
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

from pydantic import ValidationError

from ..schemas import (
    PaymentTypeDefinition,
    PayrollCalculationInput,
    PayrollCalculationResult,
    PayrollRunResult,
    PayrollTotals,
    StaffError,
    StaffPayrollRecord,
    TaxExemptions,
    TaxSettings,
)
from .engine import TaxSettingsMissingError, calculate_payroll

logger = logging.getLogger(__name__)

_TOTAL_FIELDS = (
    "total_gross",
    "employer_pension",
    "employee_pension",
    "employer_maternity",
    "employee_maternity",
    "employer_rama",
    "employee_rama",
    "paye",
    "cbhi",
    "total_applied_deductions",
    "final_net_pay",
)


def _format_validation_error(e: ValidationError) -> str:
    parts = []
    for err in e.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "record"
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


def run_payroll(
    payment_types: Sequence[PaymentTypeDefinition],
    staff_records: Iterable[Union[StaffPayrollRecord, Mapping[str, Any]]],
    tax_settings: Optional[TaxSettings],
    exemptions: Optional[TaxExemptions] = None,
) -> PayrollRunResult:
    """Calculate payroll for every staff member of a company.

    Args:
        payment_types: Company payment type definitions
        staff_records: StaffPayrollRecord objects or raw dicts (validated here)
        tax_settings: Rates and PAYE bands for the run
        exemptions: Company exemption flags

    Returns:
        PayrollRunResult with results in input order, per-record errors and totals

    Raises:
        TaxSettingsMissingError: If tax_settings is None
    """
    if tax_settings is None:
        raise TaxSettingsMissingError("No tax settings supplied for payroll run")

    results: List[PayrollCalculationResult] = []
    errors: List[StaffError] = []

    for index, raw in enumerate(staff_records):
        staff_id = None
        try:
            if isinstance(raw, StaffPayrollRecord):
                record = raw
            else:
                staff_id = raw.get("staff_member_id") if isinstance(raw, Mapping) else None
                record = StaffPayrollRecord.model_validate(raw)
            staff_id = record.staff_member_id

            calc_input = PayrollCalculationInput(
                staff_member_id=record.staff_member_id,
                payment_types=list(payment_types),
                amounts=record.amounts,
                deductions=record.deductions,
            )
        except ValidationError as e:
            message = _format_validation_error(e)
            logger.warning(f"Skipping staff record {index} ({staff_id}): {message}")
            errors.append(StaffError(
                staff_member_id=str(staff_id) if staff_id is not None else None,
                index=index,
                error=message,
            ))
            continue

        results.append(calculate_payroll(calc_input, tax_settings, exemptions))

    logger.info(f"Payroll run: {len(results)} calculated, {len(errors)} skipped")

    return PayrollRunResult(
        results=results,
        errors=errors,
        totals=summarize_results(results),
    )


def summarize_results(results: Sequence[PayrollCalculationResult]) -> PayrollTotals:
    """Sum each monetary column over a set of payroll results."""
    totals = PayrollTotals.zero()
    values = {field: getattr(totals, field) for field in _TOTAL_FIELDS}

    for result in results:
        for field in _TOTAL_FIELDS:
            values[field] += getattr(result, field)

    return PayrollTotals(staff_count=len(results), **values)
