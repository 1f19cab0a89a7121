"""Payroll calculation for one staff member.

Sequences the stages: gross salary (with net-to-gross for net-type
payments), statutory deductions, then company deductions against what is
left. Pure: the same input always gives the same result and no input is
modified.
"""

import logging
from typing import Optional

from ..money import ZERO
from ..schemas import (
    PayrollCalculationInput,
    PayrollCalculationResult,
    TaxExemptions,
    TaxSettings,
)
from .deductions import allocate_deductions
from .gross import compute_gross
from ..taxes.statutory import compute_statutory

logger = logging.getLogger(__name__)


class PayrollCalculationError(Exception):
    """Raised when a payroll calculation cannot proceed."""
    pass


class TaxSettingsMissingError(PayrollCalculationError):
    """Raised when no tax settings were supplied for a calculation."""
    pass


def calculate_payroll(
    calc_input: PayrollCalculationInput,
    tax_settings: Optional[TaxSettings] = None,
    exemptions: Optional[TaxExemptions] = None,
) -> PayrollCalculationResult:
    """Calculate the itemized payroll result for one staff member.

    Tax settings and exemptions may be given on the input or as arguments;
    arguments win.

    Args:
        calc_input: Payment types, staff amounts and deduction balances
        tax_settings: Rates and PAYE bands
        exemptions: Company exemption flags

    Returns:
        PayrollCalculationResult. final_net_pay is clamped at zero; the
        warnings list says when that happened.

    Raises:
        TaxSettingsMissingError: If no tax settings are available
    """
    settings = tax_settings if tax_settings is not None else calc_input.tax_settings
    if settings is None:
        raise TaxSettingsMissingError(
            f"No tax settings supplied for staff member '{calc_input.staff_member_id}'"
        )
    exempt = exemptions if exemptions is not None else calc_input.tax_exemptions

    gross = compute_gross(calc_input.payment_types, calc_input.amounts, settings, exempt)

    statutory = compute_statutory(
        gross.total_gross,
        gross.basic_pay,
        gross.transport_allowance,
        settings,
        exempt,
    )

    allocation = allocate_deductions(calc_input.deductions, statutory.net_after_cbhi)

    warnings = list(gross.warnings) + list(allocation.warnings)
    final_net_pay = statutory.net_after_cbhi - allocation.total_applied
    if final_net_pay < 0:
        warning = f"Net pay {final_net_pay} is negative; reported as 0"
        logger.warning(f"{calc_input.staff_member_id}: {warning}")
        warnings.append(warning)
        final_net_pay = ZERO

    logger.debug(
        f"{calc_input.staff_member_id}: gross={gross.total_gross} "
        f"net_after_cbhi={statutory.net_after_cbhi} deductions={allocation.total_applied} "
        f"final={final_net_pay}"
    )

    return PayrollCalculationResult(
        staff_member_id=calc_input.staff_member_id,
        total_gross=gross.total_gross,
        basic_pay=gross.basic_pay,
        transport_allowance=gross.transport_allowance,
        other_payments=gross.other_payments,
        employer_pension=statutory.employer_pension,
        employee_pension=statutory.employee_pension,
        employer_maternity=statutory.employer_maternity,
        employee_maternity=statutory.employee_maternity,
        employer_rama=statutory.employer_rama,
        employee_rama=statutory.employee_rama,
        paye=statutory.paye,
        cbhi=statutory.cbhi,
        net_before_cbhi=statutory.net_before_cbhi,
        net_after_cbhi=statutory.net_after_cbhi,
        deductions=allocation.breakdown,
        total_applied_deductions=allocation.total_applied,
        final_net_pay=final_net_pay,
        warnings=warnings,
    )
