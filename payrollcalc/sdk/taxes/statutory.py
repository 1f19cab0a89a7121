"""Statutory deductions: pension, maternity, RAMA, PAYE and CBHI.

Each contribution has its own base and they must be computed in this order,
since CBHI is levied on what remains after the others:

1. Pension    - total gross
2. Maternity  - total gross minus transport allowance
3. RAMA       - basic pay only
4. PAYE       - total gross (progressive bands)
5. Net before CBHI = gross - employee pension - employee maternity
                     - employee RAMA - PAYE
6. CBHI       - net before CBHI
"""

import logging
from typing import Any, Optional

from ..money import ZERO, percent_of, to_money
from ..schemas import StatutoryDeductions, TaxExemptions, TaxSettings
from .paye import calculate_paye

logger = logging.getLogger(__name__)


def compute_statutory(
    total_gross: Any,
    basic_pay: Any,
    transport_allowance: Any,
    tax_settings: TaxSettings,
    exemptions: Optional[TaxExemptions] = None,
) -> StatutoryDeductions:
    """Compute all statutory contributions for one period.

    Args:
        total_gross: Total gross salary
        basic_pay: Basic pay component (RAMA base)
        transport_allowance: Transport allowance component (excluded from maternity base)
        tax_settings: Rates and PAYE bands
        exemptions: Company exemption flags; an exempt stage yields zero

    Returns:
        StatutoryDeductions with employer and employee sides, PAYE, CBHI
        and net pay before and after CBHI
    """
    gross = to_money(total_gross)
    basic = to_money(basic_pay)
    transport = to_money(transport_allowance)
    exempt = exemptions or TaxExemptions()
    rates = tax_settings

    if exempt.pension_exempt:
        employer_pension = employee_pension = ZERO
    else:
        employer_pension = percent_of(gross, rates.pension_employer_rate)
        employee_pension = percent_of(gross, rates.pension_employee_rate)

    if exempt.maternity_exempt:
        employer_maternity = employee_maternity = ZERO
    else:
        maternity_base = gross - transport
        employer_maternity = percent_of(maternity_base, rates.maternity_employer_rate)
        employee_maternity = percent_of(maternity_base, rates.maternity_employee_rate)

    if exempt.rama_exempt:
        employer_rama = employee_rama = ZERO
    else:
        employer_rama = percent_of(basic, rates.rama_employer_rate)
        employee_rama = percent_of(basic, rates.rama_employee_rate)

    paye = ZERO if exempt.paye_exempt else calculate_paye(gross, rates.paye_bands)

    net_before_cbhi = gross - employee_pension - employee_maternity - employee_rama - paye

    cbhi = ZERO if exempt.cbhi_exempt else percent_of(net_before_cbhi, rates.cbhi_rate)
    net_after_cbhi = net_before_cbhi - cbhi

    logger.debug(
        f"statutory: gross={gross} pension={employee_pension} maternity={employee_maternity} "
        f"rama={employee_rama} paye={paye} cbhi={cbhi} net={net_after_cbhi}"
    )

    return StatutoryDeductions(
        employer_pension=employer_pension,
        employee_pension=employee_pension,
        employer_maternity=employer_maternity,
        employee_maternity=employee_maternity,
        employer_rama=employer_rama,
        employee_rama=employee_rama,
        paye=paye,
        cbhi=cbhi,
        net_before_cbhi=net_before_cbhi,
        net_after_cbhi=net_after_cbhi,
    )
