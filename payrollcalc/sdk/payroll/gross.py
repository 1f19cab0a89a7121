"""Gross salary calculation.

Folds a staff member's configured payments into total gross, in payment
type order. Net-type entries are grossed up against the gross accumulated
from the entries before them, not against zero or the final total, so the
order of payment types matters.
"""

import logging
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from ..money import ZERO
from ..schemas import (
    BASIC_PAY,
    TRANSPORT_ALLOWANCE,
    GrossBreakdown,
    PaymentTypeDefinition,
    StaffPaymentAmount,
    TaxExemptions,
    TaxSettings,
)
from .solver import solve_gross_increment

logger = logging.getLogger(__name__)


def sort_payment_types(payment_types: Sequence[PaymentTypeDefinition]) -> List[PaymentTypeDefinition]:
    """Return a new list ordered by `order`; ties keep input order."""
    return sorted(payment_types, key=lambda p: p.order)


def _index_amounts(amounts: Sequence[StaffPaymentAmount]) -> Dict[str, Decimal]:
    """Map payment type id -> amount. The first entry for an id wins."""
    indexed: Dict[str, Decimal] = {}
    for entry in amounts:
        indexed.setdefault(entry.payment_type_id, entry.amount)
    return indexed


def compute_gross(
    payment_types: Sequence[PaymentTypeDefinition],
    amounts: Sequence[StaffPaymentAmount],
    tax_settings: TaxSettings,
    exemptions: Optional[TaxExemptions] = None,
) -> GrossBreakdown:
    """Compute total gross and its tagged components.

    Args:
        payment_types: Company payment type definitions
        amounts: The staff member's configured amount per payment type
        tax_settings: Needed to gross up net-type entries
        exemptions: Company exemption flags, also applied while grossing up

    Returns:
        GrossBreakdown with total, basic pay, transport allowance and the
        remaining payments keyed by name. Zero amounts produce no entry.
    """
    amount_by_type = _index_amounts(amounts)

    total_gross = ZERO
    basic_pay = ZERO
    transport_allowance = ZERO
    other_payments: Dict[str, Decimal] = {}
    warnings: List[str] = []

    for payment_type in sort_payment_types(payment_types):
        amount = amount_by_type.get(payment_type.id, ZERO)
        if amount == 0:
            continue

        if payment_type.kind == "gross":
            gross_amount = amount
        else:
            if payment_type.name == BASIC_PAY:
                component = "basic"
            elif payment_type.name == TRANSPORT_ALLOWANCE:
                component = "transport"
            else:
                component = None
            gross_amount = solve_gross_increment(
                total_gross,
                amount,
                tax_settings,
                basic_pay=basic_pay,
                transport_allowance=transport_allowance,
                component=component,
                exemptions=exemptions,
            )
            logger.debug(f"{payment_type.name}: net {amount} grossed up to {gross_amount}")
            # Negative net targets solve to 0 and produce no line item
            if gross_amount == 0:
                continue

        total_gross += gross_amount

        if payment_type.name == BASIC_PAY:
            basic_pay = gross_amount
        elif payment_type.name == TRANSPORT_ALLOWANCE:
            transport_allowance = gross_amount
        else:
            # Same-named entries overwrite; the total still counts both.
            if payment_type.name in other_payments:
                warning = (
                    f"Payment '{payment_type.name}' appears more than once; "
                    f"the later amount replaces {other_payments[payment_type.name]} in the breakdown"
                )
                logger.warning(warning)
                warnings.append(warning)
            other_payments[payment_type.name] = gross_amount

    return GrossBreakdown(
        total_gross=total_gross,
        basic_pay=basic_pay,
        transport_allowance=transport_allowance,
        other_payments=other_payments,
        warnings=warnings,
    )
