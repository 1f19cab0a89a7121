"""Net-to-gross solver.

Some payment types are configured as the net amount the employee should
receive. The solver finds the extra gross that, after every statutory
deduction, adds that much to net pay. It is a bisection search over the
statutory deduction calculator.
"""

import logging
from decimal import Decimal
from typing import Any, Literal, Optional

from ..money import ZERO, to_money
from ..schemas import TaxExemptions, TaxSettings
from ..taxes.statutory import compute_statutory

logger = logging.getLogger(__name__)

DEFAULT_PRECISION = Decimal("0.01")
DEFAULT_MAX_ITERATIONS = 100
# Not proven to bracket the root for every configuration: a combined
# marginal deduction rate above two thirds puts the answer out of range.
UPPER_BOUND_MULTIPLIER = Decimal("3")

Component = Optional[Literal["basic", "transport"]]


def _net_pay(
    gross: Decimal,
    basic_pay: Decimal,
    transport_allowance: Decimal,
    tax_settings: TaxSettings,
    exemptions: Optional[TaxExemptions],
) -> Decimal:
    statutory = compute_statutory(gross, basic_pay, transport_allowance, tax_settings, exemptions)
    return statutory.net_after_cbhi


def solve_gross_increment(
    base_gross: Any,
    target_net_increment: Any,
    tax_settings: TaxSettings,
    basic_pay: Any = 0,
    transport_allowance: Any = 0,
    component: Component = None,
    exemptions: Optional[TaxExemptions] = None,
    precision: Decimal = DEFAULT_PRECISION,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> Decimal:
    """Find the additional gross that yields a desired net increment.

    Searches [0, 3 * target] for the gross increment whose net effect
    (full statutory delta, CBHI included) matches the target. Stops when
    the interval is narrower than `precision` or after `max_iterations`,
    returning the midpoint of the final interval either way.

    Args:
        base_gross: Gross accumulated so far
        target_net_increment: Extra net pay wanted
        tax_settings: Rates and PAYE bands
        basic_pay: Basic pay accumulated so far (RAMA base)
        transport_allowance: Transport allowance so far (maternity exclusion)
        component: "basic" or "transport" when the increment itself is
            basic pay or transport allowance, so it also moves that base
        exemptions: Company exemption flags
        precision: Absolute interval width at which to stop
        max_iterations: Iteration cap

    Returns:
        Additional gross amount (Decimal)

    Example:
        # With no deductions at all, gross-up is the identity
        solve_gross_increment(0, 1000, zero_rate_settings)  # -> ~1000
    """
    base = to_money(base_gross)
    target = to_money(target_net_increment)
    basic = to_money(basic_pay)
    transport = to_money(transport_allowance)

    if target <= 0:
        logger.debug(f"gross-up: non-positive target {target}, nothing to solve")
        return ZERO

    base_net = _net_pay(base, basic, transport, tax_settings, exemptions)

    low = ZERO
    high = target * UPPER_BOUND_MULTIPLIER
    iterations = 0

    while high - low > precision and iterations < max_iterations:
        mid = (low + high) / 2
        trial_basic = basic + mid if component == "basic" else basic
        trial_transport = transport + mid if component == "transport" else transport

        trial_net = _net_pay(base + mid, trial_basic, trial_transport, tax_settings, exemptions)
        if trial_net - base_net < target:
            low = mid
        else:
            high = mid
        iterations += 1

    if high - low > precision:
        logger.warning(
            f"gross-up did not converge after {iterations} iterations "
            f"(base={base}, target={target}, interval width={high - low})"
        )

    result = (low + high) / 2
    logger.debug(f"gross-up: base={base} target_net={target} -> gross {result} ({iterations} iterations)")
    return result
