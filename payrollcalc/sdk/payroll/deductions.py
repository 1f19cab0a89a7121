"""Company-defined deductions (loans, advances, welfare contributions).

Deductions are allocated greedily in the order the caller supplies, which
is expected to be business priority. There is no proportional split: an
earlier deduction can consume everything that is available.
"""

import logging
from typing import Any, Dict, List, Sequence

from ..money import ZERO, to_money
from ..schemas import DeductionAllocation, DeductionBalance

logger = logging.getLogger(__name__)


def allocate_deductions(
    deductions: Sequence[DeductionBalance],
    available_amount: Any,
) -> DeductionAllocation:
    """Apply deductions against the net pay left after statutory deductions.

    Each deduction takes min(monthly ceiling, outstanding balance, what is
    still available). Exhausted deductions and zero amounts are skipped and
    do not appear in the breakdown. Balances sharing an id are combined
    into one breakdown entry.

    Args:
        deductions: Deduction balances in priority order (not re-sorted)
        available_amount: Net pay available for deductions

    Returns:
        DeductionAllocation with per-deduction amounts and their total
    """
    available = to_money(available_amount)
    breakdown: Dict[str, Any] = {}
    total_applied = ZERO
    warnings: List[str] = []

    for deduction in deductions:
        if available <= 0:
            break

        applied = min(deduction.monthly_deduction, deduction.remaining_balance, available)
        if applied <= 0:
            continue

        if deduction.id in breakdown:
            warning = f"Deduction '{deduction.id}' appears more than once; amounts are combined"
            logger.warning(warning)
            warnings.append(warning)

        breakdown[deduction.id] = breakdown.get(deduction.id, ZERO) + applied
        total_applied += applied
        available -= applied

    logger.debug(f"deductions: applied {total_applied} across {len(breakdown)} deduction(s)")

    return DeductionAllocation(breakdown=breakdown, total_applied=total_applied, warnings=warnings)


def settle_deductions(
    deductions: Sequence[DeductionBalance],
    applied: Dict[str, Any],
) -> List[DeductionBalance]:
    """Advance deduction balances by the amounts applied in an accepted payroll.

    Returns new DeductionBalance objects; the inputs are left untouched.
    deducted_so_far never passes original_amount. When several balances
    share an id, the combined amount is spread over them in order, each
    taking at most its outstanding balance.

    Args:
        deductions: Balances used for the calculation
        applied: Deduction id -> amount applied (result.deductions)

    Returns:
        Updated balances, same order as the input
    """
    unsettled = {key: to_money(value) for key, value in applied.items()}

    settled = []
    for deduction in deductions:
        amount = min(unsettled.get(deduction.id, ZERO), max(deduction.remaining_balance, ZERO))
        if amount <= 0:
            settled.append(deduction.model_copy())
            continue

        unsettled[deduction.id] -= amount
        settled.append(deduction.model_copy(update={"deducted_so_far": deduction.deducted_so_far + amount}))

    return settled
