"""Progressive PAYE income tax.

Two implementations of the bracket walk exist in historical payroll
records. calculate_paye is the canonical one used by the engine;
calculate_paye_legacy reproduces the older variant so past payslips can be
reconciled. They differ by up to one currency unit on the same income.
"""

from decimal import Decimal
from typing import Any, List, Sequence

from ..money import ZERO, percent_of, round_to_unit, to_money
from ..schemas import PayeBand


def calculate_paye(income: Any, bands: Sequence[PayeBand]) -> Decimal:
    """Calculate PAYE on gross income using inclusive band widths.

    For each band with income > band.min, the taxable slice is
    min(remaining, band.max - band.min + 1), so a band covering
    [60001, 100000] holds 40000 units. The accumulated tax is rounded to the
    whole currency unit (halves up).

    Args:
        income: Gross income for the period
        bands: PAYE brackets sorted ascending by min

    Returns:
        Tax rounded to the whole unit

    Example:
        With bands 0-60000 @0%, 60001-100000 @10%, 100001-200000 @20%:
        calculate_paye(80000, bands)   # -> 2000  (19999 @ 10% = 1999.9)
        calculate_paye(150000, bands)  # -> 14000 (4000 + 49999 @ 20%)
    """
    income = to_money(income)
    tax = ZERO
    remaining = income

    for band in bands:
        if remaining <= 0:
            break
        if income <= band.min:
            continue

        width = band.width
        taxable = remaining if width is None else min(remaining, width)
        tax += percent_of(taxable, band.rate)
        remaining -= taxable

    return max(ZERO, round_to_unit(tax))


def calculate_paye_legacy(income: Any, bands: Sequence[PayeBand]) -> Decimal:
    """Calculate PAYE the way the older class-based payroll engine did.

    Compatibility variant, not used by calculate_payroll. Differences from
    calculate_paye:
    - band width is max - min (exclusive)
    - the slice is further capped at income - min
    - remaining income shrinks by the uncapped slice
    - no rounding of the final figure
    """
    income = to_money(income)
    tax = ZERO
    remaining = income

    for band in bands:
        if remaining <= 0:
            break

        if band.max is None:
            in_band = remaining
        else:
            in_band = min(remaining, band.max - band.min)

        if income > band.min:
            taxable = min(in_band, income - band.min)
            tax += percent_of(taxable, band.rate)

        remaining -= in_band

    return max(ZERO, tax)


def check_paye_bands(bands: Sequence[PayeBand]) -> List[str]:
    """Report problems in a PAYE band list.

    The engine does not call this; bands are expected to be checked when
    the tax configuration is entered. Contiguity uses inclusive bounds, so
    a band ending at 60000 must be followed by one starting at 60001.

    Returns:
        List of problems (empty if the bands are well formed)
    """
    problems = []

    if not bands:
        return ["No PAYE bands configured"]

    for i, band in enumerate(bands):
        label = f"band {i + 1} ({band.min}-{band.max if band.max is not None else 'inf'})"
        if band.rate < 0:
            problems.append(f"{label}: negative rate {band.rate}")
        if band.max is not None and band.max < band.min:
            problems.append(f"{label}: max is below min")

        if i == 0:
            continue

        prev = bands[i - 1]
        if band.min < prev.min:
            problems.append(f"{label}: bands are not sorted ascending by min")
        elif prev.max is None:
            problems.append(f"{label}: follows an unbounded band")
        elif band.min != prev.max + 1:
            kind = "gap" if band.min > prev.max + 1 else "overlap"
            problems.append(f"{label}: {kind} after previous band ending at {prev.max}")

    if bands[-1].max is not None:
        problems.append(f"last band ends at {bands[-1].max}; it should be unbounded")

    return problems
