"""Money helpers.

All amounts flow through the engine as Decimal. Floats are converted via
their string form so 0.1 stays 0.1 instead of its binary approximation.
Anything that cannot be read as a finite number becomes zero; a payroll run
should not abort on one malformed amount.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
UNIT = Decimal("1")
HUNDRED = Decimal("100")

# Largest accepted order of magnitude (10**15); larger amounts become zero
MAX_EXPONENT = 15


def to_money(value: Any) -> Decimal:
    """Coerce a monetary input to Decimal, defaulting to zero.

    Examples:
        to_money(1500)      -> Decimal("1500")
        to_money("1,500.5") -> Decimal("1500.5")
        to_money(None)      -> Decimal("0")
        to_money("abc")     -> Decimal("0")
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip().replace(",", "")
        if not text:
            return ZERO
        try:
            result = Decimal(text)
        except InvalidOperation:
            logger.debug(f"Non-numeric amount {value!r} treated as 0")
            return ZERO
    else:
        logger.debug(f"Unsupported amount type {type(value).__name__} treated as 0")
        return ZERO

    if not result.is_finite():
        logger.debug(f"Non-finite amount {value!r} treated as 0")
        return ZERO
    if result.adjusted() > MAX_EXPONENT:
        logger.debug(f"Out-of-range amount {value!r} treated as 0")
        return ZERO
    return result


def percent_of(base: Decimal, rate: Decimal) -> Decimal:
    """Apply a percentage rate (6 means 6%)."""
    return base * rate / HUNDRED


def round_to_unit(amount: Decimal) -> Decimal:
    """Round to the whole currency unit, halves away from zero."""
    return amount.quantize(UNIT, rounding=ROUND_HALF_UP)


def to_number(amount: Decimal):
    """Convert to int when integral, else float, for JSON/YAML output."""
    if amount == amount.to_integral_value():
        return int(amount)
    return float(amount)
