"""
Core utility functions for the Banking Calculators suite.

Decimal parsing and the rounding policy shared by every calculation engine.
All financial calculations use Python's Decimal for precision; a value is
quantized to currency precision only when it leaves an engine.
"""

from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal, InvalidOperation, getcontext, localcontext

# Set high precision for intermediate financial calculations
getcontext().prec = 28

# Banking reports and balance tracking use 2-decimal precision
ROUNDING_PLACES = 2
ROUNDING_MODE = ROUND_HALF_UP

# Inputs of 1e18 or more are out of range for every engine
MAX_INPUT_EXPONENT = 18

TWO_PLACES = Decimal('0.01')
ZERO = Decimal('0')
ONE = Decimal('1')
HUNDRED = Decimal('100')


def to_decimal(value) -> Decimal:
    """
    Safely parse a loosely-typed numeric input into a Decimal.

    Accepts Decimal, int, float, numeric strings and None. Anything that
    cannot be parsed, that parses to NaN or an infinity, or whose magnitude
    reaches 1e18 becomes zero. This function never raises.

    Args:
        value: Raw input, e.g. '100000', 12.5, Decimal('7.25') or None.

    Returns:
        A finite Decimal below 1e18 in magnitude.

    Examples:
        to_decimal('1500.50') → Decimal('1500.50')
        to_decimal('abc') → Decimal('0')
        to_decimal(float('nan')) → Decimal('0')
        to_decimal('1e27') → Decimal('0')
    """
    if isinstance(value, Decimal):
        parsed = value
    elif value is None or isinstance(value, bool):
        return ZERO
    else:
        try:
            # str() first so floats keep their shortest repr, not binary noise
            parsed = Decimal(str(value).strip())
        except (InvalidOperation, ValueError, TypeError):
            return ZERO

    if not parsed.is_finite() or parsed.adjusted() >= MAX_INPUT_EXPONENT:
        return ZERO
    return parsed


def _quantize(value, exponent: Decimal) -> Decimal:
    # Computed results may exceed the input range; only non-finite ones are dropped.
    if isinstance(value, Decimal):
        value = value if value.is_finite() else ZERO
    else:
        value = to_decimal(value)

    with localcontext() as ctx:
        # quantize needs room for every integer digit plus the fraction
        ctx.prec = max(ctx.prec, value.adjusted() - exponent.adjusted() + 2)
        return value.quantize(exponent, rounding=ROUNDING_MODE)


def round_to(value, places: int) -> Decimal:
    """Quantize a value to ``places`` fractional digits using ROUND_HALF_UP."""
    return _quantize(value, Decimal(1).scaleb(-places))


def round_currency(value) -> Decimal:
    """
    Round to standard currency precision (2 decimal places, half up).

    Applied to every monetary figure before it leaves an engine. Results of
    any size are rounded without loss of integer digits.

    Examples:
        round_currency(Decimal('10.005')) → Decimal('10.01')
        round_currency(7) → Decimal('7.00')
    """
    return _quantize(value, TWO_PLACES)


def to_number(value) -> float:
    """Convert a Decimal result to a plain float for export collaborators."""
    return float(round_currency(value))


def whole_months(tenure) -> int:
    """Number of complete months in a (possibly fractional) tenure."""
    return int(to_decimal(tenure).to_integral_value(rounding=ROUND_FLOOR))
