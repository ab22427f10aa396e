"""
Rounding and number display helpers shared by the engines.

Money is always ``Decimal`` and rounds half-up to whole currency units.
Statistics are computed in ``float`` and only rounded for reporting.
"""

from decimal import ROUND_HALF_DOWN, ROUND_HALF_UP, Decimal

WHOLE_UNIT = Decimal("1")


def round_money(amount: Decimal) -> Decimal:
    """Round a monetary amount half-up to a whole currency unit."""
    return amount.quantize(WHOLE_UNIT, rounding=ROUND_HALF_UP)


def round_half_up(value: float, places: int = 0) -> float:
    """Round a float half away from zero at *places* decimals.

    ``round()`` uses banker's rounding, which would report 2.5 as 2.
    """
    exponent = Decimal(1).scaleb(-places)
    rounded = Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP)
    return float(rounded)


def round_half_ceiling(value: float, places: int = 0) -> float:
    """Round a float with ties going toward positive infinity.

    Signed changes report this way: -10.5 becomes -10 and 10.5 becomes 11.
    """
    exponent = Decimal(1).scaleb(-places)
    mode = ROUND_HALF_UP if value >= 0 else ROUND_HALF_DOWN
    return float(Decimal(str(value)).quantize(exponent, rounding=mode))


def format_number(value: float | int | Decimal) -> str:
    """Render a number the way a report shows it: ``90`` not ``90.0``."""
    if isinstance(value, Decimal):
        value = float(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
