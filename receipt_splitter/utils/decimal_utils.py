from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value) -> Decimal:
    """
    Bring a number into exact decimal space.
    Floats go through their shortest repr so 0.1 stays 0.1 rather than the
    binary approximation. None and non-numeric input become zero.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        return Decimal(int(value))
    if isinstance(value, int):
        return Decimal(value)
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return ZERO


def is_finite_number(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return False
    return to_decimal(value).is_finite()


def quantize_money(amount: Decimal, places: int = 2) -> Decimal:
    """Round half-up to a fixed number of decimal places."""
    return amount.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def to_float(amount: Decimal) -> float:
    return float(amount)


def format_fixed(value, places: int = 2) -> str:
    """Fixed-point string with exactly `places` decimals, e.g. 32.5 -> '32.50'."""
    return f"{quantize_money(to_decimal(value), places):f}"
