"""
Fixed-point price units.

Prices live inside the oracle as integers in base units (18 decimals by
default, like wei). Conversions from human-readable values round down and
never accept floats, so cumulative sums stay exact.
"""

from __future__ import annotations

from decimal import ROUND_DOWN, Decimal, InvalidOperation, localcontext

from .exceptions import InvalidInputError

DEFAULT_DECIMALS = 18
MAX_DECIMALS = 36
# enough digits for 256-bit magnitudes, so scaling never rounds implicitly
_PRECISION = 80


def require_int(name: str, value: object) -> int:
    """Return value if it is a plain integer, else raise InvalidInputError."""
    # bool is an int subclass; True is not a price
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(
            f"{name} must be an integer, got {type(value).__name__}",
            details={"field": name},
        )
    return value


def require_positive_int(name: str, value: object) -> int:
    value = require_int(name, value)
    if value <= 0:
        raise InvalidInputError(f"{name} must be positive, got {value}", details={"field": name})
    return value


def _scale(decimals: int) -> int:
    if isinstance(decimals, bool) or not isinstance(decimals, int) or not 0 <= decimals <= MAX_DECIMALS:
        raise InvalidInputError(f"decimals must be an integer in [0, {MAX_DECIMALS}]")
    return 10**decimals


def to_base_units(value: str | int | Decimal, decimals: int = DEFAULT_DECIMALS) -> int:
    """
    Convert a human-readable price to integer base units.

    Args:
        value: Price as string, int or Decimal (float is forbidden)
        decimals: Number of fractional digits carried by one unit

    Returns:
        Price in base units, rounded down

    Raises:
        InvalidInputError: If value is a float or not a finite number
    """
    if isinstance(value, float):
        raise InvalidInputError(
            "Float not allowed for prices due to precision loss. Use string or Decimal instead."
        )
    if isinstance(value, bool):
        raise InvalidInputError("Boolean is not a valid price")

    scale = _scale(decimals)
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise InvalidInputError(f"Invalid price value: {value}") from e
    if not amount.is_finite():
        raise InvalidInputError(f"Invalid price value: {value}")

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return int((amount * scale).to_integral_value(rounding=ROUND_DOWN))


def from_base_units(units: int, decimals: int = DEFAULT_DECIMALS) -> Decimal:
    """Convert integer base units back to an exact Decimal."""
    units = require_int("units", units)
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return Decimal(units) / Decimal(_scale(decimals))


def format_price(units: int, decimals: int = DEFAULT_DECIMALS, places: int = 4) -> str:
    """Render base units for display, truncating to `places` fractional digits."""
    value = from_base_units(units, decimals)
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        quantizer = Decimal(1).scaleb(-places)
        return str(value.quantize(quantizer, rounding=ROUND_DOWN))
