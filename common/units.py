"""
common.units

Amount helpers: plain decimal rendering and smallest-unit conversion.
"""
from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Union

Number = Union[int, float, str, Decimal]

# wei amounts routinely exceed the default 28 significant digits
_PRECISION = 80


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise ValueError(f"not an amount: {value!r}")
    if isinstance(value, Decimal):
        d = value
    else:
        try:
            d = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"not an amount: {value!r}") from None
    if not d.is_finite():
        raise ValueError(f"not a finite amount: {value!r}")
    return d


def plain_decimal_string(value: Number) -> str:
    """
    Render value without scientific notation, e.g. 1e+21 -> "1000000000000000000000".
    """
    d = to_decimal(value)
    s = format(d, "f")
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    return s or "0"


def to_account_unit(value: Number, precision: int) -> Decimal:
    """
    Convert a smallest-unit amount (satoshi, wei) to display units.
    """
    if precision <= 0:
        raise ValueError("precision must be positive")
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return Decimal(plain_decimal_string(value)) / Decimal(precision)


def to_fixed(value: Number, places: int) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return to_decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
