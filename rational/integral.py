"""Signed integer kinds backing :class:`~rational.ratio.Ratio`.

Everything here operates on NumPy integer scalars so that results keep the
width of the kind they were computed in.  Overflow is not checked by default;
``OVERFLOW_MODE`` is handed to :func:`numpy.errstate` and may be set to
``"warn"`` or ``"raise"`` to have NumPy report it.
"""
from __future__ import annotations

import contextlib
import numbers
from typing import Any, Iterator, Tuple, Union

import numpy as np

from .errors import DivideByZeroError, RatioOverflowError

IntegralKind = Union[type, np.dtype, str]

DEFAULT_KIND = np.intp
OVERFLOW_MODE = "ignore"


def integral_dtype(kind: IntegralKind) -> np.dtype:
    """Return the dtype for *kind*, rejecting anything but signed integers."""
    try:
        dtype = np.dtype(kind)
    except TypeError as exc:
        raise TypeError(f"{kind!r} is not a NumPy integer kind") from exc
    if not np.issubdtype(dtype, np.signedinteger):
        raise TypeError(f"Ratio requires a signed integer kind, got {dtype.name}")
    return dtype


@contextlib.contextmanager
def overflow_guard() -> Iterator[None]:
    """Apply ``OVERFLOW_MODE`` to the scalar arithmetic in the block."""
    with np.errstate(over=OVERFLOW_MODE):
        try:
            yield
        except FloatingPointError as exc:
            raise RatioOverflowError(str(exc)) from exc


def to_scalar(value: Any, dtype: np.dtype, *, name: str = "value") -> np.integer:
    """Convert an integral *value* into a scalar of *dtype*."""
    if isinstance(value, np.integer) and value.dtype == dtype:
        return value
    if not isinstance(value, numbers.Integral):
        raise TypeError(f"{name} must be an integer, got {type(value)!r}")
    as_int = int(value)
    info = np.iinfo(dtype)
    if not info.min <= as_int <= info.max:
        raise RatioOverflowError(f"{name} {as_int} does not fit in {dtype.name}")
    return dtype.type(as_int)


def gcd(a: Any, b: Any) -> Any:
    """Greatest common divisor of ``|a|`` and ``|b|``.

    ``gcd(a, 0) == |a|`` and ``gcd(0, 0) == 0``.
    """
    with overflow_guard():
        return np.gcd(a, b)


def trunc_divmod(a: np.integer, b: np.integer) -> Tuple[np.integer, np.integer]:
    """Quotient rounded toward zero and the remainder carrying the sign of *a*."""
    if b == 0:
        raise DivideByZeroError("integer division or modulo by zero")
    with overflow_guard():
        quotient = a // b
        remainder = a - quotient * b
        if remainder != 0 and (a < 0) != (b < 0):
            quotient = quotient + type(quotient)(1)
            remainder = remainder - b
    return quotient, remainder


def reduce_parts(numerator: np.integer, denominator: np.integer) -> Tuple[np.integer, np.integer]:
    """Divide out the common factor and move the sign onto the numerator.

    *denominator* must be non-zero.
    """
    g = gcd(numerator, denominator)
    with overflow_guard():
        numerator = numerator // g
        denominator = denominator // g
        if denominator < 0:
            numerator, denominator = -numerator, -denominator
    return numerator, denominator


def ipow(base: np.integer, exponent: int) -> np.integer:
    """Raise *base* to a non-negative integer power by repeated squaring."""
    if exponent < 0:
        raise ValueError("exponent must be non-negative")
    result = base.dtype.type(1)
    with overflow_guard():
        while exponent:
            if exponent & 1:
                result = result * base
            exponent >>= 1
            if exponent:
                base = base * base
    return result


__all__ = [
    "DEFAULT_KIND",
    "OVERFLOW_MODE",
    "IntegralKind",
    "gcd",
    "integral_dtype",
    "ipow",
    "overflow_guard",
    "reduce_parts",
    "to_scalar",
    "trunc_divmod",
]
