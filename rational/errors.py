"""Exceptions raised by :mod:`rational`."""
from __future__ import annotations

from typing import Optional


class RatioError(ArithmeticError):
    """Base class for errors signalled by :class:`~rational.ratio.Ratio`."""

    default_message = "Invalid rational arithmetic."

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.default_message)


class DivideByZeroError(RatioError, ZeroDivisionError):
    """A zero denominator was supplied or would have been produced."""

    default_message = "Division by zero is undefined."


class RatioOverflowError(RatioError, OverflowError):
    """A value does not fit the integer kind backing a ratio."""

    default_message = "Arithmetic operation resulted in an overflow."


__all__ = ["RatioError", "DivideByZeroError", "RatioOverflowError"]
