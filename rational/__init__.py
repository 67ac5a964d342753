"""Exact rational arithmetic over fixed-width integer kinds."""

import logging

from .array import as_ratio_array, to_float_array, zeros, zeros_like
from .errors import DivideByZeroError, RatioError, RatioOverflowError
from .integral import DEFAULT_KIND, gcd
from .ratio import (
    DEFAULT_FLOAT_PRECISION,
    Ratio,
    Rational,
    Rational32,
    Rational64,
    make_ratio,
    parse_ratio,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "DEFAULT_FLOAT_PRECISION",
    "DEFAULT_KIND",
    "DivideByZeroError",
    "Ratio",
    "RatioError",
    "RatioOverflowError",
    "Rational",
    "Rational32",
    "Rational64",
    "as_ratio_array",
    "gcd",
    "make_ratio",
    "parse_ratio",
    "to_float_array",
    "zeros",
    "zeros_like",
]
