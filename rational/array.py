"""NumPy object-array helpers for :class:`~rational.ratio.Ratio` values."""
from __future__ import annotations

import numbers
from typing import Any, Optional, Tuple, Union

import numpy as np

from .integral import IntegralKind
from .ratio import DEFAULT_FLOAT_PRECISION, Ratio

Shape = Union[int, Tuple[int, ...]]


def _ratio_type(kind: Optional[IntegralKind]) -> type:
    return Ratio if kind is None else Ratio[kind]


def _coerce_element(
    item: Any, ratio_type: type, *, keep_kind: bool, precision: Optional[int]
) -> Ratio:
    if isinstance(item, Ratio):
        if keep_kind or item.dtype == ratio_type.dtype:
            return item
        return ratio_type(item)
    if isinstance(item, (numbers.Integral, numbers.Rational)):
        return ratio_type(item)
    if isinstance(item, numbers.Real):
        if precision is None:
            precision = DEFAULT_FLOAT_PRECISION
        return ratio_type.from_float(float(item), precision)
    raise TypeError(f"Cannot convert {type(item)!r} to Ratio")


def as_ratio_array(
    values: Any,
    *,
    kind: Optional[IntegralKind] = None,
    precision: Optional[int] = None,
    copy: bool = True,
) -> np.ndarray:
    """Return a ``numpy.ndarray`` of :class:`Ratio` values.

    ``values`` can be any iterable of integers, fractions, ratios or floats, or
    an existing NumPy array.  Floats are converted with
    :meth:`Ratio.from_float` at ``precision`` decimal places.  Without an
    explicit ``kind`` existing ratios keep their kind and everything else uses
    the default kind; with one, ratios are widened to it.  When ``copy`` is
    ``False`` and ``values`` is already an object array holding only ratios,
    the original array is returned.
    """

    ratio_type = _ratio_type(kind)
    keep_kind = kind is None

    def convert(item: Any) -> Ratio:
        return _coerce_element(item, ratio_type, keep_kind=keep_kind, precision=precision)

    if isinstance(values, np.ndarray):
        array = values.copy() if copy else values
        if (
            array.dtype == object
            and array.size
            and all(isinstance(item, Ratio) for item in array.flat)
            and (keep_kind or all(item.dtype == ratio_type.dtype for item in array.flat))
        ):
            return array
        if array.size == 0:
            return np.empty(array.shape, dtype=object)
        return np.vectorize(convert, otypes=[object])(array)

    if isinstance(values, (list, tuple)):
        converted = np.empty(len(values), dtype=object)
        for index, item in enumerate(values):
            converted[index] = convert(item)
        return converted

    return as_ratio_array(list(values), kind=kind, precision=precision, copy=copy)


def zeros(shape: Shape, *, kind: Optional[IntegralKind] = None) -> np.ndarray:
    """Return an object array of the given ``shape`` filled with zero ratios."""

    if isinstance(shape, numbers.Integral) and shape < 0:
        raise ValueError("length must be non-negative")
    ratio_type = _ratio_type(kind)
    array = np.empty(shape, dtype=object)
    for index in np.ndindex(array.shape):
        array[index] = ratio_type.zero()
    return array


def zeros_like(values: Any, *, kind: Optional[IntegralKind] = None) -> np.ndarray:
    """Return a zero-filled array that matches the shape of ``values``."""

    return zeros(np.shape(values), kind=kind)


def to_float_array(values: Any, kind: type = np.float64) -> np.ndarray:
    """Convert ratios to a floating point array in one final step."""

    array = as_ratio_array(values, copy=False)
    result = np.empty(array.shape, dtype=kind)
    for index in np.ndindex(array.shape):
        result[index] = array[index].to_float(kind)
    return result


__all__ = ["as_ratio_array", "to_float_array", "zeros", "zeros_like"]
