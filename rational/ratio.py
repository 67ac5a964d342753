"""Exact rational numbers over fixed-width NumPy integer kinds."""
from __future__ import annotations

import logging
import math
import numbers
import operator
import re
from fractions import Fraction
from typing import Any, Callable, Dict, Optional, Tuple, Union

import numpy as np

from .errors import DivideByZeroError, RatioOverflowError
from .integral import (
    DEFAULT_KIND,
    IntegralKind,
    integral_dtype,
    ipow,
    overflow_guard,
    reduce_parts,
    to_scalar,
    trunc_divmod,
)

logger = logging.getLogger(__name__)

NumberLike = Union["Ratio", Fraction, numbers.Integral]

DEFAULT_FLOAT_PRECISION = 6

_RATIO_PATTERN = re.compile(r"\s*([+-]?\d+)\s*(?:/\s*([+-]?\d+))?\s*")


class Ratio:
    """Numerator/denominator pair kept in lowest terms with a positive denominator.

    ``Ratio`` is backed by :data:`~rational.integral.DEFAULT_KIND`; other
    signed integer kinds are selected by subscripting, e.g. ``Ratio[np.int32]``.
    Intermediate products are computed in the backing kind and are not checked
    for overflow (see :data:`rational.integral.OVERFLOW_MODE`).
    """

    __slots__ = ("_numerator", "_denominator")
    __array_priority__ = 1000.0  # Prefer Ratio semantics in NumPy expressions.

    dtype: np.dtype = integral_dtype(DEFAULT_KIND)
    _kinds: Dict[np.dtype, type] = {}

    def __class_getitem__(cls, kind: IntegralKind) -> type:
        dtype = integral_dtype(kind)
        try:
            return Ratio._kinds[dtype]
        except KeyError:
            pass
        name = f"Ratio[{dtype.name}]"
        specialised = type(
            name,
            (Ratio,),
            {"__slots__": (), "__module__": __name__, "__qualname__": name, "dtype": dtype},
        )
        Ratio._kinds[dtype] = specialised
        return specialised

    def __init__(
        self,
        numerator: Any = 0,
        denominator: Optional[numbers.Integral] = None,
    ) -> None:
        dtype = self.dtype
        if denominator is not None:
            num, den = self._normalize(
                to_scalar(numerator, dtype, name="numerator"),
                to_scalar(denominator, dtype, name="denominator"),
            )
        elif isinstance(numerator, Ratio):
            num, den = self._widen_parts(numerator)
        elif isinstance(numerator, numbers.Integral):
            num, den = to_scalar(numerator, dtype, name="numerator"), dtype.type(1)
        elif isinstance(numerator, numbers.Rational):
            # Fractions are already in lowest terms with a positive denominator.
            num = to_scalar(numerator.numerator, dtype, name="numerator")
            den = to_scalar(numerator.denominator, dtype, name="denominator")
        else:
            raise TypeError(
                f"Cannot interpret {type(numerator)!r} as {type(self).__name__}; "
                "use from_float() for floating point values"
            )
        self._numerator = num
        self._denominator = den

    # ------------------------------------------------------------------
    # Constructors
    @classmethod
    def _unreduced(cls, numerator: np.integer, denominator: np.integer) -> "Ratio":
        """Wrap parts that already satisfy the lowest-terms invariant."""
        ratio = object.__new__(cls)
        ratio._numerator = numerator
        ratio._denominator = denominator
        return ratio

    @classmethod
    def _reduced(cls, numerator: np.integer, denominator: np.integer) -> "Ratio":
        num, den = cls._normalize(numerator, denominator)
        return cls._unreduced(num, den)

    @classmethod
    def from_integer(cls, value: numbers.Integral) -> "Ratio":
        """Return ``value/1``."""
        return cls(value)

    @classmethod
    def from_parts(cls, numerator: numbers.Integral, denominator: numbers.Integral) -> "Ratio":
        """Return ``numerator/denominator`` in lowest terms."""
        return cls(numerator, denominator)

    @classmethod
    def from_fraction(cls, value: numbers.Rational) -> "Ratio":
        """Create a :class:`Ratio` from :class:`fractions.Fraction`."""
        return cls(value.numerator, value.denominator)

    @classmethod
    def from_float(
        cls, value: float, precision: int = DEFAULT_FLOAT_PRECISION
    ) -> "Ratio":
        """Return *value* rounded to *precision* decimal places as an exact ratio.

        The exact binary value of the float is scaled and ties are rounded away
        from zero, matching :meth:`round`.  Raises :class:`RatioOverflowError`
        when ``10**precision`` or the scaled numerator does not fit the kind.
        """
        if isinstance(value, numbers.Integral):
            return cls.from_integer(value)
        value = float(value)
        if math.isnan(value) or math.isinf(value):
            raise ValueError("cannot convert NaN or infinity to Ratio")
        if precision < 0:
            raise ValueError("precision must be >= 0")
        dtype = cls.dtype
        scale = 10 ** precision
        try:
            denominator = to_scalar(scale, dtype, name="scale")
            scaled = Fraction(value) * scale
            magnitude = math.floor(abs(scaled) + Fraction(1, 2))
            numerator = to_scalar(
                magnitude if scaled >= 0 else -magnitude, dtype, name="numerator"
            )
        except RatioOverflowError as exc:
            raise RatioOverflowError(
                f"{value!r} at precision {precision} does not fit in {dtype.name}"
            ) from exc
        logger.debug("Converted float %r to %s/%s (precision %d)", value, numerator, denominator, precision)
        return cls._reduced(numerator, denominator)

    @classmethod
    def from_string(cls, text: str) -> "Ratio":
        """Parse ``"numerator/denominator"`` (or a bare integer)."""
        match = _RATIO_PATTERN.fullmatch(text)
        if match is None:
            raise ValueError(f"invalid literal for {cls.__name__}: {text!r}")
        numerator, denominator = match.groups()
        if denominator is None:
            return cls(int(numerator))
        return cls(int(numerator), int(denominator))

    @classmethod
    def zero(cls) -> "Ratio":
        return cls._unreduced(cls.dtype.type(0), cls.dtype.type(1))

    @classmethod
    def one(cls) -> "Ratio":
        return cls._unreduced(cls.dtype.type(1), cls.dtype.type(1))

    @classmethod
    def pi(cls) -> "Ratio":
        """Approximation of pi as ``6283/2000``."""
        return cls._unreduced(
            to_scalar(6283, cls.dtype, name="numerator"),
            to_scalar(2000, cls.dtype, name="denominator"),
        )

    # ------------------------------------------------------------------
    # Properties and helpers
    @property
    def numerator(self) -> np.integer:
        return self._numerator

    @property
    def denominator(self) -> np.integer:
        return self._denominator

    def as_fraction(self) -> Fraction:
        """Return a :class:`Fraction` with the same value."""
        return Fraction(int(self._numerator), int(self._denominator))

    def reduce(self) -> None:
        """Bring this value back to lowest terms in place."""
        self._numerator, self._denominator = self._normalize(self._numerator, self._denominator)

    def reduced(self) -> "Ratio":
        return type(self)._reduced(self._numerator, self._denominator)

    def reciprocal(self) -> "Ratio":
        """Return ``1/self``; the kind's minimum numerator wraps when negated."""
        if self._numerator == 0:
            raise DivideByZeroError("zero has no reciprocal")
        if self._numerator < 0:
            with overflow_guard():
                return type(self)._unreduced(-self._denominator, -self._numerator)
        return type(self)._unreduced(self._denominator, self._numerator)

    # ------------------------------------------------------------------
    # Predicates
    def is_integer(self) -> bool:
        return bool(self._denominator == 1)

    def is_zero(self) -> bool:
        return bool(self._numerator == 0)

    def is_positive(self) -> bool:
        return bool(self._numerator > 0)

    def is_negative(self) -> bool:
        return bool(self._numerator < 0)

    def signum(self) -> np.integer:
        if self.is_zero():
            return self.dtype.type(0)
        if self.is_positive():
            return self.dtype.type(1)
        return self.dtype.type(-1)

    def abs(self) -> "Ratio":
        return -self if self.is_negative() else self

    def abs_sub(self, other: Any) -> "Ratio":
        """Return ``|self - other|``."""
        return (self - other).abs()

    # ------------------------------------------------------------------
    # Rounding
    def trunc(self) -> "Ratio":
        """Round toward zero."""
        return type(self)._unreduced(self.to_integer(), self.dtype.type(1))

    def fract(self) -> "Ratio":
        """Return the part discarded by :meth:`trunc`, carrying the sign of ``self``."""
        _, remainder = trunc_divmod(self._numerator, self._denominator)
        # gcd(n % d, d) == gcd(n, d) == 1, and a zero remainder means d == 1.
        return type(self)._unreduced(remainder, self._denominator)

    def floor(self) -> "Ratio":
        """Round toward negative infinity."""
        one = self.dtype.type(1)
        if not self.is_negative():
            return self.trunc()
        with overflow_guard():
            shifted = self._numerator - self._denominator + one
        quotient, _ = trunc_divmod(shifted, self._denominator)
        return type(self)._unreduced(quotient, one)

    def ceil(self) -> "Ratio":
        """Round toward positive infinity."""
        one = self.dtype.type(1)
        if self.is_negative():
            return self.trunc()
        with overflow_guard():
            shifted = self._numerator + self._denominator - one
        quotient, _ = trunc_divmod(shifted, self._denominator)
        return type(self)._unreduced(quotient, one)

    def round(self) -> "Ratio":
        """Round to the nearest integer, ties away from zero."""
        one = self.dtype.type(1)
        quotient, remainder = trunc_divmod(self._numerator, self._denominator)
        remainder = abs(remainder)
        # remainder >= denominator - remainder  <=>  |fract| >= 1/2
        if remainder >= self._denominator - remainder:
            with overflow_guard():
                quotient = quotient + one if self.is_positive() else quotient - one
        return type(self)._unreduced(quotient, one)

    # ------------------------------------------------------------------
    # Conversions
    def to_integer(self) -> np.integer:
        """Return the quotient truncated toward zero."""
        quotient, _ = trunc_divmod(self._numerator, self._denominator)
        return quotient

    def to_float(self, kind: type = float) -> Any:
        """Return ``kind(numerator) / kind(denominator)``."""
        if not np.issubdtype(np.dtype(kind), np.floating):
            raise TypeError(f"{kind!r} is not a floating point type")
        return kind(self._numerator) / kind(self._denominator)

    def astype(self, kind: IntegralKind) -> "Ratio":
        """Convert to another integer kind, narrowing included."""
        target = Ratio[kind]
        if target.dtype == self.dtype:
            return self
        if not np.can_cast(self.dtype, target.dtype, casting="safe"):
            logger.debug("Narrowing %r to %s", self, target.dtype.name)
        return target._unreduced(
            to_scalar(self._numerator, target.dtype, name="numerator"),
            to_scalar(self._denominator, target.dtype, name="denominator"),
        )

    def _widen_parts(self, other: "Ratio") -> Tuple[np.integer, np.integer]:
        if other.dtype == self.dtype:
            return other._numerator, other._denominator
        if not np.can_cast(other.dtype, self.dtype, casting="safe"):
            raise TypeError(
                f"implicit conversion from {other.dtype.name} to {self.dtype.name} "
                "may lose precision; use astype()"
            )
        return self.dtype.type(other._numerator), self.dtype.type(other._denominator)

    # ------------------------------------------------------------------
    # Numeric protocol
    def __float__(self) -> float:
        return self.to_float()

    def __int__(self) -> int:
        return int(self.to_integer())

    def __bool__(self) -> bool:
        return not self.is_zero()

    def __trunc__(self) -> int:
        return int(self.to_integer())

    def __floor__(self) -> int:
        return int(self.floor()._numerator)

    def __ceil__(self) -> int:
        return int(self.ceil()._numerator)

    def __round__(self, ndigits: Optional[int] = None) -> Any:
        if ndigits is None:
            return int(self.round()._numerator)
        if ndigits >= 0:
            scale = type(self).from_integer(10 ** ndigits)
            return (self * scale).round() / scale
        scale = type(self).from_integer(10 ** -ndigits)
        return (self / scale).round() * scale

    def __reduce__(self):
        return (_restore, (self.dtype.name, int(self._numerator), int(self._denominator)))

    # ------------------------------------------------------------------
    # Representation
    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._numerator}, {self._denominator})"

    def __str__(self) -> str:
        return f"{self._numerator}/{self._denominator}"

    def __format__(self, format_spec: str) -> str:
        if format_spec in ("", "r", "R"):
            return str(self)
        try:
            return format(float(self), format_spec)
        except (ValueError, TypeError):
            return format(str(self), format_spec)

    # ------------------------------------------------------------------
    # Internal helpers
    @classmethod
    def _normalize(cls, num: np.integer, den: np.integer) -> Tuple[np.integer, np.integer]:
        if den == 0:
            raise DivideByZeroError("denominator must be non-zero")
        return reduce_parts(num, den)

    def _coerce_pair(self, other: Any) -> Optional[Tuple["Ratio", "Ratio"]]:
        if isinstance(other, Ratio):
            if other.dtype == self.dtype:
                return self, other
            common = Ratio[np.promote_types(self.dtype, other.dtype)]
            return common(self), common(other)
        if isinstance(other, numbers.Integral):
            return self, type(self).from_integer(other)
        if isinstance(other, numbers.Rational):
            return self, type(self).from_fraction(other)
        return None

    def _coerce_operand(self, value: Any) -> Any:
        """Turn NumPy scalars into operands the Python operators understand."""
        if isinstance(value, Ratio):
            return value
        if isinstance(value, (numbers.Integral, numbers.Rational)):
            return type(self)(value)
        if isinstance(value, np.floating):
            return float(value)
        return value

    def _binary_operation(self, other: Any, op: Callable, float_op: Callable) -> Any:
        if isinstance(other, np.ndarray):
            vectorised = np.vectorize(
                lambda x: self._binary_operation(x, op, float_op),
                otypes=[object],
            )
            return vectorised(other)
        if isinstance(other, (list, tuple)):
            return np.array(
                [self._binary_operation(x, op, float_op) for x in other],
                dtype=object,
            )
        if isinstance(other, (float, complex, np.floating)):
            logger.debug("Falling back to float arithmetic for %r and %r", self, other)
            return float_op(self.to_float(), other)
        pair = self._coerce_pair(other)
        if pair is None:
            return NotImplemented
        return op(*pair)

    def _coerce_power(self, value: Any) -> int:
        if isinstance(value, numbers.Integral):
            return int(value)
        if isinstance(value, Ratio):
            if not value.is_integer():
                raise ValueError("Exponent must be an integer")
            return int(value._numerator)
        if isinstance(value, numbers.Real):
            if not float(value).is_integer():
                raise ValueError("Exponent must be an integer")
            return int(value)
        raise TypeError("Unsupported exponent type")

    # ------------------------------------------------------------------
    # Arithmetic operators
    def __add__(self, other: Any) -> Any:
        return self._binary_operation(other, _add, operator.add)

    def __radd__(self, other: Any) -> Any:
        return self._binary_operation(other, _reflected(_add), _reflected(operator.add))

    def __sub__(self, other: Any) -> Any:
        return self._binary_operation(other, _sub, operator.sub)

    def __rsub__(self, other: Any) -> Any:
        return self._binary_operation(other, _reflected(_sub), _reflected(operator.sub))

    def __mul__(self, other: Any) -> Any:
        return self._binary_operation(other, _mul, operator.mul)

    def __rmul__(self, other: Any) -> Any:
        return self._binary_operation(other, _reflected(_mul), _reflected(operator.mul))

    def __truediv__(self, other: Any) -> Any:
        return self._binary_operation(other, _truediv, operator.truediv)

    def __rtruediv__(self, other: Any) -> Any:
        return self._binary_operation(
            other, _reflected(_truediv), _reflected(operator.truediv)
        )

    def __mod__(self, other: Any) -> Any:
        return self._binary_operation(other, _mod, math.fmod)

    def __rmod__(self, other: Any) -> Any:
        return self._binary_operation(other, _reflected(_mod), _reflected(math.fmod))

    def __pow__(self, exponent: Any) -> Any:
        if isinstance(exponent, np.ndarray):
            vectorised = np.vectorize(lambda x: self.__pow__(x), otypes=[object])
            return vectorised(exponent)
        power = self._coerce_power(exponent)
        base = self
        if power < 0:
            base = self.reciprocal()
            power = -power
        # Powers of coprime parts stay coprime.
        return type(self)._unreduced(
            ipow(base._numerator, power),
            ipow(base._denominator, power),
        )

    def __neg__(self) -> "Ratio":
        """Negate the numerator; the kind's minimum value wraps to itself."""
        with overflow_guard():
            return type(self)._unreduced(-self._numerator, self._denominator)

    def __pos__(self) -> "Ratio":
        return self

    def __abs__(self) -> "Ratio":
        return self.abs()

    # ------------------------------------------------------------------
    # Comparisons
    def _compare(self, other: Any, op: Callable, fraction_op: Callable) -> Any:
        if isinstance(other, (float, np.floating)):
            return fraction_op(self.as_fraction(), float(other))
        try:
            pair = self._coerce_pair(other)
        except RatioOverflowError:
            # Out of range for the kind, but still exactly comparable.
            return fraction_op(self.as_fraction(), Fraction(other))
        if pair is None:
            return NotImplemented
        return op(*pair)

    def __eq__(self, other: Any) -> Any:
        return self._compare(other, _equal, operator.eq)

    def __ne__(self, other: Any) -> Any:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __gt__(self, other: Any) -> Any:
        return self._compare(other, _greater, operator.gt)

    def __lt__(self, other: Any) -> Any:
        return self._compare(other, _reflected(_greater), operator.lt)

    def __le__(self, other: Any) -> Any:
        return self._compare(other, lambda a, b: not _greater(a, b), operator.le)

    def __ge__(self, other: Any) -> Any:
        return self._compare(other, lambda a, b: not _greater(b, a), operator.ge)

    def __hash__(self) -> int:
        return hash(self.as_fraction())

    # ------------------------------------------------------------------
    # NumPy interoperability
    _UFUNC_DISPATCH = {
        np.add: operator.add,
        np.subtract: operator.sub,
        np.multiply: operator.mul,
        np.true_divide: operator.truediv,
        np.remainder: operator.mod,
        np.negative: operator.neg,
        np.positive: operator.pos,
        np.absolute: abs,
        np.power: operator.pow,
        np.floor: operator.methodcaller("floor"),
        np.ceil: operator.methodcaller("ceil"),
        np.trunc: operator.methodcaller("trunc"),
        np.equal: operator.eq,
        np.not_equal: operator.ne,
        np.less: operator.lt,
        np.less_equal: operator.le,
        np.greater: operator.gt,
        np.greater_equal: operator.ge,
    }

    def __array_ufunc__(self, ufunc, method, *inputs, **kwargs):
        if method != "__call__":
            return NotImplemented
        if kwargs.get("out") is not None:
            raise NotImplementedError("`out` argument is not supported for Ratio ufuncs")
        op = self._UFUNC_DISPATCH.get(ufunc)
        if op is None:
            return NotImplemented

        coerced = []
        has_array = False
        for value in inputs:
            if isinstance(value, np.ndarray):
                vectorised = np.vectorize(self._coerce_operand, otypes=[object])
                coerced.append(vectorised(value))
                has_array = True
            else:
                coerced.append(self._coerce_operand(value))
        if has_array:
            vectorised = np.vectorize(lambda *args: op(*args), otypes=[object])
            return vectorised(*coerced)
        return op(*coerced)


Ratio._kinds[Ratio.dtype] = Ratio


# ----------------------------------------------------------------------
# Operator kernels on two ratios of the same kind
def _reflected(op: Callable) -> Callable:
    return lambda a, b: op(b, a)


def _add(a: Ratio, b: Ratio) -> Ratio:
    with overflow_guard():
        numerator = a._numerator * b._denominator + a._denominator * b._numerator
        denominator = a._denominator * b._denominator
    return type(a)._reduced(numerator, denominator)


def _sub(a: Ratio, b: Ratio) -> Ratio:
    with overflow_guard():
        numerator = a._numerator * b._denominator - a._denominator * b._numerator
        denominator = a._denominator * b._denominator
    return type(a)._reduced(numerator, denominator)


def _mul(a: Ratio, b: Ratio) -> Ratio:
    with overflow_guard():
        numerator = a._numerator * b._numerator
        denominator = a._denominator * b._denominator
    return type(a)._reduced(numerator, denominator)


def _truediv(a: Ratio, b: Ratio) -> Ratio:
    if b._numerator == 0:
        raise DivideByZeroError("division by zero")
    with overflow_guard():
        numerator = a._numerator * b._denominator
        denominator = a._denominator * b._numerator
    return type(a)._reduced(numerator, denominator)


def _mod(a: Ratio, b: Ratio) -> Ratio:
    if b._numerator == 0:
        raise DivideByZeroError("modulo by zero")
    with overflow_guard():
        dividend = a._numerator * b._denominator
        divisor = a._denominator * b._numerator
        denominator = a._denominator * b._denominator
    _, remainder = trunc_divmod(dividend, divisor)
    return type(a)._reduced(remainder, denominator)


def _equal(a: Ratio, b: Ratio) -> bool:
    with overflow_guard():
        return bool(a._numerator * b._denominator == b._numerator * a._denominator)


def _greater(a: Ratio, b: Ratio) -> bool:
    with overflow_guard():
        return bool(a._numerator * b._denominator > b._numerator * a._denominator)


def _restore(kind: str, numerator: int, denominator: int) -> Ratio:
    ratio_type = Ratio[kind]
    return ratio_type._unreduced(
        to_scalar(numerator, ratio_type.dtype),
        to_scalar(denominator, ratio_type.dtype),
    )


# ----------------------------------------------------------------------
# Public helpers
Rational = Ratio
Rational32 = Ratio[np.int32]
Rational64 = Ratio[np.int64]


def make_ratio(
    numerator: NumberLike,
    denominator: Optional[numbers.Integral] = None,
    *,
    kind: Optional[IntegralKind] = None,
) -> Ratio:
    """Public helper to build a :class:`Ratio` of the requested *kind*."""

    ratio_type = Ratio if kind is None else Ratio[kind]
    if denominator is None:
        return ratio_type(numerator)
    return ratio_type(numerator, denominator)


def parse_ratio(text: str, *, kind: Optional[IntegralKind] = None) -> Ratio:
    """Parse the ``"numerator/denominator"`` form produced by ``str(ratio)``."""

    ratio_type = Ratio if kind is None else Ratio[kind]
    return ratio_type.from_string(text)


__all__ = [
    "DEFAULT_FLOAT_PRECISION",
    "Ratio",
    "Rational",
    "Rational32",
    "Rational64",
    "make_ratio",
    "parse_ratio",
]
