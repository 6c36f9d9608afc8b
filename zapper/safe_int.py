"""Checked integer arithmetic for token amounts and reserves.

Pool math runs on unsigned 256-bit words. SafeInt keeps Python's unbounded
ints but refuses the results a uint256 pool could never produce:

- a subtraction going below zero raises Underflow
- a division by zero raises DivisionByZero
- to_uint256() raises Uint256Overflow outside [0, 2^256 - 1]

Intermediate products may exceed 256 bits (the swap-in discriminant is a
512-bit square); only values handed back to a pool are width-checked.

mul_div(a, b, d) is the multiply-then-divide used wherever two
reserve-scale quantities meet. When a * b does not fit a uint256 word it
divides the larger operand by d first, accepting the rounding loss, and
raises when that would truncate the result to zero.

Usage:
    from zapper.safe_int import S, mul_div

    amount_out = (S(amount_in) * v_reserve_out // (S(v_reserve_in) + amount_in)).value
    scaled = mul_div(k_last, v_reserve_in, v_reserve_out)
"""

from __future__ import annotations

from functools import total_ordering

import structlog

logger = structlog.get_logger()

UINT256_MAX = 2**256 - 1


class SafeIntError(ArithmeticError):
    """Arithmetic a uint256 pool would reject."""

    pass


class DivisionByZero(SafeIntError):
    """Denominator is zero, typically an empty reserve or supply."""

    pass


class Underflow(SafeIntError):
    """An amount would go negative."""

    pass


class Uint256Overflow(SafeIntError):
    """A value does not fit in an unsigned 256-bit word."""

    pass


def _unwrap(operand: SafeInt | int) -> int:
    return operand.value if isinstance(operand, SafeInt) else operand


@total_ordering
class SafeInt:
    """Integer for pool arithmetic that refuses negative differences.

    Attributes:
        value: The wrapped int
    """

    __slots__ = ("_value",)

    def __init__(self, value: int | SafeInt) -> None:
        if isinstance(value, SafeInt):
            value = value.value
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")
        self._value = value

    @property
    def value(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"S({self._value})"

    def __add__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value + _unwrap(other))

    __radd__ = __add__

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        """Difference of two amounts.

        Raises:
            Underflow: If other is larger than self
        """
        return _checked_difference(self._value, _unwrap(other))

    def __rsub__(self, other: int) -> SafeInt:
        return _checked_difference(other, self._value)

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value * _unwrap(other))

    __rmul__ = __mul__

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Quotient rounded down, the only rounding pools use.

        Raises:
            DivisionByZero: If other is zero
        """
        denominator = _unwrap(other)
        if denominator == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeInt(self._value // denominator)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (SafeInt, int)):
            return self._value == _unwrap(other)
        return NotImplemented

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _unwrap(other)

    def __hash__(self) -> int:
        return hash(self._value)

    def __bool__(self) -> bool:
        return self._value != 0

    def __int__(self) -> int:
        return self._value

    __index__ = __int__

    def min(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(min(self._value, _unwrap(other)))

    def max(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(max(self._value, _unwrap(other)))

    def saturating_sub(self, other: SafeInt | int) -> SafeInt:
        """Difference clamped at zero, for quantities that cannot go negative."""
        return SafeInt(max(self._value - _unwrap(other), 0))

    def is_uint256(self) -> bool:
        return 0 <= self._value <= UINT256_MAX

    def to_uint256(self) -> int:
        """The wrapped int, if a pool could store it.

        Raises:
            Uint256Overflow: If the value is negative or wider than 256 bits
        """
        if not self.is_uint256():
            raise Uint256Overflow(f"{self._value} is outside the uint256 range")
        return self._value


def _checked_difference(minuend: int, subtrahend: int) -> SafeInt:
    if subtrahend > minuend:
        raise Underflow(f"Underflow: {minuend} - {subtrahend} < 0")
    return SafeInt(minuend - subtrahend)


def mul_div(a: SafeInt | int, b: SafeInt | int, denominator: SafeInt | int) -> SafeInt:
    """Compute a * b // denominator within the uint256 working width.

    The product is formed first for full precision. If it does not fit in
    a uint256 word, the larger operand is divided first, provided it is at
    least the denominator. That loses at most the remainder of the divided
    operand scaled by the other one, and never rounds a non-zero result
    down to zero.

    Raises:
        DivisionByZero: If denominator is zero
        Uint256Overflow: If neither operand reaches the denominator, or the
            divide-first result still does not fit
    """
    sa, sb, sd = SafeInt(a), SafeInt(b), SafeInt(denominator)
    product = sa * sb
    if product.is_uint256():
        return product // sd

    larger, smaller = (sa, sb) if sa >= sb else (sb, sa)
    if larger < sd:
        raise Uint256Overflow(
            f"{sa.value} * {sb.value} overflows and neither operand reaches {sd.value}"
        )

    logger.debug(
        "mul_div_overflow_fallback",
        a=sa.value,
        b=sb.value,
        denominator=sd.value,
    )
    result = (larger // sd) * smaller
    result.to_uint256()
    return result


# Short alias used throughout the math modules
S = SafeInt
