"""Checked integer wrapper for reserve arithmetic.

Reserves are stored at u64 width and every product of two reserves is
formed at u128 width. Python integers never wrap, so the width limits are
enforced explicitly at the points where a value is narrowed:

- Division by zero raises DivisionByZero
- Subtraction below zero raises Underflow
- to_u64() / to_u128() raise Overflow when a value does not fit

Usage pattern:
    from launchpad.safe_int import S

    def new_reserve(k: int, denominator: int) -> int:
        return S(k).ceiling_div(denominator).to_u64()
"""

from __future__ import annotations

from launchpad.errors import DivisionByZero, Overflow, Underflow

U64_MAX = 2**64 - 1
U128_MAX = 2**128 - 1


class SafeInt:
    """Non-negative integer with checked arithmetic.

    Attributes:
        value: The underlying integer value (read-only)
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeInt) -> None:
        if isinstance(value, SafeInt):
            self._value = value._value
        elif isinstance(value, int) and not isinstance(value, bool):
            self._value = value
        else:
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")

    @property
    def value(self) -> int:
        """The underlying integer value."""
        return self._value

    def __repr__(self) -> str:
        return f"SafeInt({self._value})"

    def __str__(self) -> str:
        return str(self._value)

    def __hash__(self) -> int:
        return hash(self._value)

    # --- Arithmetic ---

    def __add__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value + _extract_value(other))

    def __radd__(self, other: int) -> SafeInt:
        return SafeInt(other + self._value)

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        """Subtract other from self.

        Raises:
            Underflow: If result would be negative
        """
        other_val = _extract_value(other)
        result = self._value - other_val
        if result < 0:
            raise Underflow(f"Underflow: {self._value} - {other_val} = {result}")
        return SafeInt(result)

    def __rsub__(self, other: int) -> SafeInt:
        result = other - self._value
        if result < 0:
            raise Underflow(f"Underflow: {other} - {self._value} = {result}")
        return SafeInt(result)

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value * _extract_value(other))

    def __rmul__(self, other: int) -> SafeInt:
        return SafeInt(other * self._value)

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Integer division, rounding toward zero for non-negative operands.

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeInt(self._value // other_val)

    def ceiling_div(self, other: SafeInt | int) -> SafeInt:
        """Division rounding up.

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Ceiling division by zero: {self._value}")
        return SafeInt(-(-self._value // other_val))

    # --- Comparison ---

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SafeInt):
            return self._value == other._value
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _extract_value(other)

    def __le__(self, other: SafeInt | int) -> bool:
        return self._value <= _extract_value(other)

    def __gt__(self, other: SafeInt | int) -> bool:
        return self._value > _extract_value(other)

    def __ge__(self, other: SafeInt | int) -> bool:
        return self._value >= _extract_value(other)

    def __int__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        return self._value != 0

    # --- Width checks ---

    def to_u64(self) -> int:
        """Narrow to reserve width.

        Raises:
            Overflow: If value is negative or exceeds 2^64-1
        """
        return _narrow(self._value, U64_MAX, "u64")

    def to_u128(self) -> int:
        """Narrow to intermediate width.

        Raises:
            Overflow: If value is negative or exceeds 2^128-1
        """
        return _narrow(self._value, U128_MAX, "u128")

    def is_u64(self) -> bool:
        return 0 <= self._value <= U64_MAX

    @classmethod
    def zero(cls) -> SafeInt:
        return cls(0)


def checked_mul_u128(a: int, b: int) -> SafeInt:
    """Multiply two reserve-width values at u128 width.

    Raises:
        Overflow: If either operand is not u64 or the product exceeds u128
    """
    sa, sb = S(S(a).to_u64()), S(S(b).to_u64())
    product = sa * sb
    product.to_u128()
    return product


def _narrow(value: int, limit: int, width: str) -> int:
    if value < 0:
        raise Overflow(f"Negative value cannot be {width}: {value}")
    if value > limit:
        raise Overflow(f"Value exceeds {width} max: {value}")
    return value


def _extract_value(x: SafeInt | int) -> int:
    if isinstance(x, SafeInt):
        return x._value
    return x


# Convenience alias for concise code
S = SafeInt
