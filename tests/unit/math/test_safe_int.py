"""Tests for SafeInt checked arithmetic."""

import pytest

from launchpad.errors import CurveArithmeticError, DivisionByZero, Overflow, Underflow
from launchpad.safe_int import U64_MAX, U128_MAX, S, SafeInt, checked_mul_u128


class TestSafeIntConstruction:
    """Tests for SafeInt construction."""

    def test_from_int(self):
        """SafeInt can be constructed from int."""
        assert SafeInt(42).value == 42

    def test_from_safeint(self):
        """SafeInt can be constructed from another SafeInt."""
        assert SafeInt(SafeInt(7)).value == 7

    def test_rejects_bool_and_float(self):
        """Only real integers are accepted."""
        with pytest.raises(TypeError):
            SafeInt(True)  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            SafeInt(1.5)  # type: ignore[arg-type]

    def test_alias_s(self):
        """S is an alias for SafeInt."""
        assert S is SafeInt

    def test_zero(self):
        assert SafeInt.zero() == 0
        assert not SafeInt.zero()


class TestSafeIntArithmetic:
    """Tests for checked operations."""

    def test_add(self):
        assert (S(2) + 3).value == 5
        assert (3 + S(2)).value == 5

    def test_sub_underflow(self):
        """Subtraction below zero raises Underflow."""
        with pytest.raises(Underflow):
            S(1) - 2
        with pytest.raises(Underflow):
            1 - S(2)

    def test_sub_to_zero(self):
        assert (S(5) - 5).value == 0

    def test_floordiv(self):
        assert (S(7) // 2).value == 3

    def test_floordiv_by_zero(self):
        with pytest.raises(DivisionByZero):
            S(7) // 0

    def test_ceiling_div(self):
        """ceiling_div rounds up when there is a remainder."""
        assert S(7).ceiling_div(2).value == 4
        assert S(8).ceiling_div(2).value == 4
        assert S(0).ceiling_div(5).value == 0

    def test_ceiling_div_by_zero(self):
        with pytest.raises(DivisionByZero):
            S(7).ceiling_div(0)

    def test_comparisons(self):
        assert S(1) < 2
        assert S(2) <= S(2)
        assert S(3) > 2
        assert S(3) >= 3
        assert S(3) == 3
        assert S(3) == S(3)


class TestSafeIntWidths:
    """Tests for narrowing to u64 / u128."""

    def test_u64_max_fits(self):
        assert S(U64_MAX).to_u64() == U64_MAX
        assert S(U64_MAX).is_u64()

    def test_u64_overflow(self):
        with pytest.raises(Overflow):
            S(U64_MAX + 1).to_u64()
        assert not S(U64_MAX + 1).is_u64()

    def test_negative_does_not_narrow(self):
        with pytest.raises(Overflow):
            S(-1).to_u64()

    def test_u128_overflow(self):
        assert S(U128_MAX).to_u128() == U128_MAX
        with pytest.raises(Overflow):
            S(U128_MAX + 1).to_u128()

    def test_checked_mul_u128_largest(self):
        """Two u64 values always multiply within u128."""
        assert checked_mul_u128(U64_MAX, U64_MAX).value == U64_MAX * U64_MAX

    def test_checked_mul_u128_rejects_wide_operand(self):
        with pytest.raises(Overflow):
            checked_mul_u128(U64_MAX + 1, 1)

    def test_errors_are_arithmetic_errors(self):
        """Checked failures are catchable as the builtin ArithmeticError."""
        assert issubclass(Overflow, ArithmeticError)
        assert issubclass(Underflow, CurveArithmeticError)
        assert issubclass(DivisionByZero, ArithmeticError)
