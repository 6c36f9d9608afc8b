"""Tests for SafeInt safe arithmetic wrapper and mul_div."""

import pytest

from zapper.safe_int import (
    UINT256_MAX,
    DivisionByZero,
    S,
    SafeInt,
    SafeIntError,
    Uint256Overflow,
    Underflow,
    mul_div,
)


class TestSafeIntConstruction:
    """Tests for SafeInt construction."""

    def test_from_int(self):
        """SafeInt can be constructed from int."""
        assert SafeInt(42).value == 42

    def test_from_safeint(self):
        """SafeInt can be constructed from another SafeInt."""
        assert SafeInt(SafeInt(42)).value == 42

    def test_from_large(self):
        """SafeInt can hold values wider than 256 bits."""
        assert SafeInt(2**300).value == 2**300

    def test_from_invalid_type_raises(self):
        """SafeInt rejects non-integers."""
        with pytest.raises(TypeError):
            SafeInt("42")  # type: ignore
        with pytest.raises(TypeError):
            SafeInt(3.14)  # type: ignore

    def test_from_bool_raises(self):
        """Booleans are not token amounts."""
        with pytest.raises(TypeError):
            SafeInt(True)  # type: ignore

    def test_alias_s(self):
        """S is an alias for SafeInt."""
        assert S is SafeInt


class TestSafeIntArithmetic:
    """Tests for SafeInt arithmetic operations."""

    def test_add(self):
        assert (S(10) + S(5)).value == 15
        assert (S(10) + 5).value == 15
        assert (5 + S(10)).value == 15

    def test_sub(self):
        assert (S(10) - S(3)).value == 7
        assert (10 - S(3)).value == 7
        assert (S(5) - 5).value == 0

    def test_sub_underflow_raises(self):
        """Subtraction below zero raises Underflow."""
        with pytest.raises(Underflow) as exc_info:
            S(5) - S(10)
        assert "5 - 10" in str(exc_info.value)

    def test_rsub_underflow_raises(self):
        with pytest.raises(Underflow):
            5 - S(10)

    def test_mul(self):
        assert (S(6) * S(7)).value == 42
        assert (6 * S(7)).value == 42

    def test_floordiv_rounds_down(self):
        assert (S(10) // S(3)).value == 3
        assert (S(999) // 1000).value == 0

    def test_floordiv_by_zero_raises(self):
        with pytest.raises(DivisionByZero) as exc_info:
            S(10) // 0
        assert "Division by zero" in str(exc_info.value)

    def test_saturating_sub_clamps(self):
        """saturating_sub returns zero instead of raising."""
        assert S(5).saturating_sub(10).value == 0
        assert S(10).saturating_sub(4).value == 6

    def test_min_max(self):
        assert S(3).min(S(7)).value == 3
        assert S(3).max(7).value == 7

    def test_errors_share_base(self):
        """All arithmetic errors are SafeIntError and ArithmeticError."""
        for error in (DivisionByZero, Underflow, Uint256Overflow):
            assert issubclass(error, SafeIntError)
            assert issubclass(error, ArithmeticError)


class TestSafeIntConversion:
    """Tests for conversions and comparisons."""

    def test_to_uint256(self):
        assert S(UINT256_MAX).to_uint256() == UINT256_MAX

    def test_to_uint256_overflow_raises(self):
        with pytest.raises(Uint256Overflow):
            S(UINT256_MAX + 1).to_uint256()

    def test_to_uint256_negative_raises(self):
        with pytest.raises(Uint256Overflow):
            S(-1).to_uint256()

    def test_is_uint256(self):
        assert S(0).is_uint256()
        assert not S(2**256).is_uint256()

    def test_int_and_index(self):
        """SafeInt converts to int and can be used as an index."""
        assert int(S(7)) == 7
        assert [0, 1, 2][S(1)] == 1

    def test_comparisons_with_int(self):
        assert S(5) == 5
        assert S(5) < 6
        assert S(5) >= S(5)
        assert not S(0)


class TestMulDiv:
    """Tests for multiply-then-divide with the divide-first fallback."""

    def test_exact_when_product_fits(self):
        assert mul_div(10, 20, 3).value == 66

    def test_accepts_safeint_operands(self):
        assert mul_div(S(10), S(20), S(4)).value == 50

    def test_division_by_zero_raises(self):
        with pytest.raises(DivisionByZero):
            mul_div(1, 2, 0)

    def test_product_at_uint256_max_is_exact(self):
        """A product of exactly 2^256 - 1 still takes the exact path."""
        assert mul_div(UINT256_MAX, 1, 2).value == UINT256_MAX // 2

    def test_overflowing_product_divides_first(self):
        """2^250 * 2^130 does not fit, so 2^250 is divided by 2^126 first."""
        assert mul_div(2**250, 2**130, 2**126).value == 2**254

    def test_fallback_loses_remainder(self):
        """Dividing first drops the remainder of a // denominator.

        The exact result is (2^256 + 6) // 4 = 2^254 + 1; dividing first gives
        (2^255 + 3) // 4 * 2 = 2^254.
        """
        assert mul_div(2**255 + 3, 2, 4).value == 2**254

    def test_fallback_result_overflow_raises(self):
        with pytest.raises(Uint256Overflow):
            mul_div(2**255, 2**10, 1)

    def test_fallback_divides_the_operand_reaching_the_denominator(self):
        """With a below the denominator, b is divided first so the result survives."""
        assert mul_div(2**100, 2**200, 2**150).value == 2**150
        assert mul_div(2**200, 2**100, 2**150).value == 2**150

    def test_fallback_without_divisible_operand_raises(self):
        """Both operands below the denominator would truncate to zero."""
        with pytest.raises(Uint256Overflow):
            mul_div(2**200, 2**200, 2**201)
