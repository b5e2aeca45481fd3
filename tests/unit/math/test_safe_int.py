"""Tests for SafeUint checked arithmetic wrapper."""

import pytest

from swapper.safe_int import (
    UINT256_MAX,
    DivisionByZero,
    Overflow,
    SafeUint,
    SafeUintError,
    U,
    Underflow,
)


class TestSafeUintConstruction:
    """Tests for SafeUint construction."""

    def test_from_int(self):
        """SafeUint can be constructed from int."""
        assert SafeUint(42).value == 42

    def test_from_safeuint(self):
        """SafeUint can be constructed from another SafeUint."""
        assert SafeUint(SafeUint(42)).value == 42

    def test_zero_and_max_are_valid(self):
        """Both ends of the uint256 range are accepted."""
        assert SafeUint(0).value == 0
        assert SafeUint(UINT256_MAX).value == UINT256_MAX

    def test_negative_raises(self):
        """Negative values are not uint256."""
        with pytest.raises(Underflow):
            SafeUint(-1)

    def test_above_max_raises(self):
        """Values above 2**256 - 1 are rejected."""
        with pytest.raises(Overflow):
            SafeUint(UINT256_MAX + 1)

    def test_invalid_types_raise(self):
        """Strings, floats and bools are rejected."""
        with pytest.raises(TypeError):
            SafeUint("42")  # type: ignore
        with pytest.raises(TypeError):
            SafeUint(3.0)  # type: ignore
        with pytest.raises(TypeError):
            SafeUint(True)  # type: ignore

    def test_alias_u(self):
        """U is an alias for SafeUint."""
        assert U is SafeUint

    def test_zero_constructor(self):
        assert SafeUint.zero().value == 0


class TestSafeUintArithmetic:
    """Tests for checked operators."""

    def test_add(self):
        assert (U(10) + U(5)).value == 15
        assert (U(10) + 5).value == 15
        assert (5 + U(10)).value == 15

    def test_add_overflow(self):
        with pytest.raises(Overflow):
            U(UINT256_MAX) + 1

    def test_sub(self):
        assert (U(10) - U(4)).value == 6
        assert (10 - U(4)).value == 6

    def test_sub_to_zero(self):
        """Subtracting equal values gives zero, not an error."""
        assert (U(7) - 7).value == 0

    def test_sub_underflow(self):
        with pytest.raises(Underflow):
            U(4) - U(10)
        with pytest.raises(Underflow):
            4 - U(10)

    def test_mul(self):
        assert (U(6) * U(7)).value == 42
        assert (6 * U(7)).value == 42

    def test_mul_overflow(self):
        with pytest.raises(Overflow):
            U(2**200) * U(2**100)

    def test_floordiv_truncates(self):
        assert (U(10) // U(3)).value == 3
        assert (10 // U(3)).value == 3

    def test_floordiv_by_zero(self):
        with pytest.raises(DivisionByZero):
            U(10) // 0
        with pytest.raises(DivisionByZero):
            10 // U(0)

    def test_true_division_rejected(self):
        """Token math must be explicit about truncation."""
        with pytest.raises(TypeError):
            U(10) / U(3)

    def test_errors_share_base(self):
        """All SafeUint errors are ArithmeticErrors."""
        for cls in (DivisionByZero, Underflow, Overflow):
            assert issubclass(cls, SafeUintError)
            assert issubclass(cls, ArithmeticError)


class TestSafeUintComparison:
    """Tests for comparisons and conversions."""

    def test_eq_with_int_and_safeuint(self):
        assert U(5) == 5
        assert U(5) == U(5)
        assert U(5) != U(6)

    def test_ordering(self):
        assert U(1) < U(2)
        assert U(2) <= 2
        assert U(3) > 2
        assert U(3) >= U(3)

    def test_bool(self):
        assert not U(0)
        assert U(1)

    def test_int_conversion(self):
        assert int(U(12)) == 12

    def test_hash_matches_int(self):
        assert hash(U(99)) == hash(99)


class TestSafeUintNamedOperations:
    """Tests for mul_div and checked_sub."""

    def test_mul_div(self):
        assert U(1000).mul_div(30, 100).value == 300

    def test_mul_div_by_zero(self):
        with pytest.raises(DivisionByZero):
            U(1000).mul_div(30, 0)

    def test_checked_sub_returns_none_on_underflow(self):
        """checked_sub reports underflow without raising."""
        assert U(5).checked_sub(6) is None
        result = U(5).checked_sub(5)
        assert result is not None and result.value == 0
