"""Checked unsigned integer wrapper for ledger and pricing arithmetic.

This module provides SafeUint, a lightweight wrapper that makes arithmetic
on token amounts behave like checked uint256 math:
- Division by zero raises DivisionByZero
- Subtraction below zero raises Underflow
- Any result above 2**256 - 1 raises Overflow

Usage pattern:
    from swapper.safe_int import SafeUint, U

    def quote(amount_in: int, reserve_in: int, reserve_out: int) -> int:
        # Wrap at entry
        a, r_in, r_out = U(amount_in), U(reserve_in), U(reserve_out)

        # Natural arithmetic - automatically checked
        out = (r_out * a) // (r_in + a)  # Raises if the denominator is 0

        # Unwrap at exit
        return out.value
"""

from __future__ import annotations

UINT256_MAX = 2**256 - 1


class SafeUintError(ArithmeticError):
    """Base class for SafeUint arithmetic errors."""

    pass


class DivisionByZero(SafeUintError):
    """Division or modulo by zero."""

    pass


class Underflow(SafeUintError):
    """Subtraction would produce a negative result."""

    pass


class Overflow(SafeUintError):
    """Result exceeds the uint256 maximum."""

    pass


def _checked(value: int) -> int:
    if value < 0:
        raise Underflow(f"Negative value is not a uint256: {value}")
    if value > UINT256_MAX:
        raise Overflow(f"Value exceeds uint256 max: {value}")
    return value


class SafeUint:
    """Non-negative integer bounded to uint256 with checked operators.

    Unlike a plain int, every intermediate result is validated, so a
    pricing or ledger formula fails loudly instead of producing a value
    that could not exist on the settlement layer.

    Attributes:
        value: The underlying integer value (read-only)
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeUint) -> None:
        """Create a SafeUint from an integer or another SafeUint.

        Args:
            value: Non-negative integer to wrap, or SafeUint to copy

        Raises:
            TypeError: If value is not an int (bool is rejected too)
            Underflow: If value is negative
            Overflow: If value exceeds UINT256_MAX
        """
        if isinstance(value, SafeUint):
            self._value = value._value
        elif isinstance(value, int) and not isinstance(value, bool):
            self._value = _checked(value)
        else:
            raise TypeError(f"SafeUint requires int, got {type(value).__name__}")

    @property
    def value(self) -> int:
        """The underlying integer value."""
        return self._value

    def __repr__(self) -> str:
        return f"SafeUint({self._value})"

    def __str__(self) -> str:
        return str(self._value)

    def __hash__(self) -> int:
        return hash(self._value)

    # --- Arithmetic operations ---

    def __add__(self, other: SafeUint | int) -> SafeUint:
        """Add two values.

        Raises:
            Overflow: If the sum exceeds UINT256_MAX
        """
        return SafeUint(self._value + _extract_value(other))

    def __radd__(self, other: int) -> SafeUint:
        return SafeUint(other + self._value)

    def __sub__(self, other: SafeUint | int) -> SafeUint:
        """Subtract other from self.

        Raises:
            Underflow: If result would be negative
        """
        other_val = _extract_value(other)
        result = self._value - other_val
        if result < 0:
            raise Underflow(f"Underflow: {self._value} - {other_val} = {result}")
        return SafeUint(result)

    def __rsub__(self, other: int) -> SafeUint:
        result = other - self._value
        if result < 0:
            raise Underflow(f"Underflow: {other} - {self._value} = {result}")
        return SafeUint(result)

    def __mul__(self, other: SafeUint | int) -> SafeUint:
        """Multiply two values.

        Raises:
            Overflow: If the product exceeds UINT256_MAX
        """
        return SafeUint(self._value * _extract_value(other))

    def __rmul__(self, other: int) -> SafeUint:
        return SafeUint(other * self._value)

    def __floordiv__(self, other: SafeUint | int) -> SafeUint:
        """Truncating integer division.

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeUint(self._value // other_val)

    def __rfloordiv__(self, other: int) -> SafeUint:
        if self._value == 0:
            raise DivisionByZero(f"Division by zero: {other} // 0")
        return SafeUint(other // self._value)

    def __truediv__(self, other: object) -> SafeUint:
        raise TypeError("SafeUint does not support true division; use //")

    def __rtruediv__(self, other: object) -> SafeUint:
        raise TypeError("SafeUint does not support true division; use //")

    # --- Comparison operations ---

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SafeUint):
            return self._value == other._value
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    def __lt__(self, other: SafeUint | int) -> bool:
        return self._value < _extract_value(other)

    def __le__(self, other: SafeUint | int) -> bool:
        return self._value <= _extract_value(other)

    def __gt__(self, other: SafeUint | int) -> bool:
        return self._value > _extract_value(other)

    def __ge__(self, other: SafeUint | int) -> bool:
        return self._value >= _extract_value(other)

    # --- Conversion ---

    def __int__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        """True if non-zero."""
        return self._value != 0

    def __index__(self) -> int:
        return self._value

    # --- Named operations ---

    def mul_div(self, numerator: SafeUint | int, denominator: SafeUint | int) -> SafeUint:
        """Compute self * numerator // denominator with checked steps.

        Raises:
            Overflow: If the intermediate product exceeds UINT256_MAX
            DivisionByZero: If denominator is zero
        """
        return (self * numerator) // denominator

    def checked_sub(self, other: SafeUint | int) -> SafeUint | None:
        """Subtract, returning None on underflow instead of raising."""
        result = self._value - _extract_value(other)
        if result < 0:
            return None
        return SafeUint(result)

    @classmethod
    def zero(cls) -> SafeUint:
        """Create a SafeUint with value 0."""
        return cls(0)


def _extract_value(x: SafeUint | int) -> int:
    """Extract integer value from SafeUint or int."""
    if isinstance(x, SafeUint):
        return x._value
    return x


# Convenience alias for concise code
U = SafeUint
