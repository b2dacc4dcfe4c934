"""
Unit Amount Module

Ownership units and settlement currency are counted in integer base units
held in unsigned 64-bit fields. This module validates amounts against that
width, provides checked arithmetic, and converts between base units and
human-readable Decimal quantities. NEVER uses float for amounts.
"""

from decimal import Decimal, ROUND_DOWN
from dataclasses import dataclass
from typing import Optional, Union

from .errors import InvalidAmount

U64_MAX = 2 ** 64 - 1

# Decimal places of ownership units and of the default settlement currency
DEFAULT_DECIMALS = 6


def is_u64(value: int) -> bool:
    """Check that value fits an unsigned 64-bit field"""
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= U64_MAX


def require_positive_amount(amount: int, name: str = "amount") -> int:
    """
    Validate an operation amount

    Raises:
        InvalidAmount: If amount is zero, negative, not an integer or wider than u64
    """
    if not is_u64(amount) or amount == 0:
        raise InvalidAmount(f"{name} must be a positive integer no larger than {U64_MAX}, got {amount!r}")
    return amount


def checked_add(a: int, b: int) -> Optional[int]:
    """Add two u64 values, returning None instead of wrapping on overflow"""
    total = a + b
    if total > U64_MAX:
        return None
    return total


def checked_sub(a: int, b: int) -> Optional[int]:
    """Subtract two u64 values, returning None instead of wrapping on underflow"""
    if b > a:
        return None
    return a - b


@dataclass(frozen=True)
class UnitAmount:
    """
    Immutable quantity of base units with a fixed number of decimals
    """
    base_units: int
    decimals: int = DEFAULT_DECIMALS

    def __post_init__(self):
        if not is_u64(self.base_units):
            raise InvalidAmount(f"Amount {self.base_units!r} does not fit in 64 bits")

    @classmethod
    def from_decimal(cls, value: Union[Decimal, str, int], decimals: int = DEFAULT_DECIMALS) -> 'UnitAmount':
        """Parse a display quantity, truncating digits beyond the precision"""
        if not isinstance(value, Decimal):
            value = Decimal(str(value))
        scaled = (value * (Decimal(10) ** decimals)).quantize(Decimal('1'), rounding=ROUND_DOWN)
        return cls(int(scaled), decimals)

    def to_decimal(self) -> Decimal:
        return Decimal(self.base_units) / (Decimal(10) ** self.decimals)

    def is_zero(self) -> bool:
        return self.base_units == 0

    def to_string(self, symbol: Optional[str] = None) -> str:
        """Format for display"""
        text = f"{self.to_decimal():,.{self.decimals}f}"
        if symbol:
            return f"{text} {symbol}"
        return text
