"""
Money Module

Fixed-point monetary amounts with two fractional digits. Balances and
transaction amounts are always Money, built on Decimal. NEVER uses float
for monetary values.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, getcontext
from dataclasses import dataclass
from typing import Union
import re

# Set global decimal context for financial precision
getcontext().prec = 28

CENT = Decimal('0.01')

# Optional sign, optional leading "$", digits with commas only between
# groups of three
_AMOUNT = re.compile(r'([+-]?)\$?((?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d*)?|\.\d+)')

AmountLike = Union['Money', Decimal, int, str]


@dataclass(frozen=True)
class Money:
    """
    Immutable amount rounded to cents.
    Accepts Decimal, int or str; anything else is converted through str().
    """
    amount: Decimal

    def __post_init__(self):
        if isinstance(self.amount, Money):
            object.__setattr__(self, 'amount', self.amount.amount)
        if not isinstance(self.amount, Decimal):
            try:
                object.__setattr__(self, 'amount', Decimal(str(self.amount)))
            except InvalidOperation:
                raise ValueError(f"Cannot convert {self.amount!r} to Money")

        if not self.amount.is_finite():
            raise ValueError(f"Amount must be finite, got {self.amount}")

        try:
            rounded = self.amount.quantize(CENT, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            raise ValueError(f"Amount {self.amount} exceeds supported precision")
        object.__setattr__(self, 'amount', rounded)

    @classmethod
    def zero(cls) -> 'Money':
        return cls(Decimal('0'))

    @classmethod
    def parse(cls, text: str) -> 'Money':
        """
        Parse operator input such as "150", "150.5" or "$1,200.00"

        Raises:
            ValueError: If the text is not a finite decimal number
        """
        return cls(decimal_from_string(text))

    def __add__(self, other: 'Money') -> 'Money':
        return Money(self.amount + _coerce(other).amount)

    def __sub__(self, other: 'Money') -> 'Money':
        return Money(self.amount - _coerce(other).amount)

    def __neg__(self) -> 'Money':
        return Money(-self.amount)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Money):
            return False
        return self.amount == other.amount

    def __hash__(self) -> int:
        return hash(self.amount)

    def __lt__(self, other: 'Money') -> bool:
        return self.amount < _coerce(other).amount

    def __le__(self, other: 'Money') -> bool:
        return self.amount <= _coerce(other).amount

    def __gt__(self, other: 'Money') -> bool:
        return self.amount > _coerce(other).amount

    def __ge__(self, other: 'Money') -> bool:
        return self.amount >= _coerce(other).amount

    def is_zero(self) -> bool:
        """Check if amount is exactly zero"""
        return self.amount == Decimal('0')

    def is_positive(self) -> bool:
        """Check if amount is positive"""
        return self.amount > Decimal('0')

    def is_negative(self) -> bool:
        """Check if amount is negative"""
        return self.amount < Decimal('0')

    def to_string(self) -> str:
        """Format for display and storage: exactly two fractional digits"""
        return f"{self.amount:.2f}"

    def __str__(self) -> str:
        return self.to_string()


def _coerce(value: AmountLike) -> Money:
    if isinstance(value, Money):
        return value
    return Money(value)


def decimal_from_string(value: str) -> Decimal:
    """
    Safely convert string to Decimal, handling common formats

    Args:
        value: String representation of number

    Returns:
        Decimal value

    Raises:
        ValueError: If string cannot be converted to a finite Decimal
    """
    if not value or not isinstance(value, str):
        raise ValueError("Value must be a non-empty string")

    match = _AMOUNT.fullmatch(value.strip())
    if not match:
        raise ValueError(f"Cannot convert '{value}' to Decimal")

    clean_value = match.group(1) + match.group(2).replace(',', '')

    try:
        result = Decimal(clean_value)
    except InvalidOperation:
        raise ValueError(f"Cannot convert '{value}' to Decimal")

    return result
