"""
Account Module

The Account value object and the Outcome values every core operation
returns. An Account owns its balance and PIN; deposits are open to anyone,
while anything that removes funds must present the account's PIN.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import re

from .currency import Money, AmountLike


MIN_PIN = 1000
MAX_PIN = 9999

_WHITESPACE = re.compile(r'\s+')


class OutcomeStatus(Enum):
    """Result codes surfaced to the console"""
    OK = "ok"
    INVALID_AMOUNT = "invalid-amount"
    INCORRECT_PIN = "incorrect-pin"
    NOT_FOUND = "not-found"
    INVALID_PIN_FORMAT = "invalid-pin-format"
    INVALID_NAME = "invalid-name"
    NO_STORE = "no-store"
    IO_ERROR = "io-error"


@dataclass(frozen=True)
class Outcome:
    """
    Status plus human-readable message.
    Truthy only when the operation succeeded.
    """
    status: OutcomeStatus
    message: str
    account_number: Optional[int] = None

    @classmethod
    def success(cls, message: str, account_number: Optional[int] = None) -> 'Outcome':
        return cls(OutcomeStatus.OK, message, account_number)

    @classmethod
    def failure(cls, status: OutcomeStatus, message: str) -> 'Outcome':
        if status == OutcomeStatus.OK:
            raise ValueError("Failure outcome needs a non-OK status")
        return cls(status, message)

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.OK

    def __bool__(self) -> bool:
        return self.ok


@dataclass(frozen=True)
class AccountView:
    """Read-only snapshot of an account for display"""
    number: int
    name: str
    balance: Money

    @property
    def balance_display(self) -> str:
        return self.balance.to_string()


def is_valid_pin(pin: int) -> bool:
    """Check that a PIN is a 4-digit number"""
    return isinstance(pin, int) and not isinstance(pin, bool) and MIN_PIN <= pin <= MAX_PIN


def normalize_name(name: str) -> str:
    """Collapse whitespace runs to underscores so the name stays one token"""
    return _WHITESPACE.sub('_', name.strip())


def is_encodable_name(name: str) -> bool:
    """Check that a name can be written to the UTF-8 store"""
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


@dataclass
class Account:
    """
    Bank account holding an owner name, a balance and a PIN.

    Construction enforces the invariants: the balance is never negative,
    the PIN has four digits and the name is a single whitespace-free token.
    """
    number: int
    name: str
    balance: Money
    pin: int = field(repr=False)

    def __post_init__(self):
        if not isinstance(self.balance, Money):
            self.balance = Money(self.balance)

        if self.balance.is_negative():
            raise ValueError(f"Account {self.number} balance cannot be negative")

        if not is_valid_pin(self.pin):
            raise ValueError(f"Account {self.number} PIN must be a 4-digit number")

        if not self.name or _WHITESPACE.search(self.name):
            raise ValueError(f"Account {self.number} name must be a single non-empty token")

    def verify_pin(self, candidate: int) -> bool:
        """Check a candidate PIN without side effects"""
        return candidate == self.pin

    def deposit(self, amount: AmountLike) -> Outcome:
        """Add funds; no PIN required"""
        amount = Money(amount)
        if not amount.is_positive():
            return Outcome.failure(OutcomeStatus.INVALID_AMOUNT, "Invalid deposit amount!")

        try:
            balance = self.balance + amount
        except ValueError:
            return Outcome.failure(
                OutcomeStatus.INVALID_AMOUNT, "Deposit would exceed the maximum balance!"
            )

        self.balance = balance
        return Outcome.success("Deposit successful!", self.number)

    def withdraw(self, amount: AmountLike, candidate_pin: int) -> Outcome:
        """
        Remove funds after checking the PIN

        Args:
            amount: Amount to withdraw
            candidate_pin: PIN presented by the operator

        Returns:
            OK outcome if the balance was reduced, otherwise INCORRECT_PIN
            or INVALID_AMOUNT with the balance untouched
        """
        if not self.verify_pin(candidate_pin):
            return Outcome.failure(
                OutcomeStatus.INCORRECT_PIN, "Incorrect PIN! Transaction denied."
            )

        amount = Money(amount)
        if not amount.is_positive() or amount > self.balance:
            return Outcome.failure(
                OutcomeStatus.INVALID_AMOUNT, "Insufficient balance or invalid amount!"
            )

        self.balance = self.balance - amount
        return Outcome.success("Withdrawal successful!", self.number)

    def view(self) -> AccountView:
        return AccountView(number=self.number, name=self.name, balance=self.balance)
