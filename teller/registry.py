"""
Account Registry Module

The Bank is the single authority over accounts: it issues account numbers,
resolves lookups and mediates every balance change. Callers address
accounts by number and receive read-only views, never the Account itself.
"""

from dataclasses import replace
from typing import Iterable, List, Optional

from .accounts import (
    Account, AccountView, Outcome, OutcomeStatus,
    is_encodable_name, is_valid_pin, normalize_name
)
from .currency import Money, AmountLike
from .logging_config import get_logger, log_action


DEFAULT_FIRST_NUMBER = 1000


class Bank:
    """
    Ordered collection of accounts plus the next-account-number counter
    """

    def __init__(self, first_number: int = DEFAULT_FIRST_NUMBER):
        if first_number < DEFAULT_FIRST_NUMBER:
            raise ValueError(f"First account number must be at least {DEFAULT_FIRST_NUMBER}")

        self.first_number = first_number
        self._accounts: List[Account] = []
        self._next_number = first_number
        self.logger = get_logger("teller.registry")

    @property
    def next_number(self) -> int:
        return self._next_number

    def __len__(self) -> int:
        return len(self._accounts)

    def _lookup(self, number: int) -> Optional[Account]:
        for account in self._accounts:
            if account.number == number:
                return account
        return None

    def _refuse(self, action: str, outcome: Outcome, number: Optional[int] = None) -> Outcome:
        log_action(
            self.logger, "warning", f"{action} refused: {outcome.status.value}",
            action=action,
            resource=f"account:{number}" if number is not None else None,
            extra={"status": outcome.status.value}
        )
        return outcome

    def create(self, name: str, initial_deposit: AmountLike, pin: int) -> Outcome:
        """
        Open a new account

        Args:
            name: Owner name; whitespace runs become underscores
            initial_deposit: Opening balance, zero or more
            pin: 4-digit PIN

        Returns:
            OK outcome carrying the new account number, or INVALID_PIN_FORMAT,
            INVALID_AMOUNT or INVALID_NAME with nothing created
        """
        if not is_valid_pin(pin):
            return self._refuse("create", Outcome.failure(
                OutcomeStatus.INVALID_PIN_FORMAT,
                "Invalid PIN! Please enter a 4-digit number."
            ))

        try:
            opening = Money(initial_deposit)
        except ValueError:
            return self._refuse("create", Outcome.failure(
                OutcomeStatus.INVALID_AMOUNT, "Invalid initial deposit amount!"
            ))
        if opening.is_negative():
            return self._refuse("create", Outcome.failure(
                OutcomeStatus.INVALID_AMOUNT, "Initial deposit cannot be negative!"
            ))

        name = normalize_name(name)
        if not name:
            return self._refuse("create", Outcome.failure(
                OutcomeStatus.INVALID_NAME, "Customer name cannot be empty!"
            ))
        if not is_encodable_name(name):
            return self._refuse("create", Outcome.failure(
                OutcomeStatus.INVALID_NAME, "Customer name contains unsupported characters!"
            ))

        number = self._next_number
        self._accounts.append(Account(number=number, name=name, balance=opening, pin=pin))
        self._next_number += 1

        log_action(
            self.logger, "info", "Account created",
            action="create", resource=f"account:{number}",
            extra={"opening_balance": opening.to_string()}
        )
        return Outcome.success(
            f"Account created successfully! Your account number is {number}.", number
        )

    def find(self, number: int) -> Optional[AccountView]:
        """Get a snapshot of an account by number"""
        account = self._lookup(number)
        return account.view() if account else None

    def deposit(self, number: int, amount: AmountLike) -> Outcome:
        account = self._lookup(number)
        if not account:
            return self._refuse("deposit", Outcome.failure(
                OutcomeStatus.NOT_FOUND, "Account not found!"
            ), number)

        outcome = account.deposit(amount)
        if not outcome:
            return self._refuse("deposit", outcome, number)

        log_action(
            self.logger, "info", "Deposit applied",
            action="deposit", resource=f"account:{number}",
            extra={"amount": Money(amount).to_string()}
        )
        return outcome

    def withdraw(self, number: int, amount: AmountLike, pin: int) -> Outcome:
        account = self._lookup(number)
        if not account:
            return self._refuse("withdraw", Outcome.failure(
                OutcomeStatus.NOT_FOUND, "Account not found!"
            ), number)

        outcome = account.withdraw(amount, pin)
        if not outcome:
            return self._refuse("withdraw", outcome, number)

        log_action(
            self.logger, "info", "Withdrawal applied",
            action="withdraw", resource=f"account:{number}",
            extra={"amount": Money(amount).to_string()}
        )
        return outcome

    def transfer(self, from_number: int, to_number: int, amount: AmountLike, from_pin: int) -> Outcome:
        """
        Move funds between two accounts

        Either both legs apply or neither does. The source PIN is checked
        before anything is touched; the destination leg is credited only
        after the source withdrawal succeeded, and the source is restored
        if the credit is refused.

        Args:
            from_number: Source account number
            to_number: Destination account number (may equal the source)
            amount: Amount to move
            from_pin: PIN of the source account

        Returns:
            OK outcome, or NOT_FOUND, INCORRECT_PIN or INVALID_AMOUNT with
            both balances unchanged
        """
        source = self._lookup(from_number)
        destination = self._lookup(to_number)

        if not source or not destination:
            return self._refuse("transfer", Outcome.failure(
                OutcomeStatus.NOT_FOUND, "One or both accounts not found!"
            ), from_number)

        if not source.verify_pin(from_pin):
            return self._refuse("transfer", Outcome.failure(
                OutcomeStatus.INCORRECT_PIN, "Incorrect PIN! Transfer denied."
            ), from_number)

        source_before = source.balance
        withdrawn = source.withdraw(amount, from_pin)
        if not withdrawn:
            return self._refuse("transfer", withdrawn, from_number)

        credited = destination.deposit(amount)
        if not credited:
            source.balance = source_before
            return self._refuse("transfer", credited, to_number)

        log_action(
            self.logger, "info", "Transfer applied",
            action="transfer", resource=f"account:{from_number}",
            extra={"to": to_number, "amount": Money(amount).to_string()}
        )
        return Outcome.success("Transfer successful!", from_number)

    def list_all(self) -> List[AccountView]:
        """All accounts in creation order"""
        return [account.view() for account in self._accounts]

    def snapshot(self) -> List[Account]:
        """Detached copies of every account, PIN included, for persistence"""
        return [replace(account) for account in self._accounts]

    def restore(self, accounts: Iterable[Account], next_number: Optional[int] = None) -> None:
        """
        Replace the whole registry state

        The counter is raised so it stays above every restored number and
        never drops below the first account number.

        Raises:
            ValueError: If two accounts share a number
        """
        restored: List[Account] = []
        seen = set()
        for account in accounts:
            if account.number in seen:
                raise ValueError(f"Duplicate account number {account.number}")
            seen.add(account.number)
            restored.append(account)

        counter = self.first_number if next_number is None else next_number
        if restored:
            counter = max(counter, max(seen) + 1)
        counter = max(counter, self.first_number)

        self._accounts = restored
        self._next_number = counter

    def clear(self) -> None:
        """Drop all accounts and reset the counter"""
        self.restore([])
