"""
Storage Backend Module

Persists the registry as line-oriented text: one "<number> <name> <balance> <pin>"
line per account followed by a line holding the next account number.
Provides an abstract store interface with file-backed and in-memory
implementations. Balances are written as two-digit decimal strings.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple
from pathlib import Path
import re

from .accounts import Account, Outcome, OutcomeStatus
from .currency import Money
from .logging_config import get_logger, log_action
from .registry import Bank


logger = get_logger("teller.storage")

_INTEGER = re.compile(r'[+-]?\d+')


def _parse_int(token: str) -> Optional[int]:
    if _INTEGER.fullmatch(token):
        return int(token)
    return None


def format_record(account: Account) -> str:
    """Serialize one account as a store line (without newline)"""
    return f"{account.number} {account.name} {account.balance.to_string()} {account.pin}"


def parse_record(line: str) -> Optional[Tuple[int, str, Money, int]]:
    """
    Parse an account line into its raw fields

    Returns:
        (number, name, balance, pin) if the line has the record shape,
        None otherwise. Field values are not checked against account rules.
    """
    fields = line.split()
    if len(fields) != 4:
        return None

    number = _parse_int(fields[0])
    pin = _parse_int(fields[3])
    if number is None or pin is None:
        return None

    try:
        balance = Money(fields[2])
    except ValueError:
        return None

    return number, fields[1], balance, pin


def parse_counter(line: str) -> Optional[int]:
    """Parse the trailing next-account-number line"""
    fields = line.split()
    if len(fields) != 1:
        return None
    return _parse_int(fields[0])


def dumps(bank: Bank) -> str:
    """Render the registry in store format"""
    lines = [format_record(account) for account in bank.snapshot()]
    lines.append(str(bank.next_number))
    return "".join(f"{line}\n" for line in lines)


def loads(bank: Bank, text: str) -> Outcome:
    """
    Replace the registry contents with the accounts held in text

    Lines that look like records but break an account rule, or repeat an
    account number already loaded, are skipped and counted.
    """
    accounts: List[Account] = []
    numbers = set()
    next_number: Optional[int] = None
    skipped = 0

    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue

        record = parse_record(line)
        if record is not None:
            number, name, balance, pin = record
            if number in numbers:
                skipped += 1
                logger.warning("Skipping duplicate account %s on line %d", number, lineno)
                continue
            try:
                account = Account(number=number, name=name, balance=balance, pin=pin)
            except ValueError as e:
                skipped += 1
                logger.warning("Skipping invalid record on line %d: %s", lineno, e)
                continue
            numbers.add(number)
            accounts.append(account)
            continue

        counter = parse_counter(line)
        if counter is not None:
            next_number = counter
            continue

        skipped += 1
        logger.warning("Skipping unreadable line %d", lineno)

    bank.restore(accounts, next_number)

    message = (
        f"Accounts loaded from file successfully! "
        f"Next account number: {bank.next_number}"
    )
    if skipped:
        message += f" ({skipped} invalid line(s) skipped)"
    return Outcome.success(message)


class StoreInterface(ABC):
    """Abstract interface for registry stores"""

    @abstractmethod
    def save(self, bank: Bank) -> Outcome:
        """Write the whole registry"""
        pass

    @abstractmethod
    def load(self, bank: Bank) -> Outcome:
        """Clear the registry and repopulate it from the store"""
        pass


class TextFileStore(StoreInterface):
    """
    Plain text file store.
    The file is opened only for the duration of a save or a load.
    """

    def __init__(self, path):
        self.path = Path(path)

    def save(self, bank: Bank) -> Outcome:
        """
        Truncate and rewrite the store file

        The payload is encoded before the file is opened, so a record that
        cannot be written leaves the previous file intact.
        """
        try:
            payload = dumps(bank).encode("utf-8")
        except UnicodeEncodeError as e:
            logger.error("Cannot encode store %s: %s", self.path, e)
            return Outcome.failure(OutcomeStatus.IO_ERROR, "Error encoding accounts for saving.")

        try:
            with open(self.path, "wb") as handle:
                handle.write(payload)
        except OSError as e:
            logger.error("Error saving store %s: %s", self.path, e)
            return Outcome.failure(OutcomeStatus.IO_ERROR, "Error opening file for saving.")

        log_action(
            logger, "info", "Store saved",
            action="save", resource=str(self.path),
            extra={"accounts": len(bank), "next_number": bank.next_number}
        )
        return Outcome.success("Accounts saved to file successfully!")

    def load(self, bank: Bank) -> Outcome:
        """
        Read the store file into the registry

        A missing file leaves an empty registry and reports NO_STORE.
        Any other read failure reports IO_ERROR and leaves the registry
        untouched.
        """
        try:
            with open(self.path, "r", encoding="utf-8") as handle:
                text = handle.read()
        except FileNotFoundError:
            bank.clear()
            logger.info("No store found at %s, starting empty", self.path)
            return Outcome.failure(
                OutcomeStatus.NO_STORE,
                f"No saved accounts found. Next account number: {bank.next_number}"
            )
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Error loading store %s: %s", self.path, e)
            return Outcome.failure(OutcomeStatus.IO_ERROR, "Error opening file for loading.")

        outcome = loads(bank, text)
        log_action(
            logger, "info", "Store loaded",
            action="load", resource=str(self.path),
            extra={"accounts": len(bank), "next_number": bank.next_number}
        )
        return outcome


class InMemoryStore(StoreInterface):
    """In-memory store holding the text format, for testing"""

    def __init__(self, text: Optional[str] = None):
        self.text = text

    def save(self, bank: Bank) -> Outcome:
        self.text = dumps(bank)
        return Outcome.success("Accounts saved to memory successfully!")

    def load(self, bank: Bank) -> Outcome:
        if self.text is None:
            bank.clear()
            return Outcome.failure(
                OutcomeStatus.NO_STORE,
                f"No saved accounts found. Next account number: {bank.next_number}"
            )
        return loads(bank, self.text)
