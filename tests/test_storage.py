"""
Tests for the text store

Covers the line format, save/load round-trips, strict loading of damaged
files and I/O failure reporting.
"""

import pytest

from teller.currency import Money
from teller.accounts import Account, OutcomeStatus
from teller.registry import Bank
from teller.storage import (
    TextFileStore, InMemoryStore, StoreInterface,
    format_record, parse_record, parse_counter, dumps, loads
)


@pytest.fixture
def two_accounts():
    bank = Bank()
    bank.create("Alice", Money("100.00"), 4321)
    bank.create("Bob", Money("0.00"), 1111)
    bank.deposit(1000, Money("30.00"))
    bank.transfer(1000, 1001, Money("30.00"), 4321)
    return bank


def rows(bank):
    return [(a.number, a.name, a.balance, a.pin) for a in bank.snapshot()]


class TestRecordFormat:
    """Test single-line encoding helpers"""

    def test_format_record(self):
        account = Account(number=1000, name="Alice", balance=Money("100"), pin=4321)
        assert format_record(account) == "1000 Alice 100.00 4321"

    def test_parse_record(self):
        assert parse_record("1000 Alice 100.00 4321") == (1000, "Alice", Money("100.00"), 4321)

    def test_parse_record_accepts_plain_decimals(self):
        assert parse_record("1000 Alice 130.5 4321")[2] == Money("130.50")
        assert parse_record("1000  Alice\t150   4321")[2] == Money("150.00")

    @pytest.mark.parametrize("line", [
        "1000 Alice 100.00",
        "1000 Alice 100.00 4321 extra",
        "x Alice 100.00 4321",
        "1000 Alice abc 4321",
        "1000 Alice 100.00 43.21",
        "1002",
        "",
    ])
    def test_parse_record_rejects(self, line):
        assert parse_record(line) is None

    def test_parse_counter(self):
        assert parse_counter("1002") == 1002
        assert parse_counter("  1002  ") == 1002
        assert parse_counter("1002 1003") is None
        assert parse_counter("1_002") is None
        assert parse_counter("next") is None

    def test_dumps(self, two_accounts):
        assert dumps(two_accounts) == (
            "1000 Alice 100.00 4321\n"
            "1001 Bob 30.00 1111\n"
            "1002\n"
        )

    def test_dumps_empty_bank(self):
        assert dumps(Bank()) == "1000\n"


class TestTextFileStore:
    """Test the file-backed store"""

    def test_is_store(self, tmp_path):
        assert isinstance(TextFileStore(tmp_path / "bank_accounts.txt"), StoreInterface)

    def test_save_then_load(self, tmp_path, two_accounts):
        path = tmp_path / "bank_accounts.txt"
        store = TextFileStore(path)

        assert store.save(two_accounts)
        assert path.read_text(encoding="utf-8") == "1000 Alice 100.00 4321\n1001 Bob 30.00 1111\n1002\n"

        fresh = Bank()
        outcome = store.load(fresh)
        assert outcome
        assert "Next account number: 1002" in outcome.message
        assert rows(fresh) == [
            (1000, "Alice", Money("100.00"), 4321),
            (1001, "Bob", Money("30.00"), 1111),
        ]
        assert fresh.next_number == 1002

    def test_loaded_registry_keeps_working(self, tmp_path, two_accounts):
        store = TextFileStore(tmp_path / "bank_accounts.txt")
        store.save(two_accounts)

        fresh = Bank()
        store.load(fresh)
        assert fresh.create("Carol", Money("1"), 2222).account_number == 1002
        assert fresh.withdraw(1000, Money("10.00"), 4321)

    def test_save_truncates(self, tmp_path, two_accounts):
        path = tmp_path / "bank_accounts.txt"
        path.write_text("stale content\n" * 50, encoding="utf-8")

        TextFileStore(path).save(Bank())
        assert path.read_text(encoding="utf-8") == "1000\n"

    def test_load_clears_existing_accounts(self, tmp_path, two_accounts):
        path = tmp_path / "bank_accounts.txt"
        path.write_text("2000 Carol 5.00 2222\n2001\n", encoding="utf-8")

        TextFileStore(path).load(two_accounts)
        assert rows(two_accounts) == [(2000, "Carol", Money("5.00"), 2222)]
        assert two_accounts.next_number == 2001

    def test_missing_file(self, tmp_path, two_accounts):
        outcome = TextFileStore(tmp_path / "absent.txt").load(two_accounts)
        assert outcome.status == OutcomeStatus.NO_STORE
        assert len(two_accounts) == 0
        assert two_accounts.next_number == 1000

    def test_save_io_error(self, tmp_path, two_accounts):
        outcome = TextFileStore(tmp_path).save(two_accounts)
        assert outcome.status == OutcomeStatus.IO_ERROR
        assert outcome.message == "Error opening file for saving."

    def test_load_io_error_leaves_registry(self, tmp_path, two_accounts):
        outcome = TextFileStore(tmp_path).load(two_accounts)
        assert outcome.status == OutcomeStatus.IO_ERROR
        assert len(two_accounts) == 2
        assert two_accounts.next_number == 1002

    def test_unencodable_record_keeps_previous_file(self, tmp_path):
        path = tmp_path / "accounts.txt"
        path.write_text("1000 Alice 100.00 4321\n1001\n", encoding="utf-8")

        bank = Bank()
        bank.restore([
            Account(number=1000, name="Alice", balance=Money("100.00"), pin=4321),
            Account(number=1001, name="Ev\udcffe", balance=Money("10.00"), pin=2222),
        ])

        outcome = TextFileStore(path).save(bank)
        assert outcome.status == OutcomeStatus.IO_ERROR
        assert path.read_text(encoding="utf-8") == "1000 Alice 100.00 4321\n1001\n"

    def test_non_ascii_names_round_trip(self, tmp_path):
        bank = Bank()
        bank.create("Zoë", Money("12.50"), 2222)
        store = TextFileStore(tmp_path / "accounts.txt")
        assert store.save(bank)

        restored = Bank()
        assert store.load(restored)
        assert restored.find(1000).name == "Zoë"


class TestStrictLoading:
    """Test how damaged or hand-edited store text is read"""

    def test_counter_only(self):
        bank = Bank()
        loads(bank, "1005\n")
        assert len(bank) == 0
        assert bank.next_number == 1005

    def test_missing_counter_line(self):
        bank = Bank()
        loads(bank, "1000 Alice 1.00 4321\n1007 Bob 2.00 1111\n")
        assert bank.next_number == 1008

    def test_stale_counter_raised(self):
        bank = Bank()
        loads(bank, "1000 Alice 1.00 1234\n1003 Bob 2.00 1234\n1001\n")
        assert bank.next_number == 1004

    def test_blank_lines_ignored(self):
        bank = Bank()
        outcome = loads(bank, "\n1000 Alice 1.00 4321\n\n1001\n\n")
        assert outcome
        assert "skipped" not in outcome.message
        assert len(bank) == 1

    def test_invalid_records_skipped(self):
        bank = Bank()
        text = (
            "1000 Alice 100.00 4321\n"
            "1001 Bob 10.00 12345\n"
            "1002 Carol -5.00 2222\n"
            "1000 Mallory 999.00 1234\n"
            "this is not a record\n"
            "1003 Dave 7.00 3333\n"
            "1004\n"
        )
        outcome = loads(bank, text)
        assert outcome
        assert "(4 invalid line(s) skipped)" in outcome.message
        assert rows(bank) == [
            (1000, "Alice", Money("100.00"), 4321),
            (1003, "Dave", Money("7.00"), 3333),
        ]
        assert bank.next_number == 1004

    def test_last_counter_line_wins(self):
        bank = Bank()
        loads(bank, "1010\n1000 Alice 1.00 4321\n1020\n")
        assert bank.next_number == 1020


class TestInMemoryStore:
    """Test the in-memory store used by console tests"""

    def test_round_trip(self, two_accounts):
        store = InMemoryStore()
        assert store.save(two_accounts)

        fresh = Bank()
        assert store.load(fresh)
        assert rows(fresh) == rows(two_accounts)
        assert fresh.next_number == two_accounts.next_number

    def test_empty_store(self, two_accounts):
        outcome = InMemoryStore().load(two_accounts)
        assert outcome.status == OutcomeStatus.NO_STORE
        assert len(two_accounts) == 0
