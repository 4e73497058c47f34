"""
Console Driver Module

Menu-driven front end for the registry. Reads and parses operator input,
calls the Bank, and renders the outcomes with rich. All balance rules live
in the registry; this module only prompts and prints.
"""

from typing import Optional, TextIO

from rich.console import Console
from rich.markup import escape

from .accounts import AccountView, Outcome, OutcomeStatus, is_valid_pin
from .currency import Money
from .logging_config import get_logger
from .registry import Bank
from .storage import StoreInterface


MENU_TITLE = "***** Welcome to Banking System *****"
MENU_ITEMS = [
    "1. Create a New Account",
    "2. Deposit Money",
    "3. Withdraw Money",
    "4. Balance Inquiry",
    "5. Fund Transfer",
    "6. View All Accounts",
    "7. Save and Exit",
]
MENU_RULE = "-" * 37
ACCOUNT_RULE = "-" * 26

SAVE_AND_EXIT = 7


class BankConsole:
    """
    Interactive menu loop over a Bank and its store

    Args:
        bank: Registry to operate on
        store: Store used for the startup load and for save-and-exit
        console: rich Console for output (defaults to stdout)
        stream: Text stream to read input from (defaults to stdin)
    """

    def __init__(self, bank: Bank, store: StoreInterface,
                 console: Optional[Console] = None, stream: Optional[TextIO] = None):
        self.bank = bank
        self.store = store
        self.console = console or Console(highlight=False, emoji=False)
        self.stream = stream
        self.logger = get_logger("teller.console")

        self._actions = {
            1: self.create_account,
            2: self.deposit,
            3: self.withdraw,
            4: self.balance_inquiry,
            5: self.transfer,
            6: self.view_all,
        }

    # Input helpers

    def _read(self, prompt: str) -> str:
        try:
            line = self.console.input(escape(prompt), stream=self.stream)
        except UnicodeDecodeError:
            self._error("Unreadable input! Please use plain text.")
            return ""
        if self.stream is not None and not line:
            raise EOFError
        return line.strip()

    def _ask_int(self, prompt: str) -> int:
        while True:
            text = self._read(prompt)
            try:
                return int(text)
            except ValueError:
                self._error("Invalid input! Please enter a whole number.")

    def _ask_amount(self, prompt: str) -> Money:
        while True:
            text = self._read(prompt)
            try:
                return Money.parse(text)
            except ValueError:
                self._error("Invalid amount! Please enter a number.")

    # Output helpers

    def _error(self, message: str) -> None:
        self.console.print(escape(message), style="bold red")

    def _info(self, message: str) -> None:
        self.console.print(escape(message))

    def _report(self, outcome: Outcome) -> None:
        if outcome:
            self.console.print(escape(outcome.message), style="green")
        elif outcome.status == OutcomeStatus.NO_STORE:
            self.console.print(escape(outcome.message), style="yellow")
        else:
            self._error(outcome.message)

    def _display(self, view: AccountView) -> None:
        self._info(f"Account Number: {view.number}")
        self._info(f"Customer Name: {view.name}")
        self._info(f"Balance: ${view.balance_display}")

    def show_menu(self) -> None:
        self.console.print(MENU_TITLE, style="bold")
        for item in MENU_ITEMS:
            self._info(item)
        self._info(MENU_RULE)

    # Menu actions

    def create_account(self) -> None:
        name = self._read("Enter Customer Name: ")
        initial_deposit = self._ask_amount("Enter Initial Deposit: ")

        pin = self._ask_int("Set a 4-digit PIN: ")
        while not is_valid_pin(pin):
            self._error("Invalid PIN! Please enter a 4-digit number.")
            pin = self._ask_int("Set a 4-digit PIN: ")

        self._report(self.bank.create(name, initial_deposit, pin))

    def deposit(self) -> None:
        number = self._ask_int("Enter Account Number: ")
        amount = self._ask_amount("Enter Deposit Amount: ")
        self._report(self.bank.deposit(number, amount))

    def withdraw(self) -> None:
        number = self._ask_int("Enter Account Number: ")
        amount = self._ask_amount("Enter Withdrawal Amount: ")
        if self.bank.find(number) is None:
            self._error("Account not found!")
            return

        pin = self._ask_int("Enter PIN: ")
        self._report(self.bank.withdraw(number, amount, pin))

    def balance_inquiry(self) -> None:
        number = self._ask_int("Enter Account Number: ")
        view = self.bank.find(number)
        if view is None:
            self._error("Account not found!")
            return
        self._display(view)

    def transfer(self) -> None:
        from_number = self._ask_int("Enter Source Account Number: ")
        to_number = self._ask_int("Enter Destination Account Number: ")
        amount = self._ask_amount("Enter Transfer Amount: ")
        if self.bank.find(from_number) is None or self.bank.find(to_number) is None:
            self._error("One or both accounts not found!")
            return

        pin = self._ask_int(f"Enter PIN for Account {from_number}: ")
        self._report(self.bank.transfer(from_number, to_number, amount, pin))

    def view_all(self) -> None:
        views = self.bank.list_all()
        if not views:
            self._info("No accounts available.")
            return
        for view in views:
            self._display(view)
            self._info(ACCOUNT_RULE)

    def save_and_exit(self) -> int:
        """Save the registry; exit status 0 when the save succeeded"""
        outcome = self.store.save(self.bank)
        self._report(outcome)
        self._info("Exiting...")
        return 0 if outcome else 1

    # Main loop

    def handle(self, choice: Optional[int]) -> None:
        action = self._actions.get(choice)
        if action is None:
            self._error("Invalid choice! Please try again.")
            return
        action()

    def run(self, load: bool = True) -> int:
        """
        Run the menu until the operator saves and exits

        End of input or Ctrl-C saves and exits as if choice 7 was picked.

        Returns:
            Process exit status
        """
        if load:
            self._report(self.store.load(self.bank))

        while True:
            self.show_menu()
            try:
                text = self._read("Enter your choice: ")
                try:
                    choice = int(text)
                except ValueError:
                    choice = None

                if choice == SAVE_AND_EXIT:
                    return self.save_and_exit()
                self.handle(choice)
            except (EOFError, KeyboardInterrupt):
                self.console.print()
                self.logger.info("Input closed, saving before exit")
                return self.save_and_exit()
