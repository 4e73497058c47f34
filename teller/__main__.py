#!/usr/bin/env python3
"""Main entry point for the Teller console bank"""

import argparse
import sys
from typing import List, Optional

from .config import LOG_LEVELS, get_config
from .console import BankConsole
from .logging_config import setup_logging
from .registry import Bank
from .storage import TextFileStore


def build_parser() -> argparse.ArgumentParser:
    config = get_config()
    parser = argparse.ArgumentParser(description="Console banking system")
    parser.add_argument(
        "--store",
        type=str,
        default=config.store_path,
        help=f"Account store file (default: {config.store_path})",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=config.log_level,
        choices=LOG_LEVELS,
        help=f"Log level (default: {config.log_level})",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Load the store, run the menu, return the exit status"""
    config = get_config()
    args = build_parser().parse_args(argv)

    setup_logging(args.log_level, log_format=config.log_format, log_file=config.log_file)

    bank = Bank(first_number=config.first_account_number)
    store = TextFileStore(args.store)
    return BankConsole(bank, store).run()


if __name__ == "__main__":
    sys.exit(main())
