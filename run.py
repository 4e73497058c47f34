#!/usr/bin/env python3
"""
Teller Entry Point

Starts the console banking menu against bank_accounts.txt in the
working directory (override with --store or TELLER_STORE_PATH).
"""

import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from teller.__main__ import main


if __name__ == "__main__":
    sys.exit(main())
