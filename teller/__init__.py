"""
Teller

A console bank: an in-memory registry of PIN-protected accounts with
deposits, withdrawals and atomic transfers, persisted to a plain text file.
"""

__version__ = "1.0.0"
