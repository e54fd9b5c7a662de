"""
Data preparation — parsing boundary records, validation, CSV import/export, operator books.
"""

from .books import DebtBook, TransactionBook
from .loader import read_debts_csv, read_transactions_csv, write_transactions_csv
from .records import parse_date, parse_debt, parse_debts, parse_transaction, parse_transactions
from .validators import ValidationResult, validate_debt, validate_debts, validate_transactions

__all__ = [
    "DebtBook",
    "TransactionBook",
    "read_debts_csv",
    "read_transactions_csv",
    "write_transactions_csv",
    "parse_date",
    "parse_debt",
    "parse_debts",
    "parse_transaction",
    "parse_transactions",
    "ValidationResult",
    "validate_debt",
    "validate_debts",
    "validate_transactions",
]
