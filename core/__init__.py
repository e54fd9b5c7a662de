"""
Core package — record definitions, configuration, and shared utilities.
No business logic lives here.
"""

from .schema import (
    ALL_ENTITIES,
    CSV_COLUMNS,
    FREQUENCY_MONTHS,
    LEDGER_COLUMNS,
    Benchmark,
    CashFlowEvent,
    Category,
    Currency,
    CurrencyAmounts,
    DebtInstrument,
    DebtStatus,
    Entity,
    EventStatus,
    Frequency,
    LoanType,
    StartingBalances,
)
from .config import DEFAULT_RATES, ExchangeRates, ProjectionConfig, StressConfig
from .errors import ParseError
from .utils import add_months, day_key, month_key, quarter_label, require_columns

__all__ = [
    "ALL_ENTITIES",
    "CSV_COLUMNS",
    "FREQUENCY_MONTHS",
    "LEDGER_COLUMNS",
    "Benchmark",
    "CashFlowEvent",
    "Category",
    "Currency",
    "CurrencyAmounts",
    "DebtInstrument",
    "DebtStatus",
    "Entity",
    "EventStatus",
    "Frequency",
    "LoanType",
    "StartingBalances",
    "DEFAULT_RATES",
    "ExchangeRates",
    "ProjectionConfig",
    "StressConfig",
    "ParseError",
    "add_months",
    "day_key",
    "month_key",
    "quarter_label",
    "require_columns",
]
