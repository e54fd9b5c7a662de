"""
Record definitions shared by every layer.

Debts and cash-flow events are plain frozen dataclasses so that the engine can
treat them as immutable snapshots: regenerating the debt schedule never patches
an existing event, it builds a fresh list.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple, Union

import pandas as pd


class Entity(str, Enum):
    PROPERTY = "PROPERTY"
    ENTERPRISE = "ENTERPRISE"


# Scope selector meaning "every entity combined".
ALL_ENTITIES = "ALL"

EntityScope = Union[Entity, str]


class Currency(str, Enum):
    HKD = "HKD"
    RMB = "RMB"
    USD = "USD"


class Benchmark(str, Enum):
    SHIBOR = "SHIBOR"
    HIBOR = "HIBOR"
    SOFR = "SOFR"
    FIXED = "FIXED"


class Frequency(str, Enum):
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    SEMI_ANNUALLY = "SEMI_ANNUALLY"
    ANNUALLY = "ANNUALLY"
    AT_MATURITY = "AT_MATURITY"


# Interest cadence in months. 0 = single lump at maturity, no periodic interest.
FREQUENCY_MONTHS: Dict[Frequency, int] = {
    Frequency.MONTHLY: 1,
    Frequency.QUARTERLY: 3,
    Frequency.SEMI_ANNUALLY: 6,
    Frequency.ANNUALLY: 12,
    Frequency.AT_MATURITY: 0,
}


class DebtStatus(str, Enum):
    PLANNED = "PLANNED"
    ACTIVE = "ACTIVE"
    SETTLED = "SETTLED"


class LoanType(str, Enum):
    BILATERAL = "BILATERAL"
    SYNDICATED = "SYNDICATED"
    BOND = "BOND"
    NOTES = "NOTES"
    OTHER = "OTHER"


class Category(str, Enum):
    OPERATING = "OPERATING"
    FINANCING = "FINANCING"
    INVESTING = "INVESTING"
    INTERNAL = "INTERNAL"


class EventStatus(str, Enum):
    FORECAST = "FORECAST"
    ACTUAL = "ACTUAL"


# Canonical ledger columns (DataFrame view of a CashFlowEvent list).
LEDGER_COLUMNS: Tuple[str, ...] = (
    "id",
    "date",
    "entity",
    "category",
    "description",
    "amount_hkd",
    "amount_rmb",
    "amount_usd",
    "status",
    "linked_debt_id",
)

# Column order of the CSV import/export format.
CSV_COLUMNS: Tuple[str, ...] = (
    "date",
    "status",
    "entity",
    "category",
    "description",
    "amountHKD",
    "amountRMB",
    "amountUSD",
)


@dataclass(frozen=True)
class CurrencyAmounts:
    """An (HKD, RMB, USD) triple, in units of 100 million."""
    hkd: float = 0.0
    rmb: float = 0.0
    usd: float = 0.0

    def __add__(self, other: "CurrencyAmounts") -> "CurrencyAmounts":
        return CurrencyAmounts(
            hkd=self.hkd + other.hkd,
            rmb=self.rmb + other.rmb,
            usd=self.usd + other.usd,
        )


StartingBalances = Dict[Entity, CurrencyAmounts]


@dataclass(frozen=True)
class DebtInstrument:
    """
    One loan, note or bond owned by an entity.

    principal is in units of 100 million of `currency`; base_rate is a percent
    (4.5 means 4.5%); spread_bps is informational only and never enters the
    interest calculation.
    """
    id: str
    name: str
    entity: Entity
    currency: Currency
    principal: float
    base_rate: float
    start_date: pd.Timestamp
    end_date: pd.Timestamp
    frequency: Frequency = Frequency.QUARTERLY
    status: DebtStatus = DebtStatus.PLANNED
    benchmark: Benchmark = Benchmark.FIXED
    spread_bps: float = 0.0
    lender: str = ""
    loan_type: LoanType = LoanType.BILATERAL
    guarantor: Optional[str] = None
    remarks: Optional[str] = None

    @property
    def interval_months(self) -> int:
        return FREQUENCY_MONTHS[self.frequency]


@dataclass(frozen=True)
class CashFlowEvent:
    """
    A single dated cash movement, generated from a debt or entered manually.

    linked_debt_id is set only on generated events.
    """
    id: str
    date: pd.Timestamp
    entity: Entity
    category: Category
    description: str
    amount_hkd: float = 0.0
    amount_rmb: float = 0.0
    amount_usd: float = 0.0
    status: EventStatus = EventStatus.FORECAST
    linked_debt_id: Optional[str] = None

    @property
    def is_generated(self) -> bool:
        return self.linked_debt_id is not None

    @property
    def amounts(self) -> CurrencyAmounts:
        return CurrencyAmounts(self.amount_hkd, self.amount_rmb, self.amount_usd)

    @classmethod
    def in_currency(
        cls,
        currency: Currency,
        amount: float,
        **fields,
    ) -> "CashFlowEvent":
        """Build an event whose whole amount sits in one currency slot."""
        return cls(
            amount_hkd=amount if currency == Currency.HKD else 0.0,
            amount_rmb=amount if currency == Currency.RMB else 0.0,
            amount_usd=amount if currency == Currency.USD else 0.0,
            **fields,
        )
