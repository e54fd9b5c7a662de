"""
Pytest configuration and fixtures for the treasury projection tests.

Fixtures provide:
- A fixed "now" (nothing under test reads the wall clock)
- A small debt book covering each status / benchmark / frequency
- Starting balances for both entities
"""

import os
import sys

import pandas as pd
import pytest

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import ExchangeRates, ProjectionConfig, StressConfig
from core.schema import (
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
)


NOW = pd.Timestamp("2024-03-15")


def make_debt(**overrides) -> DebtInstrument:
    """Quarterly 10 @ 4% SHIBOR PLANNED loan, 2024-01-01 -> 2024-07-01, unless overridden."""
    fields = dict(
        id="d1",
        name="Bank loan",
        entity=Entity.PROPERTY,
        currency=Currency.RMB,
        principal=10.0,
        base_rate=4.0,
        start_date=pd.Timestamp("2024-01-01"),
        end_date=pd.Timestamp("2024-07-01"),
        frequency=Frequency.QUARTERLY,
        status=DebtStatus.PLANNED,
        benchmark=Benchmark.SHIBOR,
    )
    fields.update(overrides)
    return DebtInstrument(**fields)


def make_event(id, date, amount_rmb=0.0, **overrides) -> CashFlowEvent:
    fields = dict(
        id=id,
        date=pd.Timestamp(date),
        entity=Entity.PROPERTY,
        category=Category.OPERATING,
        description=f"event {id}",
        amount_rmb=amount_rmb,
        status=EventStatus.FORECAST,
    )
    fields.update(overrides)
    return CashFlowEvent(**fields)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def now():
    return NOW


@pytest.fixture
def rates():
    return ExchangeRates(hkd_to_rmb=0.92, usd_to_rmb=7.23)


@pytest.fixture
def no_stress(rates):
    return StressConfig(rates=rates)


@pytest.fixture
def sample_debt():
    return make_debt()


@pytest.fixture
def debt_book():
    """One debt per status, mixing currencies, benchmarks and frequencies."""
    return [
        make_debt(),
        make_debt(
            id="d2",
            name="HKD club loan",
            entity=Entity.ENTERPRISE,
            currency=Currency.HKD,
            principal=20.0,
            base_rate=5.5,
            start_date=pd.Timestamp("2023-06-30"),
            end_date=pd.Timestamp("2025-06-30"),
            frequency=Frequency.SEMI_ANNUALLY,
            status=DebtStatus.ACTIVE,
            benchmark=Benchmark.HIBOR,
        ),
        make_debt(
            id="d3",
            name="USD note",
            entity=Entity.ENTERPRISE,
            currency=Currency.USD,
            principal=2.0,
            base_rate=6.0,
            start_date=pd.Timestamp("2024-05-01"),
            end_date=pd.Timestamp("2025-05-01"),
            frequency=Frequency.AT_MATURITY,
            status=DebtStatus.PLANNED,
            benchmark=Benchmark.FIXED,
        ),
    ]


@pytest.fixture
def starting():
    return {
        Entity.PROPERTY: CurrencyAmounts(hkd=0.0, rmb=150.0, usd=0.0),
        Entity.ENTERPRISE: CurrencyAmounts(hkd=50.0, rmb=20.0, usd=1.0),
    }


@pytest.fixture
def projection_config(now):
    return ProjectionConfig(now=now)
