"""
Projection and stress configuration.

Everything the engine depends on besides the debts and transactions themselves
is passed in through these frozen dataclasses, including "now". Nothing in the
engine reads the wall clock.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import pandas as pd

from .schema import ALL_ENTITIES, Benchmark, Currency, EntityScope


@dataclass(frozen=True)
class ExchangeRates:
    """Conversion rates into RMB. Both must be strictly positive."""
    hkd_to_rmb: float = 0.92
    usd_to_rmb: float = 7.23


DEFAULT_RATES = ExchangeRates()


@dataclass(frozen=True)
class StressConfig:
    """
    One snapshot of stress parameters.

    financing_fail_rate is a percentage (0-100) of PLANNED financing that fails
    to materialize. Shocks are in basis points and apply only to debts priced
    off the matching benchmark.
    """
    rates: ExchangeRates = field(default_factory=ExchangeRates)
    financing_fail_rate: float = 0.0
    shibor_shock_bps: float = 0.0
    hibor_shock_bps: float = 0.0
    sofr_shock_bps: float = 0.0

    def shock_for(self, benchmark: Benchmark) -> float:
        """Shock in bps for a benchmark; fixed-rate debt is never shocked."""
        if benchmark == Benchmark.SHIBOR:
            return self.shibor_shock_bps
        if benchmark == Benchmark.HIBOR:
            return self.hibor_shock_bps
        if benchmark == Benchmark.SOFR:
            return self.sofr_shock_bps
        return 0.0

    @property
    def principal_factor(self) -> float:
        """Share of PLANNED principal that actually gets drawn."""
        return (100.0 - self.financing_fail_rate) / 100.0

    @property
    def is_stressed(self) -> bool:
        return (
            self.financing_fail_rate > 0
            or abs(self.shibor_shock_bps) > 0
            or abs(self.hibor_shock_bps) > 0
            or abs(self.sofr_shock_bps) > 0
        )


@dataclass(frozen=True)
class ProjectionConfig:
    now: pd.Timestamp
    base_currency: Currency = Currency.RMB
    entity_scope: EntityScope = ALL_ENTITIES

    # daily calendar window around `now`
    calendar_lookback_days: int = 90
    calendar_horizon_days: int = 500

    # KPI window (months from the current month)
    display_months: int = 18

    # alert line, expressed in RMB and converted to the base currency
    safety_reference_rmb: float = 100.0

    # briefing: flows above this (base currency) are called out individually
    highlight_threshold: float = 5.0
