"""
Liquidity KPIs derived from the monthly summary.

The safety threshold is an alert line only (100 RMB, converted to the base
currency). Nothing in the engine stops a balance from going below it.

Runway = current balance / average monthly burn, where the burn is averaged
over the months with negative net flow inside the display window.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

import numpy as np
import pandas as pd

from core.config import ExchangeRates
from core.schema import Currency
from core.fx import to_base
from core.utils import add_months, month_key, require_columns

# Reported when there is no burn to divide by.
UNLIMITED_RUNWAY = 999.0


def safety_threshold(
    rates: ExchangeRates,
    base_currency: Currency = Currency.RMB,
    reference_rmb: float = 100.0,
) -> float:
    return to_base(0.0, reference_rmb, 0.0, rates, base_currency)


def is_below_threshold(balance: float, threshold: float) -> bool:
    return balance < threshold


def display_window(
    monthly: pd.DataFrame,
    now: pd.Timestamp,
    months: int = 18,
) -> pd.DataFrame:
    """Rows of a monthly summary from the month of `now` through `months` later (inclusive)."""
    require_columns(monthly, ["month", "net", "balance"])
    first = month_key(now)
    last = month_key(add_months(pd.Timestamp(now), months))
    mask = (monthly["month"] >= first) & (monthly["month"] <= last)
    return monthly.loc[mask].reset_index(drop=True)


def runway_months(window: pd.DataFrame) -> float:
    """
    Months until the balance runs out at the average burn rate.

    Uses the first month of the window as the current balance.
    """
    if window.empty:
        return UNLIMITED_RUNWAY
    burn = window.loc[window["net"] < 0, "net"].to_numpy(dtype=float)
    if len(burn) == 0:
        return UNLIMITED_RUNWAY
    avg_burn = float(np.mean(np.abs(burn)))
    if avg_burn == 0:
        return UNLIMITED_RUNWAY
    return float(window["balance"].iloc[0]) / avg_burn


def health_score(
    latest_balance: float,
    threshold: float,
    net_flow: float,
    runway: float,
) -> int:
    """100-point liquidity score with fixed deductions."""
    score = 100
    if latest_balance < threshold:
        score -= 30
    if net_flow < 0:
        score -= 10
    if runway < 6:
        score -= 20
    return max(0, score)


@dataclass(frozen=True)
class LiquiditySnapshot:
    current_balance: float
    latest_balance: float
    net_flow: float
    runway_months: float
    safety_threshold: float
    health_score: int

    @property
    def below_threshold(self) -> bool:
        return is_below_threshold(self.latest_balance, self.safety_threshold)

    def to_dict(self) -> Dict[str, float]:
        return {
            "current_balance": self.current_balance,
            "latest_balance": self.latest_balance,
            "net_flow": self.net_flow,
            "runway_months": self.runway_months,
            "safety_threshold": self.safety_threshold,
            "health_score": self.health_score,
        }


def liquidity_snapshot(
    monthly: pd.DataFrame,
    rates: ExchangeRates,
    base_currency: Currency = Currency.RMB,
    *,
    now: pd.Timestamp,
    months: int = 18,
    reference_rmb: float = 100.0,
) -> LiquiditySnapshot:
    """
    KPI card values.

    current_balance / net_flow come from the first month of the display
    window; latest_balance is the last month of the whole summary.
    """
    window = display_window(monthly, now, months)
    current_balance = float(window["balance"].iloc[0]) if not window.empty else 0.0
    net_flow = float(window["net"].iloc[0]) if not window.empty else 0.0
    latest_balance = float(monthly["balance"].iloc[-1]) if not monthly.empty else 0.0
    threshold = safety_threshold(rates, base_currency, reference_rmb)
    runway = runway_months(window)
    return LiquiditySnapshot(
        current_balance=current_balance,
        latest_balance=latest_balance,
        net_flow=net_flow,
        runway_months=runway,
        safety_threshold=threshold,
        health_score=health_score(latest_balance, threshold, net_flow, runway),
    )
