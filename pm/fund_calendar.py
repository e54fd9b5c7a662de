"""
Calendar-day balances for the fund calendar view.

Unlike the monthly summary (one row per month WITH events), the calendar walks
every single day of a window around `now`: [now - lookback, now + horizon].
Each day's balance is the previous day's balance plus that day's net flow.

Net flow here is external liquidity only, so INTERNAL transfers are skipped.
The opening figure is the converted sum of the starting balances, plus the
net flow of any event that falls before the window starts.
"""

from __future__ import annotations

import calendar
from typing import Dict, Mapping, Sequence

import numpy as np
import pandas as pd

from core.config import ExchangeRates
from core.schema import (
    ALL_ENTITIES,
    CashFlowEvent,
    Category,
    Currency,
    EntityScope,
    StartingBalances,
)
from core.fx import to_base
from core.utils import day_key, filter_scope

from .balances import opening_balance


def daily_net_flows(
    events: Sequence[CashFlowEvent],
    rates: ExchangeRates,
    base_currency: Currency = Currency.RMB,
    scope: EntityScope = ALL_ENTITIES,
) -> pd.Series:
    """Sum of non-INTERNAL converted amounts per calendar day (days with events only)."""
    flows: Dict[pd.Timestamp, float] = {}
    for e in filter_scope(events, scope):
        if e.category == Category.INTERNAL:
            continue
        day = pd.Timestamp(e.date).normalize()
        flows[day] = flows.get(day, 0.0) + to_base(
            e.amount_hkd, e.amount_rmb, e.amount_usd, rates, base_currency
        )
    series = pd.Series(flows, dtype=float, name="net_flow")
    series.index = pd.DatetimeIndex(series.index)
    return series.sort_index()


def daily_balances(
    events: Sequence[CashFlowEvent],
    starting: StartingBalances,
    rates: ExchangeRates,
    base_currency: Currency = Currency.RMB,
    *,
    now: pd.Timestamp,
    lookback_days: int = 90,
    horizon_days: int = 500,
    scope: EntityScope = ALL_ENTITIES,
) -> Dict[str, float]:
    """
    End-of-day balance for every day in the window.

    Parameters
    ----------
    events : sequence of CashFlowEvent
        Merged ledger.
    starting : StartingBalances
        Opening positions per entity.
    now : pd.Timestamp
        Window anchor (injected, never read from the clock).
    lookback_days, horizon_days : int
        Days before / after `now` to include. The horizon should reach past
        the last generated debt event for the calendar to cover every payment.

    Returns
    -------
    Dict mapping "YYYY-MM-DD" -> balance, in date order. Empty if the scoped
    ledger has no events at all.
    """
    scoped = filter_scope(events, scope)
    if not scoped:
        return {}

    anchor = pd.Timestamp(now).normalize()
    start = anchor - pd.Timedelta(days=lookback_days)
    end = anchor + pd.Timedelta(days=horizon_days)
    days = pd.date_range(start, end, freq="D")

    flows = daily_net_flows(scoped, rates, base_currency)
    carried_in = float(flows[flows.index < start].sum())
    opening = opening_balance(starting, rates, base_currency, scope) + carried_in

    in_window = flows.reindex(days, fill_value=0.0)
    balances = opening + np.cumsum(in_window.to_numpy(dtype=float))
    return {day_key(d): float(b) for d, b in zip(days, balances)}


def calendar_month(
    events: Sequence[CashFlowEvent],
    balances: Mapping[str, float],
    year: int,
    month: int,
    rates: ExchangeRates,
    base_currency: Currency = Currency.RMB,
    scope: EntityScope = ALL_ENTITIES,
) -> pd.DataFrame:
    """
    One row per day of a calendar month.

    Columns: date (YYYY-MM-DD), day, weekday (0=Monday), net_flow, end_balance,
    has_data. end_balance is NaN for days outside the balance window.
    has_data counts every event on that day, INTERNAL ones included.
    """
    flows = daily_net_flows(events, rates, base_currency, scope)
    event_days = {day_key(e.date) for e in filter_scope(events, scope)}

    n_days = calendar.monthrange(year, month)[1]
    rows = []
    for d in range(1, n_days + 1):
        ts = pd.Timestamp(year=year, month=month, day=d)
        key = day_key(ts)
        rows.append({
            "date": key,
            "day": d,
            "weekday": ts.weekday(),
            "net_flow": float(flows.get(ts, 0.0)),
            "end_balance": float(balances.get(key, np.nan)),
            "has_data": key in event_days,
        })
    return pd.DataFrame(rows)


def month_summary(grid: pd.DataFrame) -> Dict[str, float]:
    """Start / in / out / end of a calendar_month() grid."""
    if grid.empty:
        return {"start": 0.0, "inflow": 0.0, "outflow": 0.0, "end": 0.0}

    first = grid.iloc[0]
    last = grid.iloc[-1]
    net = grid["net_flow"]
    return {
        "start": float(first["end_balance"] - first["net_flow"]),
        "inflow": float(net[net > 0].sum()),
        "outflow": float((-net[net < 0]).sum()),
        "end": float(last["end_balance"]),
    }
