"""
Monthly and quarterly aggregation of the merged ledger.

Monthly buckets carry two different kinds of figure:
  - inflow / outflow / net  : external liquidity movement. INTERNAL transfers
                              are excluded, they wash out at group level.
  - balance (month-end)     : the running balance after the bucket's last
                              event. INTERNAL transfers are included, they
                              do move an entity's own cash.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
import pandas as pd

from core.config import ExchangeRates
from core.schema import (
    ALL_ENTITIES,
    CashFlowEvent,
    Category,
    Currency,
    Entity,
    EntityScope,
    StartingBalances,
)
from core.fx import to_base_array
from core.utils import in_scope, month_key, quarter_label

from .balances import entity_balances, running_balances

MONTHLY_COLUMNS = ["month", "inflow", "outflow", "net", "balance", "n_events"]


def monthly_summary(
    events: Sequence[CashFlowEvent],
    starting: StartingBalances,
    rates: ExchangeRates,
    base_currency: Currency = Currency.RMB,
    scope: EntityScope = ALL_ENTITIES,
) -> pd.DataFrame:
    """
    Bucket the ledger by YYYY-MM.

    Returns
    -------
    DataFrame, one row per month that has at least one event in scope:
      month, inflow, outflow, net, balance, n_events,
      plus one month-end balance column per entity and `total`
      (group-wide, independent of scope).
    """
    df = running_balances(events, starting, rates, base_currency, scope)
    entity_cols = [entity.value for entity in Entity] + ["total"]
    if df.empty:
        return pd.DataFrame(columns=MONTHLY_COLUMNS + entity_cols)

    df["month"] = df["date"].map(month_key)
    external = df["category"] != Category.INTERNAL.value
    value = df["value_base"].where(external, 0.0)
    df["_inflow"] = value.clip(lower=0.0)
    df["_outflow"] = (-value).clip(lower=0.0)
    df["_net"] = value

    grouped = df.groupby("month", sort=True)
    out = pd.DataFrame({
        "inflow": grouped["_inflow"].sum(),
        "outflow": grouped["_outflow"].sum(),
        "net": grouped["_net"].sum(),
        "balance": grouped["running_balance"].last(),
        "n_events": grouped["id"].count(),
    }).reset_index()

    # Month-end balances per entity, walked over the full (unscoped) ledger
    per_entity = entity_balances(events, starting, rates, base_currency)
    per_entity["month"] = per_entity["date"].map(month_key)
    month_end = per_entity.groupby("month", sort=True)[entity_cols].last().reset_index()

    out = out.merge(month_end, on="month", how="left")
    out["n_events"] = out["n_events"].astype(int)
    return out[MONTHLY_COLUMNS + entity_cols]


def quarterly_debt_service(
    events: Sequence[CashFlowEvent],
    rates: ExchangeRates,
    base_currency: Currency = Currency.RMB,
    scope: EntityScope = ALL_ENTITIES,
) -> pd.DataFrame:
    """
    Financing outflows (interest + principal) per quarter, split by currency.

    Values are absolute, converted to the base currency currency-by-currency.
    Returns DataFrame with columns: quarter, hkd, rmb, usd, total, in
    chronological order.
    """
    rows = []
    for e in events:
        if e.category != Category.FINANCING or not in_scope(e.entity, scope):
            continue
        if not (e.amount_hkd < 0 or e.amount_rmb < 0 or e.amount_usd < 0):
            continue
        rows.append({
            "period": pd.Timestamp(e.date).to_period("Q"),
            "quarter": quarter_label(e.date),
            "amount_hkd": e.amount_hkd,
            "amount_rmb": e.amount_rmb,
            "amount_usd": e.amount_usd,
        })

    columns = ["quarter", "hkd", "rmb", "usd", "total"]
    if not rows:
        return pd.DataFrame(columns=columns)

    df = pd.DataFrame(rows)
    zeros = np.zeros(len(df))
    df["hkd"] = np.abs(to_base_array(df["amount_hkd"], zeros, zeros, rates, base_currency))
    df["rmb"] = np.abs(to_base_array(zeros, df["amount_rmb"], zeros, rates, base_currency))
    df["usd"] = np.abs(to_base_array(zeros, zeros, df["amount_usd"], rates, base_currency))

    out = (
        df.groupby(["period", "quarter"], sort=True)[["hkd", "rmb", "usd"]]
        .sum()
        .reset_index()
    )
    out["total"] = out["hkd"] + out["rmb"] + out["usd"]
    return out[columns]
