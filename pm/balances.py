"""
Running balances over the merged ledger.

The running balance is a plain walk over the date-sorted ledger: opening
balance for the scope, then each event's converted amount added in order.
INTERNAL transfers are NOT excluded here. A transfer moves cash out of one
entity and into another, so it changes each entity's own balance even though
the pair nets to zero for the group. (Net-flow summaries, which measure
external liquidity, are the ones that drop INTERNAL rows.)
"""

from __future__ import annotations

from typing import Dict, Sequence

import numpy as np
import pandas as pd

from core.config import ExchangeRates
from core.schema import (
    ALL_ENTITIES,
    CashFlowEvent,
    Currency,
    CurrencyAmounts,
    Entity,
    EntityScope,
    StartingBalances,
)
from core.fx import amounts_to_base, to_base, to_base_array
from core.utils import filter_scope, in_scope, ledger_to_frame


def opening_balance(
    starting: StartingBalances,
    rates: ExchangeRates,
    base_currency: Currency = Currency.RMB,
    scope: EntityScope = ALL_ENTITIES,
) -> float:
    """Converted sum of the starting balances of every entity in scope."""
    total = 0.0
    for entity, amounts in starting.items():
        if in_scope(entity, scope):
            total += amounts_to_base(amounts, rates, base_currency)
    return total


def add_base_values(
    ledger: pd.DataFrame,
    rates: ExchangeRates,
    base_currency: Currency = Currency.RMB,
) -> pd.DataFrame:
    """Attach `value_base`: each row's HKD/RMB/USD amounts in the base currency."""
    out = ledger.copy()
    out["value_base"] = to_base_array(
        out["amount_hkd"].to_numpy(),
        out["amount_rmb"].to_numpy(),
        out["amount_usd"].to_numpy(),
        rates,
        base_currency,
    )
    return out


def running_balances(
    events: Sequence[CashFlowEvent],
    starting: StartingBalances,
    rates: ExchangeRates,
    base_currency: Currency = Currency.RMB,
    scope: EntityScope = ALL_ENTITIES,
) -> pd.DataFrame:
    """
    Running balance after every event in scope.

    Parameters
    ----------
    events : sequence of CashFlowEvent
        Date-sorted ledger (output of engine.ledger.merge_ledgers).
    starting : StartingBalances
        Opening HKD/RMB/USD per entity.
    rates, base_currency :
        Conversion settings.
    scope : Entity or "ALL"
        Restrict to one entity, or the whole group.

    Returns
    -------
    DataFrame with LEDGER_COLUMNS + value_base, running_balance.
    """
    scoped = filter_scope(events, scope)
    df = add_base_values(ledger_to_frame(scoped), rates, base_currency)
    opening = opening_balance(starting, rates, base_currency, scope)
    df["running_balance"] = opening + np.cumsum(df["value_base"].to_numpy(dtype=float))
    return df.reset_index(drop=True)


def closing_balance(
    events: Sequence[CashFlowEvent],
    starting: StartingBalances,
    rates: ExchangeRates,
    base_currency: Currency = Currency.RMB,
    scope: EntityScope = ALL_ENTITIES,
) -> float:
    """Balance after the last event in scope (opening balance if there is none)."""
    df = running_balances(events, starting, rates, base_currency, scope)
    if df.empty:
        return opening_balance(starting, rates, base_currency, scope)
    return float(df["running_balance"].iloc[-1])


def entity_balances(
    events: Sequence[CashFlowEvent],
    starting: StartingBalances,
    rates: ExchangeRates,
    base_currency: Currency = Currency.RMB,
) -> pd.DataFrame:
    """
    Per-entity and group-total balance after every event.

    Each entity keeps its own currency triple; the triple is converted after
    every step, so the columns always reflect the current rates.
    """
    balances: Dict[Entity, CurrencyAmounts] = {
        entity: starting.get(entity, CurrencyAmounts()) for entity in Entity
    }
    rows = []
    for e in events:
        balances[e.entity] = balances[e.entity] + e.amounts
        row = {"id": e.id, "date": pd.Timestamp(e.date)}
        total = 0.0
        for entity in Entity:
            value = amounts_to_base(balances[entity], rates, base_currency)
            row[entity.value] = value
            total += value
        row["total"] = total
        rows.append(row)

    columns = ["id", "date"] + [entity.value for entity in Entity] + ["total"]
    return pd.DataFrame(rows, columns=columns)


def currency_exposure(
    events: Sequence[CashFlowEvent],
    starting: StartingBalances,
    rates: ExchangeRates,
    base_currency: Currency = Currency.RMB,
    scope: EntityScope = ALL_ENTITIES,
) -> pd.DataFrame:
    """
    Closing position per currency, converted to base, as absolute values.

    Returns DataFrame with columns: currency, native, value_base.
    """
    final = CurrencyAmounts()
    for entity, amounts in starting.items():
        if in_scope(entity, scope):
            final = final + amounts
    for e in filter_scope(events, scope):
        final = final + e.amounts

    return pd.DataFrame([
        {"currency": Currency.RMB.value, "native": final.rmb,
         "value_base": abs(to_base(0.0, final.rmb, 0.0, rates, base_currency))},
        {"currency": Currency.HKD.value, "native": final.hkd,
         "value_base": abs(to_base(final.hkd, 0.0, 0.0, rates, base_currency))},
        {"currency": Currency.USD.value, "native": final.usd,
         "value_base": abs(to_base(0.0, 0.0, final.usd, rates, base_currency))},
    ])
