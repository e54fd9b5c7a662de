from __future__ import annotations

from typing import Iterable, List

import pandas as pd
from dateutil.relativedelta import relativedelta

from .schema import ALL_ENTITIES, LEDGER_COLUMNS, CashFlowEvent, Entity, EntityScope


def require_columns(df: pd.DataFrame, cols: Iterable[str]) -> None:
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")


def add_months(start: pd.Timestamp, n_months: int) -> pd.Timestamp:
    """
    Shift a date by whole months, clamping to month end (Jan 31 + 1 -> Feb 28/29).
    Always computed from `start`, so repeated stepping never drifts.
    """
    return pd.Timestamp(start) + relativedelta(months=n_months)


def month_key(d: pd.Timestamp) -> str:
    """YYYY-MM bucket label."""
    return pd.Timestamp(d).strftime("%Y-%m")


def day_key(d: pd.Timestamp) -> str:
    """YYYY-MM-DD label used as calendar map key."""
    return pd.Timestamp(d).strftime("%Y-%m-%d")


def quarter_label(d: pd.Timestamp) -> str:
    """Quarter label in the dashboard style, e.g. "Q3 '25"."""
    ts = pd.Timestamp(d)
    return f"Q{(ts.month - 1) // 3 + 1} '{ts.strftime('%y')}"


def in_scope(entity: Entity, scope: EntityScope) -> bool:
    return scope == ALL_ENTITIES or entity == scope


def filter_scope(events: Iterable[CashFlowEvent], scope: EntityScope = ALL_ENTITIES) -> List[CashFlowEvent]:
    return [e for e in events if in_scope(e.entity, scope)]


def ledger_to_frame(events: Iterable[CashFlowEvent]) -> pd.DataFrame:
    """One row per event, canonical LEDGER_COLUMNS, enum fields as plain strings."""
    rows = [
        {
            "id": e.id,
            "date": pd.Timestamp(e.date),
            "entity": e.entity.value,
            "category": e.category.value,
            "description": e.description,
            "amount_hkd": float(e.amount_hkd),
            "amount_rmb": float(e.amount_rmb),
            "amount_usd": float(e.amount_usd),
            "status": e.status.value,
            "linked_debt_id": e.linked_debt_id,
        }
        for e in events
    ]
    df = pd.DataFrame(rows, columns=list(LEDGER_COLUMNS))
    df["date"] = pd.to_datetime(df["date"])
    for c in ["amount_hkd", "amount_rmb", "amount_usd"]:
        df[c] = df[c].astype(float)
    return df
