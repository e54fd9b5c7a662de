"""
CSV import / export of manual transactions, and debt book loading.

Transaction CSV rows are positional:
    date, status, entity, category, description, amountHKD, amountRMB, amountUSD
The first line is a header and is always skipped (its labels are not checked,
so exports with localized headers re-import fine).
"""

from __future__ import annotations

import io
import logging
from typing import Iterable, List, Optional, Union

import pandas as pd

from core.schema import (
    ALL_ENTITIES,
    CSV_COLUMNS,
    CashFlowEvent,
    Category,
    DebtInstrument,
    Entity,
    EntityScope,
    EventStatus,
)
from core.utils import in_scope

from .records import new_event_id, parse_debt, parse_transaction

logger = logging.getLogger(__name__)

PathOrBuffer = Union[str, io.IOBase]

DEFAULT_DESCRIPTION = "CSV import"


def _blank(value) -> bool:
    return value is None or (isinstance(value, float) and pd.isna(value)) or str(value).strip() == ""


def read_transactions_csv(
    source: PathOrBuffer,
    *,
    default_date: pd.Timestamp,
) -> List[CashFlowEvent]:
    """
    Read manual transactions from a CSV export.

    Parameters
    ----------
    source : path or file-like
        CSV in the CSV_COLUMNS order.
    default_date : pd.Timestamp
        Date used for rows that leave the date column empty.

    Rows that stop before the description column are skipped. Empty
    status / entity / category / description fall back to FORECAST /
    PROPERTY / OPERATING / "CSV import"; unparseable amounts count as 0.
    Every imported row gets a fresh id.
    """
    try:
        raw = pd.read_csv(
            source,
            header=None,
            skiprows=1,
            names=list(CSV_COLUMNS),
            index_col=False,
            dtype=str,
            keep_default_na=False,
            encoding="utf-8-sig",
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError:
        logger.info("Imported 0 transactions (empty file)")
        return []

    events: List[CashFlowEvent] = []
    n_skipped = 0
    for i, row in enumerate(raw.itertuples(index=False), start=2):
        if all(_blank(v) for v in list(row)[4:]):
            n_skipped += 1
            logger.warning("CSV line %d skipped: too few columns", i)
            continue

        record = {
            "id": new_event_id(),
            "date": row.date if not _blank(row.date) else pd.Timestamp(default_date),
            "status": row.status if not _blank(row.status) else EventStatus.FORECAST,
            "entity": row.entity if not _blank(row.entity) else Entity.PROPERTY,
            "category": row.category if not _blank(row.category) else Category.OPERATING,
            "description": row.description.strip() if not _blank(row.description) else DEFAULT_DESCRIPTION,
        }
        for col, key in [("amountHKD", "amount_hkd"), ("amountRMB", "amount_rmb"), ("amountUSD", "amount_usd")]:
            amount = pd.to_numeric(getattr(row, col), errors="coerce")
            record[key] = 0.0 if pd.isna(amount) else float(amount)

        events.append(parse_transaction(record))

    logger.info("Imported %d transactions (%d rows skipped)", len(events), n_skipped)
    return events


def transactions_to_csv_frame(
    events: Iterable[CashFlowEvent],
    scope: EntityScope = ALL_ENTITIES,
) -> pd.DataFrame:
    rows = [
        {
            "date": pd.Timestamp(e.date).strftime("%Y-%m-%d"),
            "status": e.status.value,
            "entity": e.entity.value,
            "category": e.category.value,
            "description": e.description,
            "amountHKD": f"{e.amount_hkd:.2f}",
            "amountRMB": f"{e.amount_rmb:.2f}",
            "amountUSD": f"{e.amount_usd:.2f}",
        }
        for e in events
        if in_scope(e.entity, scope)
    ]
    return pd.DataFrame(rows, columns=list(CSV_COLUMNS))


def write_transactions_csv(
    events: Iterable[CashFlowEvent],
    path: Optional[str] = None,
    *,
    scope: EntityScope = ALL_ENTITIES,
) -> str:
    """
    Export a ledger (manual + generated) as CSV text.

    If `path` is given the file is also written, UTF-8 with BOM so that
    spreadsheet tools pick up the encoding.
    """
    df = transactions_to_csv_frame(events, scope)
    text = df.to_csv(index=False, lineterminator="\n")
    if path is not None:
        with open(path, "w", encoding="utf-8-sig", newline="") as fh:
            fh.write(text)
        logger.info("Exported %d transactions to %s", len(df), path)
    return text


def read_debts_csv(source: PathOrBuffer) -> List[DebtInstrument]:
    """Load a debt book from CSV (snake_case or camelCase headers)."""
    df = pd.read_csv(source, dtype=str, keep_default_na=False, encoding="utf-8-sig")
    debts = [
        parse_debt({k: v for k, v in row.items() if not _blank(v)})
        for row in df.to_dict("records")
    ]
    logger.info("Loaded %d debts", len(debts))
    return debts
