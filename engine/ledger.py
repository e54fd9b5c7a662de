"""
Ledger merge — manual transactions and generated debt events in one stream.
"""

from __future__ import annotations

from typing import List, Sequence

import pandas as pd

from core.schema import CashFlowEvent


def merge_ledgers(
    manual: Sequence[CashFlowEvent],
    generated: Sequence[CashFlowEvent],
) -> List[CashFlowEvent]:
    """
    Concatenate manual + generated and sort ascending by date.

    sorted() is stable, so events sharing a date keep their concatenation
    order (manual entries before generated ones, each in input order).
    """
    combined = list(manual) + list(generated)
    return sorted(combined, key=lambda e: pd.Timestamp(e.date))
