"""
Unit tests for merging manual and generated events into one ledger.
"""

import pandas as pd

from core.schema import LEDGER_COLUMNS, Entity
from core.utils import filter_scope, ledger_to_frame
from engine.ledger import merge_ledgers
from engine.schedule import generate_debt_events
from tests.conftest import NOW, make_event


class TestMergeLedgers:
    """Tests for merge_ledgers ordering."""

    def test_sorted_by_date(self):
        manual = [make_event("b", "2024-05-01"), make_event("a", "2024-01-01")]
        generated = [make_event("c", "2024-03-01")]
        merged = merge_ledgers(manual, generated)
        assert [e.id for e in merged] == ["a", "c", "b"]

    def test_stable_for_same_date_manual_events(self):
        """Two manual events on the same day keep their input order."""
        manual = [make_event("A", "2024-02-01"), make_event("B", "2024-02-01")]
        merged = merge_ledgers(manual, [])
        assert [e.id for e in merged] == ["A", "B"]

        reversed_input = merge_ledgers(list(reversed(manual)), [])
        assert [e.id for e in reversed_input] == ["B", "A"]

    def test_manual_before_generated_on_ties(self, sample_debt, no_stress):
        generated = generate_debt_events([sample_debt], no_stress, now=NOW)
        manual = [make_event("m1", "2024-07-01"), make_event("m2", "2024-01-01")]
        merged = merge_ledgers(manual, generated)
        ids = [e.id for e in merged]
        assert ids.index("m2") < ids.index("draw-d1-2024-01-01")
        assert ids.index("m1") < ids.index("int-d1-2024-07-01")
        assert ids.index("int-d1-2024-07-01") < ids.index("repay-d1-2024-07-01")

    def test_nothing_dropped_or_mutated(self, sample_debt, no_stress):
        generated = generate_debt_events([sample_debt], no_stress, now=NOW)
        manual = [make_event("m", "2024-02-15", 3.0)]
        merged = merge_ledgers(manual, generated)
        assert len(merged) == len(manual) + len(generated)
        assert set(merged) == set(manual) | set(generated)

    def test_empty_inputs(self):
        assert merge_ledgers([], []) == []


class TestLedgerViews:
    """Tests for scope filtering and the DataFrame view."""

    def test_filter_scope(self):
        events = [
            make_event("p", "2024-01-01"),
            make_event("e", "2024-01-02", entity=Entity.ENTERPRISE),
        ]
        assert [e.id for e in filter_scope(events, Entity.ENTERPRISE)] == ["e"]
        assert [e.id for e in filter_scope(events)] == ["p", "e"]

    def test_frame_columns_and_values(self):
        df = ledger_to_frame([make_event("x", "2024-01-05", -2.5)])
        assert list(df.columns) == list(LEDGER_COLUMNS)
        assert df.loc[0, "entity"] == "PROPERTY"
        assert df.loc[0, "amount_rmb"] == -2.5
        assert df.loc[0, "date"] == pd.Timestamp("2024-01-05")

    def test_empty_frame_keeps_columns(self):
        df = ledger_to_frame([])
        assert df.empty
        assert list(df.columns) == list(LEDGER_COLUMNS)
