"""
Unit tests for calendar-day balances and the month grid.
"""

import math

import pandas as pd
import pytest

from core.schema import Category, CurrencyAmounts, Entity
from pm.fund_calendar import calendar_month, daily_balances, daily_net_flows, month_summary
from tests.conftest import NOW, make_event


@pytest.fixture
def starting_property_only():
    return {Entity.PROPERTY: CurrencyAmounts(rmb=100.0)}


@pytest.fixture
def ledger():
    return [
        make_event("pre", "2023-11-01", 7.0),
        make_event("a", "2024-01-05", 10.0),
        make_event("xfer", "2024-02-03", -6.0, category=Category.INTERNAL),
        make_event("b", "2024-03-20", -4.0),
    ]


@pytest.fixture
def balances(ledger, starting_property_only, rates):
    return daily_balances(ledger, starting_property_only, rates, now=NOW)


class TestDailyNetFlows:
    """Tests for daily_net_flows."""

    def test_internal_excluded(self, ledger, rates):
        flows = daily_net_flows(ledger, rates)
        assert pd.Timestamp("2024-02-03") not in flows.index
        assert flows[pd.Timestamp("2024-01-05")] == pytest.approx(10.0)

    def test_same_day_events_summed(self, rates):
        events = [make_event("x", "2024-01-01", 2.0), make_event("y", "2024-01-01", -5.0)]
        flows = daily_net_flows(events, rates)
        assert len(flows) == 1
        assert flows.iloc[0] == pytest.approx(-3.0)


class TestDailyBalances:
    """Tests for daily_balances."""

    def test_window_covers_every_day(self, balances):
        keys = list(balances)
        assert keys[0] == "2023-12-16"
        assert keys[-1] == "2025-07-28"
        assert len(keys) == 90 + 500 + 1

    def test_pre_window_events_fold_into_opening(self, balances):
        assert balances["2023-12-16"] == pytest.approx(107.0)

    def test_carry_forward(self, balances):
        assert balances["2024-01-04"] == pytest.approx(107.0)
        assert balances["2024-01-05"] == pytest.approx(117.0)
        assert balances["2024-02-03"] == pytest.approx(117.0)
        assert balances["2024-03-20"] == pytest.approx(113.0)
        assert balances["2025-07-28"] == pytest.approx(113.0)

    def test_custom_window(self, ledger, starting_property_only, rates):
        out = daily_balances(
            ledger, starting_property_only, rates, now=NOW, lookback_days=0, horizon_days=10
        )
        assert list(out)[0] == "2024-03-15"
        assert len(out) == 11
        assert out["2024-03-15"] == pytest.approx(117.0)

    def test_empty_ledger_gives_empty_map(self, starting_property_only, rates):
        assert daily_balances([], starting_property_only, rates, now=NOW) == {}

    def test_scope_without_events_gives_empty_map(self, ledger, starting_property_only, rates):
        out = daily_balances(ledger, starting_property_only, rates, now=NOW, scope=Entity.ENTERPRISE)
        assert out == {}


class TestCalendarMonth:
    """Tests for the month grid and its summary."""

    def test_grid_shape(self, ledger, balances, rates):
        grid = calendar_month(ledger, balances, 2024, 2, rates)
        assert len(grid) == 29
        assert grid.loc[0, "date"] == "2024-02-01"
        # 2024-02-01 is a Thursday
        assert grid.loc[0, "weekday"] == 3

    def test_internal_day_has_data_but_no_flow(self, ledger, balances, rates):
        grid = calendar_month(ledger, balances, 2024, 2, rates).set_index("date")
        assert bool(grid.loc["2024-02-03", "has_data"])
        assert grid.loc["2024-02-03", "net_flow"] == 0.0
        assert not bool(grid.loc["2024-02-04", "has_data"])

    def test_outside_window_is_nan(self, ledger, balances, rates):
        grid = calendar_month(ledger, balances, 2023, 11, rates)
        assert grid["end_balance"].isna().all()

    def test_month_summary(self, ledger, balances, rates):
        summary = month_summary(calendar_month(ledger, balances, 2024, 1, rates))
        assert summary["start"] == pytest.approx(107.0)
        assert summary["inflow"] == pytest.approx(10.0)
        assert summary["outflow"] == pytest.approx(0.0)
        assert summary["end"] == pytest.approx(117.0)

    def test_month_summary_outflow(self, ledger, balances, rates):
        summary = month_summary(calendar_month(ledger, balances, 2024, 3, rates))
        assert summary["outflow"] == pytest.approx(4.0)
        assert summary["end"] == pytest.approx(113.0)

    def test_empty_grid_summary(self):
        summary = month_summary(pd.DataFrame())
        assert summary == {"start": 0.0, "inflow": 0.0, "outflow": 0.0, "end": 0.0}
        assert not any(math.isnan(v) for v in summary.values())
