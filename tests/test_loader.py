"""
Unit tests for CSV import / export of transactions and debt book loading.
"""

import io
import logging

import pandas as pd
import pytest

from core.errors import ParseError
from core.schema import Category, Currency, Entity, EventStatus
from data_prep.loader import (
    DEFAULT_DESCRIPTION,
    read_debts_csv,
    read_transactions_csv,
    write_transactions_csv,
)
from tests.conftest import make_event

DEFAULT_DATE = pd.Timestamp("2024-03-15")

HEADER = "date,status,entity,category,description,amountHKD,amountRMB,amountUSD\n"


def _read(body: str):
    return read_transactions_csv(io.StringIO(HEADER + body), default_date=DEFAULT_DATE)


class TestReadTransactionsCsv:
    """Tests for read_transactions_csv."""

    def test_full_row(self):
        (event,) = _read("2024-04-01,ACTUAL,ENTERPRISE,FINANCING,Bond coupon,0,-1.5,0\n")
        assert event.date == pd.Timestamp("2024-04-01")
        assert event.status == EventStatus.ACTUAL
        assert event.entity == Entity.ENTERPRISE
        assert event.category == Category.FINANCING
        assert event.description == "Bond coupon"
        assert event.amount_rmb == -1.5
        assert event.linked_debt_id is None

    def test_blank_fields_take_defaults(self):
        (event,) = _read(",,,,Rent,2,,\n")
        assert event.date == DEFAULT_DATE
        assert event.status == EventStatus.FORECAST
        assert event.entity == Entity.PROPERTY
        assert event.category == Category.OPERATING
        assert event.amount_hkd == 2.0
        assert event.amount_rmb == 0.0

    def test_blank_description_gets_default(self):
        (event,) = _read("2024-04-01,,,,,0,1,0\n")
        assert event.description == DEFAULT_DESCRIPTION

    def test_unparseable_amount_is_zero(self):
        (event,) = _read("2024-04-01,,,,Misc,n/a,abc,3\n")
        assert event.amount_hkd == 0.0
        assert event.amount_rmb == 0.0
        assert event.amount_usd == 3.0

    def test_short_rows_skipped(self, caplog):
        with caplog.at_level(logging.WARNING, logger="data_prep.loader"):
            events = _read("2024-04-01,ACTUAL,PROPERTY\n2024-04-02,,,,Kept,0,1,0\n")
        assert [e.description for e in events] == ["Kept"]
        assert "skipped" in caplog.text

    def test_fresh_ids(self):
        events = _read("2024-04-01,,,,A,0,1,0\n2024-04-01,,,,A,0,1,0\n")
        assert len({e.id for e in events}) == 2

    def test_header_labels_not_checked(self):
        body = "2024-04-01,FORECAST,PROPERTY,OPERATING,Sale,0,5,0\n"
        events = read_transactions_csv(
            io.StringIO("Date,Status,Entity,Type,Memo,HKD,RMB,USD\n" + body),
            default_date=DEFAULT_DATE,
        )
        assert events[0].amount_rmb == 5.0

    def test_quoted_description(self):
        (event,) = _read('2024-04-01,,,,"Fees, legal",0,-0.2,0\n')
        assert event.description == "Fees, legal"

    def test_bad_date_raises(self):
        with pytest.raises(ParseError):
            _read("yesterday-ish,,,,X,0,1,0\n")

    def test_header_only(self):
        assert _read("") == []


class TestWriteTransactionsCsv:
    """Tests for write_transactions_csv."""

    @pytest.fixture
    def events(self):
        return [
            make_event("a", "2024-01-05", 10.0, description="Sale"),
            make_event("b", "2024-02-01", 0.0, amount_usd=-1.25,
                       entity=Entity.ENTERPRISE, category=Category.FINANCING,
                       status=EventStatus.ACTUAL, description="Coupon"),
        ]

    def test_text_layout(self, events):
        lines = write_transactions_csv(events).splitlines()
        assert lines[0] == HEADER.strip()
        assert lines[1] == "2024-01-05,FORECAST,PROPERTY,OPERATING,Sale,0.00,10.00,0.00"
        assert lines[2] == "2024-02-01,ACTUAL,ENTERPRISE,FINANCING,Coupon,0.00,0.00,-1.25"

    def test_scope(self, events):
        lines = write_transactions_csv(events, scope=Entity.ENTERPRISE).splitlines()
        assert len(lines) == 2
        assert "Coupon" in lines[1]

    def test_file_written_with_bom(self, events, tmp_path):
        path = tmp_path / "ledger.csv"
        write_transactions_csv(events, str(path))
        raw = path.read_bytes()
        assert raw.startswith(b"\xef\xbb\xbf")

    def test_export_then_import(self, events, tmp_path):
        path = tmp_path / "ledger.csv"
        write_transactions_csv(events, str(path))
        back = read_transactions_csv(str(path), default_date=DEFAULT_DATE)
        assert [(e.date, e.entity, e.category, e.status, e.description) for e in back] == [
            (e.date, e.entity, e.category, e.status, e.description) for e in events
        ]
        assert back[1].amount_usd == -1.25
        # ids are never carried over
        assert {e.id for e in back}.isdisjoint({"a", "b"})


class TestReadDebtsCsv:
    """Tests for read_debts_csv."""

    def test_camel_case_headers(self):
        text = (
            "id,name,entity,currency,principal,baseRate,startDate,endDate,frequency,status,benchmark,bankName,guarantor\n"
            "L1,Loan,PROPERTY,RMB,10,4,2024-01-01,2025-01-01,QUARTERLY,PLANNED,SHIBOR,Bank A,\n"
            "L2,Note,ENTERPRISE,USD,2,6,2024-05-01,2026-05-01,ANNUALLY,ACTIVE,FIXED,,Parent Co\n"
        )
        debts = read_debts_csv(io.StringIO(text))
        assert [d.id for d in debts] == ["L1", "L2"]
        assert debts[0].lender == "Bank A"
        assert debts[0].guarantor is None
        assert debts[1].currency == Currency.USD
        assert debts[1].lender == ""
        assert debts[1].guarantor == "Parent Co"
