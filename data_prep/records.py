"""
Boundary parsing — loose dicts (form posts, CSV rows, cloud rows) into records.

Accepts both snake_case and the dashboard's camelCase keys (startDate,
bankName, amountHKD, ...), case-insensitive enum names, and any date string
pandas can read. Anything that cannot be parsed surfaces as a ParseError
before it reaches the engine.
"""

from __future__ import annotations

import uuid
from typing import Any, Iterable, List, Mapping, Optional

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.errors import ParseError
from core.schema import (
    Benchmark,
    CashFlowEvent,
    Category,
    Currency,
    DebtInstrument,
    DebtStatus,
    Entity,
    EventStatus,
    Frequency,
    LoanType,
)


def parse_date(value: Any, field_name: str = "date") -> pd.Timestamp:
    """Parse a calendar date; raise ParseError on missing or unreadable input."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ParseError(field_name, value, "missing date")
    try:
        ts = pd.Timestamp(value.strip() if isinstance(value, str) else value)
    except (ValueError, TypeError) as exc:
        raise ParseError(field_name, value, str(exc)) from exc
    if pd.isna(ts):
        raise ParseError(field_name, value, "missing date")
    return ts.normalize()


def _enum_key(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().upper().replace("-", "_").replace(" ", "_")
    return value


def _amount(value: Any) -> Any:
    if value is None:
        return 0.0
    if isinstance(value, str) and not value.strip():
        return 0.0
    if isinstance(value, float) and pd.isna(value):
        return 0.0
    return value


def new_event_id() -> str:
    return uuid.uuid4().hex[:12]


class _Record(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        str_strip_whitespace=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )


class DebtRecord(_Record):
    id: str
    name: str
    entity: Entity
    currency: Currency
    principal: float
    base_rate: float = Field(alias="baseRate")
    start_date: pd.Timestamp = Field(alias="startDate")
    end_date: pd.Timestamp = Field(alias="endDate")
    frequency: Frequency = Frequency.QUARTERLY
    status: DebtStatus = DebtStatus.PLANNED
    benchmark: Benchmark = Benchmark.FIXED
    spread_bps: float = Field(0.0, alias="spread")
    lender: str = Field("", alias="bankName")
    loan_type: LoanType = Field(LoanType.BILATERAL, alias="loanType")
    guarantor: Optional[str] = None
    remarks: Optional[str] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _dates(cls, v, info):
        return parse_date(v, info.field_name)

    @field_validator("entity", "currency", "frequency", "status", "benchmark", "loan_type", mode="before")
    @classmethod
    def _enums(cls, v):
        return _enum_key(v)

    @field_validator("spread_bps", mode="before")
    @classmethod
    def _spread(cls, v):
        return _amount(v)

    def to_instrument(self) -> DebtInstrument:
        return DebtInstrument(**self.model_dump())


class TransactionRecord(_Record):
    id: str = Field(default_factory=new_event_id)
    date: pd.Timestamp
    entity: Entity = Entity.PROPERTY
    category: Category = Category.OPERATING
    description: str = ""
    amount_hkd: float = Field(0.0, alias="amountHKD")
    amount_rmb: float = Field(0.0, alias="amountRMB")
    amount_usd: float = Field(0.0, alias="amountUSD")
    status: EventStatus = EventStatus.FORECAST
    linked_debt_id: Optional[str] = Field(None, alias="linkedDebtId")

    @field_validator("date", mode="before")
    @classmethod
    def _date(cls, v):
        return parse_date(v, "date")

    @field_validator("entity", "category", "status", mode="before")
    @classmethod
    def _enums(cls, v):
        return _enum_key(v)

    @field_validator("amount_hkd", "amount_rmb", "amount_usd", mode="before")
    @classmethod
    def _amounts(cls, v):
        return _amount(v)

    def to_event(self) -> CashFlowEvent:
        return CashFlowEvent(**self.model_dump())


def _raise_parse_error(exc: ValidationError) -> None:
    err = exc.errors()[0]
    field_name = ".".join(str(p) for p in err.get("loc", ())) or "record"
    raise ParseError(field_name, err.get("input"), err.get("msg", "")) from exc


def parse_debt(data: Mapping[str, Any]) -> DebtInstrument:
    try:
        return DebtRecord.model_validate(dict(data)).to_instrument()
    except ValidationError as exc:
        _raise_parse_error(exc)


def parse_transaction(data: Mapping[str, Any]) -> CashFlowEvent:
    try:
        return TransactionRecord.model_validate(dict(data)).to_event()
    except ValidationError as exc:
        _raise_parse_error(exc)


def parse_debts(rows: Iterable[Mapping[str, Any]]) -> List[DebtInstrument]:
    return [parse_debt(r) for r in rows]


def parse_transactions(rows: Iterable[Mapping[str, Any]]) -> List[CashFlowEvent]:
    return [parse_transaction(r) for r in rows]
