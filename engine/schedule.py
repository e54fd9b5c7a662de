"""
Debt schedule generator — turns debt instruments into dated cash-flow events.

For every debt, independently:
  1. Draw       (PLANNED only)  +principal x factor on the start date
  2. Interest   (periodic)      -principal x rate x interval/12 x factor
  3. Repayment  (always)        -principal x factor on the end date

factor = (100 - financing_fail_rate) / 100 for PLANNED debt, 1 otherwise.
A PLANNED facility that is only partly raised also pays proportionally less
interest and repays proportionally less principal.

Interest is flat on the ORIGINAL principal for every period. Repayments are
bullet at maturity; there is no amortization of the interest base.

Output is a pure function of (debts, stress, now): regenerate everything on
every change, never patch. Event ids are derived from (debt id, kind, date)
so a regeneration produces the same ids.
"""

from __future__ import annotations

import logging
from typing import Iterable, List

import pandas as pd

from core.config import StressConfig
from core.schema import (
    CashFlowEvent,
    Category,
    DebtInstrument,
    DebtStatus,
    EventStatus,
)
from core.utils import add_months, day_key

logger = logging.getLogger(__name__)


def event_id(kind: str, debt_id: str, date: pd.Timestamp) -> str:
    return f"{kind}-{debt_id}-{day_key(date)}"


def principal_factor(debt: DebtInstrument, stress: StressConfig) -> float:
    """Failure haircut applies only to financing that has not been drawn yet."""
    if debt.status == DebtStatus.PLANNED:
        return stress.principal_factor
    return 1.0


def effective_rate(debt: DebtInstrument, stress: StressConfig) -> float:
    """Base rate (percent) plus the shock of the debt's own benchmark."""
    return debt.base_rate + stress.shock_for(debt.benchmark) / 100.0


def interest_dates(debt: DebtInstrument) -> List[pd.Timestamp]:
    """
    Coupon dates: start + k x interval months for k = 1, 2, ... while <= end date.
    Empty for AT_MATURITY debt and for debt whose end precedes its start.
    """
    interval = debt.interval_months
    if interval <= 0:
        return []

    start = pd.Timestamp(debt.start_date)
    end = pd.Timestamp(debt.end_date)
    dates = []
    k = 1
    current = add_months(start, interval)
    while current <= end:
        dates.append(current)
        k += 1
        current = add_months(start, k * interval)
    return dates


def _draw_event(debt: DebtInstrument, stress: StressConfig) -> CashFlowEvent:
    factor = principal_factor(debt, stress)
    description = f"[Draw] {debt.name}"
    if stress.financing_fail_rate > 0:
        description += f" (financing haircut {stress.financing_fail_rate:g}%)"
    date = pd.Timestamp(debt.start_date)
    return CashFlowEvent.in_currency(
        debt.currency,
        debt.principal * factor,
        id=event_id("draw", debt.id, date),
        date=date,
        entity=debt.entity,
        category=Category.FINANCING,
        description=description,
        status=EventStatus.FORECAST,
        linked_debt_id=debt.id,
    )


def _interest_events(
    debt: DebtInstrument,
    stress: StressConfig,
    now: pd.Timestamp,
) -> List[CashFlowEvent]:
    interval = debt.interval_months
    rate = effective_rate(debt, stress)
    factor = principal_factor(debt, stress)
    amount = -(debt.principal * (rate / 100.0) * (interval / 12.0)) * factor

    events = []
    for date in interest_dates(debt):
        events.append(
            CashFlowEvent.in_currency(
                debt.currency,
                amount,
                id=event_id("int", debt.id, date),
                date=date,
                entity=debt.entity,
                category=Category.FINANCING,
                description=f"[Interest] {debt.name} @ {rate:.2f}%",
                status=EventStatus.FORECAST if date > now else EventStatus.ACTUAL,
                linked_debt_id=debt.id,
            )
        )
    return events


def _repayment_event(debt: DebtInstrument, stress: StressConfig) -> CashFlowEvent:
    # Always FORECAST, even once the maturity date has passed.
    factor = principal_factor(debt, stress)
    date = pd.Timestamp(debt.end_date)
    return CashFlowEvent.in_currency(
        debt.currency,
        -debt.principal * factor,
        id=event_id("repay", debt.id, date),
        date=date,
        entity=debt.entity,
        category=Category.FINANCING,
        description=f"[Repayment] {debt.name}",
        status=EventStatus.FORECAST,
        linked_debt_id=debt.id,
    )


def debt_events(
    debt: DebtInstrument,
    stress: StressConfig,
    *,
    now: pd.Timestamp,
) -> List[CashFlowEvent]:
    """All events for one debt: [draw], interest..., repayment."""
    events: List[CashFlowEvent] = []
    if debt.status == DebtStatus.PLANNED:
        events.append(_draw_event(debt, stress))
    events.extend(_interest_events(debt, stress, pd.Timestamp(now)))
    events.append(_repayment_event(debt, stress))
    return events


def generate_debt_events(
    debts: Iterable[DebtInstrument],
    stress: StressConfig,
    *,
    now: pd.Timestamp,
) -> List[CashFlowEvent]:
    """
    Derive the complete set of financing cash flows for a debt book.

    Parameters
    ----------
    debts : iterable of DebtInstrument
        Read-only debt definitions. Date ordering is not validated here;
        an end date before the start date simply yields no interest events.
    stress : StressConfig
        FX / rate-shock / financing-failure snapshot.
    now : pd.Timestamp
        Reference instant for the FORECAST vs ACTUAL split of interest events.

    Returns
    -------
    List of CashFlowEvent in debt order, each debt's events in date order.
    """
    now = pd.Timestamp(now)
    generated: List[CashFlowEvent] = []
    for debt in debts:
        events = debt_events(debt, stress, now=now)
        logger.debug("Debt %s: %d events generated", debt.id, len(events))
        generated.extend(events)
    return generated
