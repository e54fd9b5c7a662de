"""
Projection runner — one synchronous pass from inputs to every derived view.

    stress snapshot ─┐
    debts ───────────┴─> generate_debt_events ─┐
    manual transactions ───────────────────────┴─> merge_ledgers ─> aggregate

Every call rebuilds everything from a full snapshot of the inputs. There is no
cache and no incremental path; callers re-run on each input change (slider
drag, debt edit, import). Volumes are tens to low hundreds of records.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List

import pandas as pd

from core.config import ProjectionConfig, StressConfig
from core.schema import CashFlowEvent, DebtInstrument, StartingBalances
from pm.aggregator import monthly_summary, quarterly_debt_service
from pm.balances import currency_exposure, running_balances
from pm.briefing import TreasuryBrief, build_briefing
from pm.fund_calendar import daily_balances
from pm.metrics import LiquiditySnapshot, liquidity_snapshot

from .ledger import merge_ledgers
from .schedule import generate_debt_events

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectionResult:
    generated: List[CashFlowEvent]
    ledger: List[CashFlowEvent]
    running: pd.DataFrame
    monthly: pd.DataFrame
    quarterly_debt_service: pd.DataFrame
    currency_exposure: pd.DataFrame
    daily_balances: Dict[str, float]
    liquidity: LiquiditySnapshot
    briefing: TreasuryBrief


def run_projection(
    debts: Iterable[DebtInstrument],
    manual: Iterable[CashFlowEvent],
    stress: StressConfig,
    starting: StartingBalances,
    config: ProjectionConfig,
) -> ProjectionResult:
    """
    Run the full pipeline for one snapshot of inputs.

    Parameters
    ----------
    debts : iterable of DebtInstrument
        Debt book (read-only).
    manual : iterable of CashFlowEvent
        Operator-entered transactions.
    stress : StressConfig
        Snapshot from the scenario controller; its rates drive conversion.
    starting : StartingBalances
        Opening HKD/RMB/USD position per entity.
    config : ProjectionConfig
        `now`, base currency, entity scope and window settings.

    Returns
    -------
    ProjectionResult with the merged ledger and every aggregate view.
    """
    cfg = config
    rates = stress.rates
    base = cfg.base_currency
    scope = cfg.entity_scope
    now = pd.Timestamp(cfg.now)

    debts = list(debts)
    manual = list(manual)

    generated = generate_debt_events(debts, stress, now=now)
    ledger = merge_ledgers(manual, generated)

    running = running_balances(ledger, starting, rates, base, scope)
    monthly = monthly_summary(ledger, starting, rates, base, scope)
    quarterly = quarterly_debt_service(ledger, rates, base, scope)
    exposure = currency_exposure(ledger, starting, rates, base, scope)
    daily = daily_balances(
        ledger,
        starting,
        rates,
        base,
        now=now,
        lookback_days=cfg.calendar_lookback_days,
        horizon_days=cfg.calendar_horizon_days,
        scope=scope,
    )
    liquidity = liquidity_snapshot(
        monthly,
        rates,
        base,
        now=now,
        months=cfg.display_months,
        reference_rmb=cfg.safety_reference_rmb,
    )
    briefing = build_briefing(
        monthly,
        ledger,
        stress,
        base,
        scope,
        safety_threshold=liquidity.safety_threshold,
        highlight_threshold=cfg.highlight_threshold,
    )

    logger.info(
        "Projection: %d debts -> %d generated events, %d manual, %d months, stressed=%s",
        len(debts), len(generated), len(manual), len(monthly), stress.is_stressed,
    )

    return ProjectionResult(
        generated=generated,
        ledger=ledger,
        running=running,
        monthly=monthly,
        quarterly_debt_service=quarterly,
        currency_exposure=exposure,
        daily_balances=daily,
        liquidity=liquidity,
        briefing=briefing,
    )
