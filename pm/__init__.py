"""
PM (treasury) outputs — balances, aggregation, calendar, KPIs, and briefing text.
"""

from .aggregator import monthly_summary, quarterly_debt_service
from .balances import currency_exposure, entity_balances, opening_balance, running_balances
from .briefing import TreasuryBrief, build_briefing
from .fund_calendar import calendar_month, daily_balances, daily_net_flows, month_summary
from .metrics import liquidity_snapshot, runway_months, safety_threshold

__all__ = [
    "monthly_summary",
    "quarterly_debt_service",
    "currency_exposure",
    "entity_balances",
    "opening_balance",
    "running_balances",
    "TreasuryBrief",
    "build_briefing",
    "calendar_month",
    "daily_balances",
    "daily_net_flows",
    "month_summary",
    "liquidity_snapshot",
    "runway_months",
    "safety_threshold",
]
