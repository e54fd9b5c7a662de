"""
Treasury briefing — the plain-text package handed to an external summarizer.

Turns the monthly summary into the lines a CFO-office reader (or a language
model prompt) needs:
  - one line per month: inflow / outflow / net, plus large individual flows
  - the FX and stress settings the numbers were produced under
  - flags for months that need attention

No model is called from here; the caller decides what to do with the text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

import pandas as pd

from core.config import ExchangeRates, StressConfig
from core.fx import to_base
from core.schema import ALL_ENTITIES, CashFlowEvent, Category, Currency, EntityScope
from core.utils import filter_scope, month_key, require_columns


@dataclass
class TreasuryBrief:
    """Structured briefing output."""
    base_currency: Currency
    rates: ExchangeRates
    stress: StressConfig

    month_lines: List[str] = field(default_factory=list)
    highlights: Dict[str, List[str]] = field(default_factory=dict)
    flags: List[str] = field(default_factory=list)

    def header(self) -> str:
        lines = [
            f"Reporting currency: {self.base_currency.value}",
            f"FX: HKD/RMB={self.rates.hkd_to_rmb:.3f}, USD/RMB={self.rates.usd_to_rmb:.3f}",
        ]
        if self.stress.is_stressed:
            lines.append(
                "STRESS TEST: "
                f"financing failure {self.stress.financing_fail_rate:g}%, "
                f"SHIBOR {self.stress.shibor_shock_bps:+g}bps, "
                f"HIBOR {self.stress.hibor_shock_bps:+g}bps, "
                f"SOFR {self.stress.sofr_shock_bps:+g}bps"
            )
        else:
            lines.append("Standard forecast (no stress applied)")
        return "\n".join(lines)

    def to_text(self) -> str:
        parts = [self.header(), "", f"Monthly flows (units of 100m {self.base_currency.value}):"]
        parts.extend(self.month_lines)
        if self.flags:
            parts.append("")
            parts.append("Flags:")
            parts.extend(f"  - {f}" for f in self.flags)
        return "\n".join(parts)

    def to_dataframe(self) -> pd.DataFrame:
        rows = [{"Section": "Month", "Value": line} for line in self.month_lines]
        rows.extend({"Section": "Flag", "Value": f} for f in self.flags)
        return pd.DataFrame(rows, columns=["Section", "Value"])


def large_flows(
    events: Sequence[CashFlowEvent],
    rates: ExchangeRates,
    base_currency: Currency = Currency.RMB,
    scope: EntityScope = ALL_ENTITIES,
    *,
    threshold: float = 5.0,
) -> Dict[str, List[str]]:
    """
    In-scope external events whose converted size exceeds `threshold`, grouped
    by YYYY-MM. INTERNAL transfers never count as highlights.
    """
    out: Dict[str, List[str]] = {}
    for e in filter_scope(events, scope):
        if e.category == Category.INTERNAL:
            continue
        value = to_base(e.amount_hkd, e.amount_rmb, e.amount_usd, rates, base_currency)
        if abs(value) > threshold:
            out.setdefault(month_key(e.date), []).append(
                f"{e.entity.value} {e.description} ({value:.1f})"
            )
    return out


def build_briefing(
    monthly: pd.DataFrame,
    events: Sequence[CashFlowEvent],
    stress: StressConfig,
    base_currency: Currency = Currency.RMB,
    scope: EntityScope = ALL_ENTITIES,
    *,
    safety_threshold: float,
    highlight_threshold: float = 5.0,
) -> TreasuryBrief:
    """
    Assemble a TreasuryBrief from a monthly summary.

    Parameters
    ----------
    monthly : pd.DataFrame
        Output of pm.aggregator.monthly_summary().
    events : sequence of CashFlowEvent
        The ledger the summary was built from (for highlights).
    stress : StressConfig
        Settings the projection ran under; its rates are used for conversion.
    scope : Entity or "ALL"
        Same scope the summary was built with; highlights are restricted to it.
    safety_threshold : float
        Alert line in the base currency.
    """
    require_columns(monthly, ["month", "inflow", "outflow", "net", "balance"])
    rates = stress.rates
    highlights = large_flows(events, rates, base_currency, scope, threshold=highlight_threshold)

    month_lines = []
    flags = []
    for row in monthly.itertuples(index=False):
        line = (
            f"| {row.month} | in: {row.inflow:.1f} | out: {row.outflow:.1f} "
            f"| net: {row.net:.1f} |"
        )
        notes = highlights.get(row.month, [])
        if notes:
            line += " key: " + ", ".join(notes)
        month_lines.append(line)

        if row.balance < safety_threshold:
            flags.append(
                f"BELOW_THRESHOLD: {row.month} month-end balance {row.balance:.1f} "
                f"< {safety_threshold:.1f}"
            )
        if row.net < -highlight_threshold:
            flags.append(f"LARGE_OUTFLOW: {row.month} net {row.net:.1f}")

    return TreasuryBrief(
        base_currency=base_currency,
        rates=rates,
        stress=stress,
        month_lines=month_lines,
        highlights=highlights,
        flags=flags,
    )
