"""
Data quality validation for debts and manual transactions before they enter the engine.

The schedule generator itself never rejects input (an end date before the
start date just yields no coupons). The checks live here, at creation time:
- Dates in the wrong order
- Non-positive principal
- Rates outside plausible bounds
- Duplicate ids
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List

import pandas as pd

from core.schema import Benchmark, CashFlowEvent, DebtInstrument

# A base rate above this is almost certainly entered in bps instead of percent.
MAX_PLAUSIBLE_RATE_PCT = 30.0


@dataclass
class ValidationResult:
    """Collects all validation warnings/errors for a batch of records."""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def extend(self, other: "ValidationResult") -> "ValidationResult":
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        return self

    def summary(self) -> str:
        """Plain-text report; DebtBook embeds it in the error when it refuses a debt."""
        if not self.errors and not self.warnings:
            return "Book entry accepted. All checks passed."
        status = "rejected" if self.errors else "accepted with warnings"
        lines = [f"Book entry {status}."]
        if self.errors:
            lines.append(f"ERRORS ({len(self.errors)}), must fix before projecting:")
            lines.extend(f"  - {e}" for e in self.errors)
        if self.warnings:
            lines.append(f"WARNINGS ({len(self.warnings)}), projected as entered:")
            lines.extend(f"  - {w}" for w in self.warnings)
        return "\n".join(lines)


def validate_debt(debt: DebtInstrument) -> ValidationResult:
    """Checks for a single debt instrument."""
    result = ValidationResult()
    label = f"Debt {debt.id!r}"

    if pd.Timestamp(debt.end_date) < pd.Timestamp(debt.start_date):
        result.errors.append(
            f"{label}: end date {debt.end_date:%Y-%m-%d} is before start date "
            f"{debt.start_date:%Y-%m-%d}."
        )

    if not debt.principal > 0:
        result.errors.append(f"{label}: principal must be positive (got {debt.principal}).")

    if debt.base_rate < 0:
        result.errors.append(f"{label}: negative base rate {debt.base_rate}.")
    elif debt.base_rate > MAX_PLAUSIBLE_RATE_PCT:
        result.warnings.append(
            f"{label}: base rate {debt.base_rate} > {MAX_PLAUSIBLE_RATE_PCT:g}; check if the "
            f"rate is in percent vs basis points."
        )

    if debt.benchmark == Benchmark.FIXED and debt.spread_bps:
        result.warnings.append(
            f"{label}: spread of {debt.spread_bps:g}bps quoted on a fixed-rate debt."
        )

    if not debt.name:
        result.warnings.append(f"{label}: no name.")

    return result


def validate_debts(debts: Iterable[DebtInstrument]) -> ValidationResult:
    """Run validate_debt on every debt, plus book-level checks."""
    result = ValidationResult()
    seen = set()
    n_dup = 0
    for debt in debts:
        result.extend(validate_debt(debt))
        if debt.id in seen:
            n_dup += 1
        seen.add(debt.id)
    if n_dup > 0:
        result.warnings.append(f"{n_dup} duplicate debt ids found.")
    return result


def validate_transactions(events: Iterable[CashFlowEvent]) -> ValidationResult:
    result = ValidationResult()
    seen = set()
    n_dup = 0
    n_zero = 0
    for e in events:
        if e.id in seen:
            n_dup += 1
        seen.add(e.id)
        if e.amount_hkd == 0 and e.amount_rmb == 0 and e.amount_usd == 0:
            n_zero += 1
    if n_dup > 0:
        result.errors.append(f"{n_dup} duplicate transaction ids found.")
    if n_zero > 0:
        result.warnings.append(f"{n_zero} transactions have zero amounts in every currency.")
    return result
