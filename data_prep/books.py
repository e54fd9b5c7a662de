"""
Operator-owned collections: the debt book and the manual transaction ledger.

These are the explicit add / edit / delete commands. Debts are validated on
the way in (the schedule generator trusts whatever it is given). Generated
debt events never enter the manual ledger; they are derived on every run.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List

from core.schema import CashFlowEvent, DebtInstrument

from .validators import validate_debt

logger = logging.getLogger(__name__)


class DebtBook:
    """Ordered, id-keyed set of debt instruments."""

    def __init__(self, debts: Iterable[DebtInstrument] = ()):
        self._debts: Dict[str, DebtInstrument] = {}
        for debt in debts:
            self.add(debt)

    def __iter__(self) -> Iterator[DebtInstrument]:
        return iter(list(self._debts.values()))

    def __len__(self) -> int:
        return len(self._debts)

    def __contains__(self, debt_id: object) -> bool:
        return debt_id in self._debts

    @property
    def debts(self) -> List[DebtInstrument]:
        return list(self._debts.values())

    def get(self, debt_id: str) -> DebtInstrument:
        if debt_id not in self._debts:
            raise KeyError(f"Unknown debt id {debt_id!r}")
        return self._debts[debt_id]

    def add(self, debt: DebtInstrument) -> DebtInstrument:
        if debt.id in self._debts:
            raise ValueError(f"Debt id {debt.id!r} already exists.")
        self._check(debt)
        self._debts[debt.id] = debt
        logger.info("Debt added: %s (%s)", debt.id, debt.name)
        return debt

    def update(self, debt: DebtInstrument) -> DebtInstrument:
        if debt.id not in self._debts:
            raise KeyError(f"Unknown debt id {debt.id!r}")
        self._check(debt)
        self._debts[debt.id] = debt
        logger.info("Debt updated: %s", debt.id)
        return debt

    def remove(self, debt_id: str) -> DebtInstrument:
        """Delete a debt; its schedule disappears on the next regeneration."""
        debt = self.get(debt_id)
        del self._debts[debt_id]
        logger.info("Debt removed: %s", debt_id)
        return debt

    @staticmethod
    def _check(debt: DebtInstrument) -> None:
        result = validate_debt(debt)
        for w in result.warnings:
            logger.warning(w)
        if not result.is_valid:
            raise ValueError(f"Invalid debt {debt.id!r}:\n{result.summary()}")


class TransactionBook:
    """Manual cash-flow entries, in insertion order."""

    def __init__(self, events: Iterable[CashFlowEvent] = ()):
        self._events: Dict[str, CashFlowEvent] = {}
        for e in events:
            self.add(e)

    def __iter__(self) -> Iterator[CashFlowEvent]:
        return iter(list(self._events.values()))

    def __len__(self) -> int:
        return len(self._events)

    def __contains__(self, event_id: object) -> bool:
        return event_id in self._events

    @property
    def events(self) -> List[CashFlowEvent]:
        return list(self._events.values())

    def add(self, event: CashFlowEvent) -> CashFlowEvent:
        self._reject_generated(event)
        if event.id in self._events:
            raise ValueError(f"Transaction id {event.id!r} already exists.")
        self._events[event.id] = event
        return event

    def update(self, event: CashFlowEvent) -> CashFlowEvent:
        self._reject_generated(event)
        if event.id not in self._events:
            raise KeyError(f"Unknown transaction id {event.id!r}")
        self._events[event.id] = event
        return event

    def remove(self, event_id: str) -> CashFlowEvent:
        if event_id not in self._events:
            raise KeyError(f"Unknown transaction id {event_id!r}")
        return self._events.pop(event_id)

    def extend(self, events: Iterable[CashFlowEvent]) -> int:
        n = 0
        for e in events:
            self.add(e)
            n += 1
        return n

    def replace_all(self, events: Iterable[CashFlowEvent]) -> None:
        """Swap in a complete list, e.g. after a fetch-all from a remote store."""
        replacement: Dict[str, CashFlowEvent] = {}
        for e in events:
            self._reject_generated(e)
            if e.id in replacement:
                raise ValueError(f"Transaction id {e.id!r} appears more than once.")
            replacement[e.id] = e
        self._events = replacement
        logger.info("Manual ledger replaced: %d transactions", len(self._events))

    @staticmethod
    def _reject_generated(event: CashFlowEvent) -> None:
        if event.is_generated:
            raise ValueError(
                f"Transaction {event.id!r} is generated from debt {event.linked_debt_id!r}; "
                f"edit the debt instead."
            )
