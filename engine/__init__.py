"""
Projection engine — debt schedules, ledger merge, and the runner.
"""

from .ledger import merge_ledgers
from .runner import ProjectionResult, run_projection
from .schedule import generate_debt_events

__all__ = [
    "merge_ledgers",
    "ProjectionResult",
    "run_projection",
    "generate_debt_events",
]
