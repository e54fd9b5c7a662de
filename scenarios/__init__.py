"""
Scenario layer — stress presets and the controller that feeds the debt engine.
"""

from .controller import ScenarioController
from .presets import BASE, OPTIMISTIC, PESSIMISTIC, PRESET_DESCRIPTIONS, SCENARIO_PRESETS, get_preset

__all__ = [
    "ScenarioController",
    "BASE",
    "OPTIMISTIC",
    "PESSIMISTIC",
    "PRESET_DESCRIPTIONS",
    "SCENARIO_PRESETS",
    "get_preset",
]
