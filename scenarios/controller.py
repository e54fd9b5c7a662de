"""
Scenario controller — the one place stress parameters are allowed to change.

The controller is the mutable side of the pipeline: sliders and preset
buttons write into it, and every recomputation asks it for an immutable
StressConfig snapshot. Inputs are clamped here, at the boundary, so the
converter never sees a zero or negative rate and the generator never sees a
failure rate outside 0-100.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Dict, Tuple

from core.config import ExchangeRates, StressConfig
from core.schema import Benchmark, Currency

from .presets import BASE, get_preset

logger = logging.getLogger(__name__)

# (min, max) for every adjustable parameter
RATE_BOUNDS: Dict[Currency, Tuple[float, float]] = {
    Currency.HKD: (0.80, 1.10),
    Currency.USD: (6.50, 8.00),
}
FAIL_RATE_BOUNDS: Tuple[float, float] = (0.0, 100.0)
SHOCK_BOUNDS_BPS: Tuple[float, float] = (-200.0, 200.0)

_SHOCK_FIELDS: Dict[Benchmark, str] = {
    Benchmark.SHIBOR: "shibor_shock_bps",
    Benchmark.HIBOR: "hibor_shock_bps",
    Benchmark.SOFR: "sofr_shock_bps",
}


def _clamp(name: str, value: float, bounds: Tuple[float, float]) -> float:
    lo, hi = bounds
    if not math.isfinite(float(value)):
        raise ValueError(f"{name}={value!r} is not a finite number.")
    clamped = min(max(float(value), lo), hi)
    if clamped != value:
        logger.warning("%s=%s outside [%s, %s]; clamped to %s", name, value, lo, hi, clamped)
    return clamped


class ScenarioController:
    """Holds the current stress parameters and hands out snapshots."""

    def __init__(self, initial: StressConfig | None = None):
        self._config = get_preset(BASE)
        self._preset = BASE
        if initial is not None:
            self.load(initial)

    @property
    def stress(self) -> StressConfig:
        return self._config

    @property
    def active_preset(self) -> str | None:
        """Preset name while untouched since it was applied, else None."""
        return self._preset

    @property
    def is_stress_testing(self) -> bool:
        return self._config.is_stressed

    # ----- setters (all clamp) -----

    def set_rate(self, currency: Currency, value: float) -> StressConfig:
        if currency not in RATE_BOUNDS:
            raise ValueError(f"No adjustable rate for {currency!r}; RMB is the pivot currency.")
        clamped = _clamp(f"{currency.value}_TO_RMB", value, RATE_BOUNDS[currency])
        rates = self._config.rates
        if currency == Currency.HKD:
            rates = replace(rates, hkd_to_rmb=clamped)
        else:
            rates = replace(rates, usd_to_rmb=clamped)
        return self._update(rates=rates)

    def set_financing_fail_rate(self, value: float) -> StressConfig:
        return self._update(
            financing_fail_rate=_clamp("financing_fail_rate", value, FAIL_RATE_BOUNDS)
        )

    def set_shock(self, benchmark: Benchmark, bps: float) -> StressConfig:
        if benchmark not in _SHOCK_FIELDS:
            raise ValueError(f"{benchmark!r} has no rate shock (fixed-rate debt is never shocked).")
        field_name = _SHOCK_FIELDS[benchmark]
        return self._update(**{field_name: _clamp(field_name, bps, SHOCK_BOUNDS_BPS)})

    def load(self, config: StressConfig) -> StressConfig:
        """Adopt an arbitrary config, clamping every field."""
        self.set_rate(Currency.HKD, config.rates.hkd_to_rmb)
        self.set_rate(Currency.USD, config.rates.usd_to_rmb)
        self.set_financing_fail_rate(config.financing_fail_rate)
        for benchmark in _SHOCK_FIELDS:
            self.set_shock(benchmark, config.shock_for(benchmark))
        return self._config

    # ----- presets -----

    def apply_preset(self, name: str) -> StressConfig:
        self._config = get_preset(name)
        self._preset = name.strip().upper()
        logger.info("Scenario preset applied: %s", self._preset)
        return self._config

    def reset(self) -> StressConfig:
        return self.apply_preset(BASE)

    def _update(self, **changes) -> StressConfig:
        updated = replace(self._config, **changes)
        if updated != self._config:
            self._preset = None
        self._config = updated
        return self._config
