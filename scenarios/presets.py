"""
Named stress presets.

  BASE         house FX rates, every planned financing closes, no rate moves
  OPTIMISTIC   slightly stronger RMB, benchmarks 50bps lower
  PESSIMISTIC  weaker RMB, 30% of planned financing fails, benchmarks up 100-150bps
"""

from __future__ import annotations

from typing import Dict

from core.config import DEFAULT_RATES, ExchangeRates, StressConfig

BASE = "BASE"
OPTIMISTIC = "OPTIMISTIC"
PESSIMISTIC = "PESSIMISTIC"

SCENARIO_PRESETS: Dict[str, StressConfig] = {
    BASE: StressConfig(rates=DEFAULT_RATES),
    OPTIMISTIC: StressConfig(
        rates=ExchangeRates(hkd_to_rmb=0.91, usd_to_rmb=7.10),
        financing_fail_rate=0.0,
        shibor_shock_bps=-50.0,
        hibor_shock_bps=-50.0,
        sofr_shock_bps=-50.0,
    ),
    PESSIMISTIC: StressConfig(
        rates=ExchangeRates(hkd_to_rmb=0.95, usd_to_rmb=7.60),
        financing_fail_rate=30.0,
        shibor_shock_bps=100.0,
        hibor_shock_bps=150.0,
        sofr_shock_bps=100.0,
    ),
}

PRESET_DESCRIPTIONS: Dict[str, str] = {
    BASE: "House FX rates, planned financing closes in full, no rate moves",
    OPTIMISTIC: "Stronger RMB, benchmarks 50bps lower",
    PESSIMISTIC: "Weaker RMB, 30% financing failure, benchmarks +100-150bps",
}


def get_preset(name: str) -> StressConfig:
    """
    Return a named preset.

    Parameters
    ----------
    name : str
        One of "BASE", "OPTIMISTIC", "PESSIMISTIC" (case-insensitive).
    """
    key = name.strip().upper()
    if key not in SCENARIO_PRESETS:
        raise KeyError(
            f"Unknown scenario '{name}'. "
            f"Available: {list(SCENARIO_PRESETS.keys())}"
        )
    return SCENARIO_PRESETS[key]
