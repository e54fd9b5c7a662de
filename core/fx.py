"""
Currency conversion into the reporting (base) currency.

Everything is first expressed in RMB and then divided back out if the base
currency is HKD or USD. Rates are assumed strictly positive; the scenario
controller clamps them before they get here.
"""

from __future__ import annotations

import numpy as np

from .config import ExchangeRates
from .schema import Currency, CurrencyAmounts


def to_base(
    hkd: float,
    rmb: float,
    usd: float,
    rates: ExchangeRates,
    base_currency: Currency = Currency.RMB,
) -> float:
    value_rmb = hkd * rates.hkd_to_rmb + rmb + usd * rates.usd_to_rmb
    if base_currency == Currency.HKD:
        return value_rmb / rates.hkd_to_rmb
    if base_currency == Currency.USD:
        return value_rmb / rates.usd_to_rmb
    return value_rmb


def amounts_to_base(
    amounts: CurrencyAmounts,
    rates: ExchangeRates,
    base_currency: Currency = Currency.RMB,
) -> float:
    return to_base(amounts.hkd, amounts.rmb, amounts.usd, rates, base_currency)


def to_base_array(hkd, rmb, usd, rates: ExchangeRates, base_currency: Currency = Currency.RMB) -> np.ndarray:
    """Vectorized to_base: same formula, element-wise over arrays or Series."""
    hkd = np.asarray(hkd, dtype=float)
    rmb = np.asarray(rmb, dtype=float)
    usd = np.asarray(usd, dtype=float)
    value_rmb = hkd * rates.hkd_to_rmb + rmb + usd * rates.usd_to_rmb
    if base_currency == Currency.HKD:
        return value_rmb / rates.hkd_to_rmb
    if base_currency == Currency.USD:
        return value_rmb / rates.usd_to_rmb
    return value_rmb
