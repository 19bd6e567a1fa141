"""
Fermentation duration model.

Total fermentation time is a base duration at reference conditions
(24°C, 10% starter, 70 g/L sugar) scaled by three independent factors:

    days = 7 * temperature_factor * starter_factor * sugar_factor

    starter_factor = (10 / starter_percent) ** 0.4
    sugar_factor   = (sugar_g_per_l / 70) ** 0.3

Two temperature models are available and are never mixed:

    linear-band (default)
        20-28°C:  1 - 0.05 * |T - 24|
        below 20: 1 + 0.15 * (20 - T)
        above 28: 1 + 0.10 * (T - 28)

    power-law
        (24 / T) ** 1.8

The result is a heuristic for hobbyist guidance, not a microbiological model.
"""

import math

import numpy as np

from kombucha_calc.config import (
    BAND_SLOPE,
    BASE_DURATION_DAYS,
    COLD_SLOPE,
    COMFORT_BAND_C,
    HOT_SLOPE,
    POWER_LAW_TEMP_EXPONENT,
    REFERENCE_STARTER_PERCENT,
    REFERENCE_SUGAR_G_PER_L,
    REFERENCE_TEMP_C,
    STARTER_EXPONENT,
    SUGAR_EXPONENT,
)
from kombucha_calc.errors import InvalidDurationError

LINEAR_BAND = "linear-band"
POWER_LAW = "power-law"
TEMPERATURE_MODELS = (LINEAR_BAND, POWER_LAW)


def temperature_factor(temperature_c, model=LINEAR_BAND):
    """Duration multiplier for temperature (scalar or array)."""
    t = np.asarray(temperature_c, dtype=float)

    if model == LINEAR_BAND:
        low, high = COMFORT_BAND_C
        band = 1 - BAND_SLOPE * np.abs(t - REFERENCE_TEMP_C)
        cold = 1 + COLD_SLOPE * (low - t)
        hot = 1 + HOT_SLOPE * (t - high)
        factor = np.where(t < low, cold, np.where(t > high, hot, band))
    elif model == POWER_LAW:
        with np.errstate(divide="ignore", invalid="ignore"):
            factor = (REFERENCE_TEMP_C / t) ** POWER_LAW_TEMP_EXPONENT
    else:
        raise ValueError(f"Unknown temperature model: {model!r}")

    return factor


def starter_factor(starter_percent):
    """More starter ferments faster, with diminishing returns."""
    s = np.asarray(starter_percent, dtype=float)
    with np.errstate(divide="ignore", invalid="ignore"):
        return (REFERENCE_STARTER_PERCENT / s) ** STARTER_EXPONENT


def sugar_factor(sugar_g_per_l):
    """More sugar modestly extends fermentation."""
    g = np.asarray(sugar_g_per_l, dtype=float)
    with np.errstate(invalid="ignore"):
        return (g / REFERENCE_SUGAR_G_PER_L) ** SUGAR_EXPONENT


def estimate_duration_days(temperature_c, starter_percent, sugar_g_per_l,
                           model=LINEAR_BAND):
    """Estimated total fermentation time in days.

    No bound is enforced. Zero or negative inputs can produce a
    non-finite or non-positive result; pass it through check_duration
    before using it for a projection.
    """
    days = (BASE_DURATION_DAYS
            * temperature_factor(temperature_c, model)
            * starter_factor(starter_percent)
            * sugar_factor(sugar_g_per_l))
    return float(days)


def check_duration(days):
    """Return days unchanged, or raise if it cannot drive a projection."""
    if not math.isfinite(days) or days <= 0:
        raise InvalidDurationError(days)
    return days


def duration_sweep(temperatures, starter_percent, sugar_g_per_l, model=LINEAR_BAND):
    """Vectorized estimate over an array of temperatures."""
    temps = np.asarray(temperatures, dtype=float)
    return (BASE_DURATION_DAYS
            * temperature_factor(temps, model)
            * starter_factor(starter_percent)
            * sugar_factor(sugar_g_per_l))
