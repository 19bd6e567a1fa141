"""
Global configuration for the kombucha fermentation calculator.
Edit values here; the settings path and log level can also be set
through the environment.
"""

import logging
import os

# Reference conditions for the base duration
BASE_DURATION_DAYS = 7.0
REFERENCE_TEMP_C = 24.0
REFERENCE_STARTER_PERCENT = 10.0
REFERENCE_SUGAR_G_PER_L = 70.0

# Linear-band temperature model
COMFORT_BAND_C = (20.0, 28.0)
BAND_SLOPE = 0.05           # per degree away from the optimum, inside the band
COLD_SLOPE = 0.15           # per degree below the band
HOT_SLOPE = 0.10            # per degree above the band

# Power-law exponents
POWER_LAW_TEMP_EXPONENT = 1.8
STARTER_EXPONENT = 0.4
SUGAR_EXPONENT = 0.3

# Input ranges (min, max, step)
RANGES = {
    "temperature_c": (15.0, 35.0, 0.5),
    "starter_percent": (5.0, 30.0, 1.0),
    "sugar_g_per_l": (40.0, 120.0, 1.0),
}

DEFAULTS = {
    "temperature_c": 22.0,
    "starter_percent": 10.0,
    "sugar_g_per_l": 70.0,
}

# Persisted key names
STORAGE_KEYS = {
    "temperature_c": "kombuchaTemp",
    "starter_percent": "kombuchaStarter",
    "sugar_g_per_l": "kombuchaSugar",
    "start_instant": "kombuchaStartDate",
}

START_FORMAT = "%Y-%m-%dT%H:%M"

# Timing
SAMPLE_INTERVAL_SEC = 60

# Stage thresholds and palette
STAGE_COLORS = {
    "blue": "#3B82F6",
    "yellow": "#eab308",
    "orange": "#f97316",
    "green": "#10b981",
}

ADVISORY_FROM_PERCENT = 70.0
NEARLY_READY_MESSAGE = (
    "Your kombucha is nearly ready! Consider tasting to check if it has "
    "reached your desired flavor balance."
)
READY_MESSAGE = (
    "Your kombucha should be ready! Taste test and bottle when you're happy "
    "with the flavor."
)

# Paths
SETTINGS_PATH = os.environ.get(
    "KOMBUCHA_SETTINGS_PATH",
    os.path.join(os.path.expanduser("~"), ".kombucha_calc", "settings.json"),
)

LOG_LEVEL = os.environ.get("KOMBUCHA_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level=None):
    """Set up root logging once for the app."""
    level = (level or LOG_LEVEL).upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
