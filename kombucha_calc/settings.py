"""
Fermentation settings and their on-disk store.

Settings are a flat key/value JSON file with every value string-encoded:

    {"kombuchaTemp": "22", "kombuchaStarter": "10",
     "kombuchaSugar": "70", "kombuchaStartDate": "2024-06-01T09:00"}

An empty start date means no batch is in progress. Missing or unreadable
keys fall back to their defaults.
"""

import json
import logging
import os
from dataclasses import dataclass, replace
from datetime import date, datetime, time
from typing import Optional

import numpy as np

from kombucha_calc.config import (
    DEFAULTS,
    RANGES,
    SETTINGS_PATH,
    START_FORMAT,
    STORAGE_KEYS,
)

logger = logging.getLogger(__name__)

NUMERIC_FIELDS = ("temperature_c", "starter_percent", "sugar_g_per_l")


@dataclass(frozen=True)
class FermentationSettings:
    temperature_c: float = DEFAULTS["temperature_c"]
    starter_percent: float = DEFAULTS["starter_percent"]
    sugar_g_per_l: float = DEFAULTS["sugar_g_per_l"]
    start_instant: Optional[datetime] = None

    def with_changes(self, **changes) -> "FermentationSettings":
        return replace(self, **changes)

    def to_record(self) -> dict:
        """String-encoded storage record."""
        record = {STORAGE_KEYS[name]: _format_number(getattr(self, name))
                  for name in NUMERIC_FIELDS}
        record[STORAGE_KEYS["start_instant"]] = format_start_instant(self.start_instant)
        return record

    @classmethod
    def from_record(cls, record: dict) -> "FermentationSettings":
        values = {}
        for name in NUMERIC_FIELDS:
            raw = record.get(STORAGE_KEYS[name])
            if raw in (None, ""):
                continue
            value = _parse_number(name, raw)
            if value is not None:
                values[name] = _clip_to_range(name, value)
        values["start_instant"] = _parse_start_value(record.get(STORAGE_KEYS["start_instant"]))
        return cls(**values)


def _parse_start_value(raw):
    if raw in (None, ""):
        return None
    if not isinstance(raw, str):
        logger.warning("Ignoring non-text start date %r, treating batch as not started", raw)
        return None
    return parse_start_instant(raw)


def _format_number(value):
    value = float(value)
    return str(int(value)) if value.is_integer() else repr(value)


def _parse_number(name, raw):
    try:
        value = float(raw)
    except (TypeError, ValueError):
        logger.warning("Ignoring unreadable %s value %r, using default", name, raw)
        return None
    if not np.isfinite(value):
        logger.warning("Ignoring non-finite %s value %r, using default", name, raw)
        return None
    return value


def _clip_to_range(name, value):
    low, high, _ = RANGES[name]
    clipped = float(np.clip(value, low, high))
    if clipped != value:
        logger.warning("%s=%s outside [%s, %s], clipped to %s", name, value, low, high, clipped)
    return clipped


def parse_start_instant(raw: str) -> Optional[datetime]:
    """ISO-8601 text to a naive local datetime; None when unset or unreadable."""
    if not raw:
        return None
    try:
        parsed = datetime.fromisoformat(raw.strip())
    except (TypeError, ValueError):
        logger.warning("Unreadable start date %r, treating batch as not started", raw)
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def format_start_instant(start_instant: Optional[datetime]) -> str:
    if start_instant is None:
        return ""
    if start_instant.second or start_instant.microsecond:
        return start_instant.isoformat()
    return start_instant.strftime(START_FORMAT)


def combine_start(start_date: Optional[date], hour: int) -> Optional[datetime]:
    """Join the selected start date and hour-of-day into one instant."""
    if start_date is None:
        return None
    return datetime.combine(start_date, time(hour=hour))


def resolve_start(current: Optional[datetime], start_date: Optional[date],
                  hour: int) -> Optional[datetime]:
    """Start instant from the date and hour widgets.

    The widgets only carry whole hours, so a saved instant keeps its
    minutes and seconds while its date and hour are still selected.
    """
    start = combine_start(start_date, hour)
    if (start is not None and current is not None
            and start == current.replace(minute=0, second=0, microsecond=0)):
        return current
    return start


class SettingsStore:
    """Load/save boundary for FermentationSettings."""

    def __init__(self, path=None):
        self.path = path or SETTINGS_PATH

    def load(self) -> FermentationSettings:
        if not os.path.exists(self.path):
            logger.info("No saved settings at %s, using defaults", self.path)
            return FermentationSettings()
        try:
            with open(self.path, "r") as f:
                record = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Settings file %s unreadable (%s), using defaults", self.path, e)
            return FermentationSettings()
        if not isinstance(record, dict):
            logger.warning("Settings file %s is not a key/value object, using defaults", self.path)
            return FermentationSettings()
        return FermentationSettings.from_record(record)

    def save(self, settings: FermentationSettings) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp = self.path + ".tmp"
        with open(tmp, "w") as f:
            json.dump(settings.to_record(), f, indent=2)
        os.replace(tmp, self.path)
        logger.debug("Saved settings to %s", self.path)

    def commit(self, current: FermentationSettings,
               changed: FermentationSettings) -> FermentationSettings:
        """Save changed settings; unchanged settings are not rewritten."""
        if changed != current:
            self.save(changed)
            logger.info("Settings changed: %s", changed)
        return changed
