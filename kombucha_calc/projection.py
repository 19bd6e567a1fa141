"""Progress projection and the display stage derived from it."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

import numpy as np

from kombucha_calc.config import (
    ADVISORY_FROM_PERCENT,
    NEARLY_READY_MESSAGE,
    READY_MESSAGE,
    STAGE_COLORS,
)


@dataclass(frozen=True)
class ProjectionResult:
    target_duration_days: float
    progress_percent: float
    projected_finish_instant: Optional[datetime]

    @property
    def in_progress(self) -> bool:
        return self.projected_finish_instant is not None


def project(elapsed_days: float, target_duration_days: float,
            start_instant: Optional[datetime]) -> ProjectionResult:
    """Combine elapsed time and target duration into progress and a finish instant.

    With no start instant there is no batch in progress: progress is 0 and
    no finish instant is projected. target_duration_days must already be
    positive (see model.check_duration).
    """
    if start_instant is None:
        return ProjectionResult(target_duration_days, 0.0, None)

    progress = float(np.clip(100.0 * elapsed_days / target_duration_days, 0.0, 100.0))
    finish = start_instant + timedelta(days=target_duration_days)
    return ProjectionResult(target_duration_days, progress, finish)


class Stage(Enum):
    EARLY = ("Early Stage", "blue")
    ACTIVE = ("Active Fermentation", "yellow")
    NEARLY_READY = ("Nearly Ready", "orange")
    READY = ("Ready to Taste!", "green")

    def __init__(self, label, color):
        self.label = label
        self.color = color

    @property
    def hex_color(self):
        return STAGE_COLORS[self.color]


def stage_for(progress_percent: float) -> Stage:
    if progress_percent < 50:
        return Stage.EARLY
    if progress_percent < 80:
        return Stage.ACTIVE
    if progress_percent < 100:
        return Stage.NEARLY_READY
    return Stage.READY


def advisory_for(progress_percent: float) -> Optional[str]:
    """Tasting advice, independent of the four stages."""
    if progress_percent >= 100:
        return READY_MESSAGE
    if progress_percent >= ADVISORY_FROM_PERCENT:
        return NEARLY_READY_MESSAGE
    return None
