"""Kombucha fermentation progress calculator."""

from kombucha_calc.errors import InvalidDurationError
from kombucha_calc.formatting import format_elapsed, format_progress, format_projection
from kombucha_calc.model import check_duration, estimate_duration_days
from kombucha_calc.projection import ProjectionResult, Stage, advisory_for, project, stage_for
from kombucha_calc.sampler import ElapsedSampler, sample_elapsed_days
from kombucha_calc.settings import FermentationSettings, SettingsStore

__version__ = "0.1.0"

__all__ = [
    "ElapsedSampler",
    "FermentationSettings",
    "InvalidDurationError",
    "ProjectionResult",
    "SettingsStore",
    "Stage",
    "advisory_for",
    "check_duration",
    "estimate_duration_days",
    "format_elapsed",
    "format_progress",
    "format_projection",
    "project",
    "sample_elapsed_days",
    "stage_for",
]
