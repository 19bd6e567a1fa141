"""Tables, charts and exports for the calculator page."""

import math
from datetime import timedelta

import matplotlib
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from kombucha_calc.config import RANGES, STAGE_COLORS
from kombucha_calc.formatting import format_elapsed, format_progress, format_projection
from kombucha_calc.model import duration_sweep
from kombucha_calc.projection import advisory_for, stage_for
from kombucha_calc.settings import format_start_instant

matplotlib.use("Agg")


def setup_plot_style():
    """Setup matplotlib style"""
    plt.style.use("default")
    plt.rcParams.update({
        "axes.facecolor": "#fffbeb",
        "figure.facecolor": "#ffffff",
        "axes.edgecolor": "#b45309",
        "axes.labelcolor": "#374151",
        "xtick.color": "#6b7280",
        "ytick.color": "#6b7280",
        "text.color": "#374151",
        "grid.color": "#fcd34d",
        "grid.alpha": 0.3,
        "axes.titlecolor": "#b45309",
        "lines.linewidth": 3,
        "axes.grid": True,
        "font.size": 10,
    })


def reference_table(starter_percent, sugar_g_per_l, model, step=1.0):
    """Estimated days across the whole temperature range."""
    low, high, _ = RANGES["temperature_c"]
    temps = np.arange(low, high + step / 2, step)
    days = duration_sweep(temps, starter_percent, sugar_g_per_l, model)
    return pd.DataFrame({
        "Temperature (°C)": temps,
        "Estimated Days": np.round(days, 1),
    })


def timeline(settings, projection):
    """Day-by-day projected progress from the start instant to the finish."""
    if not projection.in_progress:
        return pd.DataFrame(columns=["Day", "Date", "Progress_percent", "Stage"])

    target = projection.target_duration_days
    day_numbers = np.arange(0, math.ceil(target) + 1)
    progress = np.clip(100.0 * day_numbers / target, 0.0, 100.0)
    return pd.DataFrame({
        "Day": day_numbers,
        "Date": [(settings.start_instant + timedelta(days=int(d))).strftime("%Y-%m-%d %H:%M")
                 for d in day_numbers],
        "Progress_percent": np.round(progress, 1),
        "Stage": [stage_for(p).label for p in progress],
    })


def _finish_line(projection, now):
    if not projection.in_progress:
        return "not started"
    finish = projection.projected_finish_instant
    return f"{format_projection(finish, now)} ({finish:%Y-%m-%d %H:%M})"


def summary_text(settings, projection, elapsed_days, now, model):
    stage = stage_for(projection.progress_percent)
    advisory = advisory_for(projection.progress_percent)
    summary = f"""KOMBUCHA FERMENTATION ESTIMATE
============================
Temperature: {settings.temperature_c:g}°C
Starter: {settings.starter_percent:g}%
Sugar: {settings.sugar_g_per_l:g} g/L
Temperature model: {model}
Start: {format_start_instant(settings.start_instant)}

RESULTS:
Estimated Total Time: {projection.target_duration_days:.1f} days
Time Elapsed: {format_elapsed(elapsed_days)} ({elapsed_days:.2f} days)
Progress: {format_progress(projection.progress_percent)} ({stage.label})
Projected Finish: {_finish_line(projection, now)}
"""
    if advisory:
        summary += f"\n{advisory}\n"
    return summary


def plot_progress(settings, projection, elapsed_days, model):
    """Progress curve with today marked, and days vs. temperature."""
    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(12, 8))

    target = projection.target_duration_days
    horizon = max(target, elapsed_days) * 1.1
    days = np.linspace(0, horizon, 200)
    progress = np.clip(100.0 * days / target, 0, 100)

    ax1.plot(days, progress, color=STAGE_COLORS["blue"], label="Projected progress")
    for threshold, color in ((50, "yellow"), (80, "orange"), (100, "green")):
        ax1.axhline(y=threshold, color=STAGE_COLORS[color], linestyle="--", alpha=0.6, linewidth=1.5)
    ax1.axvline(x=elapsed_days, color="#6b7280", linestyle=":", linewidth=2,
                label=f"Now ({format_elapsed(elapsed_days)})")
    ax1.plot(elapsed_days, projection.progress_percent, "o",
             color=stage_for(projection.progress_percent).hex_color, markersize=10)
    ax1.set_xlabel("Days since start", fontsize=12, fontweight="bold")
    ax1.set_ylabel("Progress (%)", fontsize=12, fontweight="bold")
    ax1.set_ylim(0, 105)
    ax1.legend(loc="lower right", fontsize=10)
    ax1.set_title(f"Fermentation Progress ({target:.1f} day estimate)",
                  fontsize=14, fontweight="bold", pad=20)

    table = reference_table(settings.starter_percent, settings.sugar_g_per_l, model, step=0.5)
    ax2.plot(table["Temperature (°C)"], table["Estimated Days"], color="#ef4444", linewidth=2.5)
    ax2.plot(settings.temperature_c, target, "o", color="#b45309", markersize=10,
             label=f"Current: {settings.temperature_c:g}°C")
    ax2.set_xlabel("Temperature (°C)", fontsize=12, fontweight="bold")
    ax2.set_ylabel("Estimated days", fontsize=12, fontweight="bold")
    ax2.set_title("Temperature Sensitivity", fontsize=14, fontweight="bold", pad=20)
    ax2.legend(loc="upper right", fontsize=10)

    plt.tight_layout()
    return fig
