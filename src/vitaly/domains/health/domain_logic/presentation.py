"""Presentation mapping for classification results.

Kept apart from the classifiers so the domain logic carries no display
concerns: statuses are plain enums, and callers that render them look up
text, colors and icon names here.
"""

from __future__ import annotations

from vitaly.core.reference.models import HealthStatus
from vitaly.domains.health.domain_logic.score_models import (
    HRVStatus,
    RestingHRStatus,
    SleepQuality,
)
from vitaly.domains.health.domain_logic.treatment_models import PaceVerdict

STATUS_DISPLAY_NAMES = {
    HealthStatus.VERY_POOR: "Very Poor",
    HealthStatus.POOR: "Poor",
    HealthStatus.FAIR: "Fair",
    HealthStatus.GOOD: "Good",
    HealthStatus.EXCELLENT: "Excellent",
}

STATUS_COLORS = {
    HealthStatus.VERY_POOR: "E53935",
    HealthStatus.POOR: "FB8C00",
    HealthStatus.FAIR: "FDD835",
    HealthStatus.GOOD: "7CB342",
    HealthStatus.EXCELLENT: "43A047",
}

# SF Symbol names used by the app
STATUS_ICONS = {
    HealthStatus.VERY_POOR: "exclamationmark.triangle.fill",
    HealthStatus.POOR: "arrow.down.circle.fill",
    HealthStatus.FAIR: "minus.circle.fill",
    HealthStatus.GOOD: "arrow.up.circle.fill",
    HealthStatus.EXCELLENT: "checkmark.circle.fill",
}

SLEEP_QUALITY_TEXT = {
    SleepQuality.EXCELLENT: "Excellent",
    SleepQuality.GOOD: "Good",
    SleepQuality.FAIR: "Fair",
    SleepQuality.POOR: "Poor",
}

HRV_STATUS_TEXT = {
    HRVStatus.EXCELLENT: "Excellent",
    HRVStatus.GOOD: "Good",
    HRVStatus.FAIR: "Normal",
    HRVStatus.LOW: "Low",
    HRVStatus.UNKNOWN: "Unknown",
}

RESTING_HR_STATUS_TEXT = {
    RestingHRStatus.ATHLETIC: "Athletic",
    RestingHRStatus.EXCELLENT: "Excellent",
    RestingHRStatus.GOOD: "Good",
    RestingHRStatus.AVERAGE: "Normal",
    RestingHRStatus.ELEVATED: "Elevated",
}

PACE_COLORS = {
    PaceVerdict.TOO_FAST: "warning",
    PaceVerdict.TOO_SLOW: "secondary",
    PaceVerdict.ON_TRACK: "success",
}


def display_status(status: HealthStatus) -> dict[str, str]:
    """Return display name, hex color and icon for a health status."""
    return {
        "name": STATUS_DISPLAY_NAMES[status],
        "color": STATUS_COLORS[status],
        "icon": STATUS_ICONS[status],
    }
