"""Daily biometric snapshots and score constants for composite scoring."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum


# ---------------------------------------------------------------------------
# Thresholds (fixed, not config driven)
# ---------------------------------------------------------------------------

# Sleep stage shares of total sleep
SLEEP_EXCELLENT_SHARE = 0.20    # deep AND rem
SLEEP_GOOD_SHARE = 0.15         # deep AND rem
SLEEP_FAIR_SHARE = 0.10         # deep OR rem

# Activity score: (cap, full-credit target) per component
STEPS_POINTS, STEPS_TARGET = 30, 10000
EXERCISE_POINTS = 30            # one point per minute
STAND_POINTS, STAND_TARGET = 20, 12
CALORIE_POINTS, CALORIE_TARGET = 20, 500
MAX_ACTIVITY_SCORE = 100

# HRV (ms), lower bound of each bucket
HRV_EXCELLENT_MS = 50
HRV_GOOD_MS = 35
HRV_FAIR_MS = 20

# Resting HR (bpm), exclusive upper bound of each bucket
RHR_ATHLETIC_BPM = 60
RHR_EXCELLENT_BPM = 70
RHR_GOOD_BPM = 80
RHR_AVERAGE_BPM = 90


# ---------------------------------------------------------------------------
# Statuses
# ---------------------------------------------------------------------------

class SleepQuality(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"

    @property
    def score(self) -> int:
        """Contribution to the overall daily score."""
        return _SLEEP_SCORES[self]


class HRVStatus(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    LOW = "low"
    UNKNOWN = "unknown"

    @property
    def score(self) -> int:
        return _HRV_SCORES[self]


class RestingHRStatus(str, Enum):
    ATHLETIC = "athletic"
    EXCELLENT = "excellent"
    GOOD = "good"
    AVERAGE = "average"
    ELEVATED = "elevated"


_SLEEP_SCORES = {
    SleepQuality.EXCELLENT: 90,
    SleepQuality.GOOD: 75,
    SleepQuality.FAIR: 55,
    SleepQuality.POOR: 30,
}

_HRV_SCORES = {
    HRVStatus.EXCELLENT: 90,
    HRVStatus.GOOD: 75,
    HRVStatus.FAIR: 55,
    HRVStatus.LOW: 30,
    HRVStatus.UNKNOWN: 50,
}

# Overall daily score labels: (lower bound inclusive, label), highest first
OVERALL_SCORE_LABELS = [
    (85, "Excellent"),
    (70, "Very good"),
    (55, "Good"),
    (40, "Okay"),
]
OVERALL_SCORE_FALLBACK_LABEL = "Needs improvement"


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SleepRecord:
    """One night of sleep. All durations in seconds."""

    date: date
    total_duration: float
    deep_sleep: float
    rem_sleep: float
    light_sleep: float
    awake: float
    bedtime: datetime | None = None
    wake_time: datetime | None = None


@dataclass(frozen=True)
class WorkoutSummary:
    workout_type: str
    duration: float                 # seconds
    calories: float
    start_time: datetime
    average_heart_rate: float | None = None


@dataclass(frozen=True)
class ActivityRecord:
    """One day of activity counters."""

    date: date
    steps: int
    active_calories: float
    total_calories: float
    distance: float                 # meters
    exercise_minutes: int
    stand_hours: int
    workouts: tuple[WorkoutSummary, ...] = ()


@dataclass(frozen=True)
class HeartRateZone:
    zone: int                       # 1-5
    name: str
    duration: float                 # seconds
    min_bpm: int
    max_bpm: int


@dataclass(frozen=True)
class HeartRecord:
    """One day of heart-rate statistics (bpm, HRV in ms)."""

    date: date
    resting_heart_rate: float
    average_heart_rate: float
    max_heart_rate: float
    min_heart_rate: float
    hrv: float | None = None
    heart_rate_zones: tuple[HeartRateZone, ...] = ()


HEART_RATE_ZONE_NAMES = {
    1: "Rest",
    2: "Easy",
    3: "Aerobic",
    4: "Anaerobic",
    5: "Max",
}
