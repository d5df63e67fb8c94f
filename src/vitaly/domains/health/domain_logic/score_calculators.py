"""Deterministic composite scores: raw daily snapshots -> statuses and scores.

Every function is pure: no I/O, no shared state, same output for the same
input. Thresholds live in ``score_models`` and are fixed constants.

Boundaries are exactly as written: ``>=`` thresholds include the boundary in
the higher bucket, ``<`` thresholds put it in the next bucket up.
"""

from __future__ import annotations

from vitaly.domains.health.domain_logic.score_models import (
    CALORIE_POINTS,
    CALORIE_TARGET,
    EXERCISE_POINTS,
    HRV_EXCELLENT_MS,
    HRV_FAIR_MS,
    HRV_GOOD_MS,
    MAX_ACTIVITY_SCORE,
    OVERALL_SCORE_FALLBACK_LABEL,
    OVERALL_SCORE_LABELS,
    RHR_ATHLETIC_BPM,
    RHR_AVERAGE_BPM,
    RHR_EXCELLENT_BPM,
    RHR_GOOD_BPM,
    SLEEP_EXCELLENT_SHARE,
    SLEEP_FAIR_SHARE,
    SLEEP_GOOD_SHARE,
    STAND_POINTS,
    STAND_TARGET,
    STEPS_POINTS,
    STEPS_TARGET,
    ActivityRecord,
    HeartRecord,
    HRVStatus,
    RestingHRStatus,
    SleepQuality,
    SleepRecord,
)


def _clamp(value: int, lo: int = 0, hi: int = MAX_ACTIVITY_SCORE) -> int:
    """Clamp a value to [lo, hi]."""
    return max(lo, min(hi, value))


# ---------------------------------------------------------------------------
# Sleep
# ---------------------------------------------------------------------------

def sleep_stage_shares(record: SleepRecord) -> tuple[float, float]:
    """Return (deep share, rem share) of total sleep; (0, 0) for empty nights."""
    if record.total_duration <= 0:
        return 0.0, 0.0
    return (
        record.deep_sleep / record.total_duration,
        record.rem_sleep / record.total_duration,
    )


def sleep_quality(record: SleepRecord) -> SleepQuality:
    """Classify a night from its deep and REM sleep shares.

    ``excellent`` and ``good`` need both shares over the bar; ``fair`` needs
    only one of them.
    """
    deep, rem = sleep_stage_shares(record)

    if deep >= SLEEP_EXCELLENT_SHARE and rem >= SLEEP_EXCELLENT_SHARE:
        return SleepQuality.EXCELLENT
    if deep >= SLEEP_GOOD_SHARE and rem >= SLEEP_GOOD_SHARE:
        return SleepQuality.GOOD
    if deep >= SLEEP_FAIR_SHARE or rem >= SLEEP_FAIR_SHARE:
        return SleepQuality.FAIR
    return SleepQuality.POOR


def sleep_total_hours(record: SleepRecord) -> float:
    return record.total_duration / 3600


def format_sleep_duration(record: SleepRecord) -> str:
    """Format total sleep as ``"7h 30m"`` (seconds truncated)."""
    total = int(record.total_duration)
    return f"{total // 3600}h {(total % 3600) // 60}m"


# ---------------------------------------------------------------------------
# Activity
# ---------------------------------------------------------------------------

def activity_score(record: ActivityRecord) -> int:
    """Compute the 0-100 activity score.

    Components (each capped before summing):
        steps (30): steps * 30 // 10000
        exercise (30): one point per minute
        stand (20): stand_hours * 20 // 12
        active calories (20): truncated active_calories * 20 / 500

    Divisions truncate the scaled product, not the ratio.
    """
    score = 0
    score += min(STEPS_POINTS, (record.steps * STEPS_POINTS) // STEPS_TARGET)
    score += min(EXERCISE_POINTS, record.exercise_minutes)
    score += min(STAND_POINTS, (record.stand_hours * STAND_POINTS) // STAND_TARGET)
    score += min(CALORIE_POINTS, int((record.active_calories * CALORIE_POINTS) / CALORIE_TARGET))
    return _clamp(score)


def distance_km(record: ActivityRecord) -> float:
    return record.distance / 1000


def format_distance(record: ActivityRecord) -> str:
    return f"{distance_km(record):.1f} km"


def format_minutes(seconds: float) -> str:
    """Format a workout or zone duration as ``"45 min"``."""
    return f"{int(seconds) // 60} min"


# ---------------------------------------------------------------------------
# Heart
# ---------------------------------------------------------------------------

def hrv_status(hrv_ms: float | None) -> HRVStatus:
    if hrv_ms is None:
        return HRVStatus.UNKNOWN
    if hrv_ms >= HRV_EXCELLENT_MS:
        return HRVStatus.EXCELLENT
    if hrv_ms >= HRV_GOOD_MS:
        return HRVStatus.GOOD
    if hrv_ms >= HRV_FAIR_MS:
        return HRVStatus.FAIR
    return HRVStatus.LOW


def resting_hr_status(bpm: float) -> RestingHRStatus:
    if bpm < RHR_ATHLETIC_BPM:
        return RestingHRStatus.ATHLETIC
    if bpm < RHR_EXCELLENT_BPM:
        return RestingHRStatus.EXCELLENT
    if bpm < RHR_GOOD_BPM:
        return RestingHRStatus.GOOD
    if bpm < RHR_AVERAGE_BPM:
        return RestingHRStatus.AVERAGE
    return RestingHRStatus.ELEVATED


# ---------------------------------------------------------------------------
# Overall daily score
# ---------------------------------------------------------------------------

def overall_daily_score(
    sleep: SleepRecord | None = None,
    activity: ActivityRecord | None = None,
    heart: HeartRecord | None = None,
) -> int:
    """Integer mean of the available component scores; 0 with no data.

    Components: sleep-quality score, activity score, HRV-status score.
    """
    components: list[int] = []
    if sleep is not None:
        components.append(sleep_quality(sleep).score)
    if activity is not None:
        components.append(activity_score(activity))
    if heart is not None:
        components.append(hrv_status(heart.hrv).score)

    if not components:
        return 0
    return sum(components) // len(components)


def overall_score_label(score: int) -> str:
    for lower, label in OVERALL_SCORE_LABELS:
        if score >= lower:
            return label
    return OVERALL_SCORE_FALLBACK_LABEL
