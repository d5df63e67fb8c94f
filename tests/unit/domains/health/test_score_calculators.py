"""Unit tests for the composite score calculators."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from vitaly.domains.health.domain_logic.score_calculators import (
    activity_score,
    distance_km,
    format_distance,
    format_minutes,
    format_sleep_duration,
    hrv_status,
    overall_daily_score,
    overall_score_label,
    resting_hr_status,
    sleep_quality,
    sleep_stage_shares,
    sleep_total_hours,
)
from vitaly.domains.health.domain_logic.score_models import (
    ActivityRecord,
    HeartRecord,
    HRVStatus,
    RestingHRStatus,
    SleepQuality,
    SleepRecord,
    WorkoutSummary,
)

DAY = date(2026, 3, 4)
HOUR = 3600


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _sleep(total_h=8.0, deep_h=1.6, rem_h=1.8, awake_h=0.0):
    light_h = max(0.0, total_h - deep_h - rem_h)
    return SleepRecord(
        date=DAY,
        total_duration=round(total_h * HOUR),
        deep_sleep=round(deep_h * HOUR),
        rem_sleep=round(rem_h * HOUR),
        light_sleep=round(light_h * HOUR),
        awake=round(awake_h * HOUR),
    )


def _activity(steps=8000, active_calories=400.0, exercise_minutes=25, stand_hours=10, distance=6000.0):
    return ActivityRecord(
        date=DAY,
        steps=steps,
        active_calories=active_calories,
        total_calories=active_calories + 1700,
        distance=distance,
        exercise_minutes=exercise_minutes,
        stand_hours=stand_hours,
    )


def _heart(rhr=62.0, hrv=48.0):
    return HeartRecord(
        date=DAY,
        resting_heart_rate=rhr,
        average_heart_rate=74.0,
        max_heart_rate=152.0,
        min_heart_rate=51.0,
        hrv=hrv,
    )


# ---------------------------------------------------------------------------
# Sleep
# ---------------------------------------------------------------------------

class TestSleepQuality:
    def test_quarter_deep_and_rem_is_excellent(self):
        assert sleep_quality(_sleep(8, deep_h=2, rem_h=2)) == SleepQuality.EXCELLENT

    def test_little_deep_and_rem_is_poor(self):
        assert sleep_quality(_sleep(8, deep_h=0.5, rem_h=0.5)) == SleepQuality.POOR

    def test_exact_twenty_percent_is_excellent(self):
        assert sleep_quality(_sleep(8, deep_h=1.6, rem_h=1.6)) == SleepQuality.EXCELLENT

    def test_exact_fifteen_percent_is_good(self):
        assert sleep_quality(_sleep(8, deep_h=1.2, rem_h=1.2)) == SleepQuality.GOOD

    def test_excellent_needs_both_stages(self):
        assert sleep_quality(_sleep(8, deep_h=2.4, rem_h=1.3)) == SleepQuality.GOOD

    def test_good_needs_both_stages(self):
        # Deep is high but REM below 15%: not good, only fair.
        assert sleep_quality(_sleep(8, deep_h=2.4, rem_h=0.96)) == SleepQuality.FAIR

    def test_fair_needs_only_one_stage(self):
        assert sleep_quality(_sleep(8, deep_h=0.8, rem_h=0.1)) == SleepQuality.FAIR
        assert sleep_quality(_sleep(8, deep_h=0.1, rem_h=0.8)) == SleepQuality.FAIR

    def test_just_under_ten_percent_both_is_poor(self):
        assert sleep_quality(_sleep(10, deep_h=0.99, rem_h=0.99)) == SleepQuality.POOR

    def test_zero_duration_is_poor_without_raising(self):
        record = SleepRecord(
            date=DAY, total_duration=0, deep_sleep=0, rem_sleep=0, light_sleep=0, awake=0
        )
        assert sleep_quality(record) == SleepQuality.POOR
        assert sleep_stage_shares(record) == (0.0, 0.0)

    def test_quality_scores(self):
        assert [q.score for q in SleepQuality] == [90, 75, 55, 30]


class TestSleepFormatting:
    def test_seven_and_a_half_hours(self):
        record = SleepRecord(
            date=DAY,
            total_duration=7.5 * HOUR,
            deep_sleep=1.5 * HOUR,
            rem_sleep=1.5 * HOUR,
            light_sleep=4.5 * HOUR,
            awake=0,
            bedtime=datetime(2026, 3, 3, 23, 0),
            wake_time=datetime(2026, 3, 4, 6, 30),
        )
        assert format_sleep_duration(record) == "7h 30m"
        assert sleep_total_hours(record) == 7.5

    def test_seconds_are_truncated(self):
        assert format_sleep_duration(_sleep(total_h=(6 * HOUR + 59 * 60 + 59) / HOUR)) == "6h 59m"


# ---------------------------------------------------------------------------
# Activity
# ---------------------------------------------------------------------------

class TestActivityScore:
    def test_all_goals_met_is_100(self):
        record = _activity(steps=10000, active_calories=500, exercise_minutes=30, stand_hours=12)
        assert activity_score(record) == 100

    def test_low_day_is_below_50(self):
        record = _activity(steps=2000, active_calories=100, exercise_minutes=5, stand_hours=4)
        # 6 + 5 + 6 + 4
        assert activity_score(record) == 21
        assert activity_score(record) < 50

    def test_zero_day_is_zero(self):
        record = _activity(steps=0, active_calories=0, exercise_minutes=0, stand_hours=0)
        assert activity_score(record) == 0

    def test_huge_values_are_capped(self):
        record = _activity(
            steps=10_000_000, active_calories=1e9, exercise_minutes=100_000, stand_hours=24
        )
        assert activity_score(record) == 100

    @pytest.mark.parametrize(
        "steps,stand,calories,minutes,expected",
        [
            (9999, 0, 0, 0, 29),       # 299970 // 10000
            (0, 11, 0, 0, 18),         # 220 // 12
            (0, 0, 499.9, 0, 19),      # int(19.996)
            (0, 0, 0, 29, 29),
            (334, 1, 25, 1, 1 + 1 + 1 + 1),
        ],
    )
    def test_components_truncate(self, steps, stand, calories, minutes, expected):
        record = _activity(
            steps=steps, active_calories=calories, exercise_minutes=minutes, stand_hours=stand
        )
        assert activity_score(record) == expected

    def test_each_component_capped_before_sum(self):
        # 30 (steps capped) + 0 + 0 + 0: overflow in one term does not spill over.
        record = _activity(steps=50000, active_calories=0, exercise_minutes=0, stand_hours=0)
        assert activity_score(record) == 30

    @pytest.mark.parametrize("steps", [0, 1, 5000, 10000, 10**6])
    @pytest.mark.parametrize("calories", [0, 250.5, 500, 10**5])
    def test_score_always_within_bounds(self, steps, calories):
        score = activity_score(_activity(steps=steps, active_calories=calories))
        assert 0 <= score <= 100


class TestActivityFormatting:
    def test_distance(self):
        record = _activity(distance=5234)
        assert distance_km(record) == pytest.approx(5.234)
        assert format_distance(record) == "5.2 km"

    def test_workout_minutes(self):
        workout = WorkoutSummary(
            workout_type="running",
            duration=2730,
            calories=410,
            start_time=datetime(2026, 3, 4, 7, 0),
            average_heart_rate=148,
        )
        assert format_minutes(workout.duration) == "45 min"


# ---------------------------------------------------------------------------
# Heart
# ---------------------------------------------------------------------------

class TestHRVStatus:
    @pytest.mark.parametrize(
        "hrv,expected",
        [
            (60, HRVStatus.EXCELLENT),
            (50, HRVStatus.EXCELLENT),
            (49.999, HRVStatus.GOOD),
            (35, HRVStatus.GOOD),
            (34.999, HRVStatus.FAIR),
            (20, HRVStatus.FAIR),
            (19.999, HRVStatus.LOW),
            (15, HRVStatus.LOW),
            (0, HRVStatus.LOW),
        ],
    )
    def test_thresholds(self, hrv, expected):
        assert hrv_status(hrv) == expected

    def test_missing_hrv_is_unknown(self):
        assert hrv_status(None) == HRVStatus.UNKNOWN
        assert hrv_status(_heart(hrv=None).hrv) == HRVStatus.UNKNOWN


class TestRestingHRStatus:
    @pytest.mark.parametrize(
        "bpm,expected",
        [
            (55, RestingHRStatus.ATHLETIC),
            (59.999, RestingHRStatus.ATHLETIC),
            (60, RestingHRStatus.EXCELLENT),
            (60.001, RestingHRStatus.EXCELLENT),
            (69.999, RestingHRStatus.EXCELLENT),
            (70, RestingHRStatus.GOOD),
            (75, RestingHRStatus.GOOD),
            (80, RestingHRStatus.AVERAGE),
            (85, RestingHRStatus.AVERAGE),
            (89.999, RestingHRStatus.AVERAGE),
            (90, RestingHRStatus.ELEVATED),
            (120, RestingHRStatus.ELEVATED),
        ],
    )
    def test_thresholds(self, bpm, expected):
        assert resting_hr_status(bpm) == expected


# ---------------------------------------------------------------------------
# Overall
# ---------------------------------------------------------------------------

class TestOverallDailyScore:
    def test_no_data_is_zero(self):
        assert overall_daily_score() == 0
        assert overall_score_label(0) == "Needs improvement"

    def test_mean_of_available_components(self):
        sleep = _sleep(8, deep_h=2, rem_h=2)                       # 90
        activity = _activity(steps=10000, active_calories=500,
                             exercise_minutes=30, stand_hours=12)   # 100
        heart = _heart(hrv=55)                                     # 90
        assert overall_daily_score(sleep, activity, heart) == 93

    def test_integer_mean_truncates(self):
        sleep = _sleep(8, deep_h=1.2, rem_h=1.2)                   # 75
        heart = _heart(hrv=None)                                   # 50
        assert overall_daily_score(sleep=sleep, heart=heart) == 62

    def test_single_component(self):
        assert overall_daily_score(activity=_activity(steps=2000, active_calories=100,
                                                      exercise_minutes=5, stand_hours=4)) == 21

    @pytest.mark.parametrize(
        "score,label",
        [
            (100, "Excellent"),
            (85, "Excellent"),
            (84, "Very good"),
            (70, "Very good"),
            (69, "Good"),
            (55, "Good"),
            (54, "Okay"),
            (40, "Okay"),
            (39, "Needs improvement"),
        ],
    )
    def test_labels(self, score, label):
        assert overall_score_label(score) == label
