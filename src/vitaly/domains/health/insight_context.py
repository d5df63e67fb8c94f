"""Structured context handed to the insight-generation service.

Gathers the outputs of the evaluator, the composite scores and the treatment
engine into one plain, JSON-ready dict. Floats are rounded so the context (and
its fingerprint) is stable for identical inputs.
"""

from __future__ import annotations

from typing import Any, Mapping

from vitaly.core.insight.cache import fingerprint
from vitaly.domains.health.domain_logic.metric_evaluator import MetricEvaluation
from vitaly.domains.health.domain_logic.score_calculators import (
    activity_score,
    format_sleep_duration,
    hrv_status,
    overall_daily_score,
    overall_score_label,
    resting_hr_status,
    sleep_quality,
    sleep_stage_shares,
)
from vitaly.domains.health.domain_logic.score_models import (
    ActivityRecord,
    HeartRecord,
    SleepRecord,
)
from vitaly.domains.health.domain_logic.treatment_progression import TreatmentProgress


def _round_floats(obj: Any, ndigits: int = 2) -> Any:
    if isinstance(obj, float):
        return round(obj, ndigits)
    if isinstance(obj, dict):
        return {k: _round_floats(v, ndigits=ndigits) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_round_floats(v, ndigits=ndigits) for v in obj]
    return obj


def build_insight_context(
    *,
    sleep: SleepRecord | None = None,
    activity: ActivityRecord | None = None,
    heart: HeartRecord | None = None,
    evaluations: Mapping[str, MetricEvaluation] | None = None,
    treatment: TreatmentProgress | None = None,
) -> dict[str, Any]:
    """Build the context dict from whatever data is available today."""
    context: dict[str, Any] = {}

    if sleep is not None:
        deep, rem = sleep_stage_shares(sleep)
        context["sleep"] = {
            "date": sleep.date.isoformat(),
            "duration": format_sleep_duration(sleep),
            "quality": sleep_quality(sleep).value,
            "deep_share": deep,
            "rem_share": rem,
        }

    if activity is not None:
        context["activity"] = {
            "date": activity.date.isoformat(),
            "steps": activity.steps,
            "exercise_minutes": activity.exercise_minutes,
            "score": activity_score(activity),
        }

    if heart is not None:
        context["heart"] = {
            "date": heart.date.isoformat(),
            "resting_heart_rate_bpm": heart.resting_heart_rate,
            "resting_hr_status": resting_hr_status(heart.resting_heart_rate).value,
            "hrv_ms": heart.hrv,
            "hrv_status": hrv_status(heart.hrv).value,
        }

    if sleep is not None or activity is not None or heart is not None:
        score = overall_daily_score(sleep, activity, heart)
        context["overall"] = {"score": score, "label": overall_score_label(score)}

    if evaluations:
        context["evaluations"] = {
            getattr(key, "value", key): evaluations[key].as_dict()
            for key in sorted(evaluations)
        }

    if treatment is not None:
        context["treatment"] = treatment.as_dict()

    return _round_floats(context)


def context_fingerprint(context: Mapping[str, Any]) -> str:
    """Fingerprint used as the insight cache key for this context."""
    return fingerprint(dict(context))
