"""Range-table metric classification.

Maps a single raw reading (resting heart rate, HRV, steps, ...) onto the
matching reference range and reports its status, presentation text and local
percentile (position of the value inside its range, not a population
percentile). Unknown metric keys never raise; they yield
:data:`UNKNOWN_EVALUATION`.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass

from vitaly.core.reference.models import (
    HealthStatus,
    MetricKey,
    MetricRange,
    MetricReference,
    ReferenceCatalog,
)

logger = logging.getLogger(__name__)

NEUTRAL_COLOR = "9E9E9E"


@dataclass(frozen=True)
class MetricEvaluation:
    """Classification of one reading against its reference ranges."""

    status: HealthStatus
    label: str
    comment: str
    color: str
    percentile: float   # 0-100, 50 for degenerate/unknown

    def as_dict(self) -> dict:
        data = asdict(self)
        data["status"] = self.status.value
        return data


UNKNOWN_EVALUATION = MetricEvaluation(
    status=HealthStatus.FAIR,
    label="Unknown",
    comment="No data available",
    color=NEUTRAL_COLOR,
    percentile=50.0,
)


class MetricEvaluator:
    """Classifies readings against an injected, immutable reference catalog.

    Usage::

        evaluator = MetricEvaluator(catalog)
        evaluator.evaluate(MetricKey.HRV, 48.0)
        evaluator.evaluate_steps(8200)
    """

    def __init__(self, catalog: ReferenceCatalog) -> None:
        self._catalog = catalog

    @property
    def catalog(self) -> ReferenceCatalog:
        return self._catalog

    def evaluate(self, metric_key: MetricKey | str, value: float) -> MetricEvaluation:
        """Classify ``value`` for ``metric_key``.

        Returns the neutral :data:`UNKNOWN_EVALUATION` for unknown keys and for
        values falling in a gap between ranges.
        """
        metric = self._catalog.lookup(metric_key)
        if metric is None:
            logger.debug("No reference for metric %r; returning neutral evaluation", metric_key)
            return UNKNOWN_EVALUATION
        return _classify(metric, float(value))

    def metric_info(self, metric_key: MetricKey | str) -> MetricReference | None:
        return self._catalog.lookup(metric_key)

    # ------------------------------------------------------------------
    # Named bindings
    # ------------------------------------------------------------------

    def evaluate_sleep(self, hours: float) -> MetricEvaluation:
        return self.evaluate(MetricKey.SLEEP, hours)

    def evaluate_steps(self, steps: int) -> MetricEvaluation:
        return self.evaluate(MetricKey.STEPS, steps)

    def evaluate_resting_heart_rate(self, bpm: float) -> MetricEvaluation:
        return self.evaluate(MetricKey.RESTING_HEART_RATE, bpm)

    def evaluate_hrv(self, ms: float) -> MetricEvaluation:
        return self.evaluate(MetricKey.HRV, ms)

    def evaluate_respiratory_rate(self, rpm: float) -> MetricEvaluation:
        return self.evaluate(MetricKey.RESPIRATORY_RATE, rpm)

    def evaluate_oxygen_saturation(self, percent: float) -> MetricEvaluation:
        return self.evaluate(MetricKey.OXYGEN_SATURATION, percent)

    def evaluate_vo2_max(self, value: float) -> MetricEvaluation:
        return self.evaluate(MetricKey.VO2_MAX, value)

    def evaluate_body_fat(self, percent: float) -> MetricEvaluation:
        return self.evaluate(MetricKey.BODY_FAT_PERCENTAGE, percent)

    def evaluate_active_calories(self, kcal: float) -> MetricEvaluation:
        return self.evaluate(MetricKey.ACTIVE_CALORIES, kcal)

    def evaluate_exercise_minutes(self, minutes: int) -> MetricEvaluation:
        return self.evaluate(MetricKey.EXERCISE_MINUTES, minutes)

    def evaluate_deep_sleep(self, percentage: float) -> MetricEvaluation:
        return self.evaluate(MetricKey.DEEP_SLEEP_PERCENTAGE, percentage)

    def evaluate_rem_sleep(self, percentage: float) -> MetricEvaluation:
        return self.evaluate(MetricKey.REM_SLEEP_PERCENTAGE, percentage)


def _classify(metric: MetricReference, value: float) -> MetricEvaluation:
    ranges = metric.ranges
    if not ranges:
        return UNKNOWN_EVALUATION

    for rng in ranges:
        if rng.contains(value):
            return _from_range(rng, _percentile(value, rng))

    # Outside every range: clamp to the extreme bucket rather than extrapolate.
    if value < ranges[0].min:
        return _from_range(ranges[0], 0.0)
    if value >= ranges[-1].max:
        return _from_range(ranges[-1], 100.0)

    return UNKNOWN_EVALUATION


def _percentile(value: float, rng: MetricRange) -> float:
    size = rng.max - rng.min
    if size <= 0:
        return 50.0
    return max(0.0, min(100.0, (value - rng.min) / size * 100))


def _from_range(rng: MetricRange, percentile: float) -> MetricEvaluation:
    return MetricEvaluation(
        status=rng.level,
        label=rng.label,
        comment=rng.comment,
        color=rng.color,
        percentile=percentile,
    )
