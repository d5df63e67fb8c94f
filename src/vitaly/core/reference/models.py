"""Data models for versioned health reference ranges."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class HealthStatus(str, Enum):
    """Categorical health status attached to a reference range."""

    VERY_POOR = "veryPoor"
    POOR = "poor"
    FAIR = "fair"
    GOOD = "good"
    EXCELLENT = "excellent"

    @property
    def rank(self) -> int:
        """Severity rank: 0 (very poor) .. 4 (excellent)."""
        return _STATUS_RANK[self]


_STATUS_RANK = {
    HealthStatus.VERY_POOR: 0,
    HealthStatus.POOR: 1,
    HealthStatus.FAIR: 2,
    HealthStatus.GOOD: 3,
    HealthStatus.EXCELLENT: 4,
}


class MetricKey(str, Enum):
    """Known metric keys in the reference catalog."""

    SLEEP = "sleep"
    STEPS = "steps"
    RESTING_HEART_RATE = "restingHeartRate"
    HRV = "hrv"
    RESPIRATORY_RATE = "respiratoryRate"
    OXYGEN_SATURATION = "oxygenSaturation"
    VO2_MAX = "vo2Max"
    BODY_FAT_PERCENTAGE = "bodyFatPercentage"
    ACTIVE_CALORIES = "activeCalories"
    EXERCISE_MINUTES = "exerciseMinutes"
    DEEP_SLEEP_PERCENTAGE = "deepSleepPercentage"
    REM_SLEEP_PERCENTAGE = "remSleepPercentage"


@dataclass(frozen=True)
class MetricRange:
    """A half-open interval ``[min, max)`` tagged with a status level."""

    level: HealthStatus
    min: float
    max: float
    label: str
    color: str     # hex, no leading '#'
    comment: str

    def contains(self, value: float) -> bool:
        return self.min <= value < self.max


@dataclass(frozen=True)
class MetricReference:
    """Reference definition for one metric key."""

    name: str
    unit: str
    description: str
    higher_is_better: bool
    ranges: tuple[MetricRange, ...] = ()


@dataclass(frozen=True)
class ReferenceCatalog:
    """An immutable, versioned table of metric references.

    Built once at startup by :func:`vitaly.core.reference.loader.load_reference_catalog`
    and shared read-only afterwards.
    """

    version: str
    last_updated: str
    metrics: Mapping[str, MetricReference] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Freeze the mapping so the catalog can be shared across threads.
        object.__setattr__(self, "metrics", MappingProxyType(dict(self.metrics)))

    def lookup(self, key: MetricKey | str) -> MetricReference | None:
        """Look up a metric reference, or ``None`` when the key is unknown."""
        if isinstance(key, MetricKey):
            key = key.value
        return self.metrics.get(key)

    def keys(self) -> list[str]:
        return sorted(self.metrics)

    def __contains__(self, key: object) -> bool:
        if isinstance(key, MetricKey):
            key = key.value
        return key in self.metrics

    def __len__(self) -> int:
        return len(self.metrics)

    def __hash__(self) -> int:
        return hash((self.version, self.last_updated))
