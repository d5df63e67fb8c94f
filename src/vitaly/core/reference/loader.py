"""Reference catalog loader — reads and validates range tables from disk.

The source document is keyed ``metricKey -> MetricReference`` and stamped
with ``version``/``lastUpdated``::

    version: "1.2.0"
    lastUpdated: "2025-01-15"
    metrics:
      hrv:
        name: Heart Rate Variability
        unit: ms
        description: ...
        higherIsBetter: true
        ranges:
          - {level: veryPoor, min: 0, max: 20, label: ..., color: E53935, comment: ...}

JSON documents load too (``yaml.safe_load`` accepts them). Any malformed
entry, or a range table that is unsorted, overlapping, empty, has
``min >= max`` or mixes up its level ordering, fails the whole load with
:class:`ConfigError`.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any, Mapping

import yaml

from vitaly.core.reference.models import (
    HealthStatus,
    MetricKey,
    MetricRange,
    MetricReference,
    ReferenceCatalog,
)

logger = logging.getLogger(__name__)

_DATA_DIR = Path(__file__).resolve().parent / "data"
_KNOWN_KEYS = {k.value for k in MetricKey}


class ConfigError(Exception):
    """Raised when a reference range source is missing or malformed."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or [message]


def default_catalog_path() -> Path:
    """Path of the reference catalog bundled with the package."""
    return _DATA_DIR / "health_reference_values.yaml"


def load_reference_catalog(source: str | Path | Mapping[str, Any]) -> ReferenceCatalog:
    """Load a reference catalog from a file path or a parsed mapping.

    Raises:
        ConfigError: If the source is unreadable, malformed, or any metric's
            ranges violate the ordering invariants.
    """
    if isinstance(source, Mapping):
        data: Any = source
        origin = "<mapping>"
    else:
        data = _read_document(Path(source))
        origin = str(source)

    catalog, errors = _build_catalog(data)
    if catalog is None:
        for err in errors:
            logger.error("%s: %s", origin, err)
        raise ConfigError(
            f"Invalid reference catalog {origin}: {errors[0]}"
            + (f" (and {len(errors) - 1} more)" if len(errors) > 1 else ""),
            errors,
        )

    logger.info(
        "Loaded reference catalog v%s (%d metrics) from %s",
        catalog.version,
        len(catalog),
        origin,
    )
    return catalog


def validate_reference_file(path: str | Path) -> tuple[ReferenceCatalog | None, list[str]]:
    """Validate a reference file, collecting every problem instead of raising.

    Returns: (catalog_or_none, errors)
    """
    try:
        data = _read_document(Path(path))
    except ConfigError as exc:
        return None, list(exc.errors)
    catalog, errors = _build_catalog(data)
    return (None if errors else catalog), errors


def range_errors(metric_key: str, ranges: list[MetricRange]) -> list[str]:
    """Check the ordering invariants of one metric's range table."""
    errors: list[str] = []
    if not ranges:
        return [f"Metric '{metric_key}' has no ranges"]

    for i, rng in enumerate(ranges):
        if rng.min >= rng.max:
            errors.append(
                f"Metric '{metric_key}' range {i} has min >= max ({rng.min} >= {rng.max})"
            )

    for i in range(1, len(ranges)):
        prev, cur = ranges[i - 1], ranges[i]
        if cur.min < prev.min:
            errors.append(f"Metric '{metric_key}' ranges are not sorted by min at index {i}")
        elif cur.min < prev.max:
            errors.append(
                f"Metric '{metric_key}' range {i} overlaps range {i - 1} "
                f"([{cur.min}, {cur.max}) vs [{prev.min}, {prev.max}))"
            )

    steps = [b.level.rank - a.level.rank for a, b in zip(ranges, ranges[1:])]
    if any(s > 0 for s in steps) and any(s < 0 for s in steps):
        errors.append(f"Metric '{metric_key}' range levels are not monotonic")

    return errors


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------

def _read_document(path: Path) -> Any:
    if not path.is_file():
        raise ConfigError(f"Reference source not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f)
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Could not read reference source {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Could not parse reference source {path}: {exc}") from exc


def _build_catalog(data: Any) -> tuple[ReferenceCatalog | None, list[str]]:
    if not isinstance(data, Mapping):
        return None, ["Reference document must be a mapping"]

    errors: list[str] = []
    for field_name in ("version", "lastUpdated", "metrics"):
        if field_name not in data:
            errors.append(f"Missing required field '{field_name}'")
    if errors:
        return None, errors

    metrics_data = data["metrics"]
    if not isinstance(metrics_data, Mapping):
        return None, ["'metrics' must be a mapping of metric key to reference"]

    metrics: dict[str, MetricReference] = {}
    for key, entry in metrics_data.items():
        key = str(key)
        try:
            reference = _parse_reference(key, entry)
        except (KeyError, TypeError, ValueError) as exc:
            errors.append(f"Metric '{key}' is malformed: {exc}")
            continue

        problems = range_errors(key, list(reference.ranges))
        if problems:
            errors.extend(problems)
            continue

        if key not in _KNOWN_KEYS:
            logger.warning("Reference metric '%s' is not a known metric key", key)
        _check_direction(key, reference)
        metrics[key] = reference

    if errors:
        return None, errors

    return (
        ReferenceCatalog(
            version=str(data["version"]),
            last_updated=str(data["lastUpdated"]),
            metrics=metrics,
        ),
        [],
    )


def _parse_reference(key: str, entry: Any) -> MetricReference:
    if not isinstance(entry, Mapping):
        raise TypeError("expected a mapping")
    ranges_data = entry.get("ranges")
    if not isinstance(ranges_data, list):
        raise TypeError("'ranges' must be a list")

    return MetricReference(
        name=str(entry["name"]),
        unit=str(entry.get("unit", "")),
        description=str(entry.get("description", "")).strip(),
        higher_is_better=bool(entry.get("higherIsBetter", True)),
        ranges=tuple(_parse_range(r) for r in ranges_data),
    )


def _parse_range(data: Any) -> MetricRange:
    if not isinstance(data, Mapping):
        raise TypeError("each range must be a mapping")
    min_val = data["min"]
    max_val = data["max"]
    if isinstance(min_val, bool) or isinstance(max_val, bool):
        raise TypeError("range bounds must be numbers")
    min_val, max_val = float(min_val), float(max_val)
    if math.isnan(min_val) or math.isnan(max_val):
        raise ValueError("range bounds must not be NaN")
    return MetricRange(
        level=HealthStatus(data["level"]),
        min=min_val,
        max=max_val,
        label=str(data.get("label", "")),
        color=str(data.get("color", "")).lstrip("#"),
        comment=str(data.get("comment", "")),
    )


def _check_direction(key: str, reference: MetricReference) -> None:
    first = reference.ranges[0].level.rank
    last = reference.ranges[-1].level.rank
    if first == last:
        return
    ascending = last > first
    if ascending != reference.higher_is_better:
        logger.warning(
            "Metric '%s' levels run %s but higherIsBetter=%s",
            key,
            "worst->best" if ascending else "best->worst",
            reference.higher_is_better,
        )
