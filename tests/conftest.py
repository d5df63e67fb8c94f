"""Shared test fixtures for Vitaly health core tests."""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path
from typing import Any

import pytest

# ---------------------------------------------------------------------------
# Test hermeticity
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _force_hermetic_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("VITALY_REFERENCE_PATH", raising=False)
    monkeypatch.delenv("VITALY_LOG_LEVEL", raising=False)

# Allow running tests without `pip install -e .` by making `src/` importable.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_SRC_DIR = _PROJECT_ROOT / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from vitaly.core.reference.loader import (  # noqa: E402
    default_catalog_path,
    load_reference_catalog,
)
from vitaly.core.reference.models import ReferenceCatalog  # noqa: E402
from vitaly.domains.health.domain_logic.metric_evaluator import MetricEvaluator  # noqa: E402

# Wednesday
TODAY = date(2026, 3, 4)

_COLORS = {
    "veryPoor": "E53935",
    "poor": "FB8C00",
    "fair": "FDD835",
    "good": "7CB342",
    "excellent": "43A047",
}


def make_ranges(*bounds: tuple[str, float, float]) -> list[dict[str, Any]]:
    """Build raw range dicts from (level, min, max) triples."""
    return [
        {
            "level": level,
            "min": lo,
            "max": hi,
            "label": f"{level} label",
            "color": _COLORS.get(level, "000000"),
            "comment": f"{level} comment",
        }
        for level, lo, hi in bounds
    ]


def make_reference_document(
    metrics: dict[str, dict[str, Any]] | None = None,
    version: str = "9.9.9",
) -> dict[str, Any]:
    """Create a raw reference document with an HRV table by default."""
    if metrics is None:
        metrics = {
            "hrv": {
                "name": "Heart Rate Variability",
                "unit": "ms",
                "description": "SDNN",
                "higherIsBetter": True,
                "ranges": make_ranges(
                    ("veryPoor", 0, 20),
                    ("poor", 20, 35),
                    ("fair", 35, 50),
                    ("good", 50, 70),
                    ("excellent", 70, 200),
                ),
            },
        }
    return {"version": version, "lastUpdated": "2026-01-01", "metrics": metrics}


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def bundled_catalog() -> ReferenceCatalog:
    """The reference catalog shipped with the package."""
    return load_reference_catalog(default_catalog_path())


@pytest.fixture
def hrv_catalog() -> ReferenceCatalog:
    """A catalog holding only the default HRV table."""
    return load_reference_catalog(make_reference_document())


@pytest.fixture
def evaluator(hrv_catalog: ReferenceCatalog) -> MetricEvaluator:
    return MetricEvaluator(hrv_catalog)


@pytest.fixture
def bundled_evaluator(bundled_catalog: ReferenceCatalog) -> MetricEvaluator:
    return MetricEvaluator(bundled_catalog)
