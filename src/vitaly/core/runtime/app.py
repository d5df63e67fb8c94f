"""Vitaly health core — application factory.

This module provides:
- create_core() to build the long-lived, read-only pieces once at process start
- configure_logging() for hosts that want the configured log level applied
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from vitaly.core.config.settings import Settings, get_settings
from vitaly.core.reference.loader import default_catalog_path, load_reference_catalog
from vitaly.core.reference.models import ReferenceCatalog
from vitaly.domains.health.domain_logic.metric_evaluator import MetricEvaluator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HealthCore:
    """Process-wide, immutable services. Safe to share across threads."""

    catalog: ReferenceCatalog
    evaluator: MetricEvaluator


def configure_logging(settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    logging.basicConfig(level=getattr(logging, settings.vitaly_log_level.upper(), logging.INFO))


def create_core(
    *,
    settings: Settings | None = None,
    catalog_override: ReferenceCatalog | None = None,
) -> HealthCore:
    """Load the reference catalog and wire the evaluator.

    Raises:
        ConfigError: If the configured reference source is missing or invalid.
            There is no fallback to the bundled catalog in that case.
    """
    settings = settings or get_settings()

    if catalog_override is not None:
        catalog = catalog_override
    else:
        path = (
            Path(settings.vitaly_reference_path).expanduser()
            if settings.vitaly_reference_path
            else default_catalog_path()
        )
        catalog = load_reference_catalog(path)

    logger.info("Health core ready (reference catalog v%s)", catalog.version)
    return HealthCore(catalog=catalog, evaluator=MetricEvaluator(catalog))
