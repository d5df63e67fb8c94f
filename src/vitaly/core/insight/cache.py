"""Input fingerprinting and cache validity for generated insights.

The insight service caches generated text per request. An entry is reusable
only while both hold:

* it was produced in the same calendar day and hour as the current request;
* the fingerprint of the input data (evaluations, scores, verdicts) is unchanged.

Fingerprints are SHA-256 digests of canonical JSON, so identical inputs always
hash identically regardless of dict ordering.
"""

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

logger = logging.getLogger(__name__)


def fingerprint(data: Any) -> str:
    """SHA-256 hash of canonical JSON.

    Raises:
        TypeError: If ``data`` is not JSON-serializable.
    """
    canonical = json.dumps(data, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode()).hexdigest()


def same_hour(a: datetime, b: datetime) -> bool:
    """True when both timestamps fall in the same calendar date and hour."""
    return a.date() == b.date() and a.hour == b.hour


@dataclass(frozen=True)
class InsightCacheEntry:
    """A cached insight and the fingerprint of the data it was generated from."""

    produced_at: datetime
    input_hash: str
    payload: dict[str, Any] = field(default_factory=dict)

    def is_valid(self, now: datetime, input_hash: str) -> bool:
        if not same_hour(self.produced_at, now):
            logger.debug("Insight cache entry from %s expired at %s", self.produced_at, now)
            return False
        if self.input_hash != input_hash:
            logger.debug("Insight cache entry stale: input fingerprint changed")
            return False
        return True
