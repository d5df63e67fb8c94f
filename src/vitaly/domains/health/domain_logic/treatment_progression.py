"""Dose-escalation state machine and weight-loss progress for GLP-1 treatments.

States are the entries of the medication's dose schedule; the treatment only
ever moves forward along it, and the last entry is terminal. The engine
reports eligibility for the next step. Escalation itself is an explicit
caller action (:func:`escalate_dose`) whose result the caller persists.

All date arithmetic takes ``today`` explicitly and works on calendar dates
(ISO weekdays, Monday=1), so results never depend on the ambient clock,
timezone or locale. Datetimes passed in are reduced to their date.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Mapping, Sequence

from vitaly.domains.health.domain_logic.treatment_models import (
    GLP1Treatment,
    MedicationLog,
    PaceVerdict,
    WeightLossStats,
)

logger = logging.getLogger(__name__)

INJECTION_INTERVAL_DAYS = 7


class InvariantViolation(Exception):
    """A treatment record breaks an invariant upstream code should guarantee."""


# ---------------------------------------------------------------------------
# Calendar helpers
# ---------------------------------------------------------------------------

def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def weeks_between(start: date | datetime, today: date | datetime) -> int:
    """Whole weeks from ``start`` to ``today``, floored, never negative."""
    days = (_as_date(today) - _as_date(start)).days
    return max(0, days // 7)


# ---------------------------------------------------------------------------
# Dose escalation
# ---------------------------------------------------------------------------

def weeks_on_current_dose(treatment: GLP1Treatment, today: date | datetime) -> int:
    return weeks_between(treatment.current_dose_start_date, today)


def weeks_on_treatment(treatment: GLP1Treatment, today: date | datetime) -> int:
    return weeks_between(treatment.start_date, today)


def current_dose_index(treatment: GLP1Treatment) -> int:
    """Position of the current dose in the medication's schedule.

    Raises:
        InvariantViolation: If the dose is not part of the schedule.
    """
    schedule = treatment.medication.spec.dose_schedule
    try:
        return schedule.index(treatment.current_dose)
    except ValueError:
        raise InvariantViolation(
            f"Dose {treatment.current_dose} is not in the "
            f"{treatment.medication.value} schedule {list(schedule)}"
        ) from None


def next_dose(treatment: GLP1Treatment) -> float | None:
    """The next dose in the schedule, or None at the maximum dose."""
    schedule = treatment.medication.spec.dose_schedule
    index = current_dose_index(treatment) + 1
    if index >= len(schedule):
        return None
    return schedule[index]


def is_at_max_dose(treatment: GLP1Treatment) -> bool:
    return current_dose_index(treatment) == len(treatment.medication.spec.dose_schedule) - 1


def is_ready_for_dose_increase(treatment: GLP1Treatment, today: date | datetime) -> bool:
    """Eligible when the current dose has been held long enough and a next dose exists."""
    return (
        weeks_on_current_dose(treatment, today) >= treatment.medication.spec.weeks_per_dose
        and next_dose(treatment) is not None
    )


def escalate_dose(treatment: GLP1Treatment, today: date | datetime) -> GLP1Treatment:
    """Return a copy of ``treatment`` moved to the next dose, starting ``today``.

    Eligibility is not enforced here; callers check
    :func:`is_ready_for_dose_increase` first when they need to.

    Raises:
        InvariantViolation: At the maximum dose or for a dose off the schedule.
    """
    upcoming = next_dose(treatment)
    if upcoming is None:
        raise InvariantViolation(
            f"{treatment.medication.value} is already at its maximum dose "
            f"({treatment.current_dose} mg)"
        )
    logger.info(
        "Escalating %s from %s to %s mg",
        treatment.medication.value,
        treatment.current_dose,
        upcoming,
    )
    return replace(treatment, current_dose=upcoming, current_dose_start_date=_as_date(today))


# ---------------------------------------------------------------------------
# Injection schedule
# ---------------------------------------------------------------------------

def next_injection_date(treatment: GLP1Treatment, today: date | datetime) -> date | None:
    """Next preferred injection day strictly after ``today``.

    None for daily medications or when no preferred day is set.
    """
    if not treatment.medication.spec.is_weekly:
        return None
    preferred = treatment.preferred_injection_day
    if preferred is None:
        return None
    if not 1 <= preferred <= 7:
        raise InvariantViolation(f"Preferred injection day must be 1-7, got {preferred}")

    today = _as_date(today)
    offset = preferred - today.isoweekday()
    if offset <= 0:
        offset += 7
    return today + timedelta(days=offset)


def last_injection_date(logs: Iterable[MedicationLog]) -> date | None:
    """Most recent non-skipped injection date."""
    taken = [log.date for log in logs if not log.skipped]
    return max(taken) if taken else None


def days_since_last_injection(
    logs: Iterable[MedicationLog], today: date | datetime
) -> int | None:
    last = last_injection_date(logs)
    if last is None:
        return None
    return (_as_date(today) - last).days


def is_injection_due(
    treatment: GLP1Treatment,
    logs: Iterable[MedicationLog],
    today: date | datetime,
) -> bool:
    """Weekly medications only: due with no logged injection or after 7+ days."""
    if not treatment.medication.spec.is_weekly:
        return False
    days = days_since_last_injection(logs, today)
    if days is None:
        return True
    return days >= INJECTION_INTERVAL_DAYS


# ---------------------------------------------------------------------------
# Weight loss
# ---------------------------------------------------------------------------

def weight_loss_stats(
    treatment: GLP1Treatment,
    current_weight: float,
    today: date | datetime,
) -> WeightLossStats:
    return WeightLossStats(
        start_weight=treatment.start_weight,
        current_weight=current_weight,
        target_weight=treatment.target_weight,
        weeks_on_treatment=weeks_on_treatment(treatment, today),
    )


def classify_pace(stats: WeightLossStats) -> PaceVerdict:
    return stats.pace


# ---------------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------------

def validate_treatment(treatment: GLP1Treatment) -> None:
    """Raise :class:`InvariantViolation` for records upstream should never produce."""
    current_dose_index(treatment)
    if treatment.start_weight <= 0:
        raise InvariantViolation(
            f"Treatment start weight must be positive, got {treatment.start_weight}"
        )


@dataclass(frozen=True)
class TreatmentProgress:
    """Derived view of one treatment on a given day."""

    medication: str
    current_dose: float
    dose_index: int
    next_dose: float | None
    weeks_on_current_dose: int
    weeks_on_treatment: int
    is_ready_for_dose_increase: bool
    is_at_max_dose: bool
    next_injection_date: date | None
    is_injection_due: bool
    weight: WeightLossStats | None = None

    @property
    def pace(self) -> PaceVerdict | None:
        return self.weight.pace if self.weight is not None else None

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "medication": self.medication,
            "current_dose": self.current_dose,
            "dose_index": self.dose_index,
            "next_dose": self.next_dose,
            "weeks_on_current_dose": self.weeks_on_current_dose,
            "weeks_on_treatment": self.weeks_on_treatment,
            "is_ready_for_dose_increase": self.is_ready_for_dose_increase,
            "is_at_max_dose": self.is_at_max_dose,
            "next_injection_date": (
                self.next_injection_date.isoformat() if self.next_injection_date else None
            ),
            "is_injection_due": self.is_injection_due,
        }
        if self.weight is not None:
            data["weight"] = {
                "total_lost_kg": self.weight.total_lost,
                "percentage_lost": self.weight.percentage_lost,
                "weekly_average_kg": self.weight.weekly_average,
                "remaining_to_target_kg": self.weight.remaining_to_target,
                "progress_to_target": self.weight.progress_to_target,
                "pace": self.weight.pace.value,
            }
        return data


def summarize_treatment(
    treatment: GLP1Treatment,
    today: date | datetime,
    *,
    current_weight: float | None = None,
    logs: Sequence[MedicationLog] = (),
) -> TreatmentProgress:
    """Compute the full progress view for one treatment.

    Raises:
        InvariantViolation: If the record is inconsistent (see
            :func:`validate_treatment`).
    """
    validate_treatment(treatment)
    upcoming = next_dose(treatment)
    return TreatmentProgress(
        medication=treatment.medication.value,
        current_dose=treatment.current_dose,
        dose_index=current_dose_index(treatment),
        next_dose=upcoming,
        weeks_on_current_dose=weeks_on_current_dose(treatment, today),
        weeks_on_treatment=weeks_on_treatment(treatment, today),
        is_ready_for_dose_increase=is_ready_for_dose_increase(treatment, today),
        is_at_max_dose=upcoming is None,
        next_injection_date=next_injection_date(treatment, today),
        is_injection_due=is_injection_due(treatment, logs, today),
        weight=(
            weight_loss_stats(treatment, current_weight, today)
            if current_weight is not None
            else None
        ),
    )


@dataclass
class TreatmentBatchResult:
    """Progress for every valid record, plus the records that failed validation."""

    progress: list[TreatmentProgress] = field(default_factory=list)
    failures: list[tuple[GLP1Treatment, InvariantViolation]] = field(default_factory=list)


def summarize_treatments(
    treatments: Iterable[GLP1Treatment],
    today: date | datetime,
    *,
    current_weights: Mapping[str, float] | None = None,
    logs: Mapping[str, Sequence[MedicationLog]] | None = None,
) -> TreatmentBatchResult:
    """Summarize many treatments; a broken record is reported, not fatal.

    ``current_weights`` and ``logs`` are keyed by treatment id. Records without
    an id get neither a weigh-in nor injection logs.
    """
    current_weights = current_weights or {}
    logs = logs or {}
    result = TreatmentBatchResult()
    for treatment in treatments:
        try:
            result.progress.append(
                summarize_treatment(
                    treatment,
                    today,
                    current_weight=current_weights.get(treatment.id) if treatment.id else None,
                    logs=logs.get(treatment.id, ()) if treatment.id else (),
                )
            )
        except InvariantViolation as exc:
            logger.exception("Skipping inconsistent treatment %r", treatment.id)
            result.failures.append((treatment, exc))
    return result
