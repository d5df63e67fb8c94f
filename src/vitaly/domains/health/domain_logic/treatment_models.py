"""GLP-1 treatment records, built-in medication specs, and weight-loss stats."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum


# ---------------------------------------------------------------------------
# Medications
# ---------------------------------------------------------------------------

class Medication(str, Enum):
    OZEMPIC = "ozempic"
    WEGOVY = "wegovy"
    MOUNJARO = "mounjaro"
    SAXENDA = "saxenda"
    RYBELSUS = "rybelsus"

    @property
    def spec(self) -> MedicationSpec:
        return MEDICATION_SPECS[self]


@dataclass(frozen=True)
class MedicationSpec:
    """Fixed per-medication constants. ``dose_schedule`` is strictly increasing (mg)."""

    display_name: str
    manufacturer: str
    active_ingredient: str
    dose_schedule: tuple[float, ...]
    weeks_per_dose: int
    is_weekly: bool
    unit: str = "mg"

    def __post_init__(self) -> None:
        if not self.dose_schedule:
            raise ValueError(f"{self.display_name}: dose schedule must not be empty")
        if any(b <= a for a, b in zip(self.dose_schedule, self.dose_schedule[1:])):
            raise ValueError(f"{self.display_name}: dose schedule must be strictly increasing")


MEDICATION_SPECS: dict[Medication, MedicationSpec] = {
    Medication.OZEMPIC: MedicationSpec(
        display_name="Ozempic",
        manufacturer="Novo Nordisk",
        active_ingredient="Semaglutide",
        dose_schedule=(0.25, 0.5, 1.0, 2.0),
        weeks_per_dose=4,
        is_weekly=True,
    ),
    Medication.WEGOVY: MedicationSpec(
        display_name="Wegovy",
        manufacturer="Novo Nordisk",
        active_ingredient="Semaglutide",
        dose_schedule=(0.25, 0.5, 1.0, 1.7, 2.4),
        weeks_per_dose=4,
        is_weekly=True,
    ),
    Medication.MOUNJARO: MedicationSpec(
        display_name="Mounjaro",
        manufacturer="Eli Lilly",
        active_ingredient="Tirzepatide",
        dose_schedule=(2.5, 5.0, 7.5, 10.0, 12.5, 15.0),
        weeks_per_dose=4,
        is_weekly=True,
    ),
    Medication.SAXENDA: MedicationSpec(
        display_name="Saxenda",
        manufacturer="Novo Nordisk",
        active_ingredient="Liraglutide",
        dose_schedule=(0.6, 1.2, 1.8, 2.4, 3.0),
        weeks_per_dose=1,
        is_weekly=False,
    ),
    Medication.RYBELSUS: MedicationSpec(
        display_name="Rybelsus",
        manufacturer="Novo Nordisk",
        active_ingredient="Semaglutide",
        dose_schedule=(3.0, 7.0, 14.0),
        weeks_per_dose=4,
        is_weekly=False,
    ),
}


# ---------------------------------------------------------------------------
# Treatment and logs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GLP1Treatment:
    """A user's current GLP-1 treatment.

    ``current_dose`` must be a member of the medication's dose schedule, and
    ``current_dose_start_date`` resets whenever the dose changes.
    """

    medication: Medication
    start_date: date
    start_weight: float             # kg
    current_dose: float             # mg
    current_dose_start_date: date
    target_weight: float | None = None
    preferred_injection_day: int | None = None   # 1-7, Monday-Sunday
    preferred_injection_hour: int = 9
    preferred_injection_minute: int = 0
    notifications_enabled: bool = True
    notes: str | None = None
    is_active: bool = True
    id: str = ""


class InjectionSite(str, Enum):
    ABDOMEN = "abdomen"
    THIGH = "thigh"
    UPPER_ARM = "upper_arm"


@dataclass(frozen=True)
class MedicationLog:
    date: date
    dose: float
    medication: Medication
    injection_site: InjectionSite | None = None
    notes: str | None = None
    skipped: bool = False
    skip_reason: str | None = None
    id: str = ""


@dataclass(frozen=True)
class SideEffectLog:
    """Daily side-effect check-in. Scores are 1-10."""

    date: date
    nausea: int
    appetite: int                   # 1 = no appetite, 10 = very hungry
    energy: int
    constipation: int | None = None
    diarrhea: int | None = None
    headache: int | None = None
    fatigue: int | None = None
    notes: str | None = None
    id: str = ""

    @property
    def overall_wellbeing(self) -> float:
        """Mean of energy and the inverted symptom scores (non-positive terms dropped)."""
        scores = [
            10 - self.nausea,
            self.energy,
            10 - (self.constipation or 0),
            10 - (self.diarrhea or 0),
            10 - (self.headache or 0),
            10 - (self.fatigue or 0),
        ]
        scores = [s for s in scores if s > 0]
        if not scores:
            return 5.0
        return sum(scores) / len(scores)


@dataclass(frozen=True)
class BodyComposition:
    date: date
    weight: float                   # kg
    body_fat_percentage: float | None = None
    muscle_mass: float | None = None
    bone_mass: float | None = None
    water_percentage: float | None = None
    visceral_fat: int | None = None
    metabolic_age: int | None = None
    bmi: float | None = None
    id: str = ""

    @property
    def lean_mass(self) -> float | None:
        if self.body_fat_percentage is None:
            return None
        return self.weight * (1 - self.body_fat_percentage / 100)

    @property
    def fat_mass(self) -> float | None:
        if self.body_fat_percentage is None:
            return None
        return self.weight * (self.body_fat_percentage / 100)


# ---------------------------------------------------------------------------
# Weight-loss trend
# ---------------------------------------------------------------------------

TOO_FAST_KG_PER_WEEK = 1.0
TOO_SLOW_KG_PER_WEEK = 0.25
TOO_SLOW_MIN_WEEKS = 4


class PaceVerdict(str, Enum):
    TOO_FAST = "too_fast"
    TOO_SLOW = "too_slow"
    ON_TRACK = "on_track"

    @property
    def message(self) -> str:
        return _PACE_MESSAGES[self]


_PACE_MESSAGES = {
    PaceVerdict.TOO_FAST: "Weight loss is rapid - consider consulting your doctor",
    PaceVerdict.TOO_SLOW: "Weight loss is slow - dose adjustment may help",
    PaceVerdict.ON_TRACK: "Weight loss is on track",
}


@dataclass(frozen=True)
class WeightLossStats:
    """Read-only projection of a treatment plus the latest weigh-in."""

    start_weight: float
    current_weight: float
    target_weight: float | None
    weeks_on_treatment: int

    @property
    def total_lost(self) -> float:
        return self.start_weight - self.current_weight

    @property
    def percentage_lost(self) -> float:
        if self.start_weight <= 0:
            return 0.0
        return self.total_lost / self.start_weight * 100

    @property
    def weekly_average(self) -> float:
        if self.weeks_on_treatment <= 0:
            return 0.0
        return self.total_lost / self.weeks_on_treatment

    @property
    def remaining_to_target(self) -> float | None:
        if self.target_weight is None:
            return None
        return self.current_weight - self.target_weight

    @property
    def progress_to_target(self) -> float | None:
        """Percent of the planned loss achieved; None without a meaningful target."""
        if self.target_weight is None:
            return None
        total_to_lose = self.start_weight - self.target_weight
        if total_to_lose <= 0:
            return None
        return self.total_lost / total_to_lose * 100

    @property
    def is_losing_too_fast(self) -> bool:
        return self.weekly_average > TOO_FAST_KG_PER_WEEK

    @property
    def is_losing_too_slow(self) -> bool:
        return (
            self.weeks_on_treatment >= TOO_SLOW_MIN_WEEKS
            and self.weekly_average < TOO_SLOW_KG_PER_WEEK
        )

    @property
    def pace(self) -> PaceVerdict:
        # Too fast is checked first.
        if self.is_losing_too_fast:
            return PaceVerdict.TOO_FAST
        if self.is_losing_too_slow:
            return PaceVerdict.TOO_SLOW
        return PaceVerdict.ON_TRACK
