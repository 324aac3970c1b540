"""
Personal records, derived on the fly from exercise history (nothing is stored).

Only sets with a positive weight and reps count towards a record.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from app.schemas.exercise_set import SetEntry
from app.services.sets import HistoryEntry, load_sets

TRACKED_REP_COUNTS = (1, 3, 5, 8, 10)


@dataclass(slots=True)
class RecordSet:
    value: float
    weight: float
    reps: int
    date: date | None = None


@dataclass(slots=True)
class PersonalRecords:
    e1rm: RecordSet | None = None
    rep_maxes: dict[int, RecordSet] = field(default_factory=dict)
    volume: RecordSet | None = None
    has_data: bool = False


@dataclass(slots=True)
class NewRecord:
    exercise_name: str
    record_type: str            # "e1rm", "5rm", "volume" or "first"
    value: float
    previous_value: float
    weight: float
    reps: int


def calculate_e1rm(weight: float | None, reps: int | None) -> float:
    """Epley estimate, rounded to one decimal."""
    if not weight or weight <= 0 or not reps or reps <= 0:
        return 0
    if reps == 1:
        return weight
    return round(weight * (1 + reps / 30), 1)


def _scoring(sets: Iterable[SetEntry]) -> list[SetEntry]:
    return [s for s in sets if s.weight and s.weight > 0 and s.reps > 0]


def calculate_records(history: Iterable[HistoryEntry]) -> PersonalRecords:
    history = list(history or [])
    if not history:
        return PersonalRecords()

    records = PersonalRecords(has_data=True)
    for entry in history:
        for s in _scoring(entry.sets):
            e1rm = calculate_e1rm(s.weight, s.reps)
            if records.e1rm is None or e1rm > records.e1rm.value:
                records.e1rm = RecordSet(e1rm, s.weight, s.reps, entry.date)

            if s.reps in TRACKED_REP_COUNTS:
                best = records.rep_maxes.get(s.reps)
                if best is None or s.weight > best.weight:
                    records.rep_maxes[s.reps] = RecordSet(s.weight, s.weight, s.reps, entry.date)

            volume = s.volume
            if records.volume is None or volume > records.volume.value:
                records.volume = RecordSet(volume, s.weight, s.reps, entry.date)
    return records


def _first_time(name: str, sets: list[SetEntry]) -> list[NewRecord]:
    scoring = _scoring(sets)
    if not scoring:
        return []
    best = max(scoring, key=lambda s: calculate_e1rm(s.weight, s.reps))
    return [
        NewRecord(
            exercise_name=name,
            record_type="first",
            value=calculate_e1rm(best.weight, best.reps),
            previous_value=0,
            weight=best.weight,
            reps=best.reps,
        )
    ]


def _against(name: str, sets: list[SetEntry], existing: PersonalRecords) -> list[NewRecord]:
    best_e1rm: SetEntry | None = None
    best_volume: SetEntry | None = None
    best_rep_maxes: dict[int, SetEntry] = {}

    prev_e1rm = existing.e1rm.value if existing.e1rm else 0
    prev_volume = existing.volume.value if existing.volume else 0

    for s in _scoring(sets):
        e1rm = calculate_e1rm(s.weight, s.reps)
        if e1rm > prev_e1rm and (
            best_e1rm is None or e1rm > calculate_e1rm(best_e1rm.weight, best_e1rm.reps)
        ):
            best_e1rm = s

        if s.reps in TRACKED_REP_COUNTS:
            prior = existing.rep_maxes.get(s.reps)
            if prior is None or s.weight > prior.weight:
                current = best_rep_maxes.get(s.reps)
                if current is None or s.weight > current.weight:
                    best_rep_maxes[s.reps] = s

        if s.volume > prev_volume and (best_volume is None or s.volume > best_volume.volume):
            best_volume = s

    found: list[NewRecord] = []
    if best_e1rm is not None:
        found.append(NewRecord(
            exercise_name=name,
            record_type="e1rm",
            value=calculate_e1rm(best_e1rm.weight, best_e1rm.reps),
            previous_value=prev_e1rm,
            weight=best_e1rm.weight,
            reps=best_e1rm.reps,
        ))
    for reps in sorted(best_rep_maxes):
        s = best_rep_maxes[reps]
        prior = existing.rep_maxes.get(reps)
        found.append(NewRecord(
            exercise_name=name,
            record_type=f"{reps}rm",
            value=s.weight,
            previous_value=prior.weight if prior else 0,
            weight=s.weight,
            reps=reps,
        ))
    if best_volume is not None:
        found.append(NewRecord(
            exercise_name=name,
            record_type="volume",
            value=best_volume.volume,
            previous_value=prev_volume,
            weight=best_volume.weight,
            reps=best_volume.reps,
        ))
    return found


def detect_new_records(
    exercises: Iterable[Any],
    histories: Mapping[str, list[HistoryEntry]],
) -> list[NewRecord]:
    """
    exercises: objects with `.name` and `.sets` from the workout being checked.
    histories: prior history per exercise, keyed by lower-cased name.
    """
    found: list[NewRecord] = []
    for exercise in exercises:
        sets = load_sets(exercise.sets)
        history = histories.get(exercise.name.strip().lower()) or []
        if not history:
            found.extend(_first_time(exercise.name, sets))
        else:
            found.extend(_against(exercise.name, sets, calculate_records(history)))
    return found
