"""
Helpers for the per-exercise `sets` list.

Sets are stored as a JSON array on `exercises.sets`. Rows written before the
JSON column existed may still hold the array as an encoded string, and any row
can be hand-edited, so reads are tolerant: whatever can't be understood is
dropped instead of failing the request.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable

from pydantic import ValidationError

from app.schemas.exercise_set import SetEntry

logger = logging.getLogger(__name__)


def load_sets(raw: Any) -> list[SetEntry]:
    """Materialize stored sets data into `SetEntry` objects; corrupted data degrades to []."""
    if raw is None or raw == "":
        return []
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except ValueError:
            logger.warning("unparseable sets data, treating as empty")
            return []
    if not isinstance(raw, list):
        logger.warning("sets data is %s, expected a list", type(raw).__name__)
        return []

    sets: list[SetEntry] = []
    for item in raw:
        if isinstance(item, SetEntry):
            sets.append(item)
            continue
        try:
            sets.append(SetEntry.model_validate(item))
        except ValidationError:
            logger.warning("dropping invalid set entry: %r", item)
    return sets


def dump_sets(sets: Iterable[SetEntry]) -> list[dict[str, Any]]:
    """Storage form for the JSON column; unset optional fields are left out."""
    return [s.model_dump(exclude_none=True) for s in sets]


@dataclass(slots=True)
class ExerciseSummary:
    total_sets: int = 0
    total_reps: int = 0
    max_weight: float = 0
    total_volume: float = 0
    average_rpe: float | None = None
    max_rpe: int | None = None


def summarize_sets(sets: list[SetEntry]) -> ExerciseSummary:
    if not sets:
        return ExerciseSummary()

    rated = [s.rpe for s in sets if s.rpe]
    average_rpe = round(sum(rated) / len(rated), 1) if rated else None
    return ExerciseSummary(
        total_sets=len(sets),
        total_reps=sum(s.reps for s in sets),
        max_weight=max(s.weight or 0 for s in sets),
        total_volume=sum(s.volume for s in sets),
        average_rpe=average_rpe,
        max_rpe=max(rated) if rated else None,
    )


@dataclass(slots=True)
class HistoryEntry:
    """One past performance of an exercise, as fed to the analytics functions."""
    date: date
    sets: list[SetEntry] = field(default_factory=list)
    workout_title: str | None = None
    template_id: int | None = None
