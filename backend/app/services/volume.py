"""
Training volume analytics.

Volume is sum(weight * reps) over sets; sets without a weight contribute 0.
Exercises are attributed to muscle groups through the tags on template
exercises (matched by lower-cased name). An exercise tagged with several
groups has its volume split evenly between them; untagged exercises are
reported under "Uncategorized".

Workouts are duck-typed: anything with `.date` and `.exercises`, where each
exercise has `.name` and `.sets` (stored JSON or `SetEntry` objects).
"""
from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any

from app.services.sets import load_sets

UNCATEGORIZED = "Uncategorized"

PUSH_MUSCLES = frozenset({"chest", "shoulders", "triceps"})
PULL_MUSCLES = frozenset({"back", "biceps"})
UPPER_MUSCLES = PUSH_MUSCLES | PULL_MUSCLES
LOWER_MUSCLES = frozenset({"quads", "hamstrings", "glutes", "calves"})

DEFAULT_WEEKS = 8

MuscleGroupMap = Mapping[str, list[str]]


@dataclass(slots=True)
class WorkoutVolume:
    total: float = 0
    by_exercise: dict[str, float] = field(default_factory=dict)


@dataclass(slots=True)
class WeekVolume:
    week: str
    label: str
    total: float = 0
    by_muscle: dict[str, float] = field(default_factory=dict)


@dataclass(slots=True)
class BalanceSplit:
    left: str
    right: str
    left_pct: int
    right_pct: int
    left_volume: float
    right_volume: float
    status: str


@dataclass(slots=True)
class TrainingBalance:
    push_pull: BalanceSplit | None = None
    upper_lower: BalanceSplit | None = None


@dataclass(slots=True)
class ThisWeekVolume:
    total: int = 0
    by_muscle: dict[str, int] = field(default_factory=dict)
    workout_count: int = 0


@dataclass(slots=True)
class VolumeAnalytics:
    weekly_trend: list[WeekVolume]
    this_week: ThisWeekVolume
    balance: TrainingBalance


def _as_date(value: date | datetime | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def exercise_volume(sets: Any) -> float:
    return sum(s.volume for s in load_sets(sets))


def workout_volume(workout: Any) -> WorkoutVolume:
    result = WorkoutVolume()
    for exercise in workout.exercises or []:
        volume = exercise_volume(exercise.sets)
        result.by_exercise[exercise.name] = result.by_exercise.get(exercise.name, 0) + volume
        result.total += volume
    return result


def iso_week_key(value: date | datetime | str) -> str:
    year, week, _ = _as_date(value).isocalendar()
    return f"{year}-W{week:02d}"


def week_label(key: str) -> str:
    return "W" + key.split("-W", 1)[1]


def build_muscle_group_map(template_exercises: Iterable[Any]) -> dict[str, list[str]]:
    """{"bench press": ["Chest", "Triceps"], ...} from comma separated tags."""
    muscle_map: dict[str, list[str]] = {}
    for te in template_exercises or []:
        tags = te.muscle_groups or ""
        muscles = [m.strip() for m in tags.split(",") if m.strip()]
        if muscles:
            muscle_map[te.exercise_name.strip().lower()] = muscles
    return muscle_map


def muscles_for(name: str, muscle_map: MuscleGroupMap | None) -> list[str]:
    return (muscle_map or {}).get(name.strip().lower()) or [UNCATEGORIZED]


def _attribute(target: dict[str, float], name: str, volume: float, muscle_map) -> None:
    muscles = muscles_for(name, muscle_map)
    share = volume / len(muscles)
    for muscle in muscles:
        target[muscle] = target.get(muscle, 0) + share


def volume_by_muscle(workouts: Iterable[Any], muscle_map: MuscleGroupMap | None = None) -> dict[str, float]:
    totals: dict[str, float] = {}
    for workout in workouts:
        for exercise in workout.exercises or []:
            _attribute(totals, exercise.name, exercise_volume(exercise.sets), muscle_map)
    return totals


def aggregate_volume_by_week(
    workouts: Iterable[Any],
    muscle_map: MuscleGroupMap | None = None,
    weeks: int = DEFAULT_WEEKS,
    today: date | None = None,
) -> list[WeekVolume]:
    """Trailing `weeks` ISO weeks ending with the current one, oldest first; empty weeks are kept."""
    today = today or date.today()
    monday = today - timedelta(days=today.weekday())
    buckets: dict[str, WeekVolume] = {}
    for offset in reversed(range(weeks)):
        key = iso_week_key(monday - timedelta(weeks=offset))
        buckets[key] = WeekVolume(week=key, label=week_label(key))

    for workout in workouts:
        bucket = buckets.get(iso_week_key(workout.date))
        if bucket is None:
            continue
        for exercise in workout.exercises or []:
            volume = exercise_volume(exercise.sets)
            bucket.total += volume
            _attribute(bucket.by_muscle, exercise.name, volume, muscle_map)

    for bucket in buckets.values():
        bucket.total = round(bucket.total, 1)
        bucket.by_muscle = {k: round(v, 1) for k, v in bucket.by_muscle.items()}
    return list(buckets.values())


def get_balance_status(pct: float) -> str:
    if 45 <= pct <= 55:
        return "balanced"
    if 35 <= pct <= 65:
        return "slight"
    return "imbalanced"


def _split(left: str, right: str, left_volume: float, right_volume: float) -> BalanceSplit | None:
    total = left_volume + right_volume
    if total <= 0:
        return None
    left_pct = _round_half_up(left_volume / total * 100)
    return BalanceSplit(
        left=left,
        right=right,
        left_pct=left_pct,
        right_pct=100 - left_pct,
        left_volume=round(left_volume, 1),
        right_volume=round(right_volume, 1),
        status=get_balance_status(left_pct),
    )


def calculate_training_balance(by_muscle: Mapping[str, float]) -> TrainingBalance:
    push = pull = upper = lower = 0.0
    for muscle, volume in by_muscle.items():
        key = muscle.strip().lower()
        if key in PUSH_MUSCLES:
            push += volume
        if key in PULL_MUSCLES:
            pull += volume
        if key in UPPER_MUSCLES:
            upper += volume
        if key in LOWER_MUSCLES:
            lower += volume
    return TrainingBalance(
        push_pull=_split("push", "pull", push, pull),
        upper_lower=_split("upper", "lower", upper, lower),
    )


def this_week_workouts(workouts: Iterable[Any], today: date | None = None) -> list[Any]:
    current = iso_week_key(today or date.today())
    return [w for w in workouts if iso_week_key(w.date) == current]


def calculate_volume_analytics(
    workouts: Iterable[Any],
    muscle_map: MuscleGroupMap | None = None,
    today: date | None = None,
) -> VolumeAnalytics:
    """Callers pass COMPLETED workouts only."""
    workouts = list(workouts)
    current = this_week_workouts(workouts, today)
    by_muscle = volume_by_muscle(current, muscle_map)
    return VolumeAnalytics(
        weekly_trend=aggregate_volume_by_week(workouts, muscle_map, today=today),
        this_week=ThisWeekVolume(
            total=_round_half_up(sum(by_muscle.values())),
            by_muscle={k: _round_half_up(v) for k, v in by_muscle.items()},
            workout_count=len(current),
        ),
        balance=calculate_training_balance(by_muscle),
    )
