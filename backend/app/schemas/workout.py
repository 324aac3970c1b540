from datetime import date, datetime
from typing import Annotated
from pydantic import BaseModel, Field, StringConstraints, field_validator, model_validator

from app.models.workout import WorkoutStatus
from app.schemas.common import FlexibleDateTime, NonNegInt, NotesStr, NameStr, PosInt
from app.schemas.exercise_set import SetEntry
from app.services.sets import HistoryEntry, load_sets, summarize_sets

TitleStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]

class ExerciseCreate(BaseModel):
    name: NameStr
    sets: Annotated[list[SetEntry], Field(min_length=1)]
    rest_seconds: NonNegInt | None = None
    notes: NotesStr | None = None
    order_index: NonNegInt | None = None

class ExerciseAdd(ExerciseCreate):
    """Standalone exercise appended to an existing workout."""
    workout_id: int

class ExerciseRead(BaseModel):
    id: int
    workout_id: int
    name: str
    sets: list[SetEntry]
    rest_seconds: int | None = None
    notes: str | None = None
    order_index: int
    created_at: datetime | None = None

    model_config = {"from_attributes": True}

    @field_validator("sets", mode="before")
    @classmethod
    def materialize_sets(cls, v):
        return load_sets(v)

def _check_unique_order(exercises: list[ExerciseCreate] | None) -> None:
    if not exercises:
        return
    explicit = [e.order_index for e in exercises if e.order_index is not None]
    if len(explicit) != len(set(explicit)):
        raise ValueError("exercise order_index values must be unique within a workout")

class WorkoutBase(BaseModel):
    title: TitleStr
    date: FlexibleDateTime
    duration_minutes: PosInt | None = None
    notes: NotesStr | None = None
    status: WorkoutStatus = WorkoutStatus.COMPLETED

class WorkoutCreate(WorkoutBase):
    exercises: list[ExerciseCreate] = Field(default_factory=list)

    @model_validator(mode="after")
    def unique_order(self):
        _check_unique_order(self.exercises)
        return self

class WorkoutUpdate(WorkoutBase):
    # None keeps the stored exercises, a list (even empty) replaces them all
    exercises: list[ExerciseCreate] | None = None

    @model_validator(mode="after")
    def unique_order(self):
        _check_unique_order(self.exercises)
        return self

class WorkoutFromTemplate(WorkoutCreate):
    template_id: int

class WorkoutRead(BaseModel):
    id: int
    user_id: int
    template_id: int | None = None
    title: str
    date: datetime
    duration_minutes: int | None = None
    notes: str | None = None
    status: WorkoutStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None
    exercises: list[ExerciseRead] = Field(default_factory=list)

    model_config = {"from_attributes": True}

class CalendarWorkout(BaseModel):
    id: int
    title: str
    notes: str | None = None

class CalendarRead(BaseModel):
    year: int
    month: int
    workouts: dict[str, list[CalendarWorkout]]

class HistoryEntryRead(BaseModel):
    date: date
    sets: list[SetEntry]
    total_sets: int
    total_reps: int
    max_weight: float
    total_volume: float
    workout_title: str | None = None

    @classmethod
    def from_entry(cls, entry: HistoryEntry) -> "HistoryEntryRead":
        summary = summarize_sets(entry.sets)
        return cls(
            date=entry.date,
            sets=entry.sets,
            total_sets=summary.total_sets,
            total_reps=summary.total_reps,
            max_weight=summary.max_weight,
            total_volume=summary.total_volume,
            workout_title=entry.workout_title,
        )
