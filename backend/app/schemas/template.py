from datetime import date, datetime
from typing import Annotated
from pydantic import BaseModel, Field, StringConstraints

from app.schemas.common import NameStr, NonNegFloat, NonNegInt, NotesStr, PosInt
from app.schemas.exercise_set import SetEntry

# "8-12" or a single target like "5"
RepRangeStr = Annotated[str, StringConstraints(strip_whitespace=True, max_length=20, pattern=r"^\d+(\s*-\s*\d+)?$")]
MuscleGroupsStr = Annotated[str, StringConstraints(strip_whitespace=True, max_length=255)]

class TemplateExerciseIn(BaseModel):
    name: NameStr
    default_sets: PosInt | None = None
    default_reps: PosInt | None = None
    target_rep_range: RepRangeStr | None = None
    default_weight: NonNegFloat | None = None
    muscle_groups: MuscleGroupsStr | None = None
    order_index: NonNegInt | None = None
    notes: NotesStr | None = None
    rest_seconds: NonNegInt | None = None

class TemplateCreate(BaseModel):
    name: NameStr
    description: NotesStr | None = None
    is_default: bool = False
    exercises: list[TemplateExerciseIn] = Field(default_factory=list)

class TemplateUpdate(BaseModel):
    name: NameStr
    description: NotesStr | None = None
    is_default: bool = False
    exercises: list[TemplateExerciseIn] | None = None

class TemplateExerciseRead(BaseModel):
    id: int
    template_id: int
    exercise_name: str
    default_sets: int | None = None
    default_reps: int | None = None
    target_rep_range: str | None = None
    default_weight: float | None = None
    muscle_groups: str | None = None
    order_index: int
    notes: str | None = None
    rest_seconds: int | None = None

    model_config = {"from_attributes": True}

class TemplateRead(BaseModel):
    id: int
    name: str
    description: str | None = None
    is_default: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None
    template_exercises: list[TemplateExerciseRead] = Field(default_factory=list)

    model_config = {"from_attributes": True}

class PastPerformance(BaseModel):
    date: date
    sets: list[SetEntry]

class LatestTemplateExercise(BaseModel):
    id: int
    name: str
    default_sets: int | None = None
    default_reps: int | None = None
    target_rep_range: str | None = None
    default_weight: float | None = None
    muscle_groups: str | None = None
    order_index: int
    notes: str | None = None
    rest_seconds: int | None = None
    latest_sets: list[SetEntry] = Field(default_factory=list)
    last_performed: date | None = None
    exercise_history: list[PastPerformance] = Field(default_factory=list)

class TemplateLatestRead(BaseModel):
    id: int
    name: str
    description: str | None = None
    is_default: bool
    template_exercises: list[LatestTemplateExercise]
