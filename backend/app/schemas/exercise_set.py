from typing import Annotated
from pydantic import BaseModel, Field
from app.schemas.common import NonNegFloat

Reps = Annotated[int, Field(ge=1, le=1000)]
RPE = Annotated[int, Field(ge=1, le=10)]

class SetEntry(BaseModel):
    """One performed set. Weight and RPE are optional (bodyweight work, unrated sets)."""
    reps: Reps
    weight: NonNegFloat | None = None
    rpe: RPE | None = None

    @property
    def volume(self) -> float:
        return (self.weight or 0) * self.reps

    @property
    def is_completed(self) -> bool:
        return self.weight is not None
