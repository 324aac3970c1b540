from datetime import datetime
from typing import Annotated
from pydantic import BaseModel, Field

from app.models.weight import GoalType
from app.schemas.common import FlexibleDateTime

BodyWeight = Annotated[float, Field(gt=0, le=1000)]

class WeightEntryCreate(BaseModel):
    weight: BodyWeight
    date: FlexibleDateTime

class WeightEntryRead(BaseModel):
    id: int
    user_id: int
    weight: float
    date: datetime
    created_at: datetime | None = None

    model_config = {"from_attributes": True}

class WeightGoalIn(BaseModel):
    target_weight: BodyWeight
    goal_type: GoalType
    target_date: FlexibleDateTime | None = None

class WeightGoalRead(BaseModel):
    id: int
    user_id: int
    target_weight: float
    goal_type: GoalType
    target_date: datetime | None = None
    is_active: bool
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
