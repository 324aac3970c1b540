import datetime as dt
from pydantic import BaseModel, ConfigDict, Field

from app.schemas.workout import HistoryEntryRead
from app.services.progression import ProgressionStatus

class _FromAttrs(BaseModel):
    model_config = ConfigDict(from_attributes=True)

# --- personal records ---

class RecordSetRead(_FromAttrs):
    value: float
    weight: float
    reps: int
    date: dt.date | None = None

class PersonalRecordsRead(_FromAttrs):
    e1rm: RecordSetRead | None = None
    rep_maxes: dict[int, RecordSetRead] = Field(default_factory=dict)
    volume: RecordSetRead | None = None
    has_data: bool = False

class NewRecordRead(_FromAttrs):
    exercise_name: str
    record_type: str
    value: float
    previous_value: float
    weight: float
    reps: int

# --- progression ---

class RecommendationRead(_FromAttrs):
    weight_change: float = 0
    rep_change: int = 0
    target_rpe: str | None = None

class LastSessionRead(_FromAttrs):
    date: dt.date | None = None
    max_weight: float
    total_reps: int
    total_sets: int
    avg_reps: int
    avg_rpe: float | None = None

class ExerciseInsight(BaseModel):
    name: str
    target_rep_range: str | None = None
    history: list[HistoryEntryRead] = Field(default_factory=list)
    status: ProgressionStatus
    message: str
    short_message: str
    suggestion_text: str
    recommendation: RecommendationRead | None = None
    suggested_weight: float | None = None
    suggested_reps: int | None = None
    last_session_rpe: float | None = None
    rpe_trend: float = 0
    fatigue: str | None = None
    readiness: str | None = None
    sessions_analyzed: int = 0
    last_session: LastSessionRead | None = None

class InsightsSummary(BaseModel):
    total_exercises: int
    ready_count: int
    maintain_count: int
    attention_count: int
    no_data_count: int

class InsightCategories(_FromAttrs):
    ready_to_progress: list[ExerciseInsight]
    maintain: list[ExerciseInsight]
    needs_attention: list[ExerciseInsight]
    no_data: list[ExerciseInsight]

# --- volume ---

class WeekVolumeRead(_FromAttrs):
    week: str
    label: str
    total: float
    by_muscle: dict[str, float]

class BalanceSplitRead(_FromAttrs):
    left: str
    right: str
    left_pct: int
    right_pct: int
    left_volume: float
    right_volume: float
    status: str

class TrainingBalanceRead(_FromAttrs):
    push_pull: BalanceSplitRead | None = None
    upper_lower: BalanceSplitRead | None = None

class ThisWeekRead(_FromAttrs):
    total: int
    by_muscle: dict[str, int]
    workout_count: int

class VolumeAnalyticsRead(_FromAttrs):
    weekly_trend: list[WeekVolumeRead]
    this_week: ThisWeekRead
    balance: TrainingBalanceRead

class InsightsRead(BaseModel):
    summary: InsightsSummary
    categories: InsightCategories
    exercises: list[ExerciseInsight]
    volume: VolumeAnalyticsRead
