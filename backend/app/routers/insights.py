from datetime import datetime, timedelta, timezone
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.db import get_db
from app.deps.auth import require_auth
from app.models import WorkoutStatus
from app.repositories.template_repo import TemplateRepository
from app.repositories.workout_repo import WorkoutRepository
from app.schemas.analytics import (
    ExerciseInsight,
    InsightCategories,
    InsightsRead,
    InsightsSummary,
    VolumeAnalyticsRead,
)
from app.schemas.workout import HistoryEntryRead
from app.services.auth import AuthContext
from app.services.progression import categorize_exercises, format_suggestion_text, get_progression_suggestion
from app.services.volume import build_muscle_group_map, calculate_volume_analytics

router = APIRouter(prefix="/insights", tags=["insights"])

HISTORY_SESSIONS = 5
VOLUME_WINDOW_DAYS = 56

def _exercise_insight(
    name: str,
    workouts: WorkoutRepository,
    templates: TemplateRepository,
    user_id: int,
) -> ExerciseInsight:
    history = workouts.exercise_history(user_id, name, limit=HISTORY_SESSIONS)

    # rep range comes from the template behind the latest session, if any
    target_rep_range = None
    if history and history[0].template_id is not None:
        te = templates.find_exercise(history[0].template_id, name)
        target_rep_range = te.target_rep_range if te else None

    suggestion = get_progression_suggestion(history, target_rep_range)
    return ExerciseInsight(
        name=name,
        target_rep_range=target_rep_range,
        history=[HistoryEntryRead.from_entry(h) for h in history],
        status=suggestion.status,
        message=suggestion.message,
        short_message=suggestion.short_message,
        suggestion_text=format_suggestion_text(suggestion),
        recommendation=suggestion.recommendation,
        suggested_weight=suggestion.suggested_weight,
        suggested_reps=suggestion.suggested_reps,
        last_session_rpe=suggestion.last_session_rpe,
        rpe_trend=suggestion.rpe_trend,
        fatigue=suggestion.fatigue,
        readiness=suggestion.readiness,
        sessions_analyzed=suggestion.sessions_analyzed,
        last_session=suggestion.last_session,
    )

@router.get("", response_model=InsightsRead)
def insights(db: Session = Depends(get_db), auth: AuthContext = Depends(require_auth)):
    workouts = WorkoutRepository(db)
    templates = TemplateRepository(db)
    user_id = auth.user.id

    # names differing only in case are one exercise
    names: dict[str, str] = {}
    for name in workouts.exercise_names(user_id):
        names.setdefault(name.strip().lower(), name)
    exercises = [_exercise_insight(n, workouts, templates, user_id) for n in names.values()]
    categories = categorize_exercises(exercises)

    since = datetime.now(timezone.utc) - timedelta(days=VOLUME_WINDOW_DAYS)
    recent = workouts.list_by_user(user_id, status=WorkoutStatus.COMPLETED, since=since)
    muscle_map = build_muscle_group_map(templates.tagged_exercises())
    volume = calculate_volume_analytics(recent, muscle_map)

    return InsightsRead(
        summary=InsightsSummary(
            total_exercises=len(exercises),
            ready_count=len(categories.ready_to_progress),
            maintain_count=len(categories.maintain),
            attention_count=len(categories.needs_attention),
            no_data_count=len(categories.no_data),
        ),
        categories=InsightCategories.model_validate(categories),
        exercises=exercises,
        volume=VolumeAnalyticsRead.model_validate(volume),
    )
