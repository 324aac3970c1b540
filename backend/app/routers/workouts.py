from datetime import date, datetime, timezone
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from app.db import get_db
from app.deps.auth import require_auth
from app.errors import NotFoundError
from app.models import Workout
from app.repositories.template_repo import TemplateRepository
from app.repositories.workout_repo import WorkoutRepository
from app.schemas.analytics import NewRecordRead
from app.schemas.workout import (
    CalendarRead,
    CalendarWorkout,
    WorkoutCreate,
    WorkoutFromTemplate,
    WorkoutRead,
    WorkoutUpdate,
)
from app.services.auth import AuthContext
from app.services.records import detect_new_records

router = APIRouter(prefix="/workouts", tags=["workouts"])

def _owned_or_404(repo: WorkoutRepository, workout_id: int, user_id: int) -> Workout:
    workout = repo.get_for_user(workout_id, user_id)
    if workout is None:
        # someone else's workout is indistinguishable from a missing one
        raise NotFoundError("Workout not found")
    return workout

def _month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    end = datetime(year + 1, 1, 1, tzinfo=timezone.utc) if month == 12 \
        else datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return start, end

@router.get("", response_model=list[WorkoutRead])
def list_workouts(db: Session = Depends(get_db), auth: AuthContext = Depends(require_auth)):
    return WorkoutRepository(db).list_by_user(auth.user.id)

@router.post("", response_model=WorkoutRead, status_code=status.HTTP_201_CREATED)
def create_workout(payload: WorkoutCreate, db: Session = Depends(get_db), auth: AuthContext = Depends(require_auth)):
    return WorkoutRepository(db).create(
        auth.user.id,
        title=payload.title,
        date=payload.date,
        duration_minutes=payload.duration_minutes,
        notes=payload.notes,
        status=payload.status,
        exercises=payload.exercises,
    )

@router.get("/calendar", response_model=CalendarRead)
def calendar(
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
    year: Optional[int] = Query(None, ge=1970, le=9998),
    month: Optional[int] = Query(None, ge=1, le=12),
):
    today = date.today()
    year = year or today.year
    month = month or today.month
    start, end = _month_bounds(year, month)

    by_day: dict[str, list[CalendarWorkout]] = {}
    for w in WorkoutRepository(db).list_between(auth.user.id, start, end):
        by_day.setdefault(w.date.date().isoformat(), []).append(
            CalendarWorkout(id=w.id, title=w.title, notes=w.notes)
        )
    return CalendarRead(year=year, month=month, workouts=by_day)

@router.post("/from-template", response_model=WorkoutRead, status_code=status.HTTP_201_CREATED)
def create_from_template(
    payload: WorkoutFromTemplate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    if TemplateRepository(db).get(payload.template_id) is None:
        raise NotFoundError("Template not found")
    return WorkoutRepository(db).create(
        auth.user.id,
        title=payload.title,
        date=payload.date,
        duration_minutes=payload.duration_minutes,
        notes=payload.notes,
        status=payload.status,
        template_id=payload.template_id,
        exercises=payload.exercises,
    )

@router.get("/{workout_id}", response_model=WorkoutRead)
def get_workout(workout_id: int, db: Session = Depends(get_db), auth: AuthContext = Depends(require_auth)):
    return _owned_or_404(WorkoutRepository(db), workout_id, auth.user.id)

@router.put("/{workout_id}", response_model=WorkoutRead)
def update_workout(
    workout_id: int,
    payload: WorkoutUpdate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    repo = WorkoutRepository(db)
    workout = _owned_or_404(repo, workout_id, auth.user.id)
    return repo.update(
        workout,
        title=payload.title,
        date=payload.date,
        duration_minutes=payload.duration_minutes,
        notes=payload.notes,
        status=payload.status,
        exercises=payload.exercises,
    )

@router.delete("/{workout_id}")
def delete_workout(workout_id: int, db: Session = Depends(get_db), auth: AuthContext = Depends(require_auth)):
    repo = WorkoutRepository(db)
    repo.delete(_owned_or_404(repo, workout_id, auth.user.id))
    return {"success": True}

@router.get("/{workout_id}/records", response_model=list[NewRecordRead])
def workout_records(workout_id: int, db: Session = Depends(get_db), auth: AuthContext = Depends(require_auth)):
    """Personal records this workout set, judged against everything logged up to its date."""
    repo = WorkoutRepository(db)
    workout = _owned_or_404(repo, workout_id, auth.user.id)
    histories = {
        e.name.strip().lower(): repo.exercise_history(
            auth.user.id, e.name, exclude_workout_id=workout.id, before=workout.date
        )
        for e in workout.exercises
    }
    return [NewRecordRead.model_validate(r) for r in detect_new_records(workout.exercises, histories)]
