from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from app.db import get_db
from app.deps.auth import require_auth
from app.errors import ConflictError, NotFoundError, ValidationError
from app.repositories.exercise_repo import ExerciseRepository
from app.repositories.workout_repo import WorkoutRepository
from app.schemas.analytics import PersonalRecordsRead
from app.schemas.workout import ExerciseAdd, ExerciseRead, HistoryEntryRead
from app.services.auth import AuthContext
from app.services.records import calculate_records

router = APIRouter(prefix="/exercises", tags=["exercises"])

def _clean_name(name: str) -> str:
    name = name.strip()
    if not name:
        raise ValidationError("Exercise name is required")
    return name

@router.get("", response_model=list[ExerciseRead])
def list_exercises(
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
    workout_id: Optional[int] = Query(None),
):
    return ExerciseRepository(db).list_for_user(auth.user.id, workout_id=workout_id)

@router.post("", response_model=ExerciseRead, status_code=status.HTTP_201_CREATED)
def add_exercise(payload: ExerciseAdd, db: Session = Depends(get_db), auth: AuthContext = Depends(require_auth)):
    if WorkoutRepository(db).get_for_user(payload.workout_id, auth.user.id) is None:
        raise NotFoundError("Workout not found")
    try:
        return ExerciseRepository(db).add_to_workout(payload.workout_id, payload)
    except ValueError as e:
        if str(e) == "order_index_taken":
            raise ConflictError("order_index already used in this workout")
        raise

@router.get("/history/{name}", response_model=list[HistoryEntryRead])
def exercise_history(name: str, db: Session = Depends(get_db), auth: AuthContext = Depends(require_auth)):
    history = WorkoutRepository(db).exercise_history(auth.user.id, _clean_name(name))
    return [HistoryEntryRead.from_entry(entry) for entry in history]

@router.get("/history/{name}/records", response_model=PersonalRecordsRead)
def exercise_records(name: str, db: Session = Depends(get_db), auth: AuthContext = Depends(require_auth)):
    history = WorkoutRepository(db).exercise_history(auth.user.id, _clean_name(name))
    return PersonalRecordsRead.model_validate(calculate_records(history))
