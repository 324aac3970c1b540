from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.db import get_db
from app.deps.auth import require_auth
from app.errors import AuthorizationError, ConflictError, NotFoundError
from app.models import SessionTemplate, TemplateExercise
from app.repositories.template_repo import TemplateRepository
from app.repositories.workout_repo import WorkoutRepository
from app.schemas.template import (
    LatestTemplateExercise,
    PastPerformance,
    TemplateCreate,
    TemplateLatestRead,
    TemplateRead,
    TemplateUpdate,
)
from app.services.auth import AuthContext

router = APIRouter(prefix="/templates", tags=["templates"])

# sessions of the same template used to pre-fill a new workout
LATEST_SESSIONS = 2

def _get_or_404(repo: TemplateRepository, template_id: int) -> SessionTemplate:
    template = repo.get(template_id)
    if template is None:
        raise NotFoundError("Template not found")
    return template

@router.get("", response_model=list[TemplateRead])
def list_templates(db: Session = Depends(get_db), auth: AuthContext = Depends(require_auth)):
    return TemplateRepository(db).list_all()

@router.post("", response_model=TemplateRead, status_code=status.HTTP_201_CREATED)
def create_template(payload: TemplateCreate, db: Session = Depends(get_db), auth: AuthContext = Depends(require_auth)):
    try:
        return TemplateRepository(db).create(
            name=payload.name,
            description=payload.description,
            is_default=payload.is_default,
            exercises=payload.exercises,
        )
    except ValueError as e:
        if str(e) == "template_name_exists":
            raise ConflictError("A template with this name already exists")
        raise

@router.get("/{template_id}", response_model=TemplateRead)
def get_template(template_id: int, db: Session = Depends(get_db), auth: AuthContext = Depends(require_auth)):
    return _get_or_404(TemplateRepository(db), template_id)

@router.put("/{template_id}", response_model=TemplateRead)
def update_template(
    template_id: int,
    payload: TemplateUpdate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    repo = TemplateRepository(db)
    template = _get_or_404(repo, template_id)
    try:
        return repo.update(
            template,
            name=payload.name,
            description=payload.description,
            is_default=payload.is_default,
            exercises=payload.exercises,
        )
    except ValueError as e:
        if str(e) == "template_name_exists":
            raise ConflictError("A template with this name already exists")
        raise

@router.delete("/{template_id}")
def delete_template(template_id: int, db: Session = Depends(get_db), auth: AuthContext = Depends(require_auth)):
    repo = TemplateRepository(db)
    template = _get_or_404(repo, template_id)
    if template.is_default:
        raise AuthorizationError("Cannot delete default templates")
    repo.delete(template)
    return {"success": True}

def _prefill(te: TemplateExercise, history) -> LatestTemplateExercise:
    latest_sets = history[0].sets if history else []
    weights = [s.weight for s in latest_sets if s.weight]
    reps = [s.reps for s in latest_sets]
    return LatestTemplateExercise(
        id=te.id,
        name=te.exercise_name,
        default_sets=te.default_sets,
        default_reps=round(sum(reps) / len(reps)) if reps else te.default_reps,
        target_rep_range=te.target_rep_range,
        default_weight=max(weights) if weights else te.default_weight,
        muscle_groups=te.muscle_groups,
        order_index=te.order_index,
        notes=te.notes,
        rest_seconds=te.rest_seconds,
        latest_sets=latest_sets,
        last_performed=history[0].date if history else None,
        exercise_history=[PastPerformance(date=h.date, sets=h.sets) for h in history],
    )

@router.get("/{template_id}/latest-data", response_model=TemplateLatestRead)
def template_latest_data(template_id: int, db: Session = Depends(get_db), auth: AuthContext = Depends(require_auth)):
    """Template exercises pre-filled from the caller's most recent sessions of this template."""
    template = _get_or_404(TemplateRepository(db), template_id)
    workouts = WorkoutRepository(db)
    exercises = [
        _prefill(
            te,
            workouts.exercise_history(
                auth.user.id, te.exercise_name, template_id=template.id, limit=LATEST_SESSIONS
            ),
        )
        for te in template.template_exercises
    ]
    return TemplateLatestRead(
        id=template.id,
        name=template.name,
        description=template.description,
        is_default=template.is_default,
        template_exercises=exercises,
    )
