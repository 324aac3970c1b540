from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.db import get_db
from app.deps.auth import require_auth
from app.errors import NotFoundError
from app.repositories.weight_repo import WeightRepository
from app.schemas.weight import WeightEntryCreate, WeightEntryRead, WeightGoalIn, WeightGoalRead
from app.services.auth import AuthContext

router = APIRouter(prefix="/weight", tags=["weight"])

@router.get("", response_model=list[WeightEntryRead])
def list_entries(db: Session = Depends(get_db), auth: AuthContext = Depends(require_auth)):
    return WeightRepository(db).list_entries(auth.user.id)

@router.post("", response_model=WeightEntryRead, status_code=status.HTTP_201_CREATED)
def add_entry(payload: WeightEntryCreate, db: Session = Depends(get_db), auth: AuthContext = Depends(require_auth)):
    return WeightRepository(db).add_entry(auth.user.id, weight=payload.weight, date=payload.date)

@router.get("/goal", response_model=Optional[WeightGoalRead])
def get_goal(db: Session = Depends(get_db), auth: AuthContext = Depends(require_auth)):
    return WeightRepository(db).active_goal(auth.user.id)

@router.post("/goal", response_model=WeightGoalRead, status_code=status.HTTP_201_CREATED)
def set_goal(payload: WeightGoalIn, db: Session = Depends(get_db), auth: AuthContext = Depends(require_auth)):
    return WeightRepository(db).set_goal(
        auth.user.id,
        target_weight=payload.target_weight,
        goal_type=payload.goal_type,
        target_date=payload.target_date,
    )

@router.put("/goal", response_model=WeightGoalRead)
def update_goal(payload: WeightGoalIn, db: Session = Depends(get_db), auth: AuthContext = Depends(require_auth)):
    repo = WeightRepository(db)
    goal = repo.active_goal(auth.user.id)
    if goal is None:
        raise NotFoundError("No active weight goal")
    return repo.update_goal(
        goal,
        target_weight=payload.target_weight,
        goal_type=payload.goal_type,
        target_date=payload.target_date,
    )

@router.delete("/{entry_id}")
def delete_entry(entry_id: int, db: Session = Depends(get_db), auth: AuthContext = Depends(require_auth)):
    repo = WeightRepository(db)
    entry = repo.get_entry_for_user(entry_id, auth.user.id)
    if entry is None:
        raise NotFoundError("Weight entry not found")
    repo.delete_entry(entry)
    return {"success": True}
