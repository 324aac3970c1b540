# app/repositories/exercise_repo.py
from __future__ import annotations
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from app.models import Exercise, Workout
from app.repositories.base import BaseRepository
from app.schemas.workout import ExerciseCreate
from app.services.sets import dump_sets

class ExerciseRepository(BaseRepository[Exercise]):
    model = Exercise

    # READS
    def list_for_user(self, user_id: int, *, workout_id: Optional[int] = None) -> list[Exercise]:
        stmt = (
            select(Exercise)
            .join(Workout, Exercise.workout_id == Workout.id)
            .where(Workout.user_id == user_id)
        )
        if workout_id is not None:
            stmt = stmt.where(Exercise.workout_id == workout_id)
        stmt = stmt.order_by(Workout.date.desc(), Exercise.workout_id.desc(), Exercise.order_index.asc())
        return list(self.db.execute(stmt).scalars().all())

    def next_order_index(self, workout_id: int) -> int:
        stmt = select(func.max(Exercise.order_index)).where(Exercise.workout_id == workout_id)
        current = self.db.execute(stmt).scalar_one_or_none()
        return 0 if current is None else current + 1

    # WRITES
    def add_to_workout(self, workout_id: int, payload: ExerciseCreate) -> Exercise:
        order_index = payload.order_index
        if order_index is None:
            order_index = self.next_order_index(workout_id)
        exercise = Exercise(
            workout_id=workout_id,
            name=payload.name,
            sets=dump_sets(payload.sets),
            rest_seconds=payload.rest_seconds,
            notes=payload.notes,
            order_index=order_index,
        )
        try:
            self.db.add(exercise)
            self.db.commit()
            self.db.refresh(exercise)
            return exercise
        except IntegrityError:
            self.db.rollback()
            raise ValueError("order_index_taken")
