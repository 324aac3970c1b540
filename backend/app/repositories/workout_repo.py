# app/repositories/workout_repo.py
from __future__ import annotations
from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy import Select, func, select
from sqlalchemy.orm import selectinload

from app.models import Exercise, Workout, WorkoutStatus
from app.repositories.base import BaseRepository
from app.schemas.workout import ExerciseCreate
from app.services.sets import HistoryEntry, dump_sets, load_sets


def build_exercises(exercises: Sequence[ExerciseCreate]) -> list[Exercise]:
    """Explicit order_index values win; the rest take the lowest free slots in list order."""
    taken = {e.order_index for e in exercises if e.order_index is not None}
    next_free = 0
    rows: list[Exercise] = []
    for e in exercises:
        index = e.order_index
        if index is None:
            while next_free in taken:
                next_free += 1
            index = next_free
            taken.add(index)
        rows.append(
            Exercise(
                name=e.name,
                sets=dump_sets(e.sets),
                rest_seconds=e.rest_seconds,
                notes=e.notes,
                order_index=index,
            )
        )
    return rows


class WorkoutRepository(BaseRepository[Workout]):
    model = Workout

    def _owned(self, user_id: int) -> Select:
        return (
            select(Workout)
            .options(selectinload(Workout.exercises))
            .where(Workout.user_id == user_id)
        )

    # READS
    def get_for_user(self, workout_id: int, user_id: int) -> Optional[Workout]:
        stmt = self._owned(user_id).where(Workout.id == workout_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def list_by_user(
        self,
        user_id: int,
        *,
        status: WorkoutStatus | None = None,
        since: datetime | None = None,
    ) -> list[Workout]:
        stmt = self._owned(user_id)
        if status is not None:
            stmt = stmt.where(Workout.status == status)
        if since is not None:
            stmt = stmt.where(Workout.date >= since)
        stmt = stmt.order_by(Workout.date.desc(), Workout.id.desc())
        return list(self.db.execute(stmt).scalars().all())

    def list_between(self, user_id: int, start: datetime, end: datetime) -> list[Workout]:
        """Workouts with start <= date < end, oldest first."""
        stmt = (
            select(Workout)
            .where(Workout.user_id == user_id, Workout.date >= start, Workout.date < end)
            .order_by(Workout.date.asc(), Workout.id.asc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def exercise_names(self, user_id: int) -> list[str]:
        stmt = (
            select(Exercise.name)
            .join(Workout, Exercise.workout_id == Workout.id)
            .where(Workout.user_id == user_id)
            .distinct()
            .order_by(Exercise.name)
        )
        return list(self.db.execute(stmt).scalars().all())

    def exercise_history(
        self,
        user_id: int,
        name: str,
        *,
        limit: int | None = None,
        template_id: int | None = None,
        exclude_workout_id: int | None = None,
        before: datetime | None = None,
    ) -> list[HistoryEntry]:
        """Past performances of `name` (case-insensitive), most recent first."""
        stmt = (
            select(Exercise, Workout)
            .join(Workout, Exercise.workout_id == Workout.id)
            .where(
                Workout.user_id == user_id,
                func.lower(Exercise.name) == name.strip().lower(),
            )
            .order_by(Workout.date.desc(), Workout.id.desc(), Exercise.order_index.asc())
        )
        if template_id is not None:
            stmt = stmt.where(Workout.template_id == template_id)
        if exclude_workout_id is not None:
            stmt = stmt.where(Workout.id != exclude_workout_id)
        if before is not None:
            stmt = stmt.where(Workout.date <= before)
        if limit is not None:
            stmt = stmt.limit(limit)
        return [
            HistoryEntry(
                date=workout.date.date(),
                sets=load_sets(exercise.sets),
                workout_title=workout.title,
                template_id=workout.template_id,
            )
            for exercise, workout in self.db.execute(stmt).all()
        ]

    # WRITES
    def create(
        self,
        user_id: int,
        *,
        title: str,
        date: datetime,
        duration_minutes: int | None = None,
        notes: str | None = None,
        status: WorkoutStatus = WorkoutStatus.COMPLETED,
        template_id: int | None = None,
        exercises: Sequence[ExerciseCreate] = (),
    ) -> Workout:
        """Workout and its exercises land in one commit or not at all."""
        workout = Workout(
            user_id=user_id,
            template_id=template_id,
            title=title,
            date=date,
            duration_minutes=duration_minutes,
            notes=notes,
            status=status,
        )
        workout.exercises = build_exercises(exercises)
        with self.transaction():
            self.db.add(workout)
        return self.get_for_user(workout.id, user_id)

    def update(
        self,
        workout: Workout,
        *,
        title: str,
        date: datetime,
        duration_minutes: int | None,
        notes: str | None,
        status: WorkoutStatus,
        exercises: Sequence[ExerciseCreate] | None = None,
    ) -> Workout:
        """`exercises=None` leaves them alone; a list replaces all of them atomically."""
        with self.transaction():
            workout.title = title
            workout.date = date
            workout.duration_minutes = duration_minutes
            workout.notes = notes
            workout.status = status
            if exercises is not None:
                workout.exercises.clear()
                # old rows must be gone before new ones reuse their order_index
                self.db.flush()
                workout.exercises.extend(build_exercises(exercises))
        self.db.refresh(workout)
        return workout

    def delete(self, workout: Workout) -> None:
        self.db.delete(workout)
        self.db.commit()
