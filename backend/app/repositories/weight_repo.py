# app/repositories/weight_repo.py
from __future__ import annotations
from datetime import datetime
from typing import Optional

from sqlalchemy import select, update

from app.models import GoalType, WeightEntry, WeightGoal
from app.repositories.base import BaseRepository

class WeightRepository(BaseRepository[WeightEntry]):
    model = WeightEntry

    # ENTRIES
    def list_entries(self, user_id: int) -> list[WeightEntry]:
        stmt = (
            select(WeightEntry)
            .where(WeightEntry.user_id == user_id)
            .order_by(WeightEntry.date.desc(), WeightEntry.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_entry_for_user(self, entry_id: int, user_id: int) -> Optional[WeightEntry]:
        stmt = select(WeightEntry).where(WeightEntry.id == entry_id, WeightEntry.user_id == user_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def add_entry(self, user_id: int, *, weight: float, date: datetime) -> WeightEntry:
        entry = WeightEntry(user_id=user_id, weight=weight, date=date)
        self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)
        return entry

    def delete_entry(self, entry: WeightEntry) -> None:
        self.db.delete(entry)
        self.db.commit()

    # GOALS
    def active_goal(self, user_id: int) -> Optional[WeightGoal]:
        stmt = (
            select(WeightGoal)
            .where(WeightGoal.user_id == user_id, WeightGoal.is_active.is_(True))
            .order_by(WeightGoal.created_at.desc(), WeightGoal.id.desc())
            .limit(1)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def set_goal(
        self,
        user_id: int,
        *,
        target_weight: float,
        goal_type: GoalType,
        target_date: datetime | None = None,
    ) -> WeightGoal:
        """Deactivates any previous goal; at most one goal is active per user."""
        with self.transaction():
            self.db.execute(
                update(WeightGoal)
                .where(WeightGoal.user_id == user_id, WeightGoal.is_active.is_(True))
                .values(is_active=False)
            )
            goal = WeightGoal(
                user_id=user_id,
                target_weight=target_weight,
                goal_type=goal_type,
                target_date=target_date,
                is_active=True,
            )
            self.db.add(goal)
        self.db.refresh(goal)
        return goal

    def update_goal(
        self,
        goal: WeightGoal,
        *,
        target_weight: float,
        goal_type: GoalType,
        target_date: datetime | None = None,
    ) -> WeightGoal:
        goal.target_weight = target_weight
        goal.goal_type = goal_type
        goal.target_date = target_date
        self.db.commit()
        self.db.refresh(goal)
        return goal
