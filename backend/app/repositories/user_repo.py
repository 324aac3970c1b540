# app/repositories/user_repo.py
from __future__ import annotations
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from app.models import User
from app.repositories.base import BaseRepository

class UserRepository(BaseRepository[User]):
    model = User

    # READS
    def get_by_username(self, username: str) -> Optional[User]:
        # exact match: usernames are case-sensitive
        stmt = select(User).where(User.username == username)
        return self.db.execute(stmt).scalar_one_or_none()

    # WRITES
    def create(self, *, username: str, name: str, password_hash: str) -> User:
        user = User(username=username, name=name, password_hash=password_hash)
        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
            return user
        except IntegrityError:
            self.db.rollback()
            # Re-raise a clean marker the router maps to 409
            raise ValueError("username_already_exists")

    def update_password(self, user_id: int, *, password_hash: str) -> Optional[User]:
        user = self.get(user_id)
        if not user:
            return None
        user.password_hash = password_hash
        self.db.commit()
        self.db.refresh(user)
        return user

    def delete(self, user_id: int) -> bool:
        """Cascades to sessions, workouts and weight data."""
        user = self.get(user_id)
        if not user:
            return False
        self.db.delete(user)
        self.db.commit()
        return True
