from __future__ import annotations
from datetime import datetime
from typing import Optional
from sqlalchemy import delete, select
from sqlalchemy.orm import joinedload
from app.models import AuthSession
from app.repositories.base import BaseRepository

class AuthSessionRepository(BaseRepository[AuthSession]):
    model = AuthSession

    def get_by_token(self, token: str) -> Optional[AuthSession]:
        stmt = select(AuthSession).options(joinedload(AuthSession.user)).where(AuthSession.token == token)
        return self.db.execute(stmt).scalar_one_or_none()

    def create(self, user_id: int, *, token: str, expires_at: datetime) -> AuthSession:
        sess = AuthSession(user_id=user_id, token=token, expires_at=expires_at)
        self.db.add(sess)
        self.db.commit()
        self.db.refresh(sess)
        return sess

    def delete(self, sess: AuthSession) -> None:
        self.db.delete(sess)
        self.db.commit()

    def delete_by_token(self, token: str) -> int:
        """Returns the number of rows removed (0 for an unknown token)."""
        result = self.db.execute(delete(AuthSession).where(AuthSession.token == token))
        self.db.commit()
        return result.rowcount or 0
