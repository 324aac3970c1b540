# app/repositories/base.py
from __future__ import annotations
from contextlib import contextmanager
from typing import Generic, Iterator, Optional, TypeVar

from sqlalchemy.orm import Session

T = TypeVar("T")  # SQLAlchemy model type

class BaseRepository(Generic[T]):
    """Lightweight base for repositories using SQLAlchemy 2.0 style."""
    model: type[T]

    def __init__(self, db: Session):
        self.db = db

    def get(self, pk: int) -> Optional[T]:
        return self.db.get(self.model, pk)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Commit everything done inside the block, or roll all of it back and re-raise."""
        try:
            yield
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
