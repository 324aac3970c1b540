from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Integer, ForeignKey, DateTime, String, Text, JSON, UniqueConstraint, func
from app.db import Base

class Exercise(Base):
    __tablename__ = "exercises"
    __table_args__ = (UniqueConstraint("workout_id", "order_index", name="uq_exercises_workout_order"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    workout_id: Mapped[int] = mapped_column(ForeignKey("workouts.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    # ordered list of {"reps": int, "weight": float?, "rpe": int?}
    sets: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    rest_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    workout = relationship("Workout", back_populates="exercises")
