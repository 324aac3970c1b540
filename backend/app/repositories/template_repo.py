# app/repositories/template_repo.py
from __future__ import annotations
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from app.models import SessionTemplate, TemplateExercise
from app.repositories.base import BaseRepository
from app.schemas.template import TemplateExerciseIn


def build_template_exercises(exercises: Sequence[TemplateExerciseIn]) -> list[TemplateExercise]:
    return [
        TemplateExercise(
            exercise_name=e.name,
            default_sets=e.default_sets,
            default_reps=e.default_reps,
            target_rep_range=e.target_rep_range,
            default_weight=e.default_weight,
            muscle_groups=e.muscle_groups or None,
            order_index=e.order_index if e.order_index is not None else i,
            notes=e.notes,
            rest_seconds=e.rest_seconds,
        )
        for i, e in enumerate(exercises)
    ]


class TemplateRepository(BaseRepository[SessionTemplate]):
    model = SessionTemplate

    # READS
    def get(self, template_id: int) -> Optional[SessionTemplate]:
        stmt = (
            select(SessionTemplate)
            .options(selectinload(SessionTemplate.template_exercises))
            .where(SessionTemplate.id == template_id)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_name(self, name: str) -> Optional[SessionTemplate]:
        stmt = select(SessionTemplate).where(SessionTemplate.name == name)
        return self.db.execute(stmt).scalar_one_or_none()

    def list_all(self) -> list[SessionTemplate]:
        """Defaults first, then alphabetical."""
        stmt = (
            select(SessionTemplate)
            .options(selectinload(SessionTemplate.template_exercises))
            .order_by(SessionTemplate.is_default.desc(), SessionTemplate.name.asc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def tagged_exercises(self) -> list[TemplateExercise]:
        """Template exercises carrying muscle group tags."""
        stmt = select(TemplateExercise).where(TemplateExercise.muscle_groups.is_not(None))
        return list(self.db.execute(stmt).scalars().all())

    def find_exercise(self, template_id: int, name: str) -> Optional[TemplateExercise]:
        stmt = (
            select(TemplateExercise)
            .where(TemplateExercise.template_id == template_id)
            .order_by(TemplateExercise.order_index.asc())
        )
        wanted = name.strip().lower()
        for te in self.db.execute(stmt).scalars():
            if te.exercise_name.strip().lower() == wanted:
                return te
        return None

    # WRITES
    def create(
        self,
        *,
        name: str,
        description: str | None = None,
        is_default: bool = False,
        exercises: Sequence[TemplateExerciseIn] = (),
    ) -> SessionTemplate:
        template = SessionTemplate(name=name, description=description, is_default=is_default)
        template.template_exercises = build_template_exercises(exercises)
        try:
            with self.transaction():
                self.db.add(template)
        except IntegrityError:
            # Re-raise a clean marker the router maps to 409
            raise ValueError("template_name_exists")
        return self.get(template.id)

    def update(
        self,
        template: SessionTemplate,
        *,
        name: str,
        description: str | None,
        is_default: bool,
        exercises: Sequence[TemplateExerciseIn] | None = None,
    ) -> SessionTemplate:
        template_id = template.id
        try:
            with self.transaction():
                template.name = name
                template.description = description
                template.is_default = is_default
                if exercises is not None:
                    template.template_exercises.clear()
                    self.db.flush()
                    template.template_exercises.extend(build_template_exercises(exercises))
        except IntegrityError:
            raise ValueError("template_name_exists")
        self.db.expire_all()
        return self.get(template_id)

    def delete(self, template: SessionTemplate) -> None:
        self.db.delete(template)
        self.db.commit()
