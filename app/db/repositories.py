from __future__ import annotations

from typing import Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.db import models

ModelT = TypeVar("ModelT")


class BaseRepository(Generic[ModelT]):
    model: type[ModelT]

    def __init__(self, db: Session):
        self.db = db

    def create(self, **kwargs) -> ModelT:
        entity = self.model(**kwargs)
        self.db.add(entity)
        self.db.flush()
        return entity

    def get(self, entity_id: int) -> ModelT | None:
        return self.db.get(self.model, entity_id)

    def list(self, limit: int = 100, offset: int = 0) -> list[ModelT]:
        stmt = select(self.model).offset(offset).limit(limit)
        return self.db.execute(stmt).scalars().all()

    def update(self, entity: ModelT, **kwargs) -> ModelT:
        for key, value in kwargs.items():
            setattr(entity, key, value)
        self.db.flush()
        return entity

    def delete(self, entity: ModelT) -> None:
        self.db.delete(entity)
        self.db.flush()


class ProjectRepository(BaseRepository[models.Project]):
    model = models.Project


class LabelClassRepository(BaseRepository[models.LabelClass]):
    model = models.LabelClass


class DataItemRepository(BaseRepository[models.DataItem]):
    model = models.DataItem


class AnnotationRepository(BaseRepository[models.Annotation]):
    model = models.Annotation


class AssignmentRepository(BaseRepository[models.Assignment]):
    model = models.Assignment

    def list_for_review(self, project_id: int, status: str) -> list[models.Assignment]:
        """Return *project_id* assignments in *status* with review context eagerly loaded."""
        stmt = (
            select(models.Assignment)
            .where(
                models.Assignment.project_id == project_id,
                models.Assignment.status == status,
            )
            .options(
                selectinload(models.Assignment.data_item),
                selectinload(models.Assignment.project).selectinload(models.Project.label_classes),
                selectinload(models.Assignment.annotations),
            )
            .order_by(models.Assignment.id.asc())
        )
        return list(self.db.execute(stmt).scalars().all())


class ReviewLogRepository(BaseRepository[models.ReviewLog]):
    model = models.ReviewLog
