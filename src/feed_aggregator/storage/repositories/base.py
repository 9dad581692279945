"""
Generic repository with the CRUD operations shared by all models.
"""

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel
from sqlalchemy import asc, desc
from sqlalchemy.orm import Session

from feed_aggregator.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class BaseRepository(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """Base repository bound to one session and one model class."""

    def __init__(self, session: Session, model: type[ModelType]) -> None:
        """Initialize repository.

        Args:
            session: SQLAlchemy Session instance
            model: ORM model class managed by this repository
        """
        self.session = session
        self.model = model

    def get_by_id(self, id: int) -> Optional[ModelType]:
        """Get a row by primary key, or None."""
        return self.session.get(self.model, id)

    def create(self, data: CreateSchemaType) -> ModelType:
        """Create a row from a pydantic schema."""
        instance = self.model(**data.model_dump())
        self.session.add(instance)
        self.session.flush()
        self.session.refresh(instance)
        return instance

    def update(self, instance: ModelType, data: UpdateSchemaType) -> ModelType:
        """Apply the explicitly set fields of a pydantic schema."""
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(instance, field, value)

        self.session.flush()
        self.session.refresh(instance)
        return instance

    def delete(self, instance: ModelType) -> None:
        self.session.delete(instance)
        self.session.flush()

    def list(
        self,
        limit: Optional[int] = None,
        offset: int = 0,
        order_by: str = "id",
        order_desc: bool = False,
        **filters: Any,
    ) -> list[ModelType]:
        """List rows with equality filters and ordering.

        Args:
            limit: Maximum number of results (None for all)
            offset: Number of results to skip
            order_by: Column name to order by
            order_desc: Sort in descending order
            **filters: Column equality filters

        Returns:
            List of model instances
        """
        query = self.session.query(self.model).filter_by(**filters)

        column = getattr(self.model, order_by)
        query = query.order_by(desc(column) if order_desc else asc(column))

        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)

        return query.all()

    def count(self, **filters: Any) -> int:
        return self.session.query(self.model).filter_by(**filters).count()
