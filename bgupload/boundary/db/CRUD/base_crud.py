"""
Base CRUD operations for SQLAlchemy models.

Provides generic primary-key operations that model-specific CRUD classes
inherit and extend.

Dependencies: sqlalchemy
System role: Foundation for all database CRUD operations
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from bgupload.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """
    Generic base class for CRUD operations keyed by a single primary key.

    Type Parameters:
        ModelT: SQLAlchemy model class inheriting from Base

    Attributes:
        model: The SQLAlchemy model class to operate on
        key: The primary key column attribute
    """

    def __init__(self, model: type[ModelT], key_name: str) -> None:
        """
        Initialize CRUD with target model.

        Args:
            model: SQLAlchemy model class for database operations
            key_name: Name of the primary key attribute
        """
        self.model = model
        self.key = getattr(model, key_name)

    async def get(self, session: AsyncSession, key: Any) -> ModelT | None:
        """
        Retrieve a single record by primary key.

        Args:
            session: Async database session
            key: Primary key value

        Returns:
            Model instance if found, None otherwise
        """
        stmt = select(self.model).where(self.key == key)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def upsert(self, session: AsyncSession, **values) -> ModelT:
        """
        Insert a record or overwrite the existing one with the same key.

        Args:
            session: Async database session
            **values: Model field values, including the primary key

        Returns:
            Merged model instance
        """
        instance = await session.merge(self.model(**values))
        await session.flush()
        return instance

    async def delete(self, session: AsyncSession, key: Any) -> bool:
        """
        Delete a record by primary key.

        Args:
            session: Async database session
            key: Primary key value

        Returns:
            True if a record was deleted, False if not found
        """
        stmt = delete(self.model).where(self.key == key)
        result = await session.execute(stmt)
        return result.rowcount > 0
