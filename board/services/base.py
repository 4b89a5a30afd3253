"""
Query helpers shared by the board services.

Lookups raise the domain ``NotFoundError`` instead of returning None so that
every operation fails the same way when a referenced row is missing.
"""

from typing import Any, Optional, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from board.core.exceptions import NotFoundError
from board.db.base_class import Base

ModelType = TypeVar("ModelType", bound=Base)


class AsyncQueryUtils:
    """Common async query patterns."""

    @staticmethod
    async def get_or_raise(
        db: AsyncSession,
        model: Type[ModelType],
        id: Any,
        *,
        for_update: bool = False,
        label: Optional[str] = None,
    ) -> ModelType:
        """
        Get a record by ID or raise NotFoundError.

        Args:
            db: Async database session
            model: SQLAlchemy model class
            id: Primary key value
            for_update: Lock the row for the rest of the transaction
            label: Name used in the error message (defaults to the model name)

        Returns:
            Model instance

        Raises:
            NotFoundError: If no row has this ID
        """
        stmt = select(model).where(model.id == id)
        if for_update:
            # Re-read the locked row even if the session already holds it
            stmt = stmt.with_for_update(of=model).execution_options(populate_existing=True)

        result = await db.execute(stmt)
        obj = result.unique().scalar_one_or_none()

        if obj is None:
            raise NotFoundError(f"{label or model.__name__} not found: {id}")

        return obj

    @staticmethod
    async def count(db: AsyncSession, model: Type[ModelType], *conditions) -> int:
        """Count rows of ``model`` matching all ``conditions``."""
        stmt = select(func.count()).select_from(model)
        if conditions:
            stmt = stmt.where(*conditions)
        result = await db.execute(stmt)
        return result.scalar() or 0
