"""
Base repository.

Shared data access for all models. Repositories only flush; committing
belongs to the service that owns the unit of work.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from affiliate.models.base import Base


ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Generic repository bound to one model and one session.

    Example:
        class CommissionRepository(BaseRepository[Commission]):
            def __init__(self, session: AsyncSession) -> None:
                super().__init__(Commission, session)
    """

    def __init__(
        self, model: type[ModelType], session: AsyncSession
    ) -> None:
        self.model = model
        self.session = session

    async def get_by_id(self, id: int) -> ModelType | None:
        """Get entity by primary key, from the identity map if loaded."""
        return await self.session.get(self.model, id)

    async def get_for_update(self, id: int) -> ModelType | None:
        """
        Get entity by ID and lock its row until the transaction ends.

        Loaded instances are refreshed, so balances read under the lock
        are the committed values and not a stale in-session copy.

        Args:
            id: Entity ID

        Returns:
            Locked entity or None
        """
        stmt = (
            select(self.model)
            .where(self.model.id == id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by(self, **filters: Any) -> ModelType | None:
        """
        Get the single entity matching equality filters.

        Intended for unique columns (code, slug, order_id, user_id).

        Args:
            **filters: Column filters

        Returns:
            Entity or None
        """
        stmt = select(self.model).filter_by(**filters)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, **data: Any) -> ModelType:
        """
        Add a new entity and flush it so database defaults and the
        primary key are populated.

        Args:
            **data: Column values

        Returns:
            Created entity
        """
        entity = self.model(**data)
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def count(self, **filters: Any) -> int:
        """Count entities matching equality filters."""
        stmt = select(func.count()).select_from(self.model)
        if filters:
            stmt = stmt.filter_by(**filters)
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def exists(self, **filters: Any) -> bool:
        """Check if any entity matches equality filters."""
        return await self.count(**filters) > 0
