"""
Repository interface and the shared SQLModel implementation.

Every table repository derives from ``SQLModelRepository`` and adds its own
lookups on top of the generic CRUD surface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..base import utc_now

# Generic type for SQLModel entities
EntityType = TypeVar("EntityType", bound=SQLModel)


class AsyncBaseRepository(ABC, Generic[EntityType]):
    """Base async repository interface with common CRUD operations using SQLModel."""

    def __init__(self, session: AsyncSession, model: Type[EntityType]) -> None:
        self.session = session
        self.model = model

    @abstractmethod
    async def create(self, entity: EntityType) -> EntityType:
        """Insert a row and return it with server-side fields loaded."""

    @abstractmethod
    async def get_by_id(self, entity_id: str) -> Optional[EntityType]:
        """Row with this primary key, or None."""

    @abstractmethod
    async def update(self, entity: EntityType) -> EntityType:
        """Persist changes made to a loaded row."""

    @abstractmethod
    async def delete(self, entity_id: str) -> bool:
        """Delete by primary key. False when no such row exists."""

    @abstractmethod
    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[EntityType]:
        """Newest rows first, narrowed by equality ``filters`` on known columns."""


class SQLModelRepository(AsyncBaseRepository[EntityType]):
    """CRUD implementation shared by every table-backed repository.

    Each write commits immediately and refreshes the instance, so callers
    always get the persisted state back.
    """

    order_by: Optional[str] = "created_at"

    async def create(self, entity: EntityType) -> EntityType:
        self.session.add(entity)
        await self.session.commit()
        await self.session.refresh(entity)
        return entity

    async def get_by_id(self, entity_id: str) -> Optional[EntityType]:
        stmt = select(self.model).where(self.model.id == str(entity_id))  # type: ignore[attr-defined]
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def update(self, entity: EntityType) -> EntityType:
        if hasattr(entity, "updated_at"):
            entity.updated_at = utc_now()  # type: ignore[attr-defined]
        self.session.add(entity)
        await self.session.commit()
        await self.session.refresh(entity)
        return entity

    async def delete(self, entity_id: str) -> bool:
        entity = await self.get_by_id(entity_id)
        if entity is None:
            return False
        await self.session.delete(entity)
        await self.session.commit()
        return True

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[EntityType]:
        stmt = select(self.model)
        if self.order_by and hasattr(self.model, self.order_by):
            stmt = stmt.order_by(getattr(self.model, self.order_by).desc())

        if filters:
            stmt = AsyncQueryBuilder.apply_filters(stmt, self.model, filters)

        stmt = AsyncQueryBuilder.apply_pagination(stmt, limit, offset)

        result = await self.session.exec(stmt)
        return list(result)

    async def _first(self, stmt) -> Optional[EntityType]:
        result = await self.session.exec(stmt)
        return result.first()

    async def _all(self, stmt) -> List[EntityType]:
        result = await self.session.exec(stmt)
        return list(result)


class AsyncQueryBuilder:
    """Statement helpers shared by ``list`` and the custom lookups."""

    @staticmethod
    def apply_filters(stmt, model: Type[EntityType], filters: Dict[str, Any]):
        """AND together ``column == value`` for every known column with a non-None value."""
        for key, value in filters.items():
            if value is not None and hasattr(model, key):
                stmt = stmt.where(getattr(model, key) == value)
        return stmt

    @staticmethod
    def apply_pagination(stmt, limit: Optional[int], offset: Optional[int]):
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset is not None:
            stmt = stmt.offset(offset)
        return stmt
