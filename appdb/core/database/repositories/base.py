"""
Base repository interfaces and the generic collection handle.

This module provides the repository pattern used for every model an
application declares. ``AsyncRepository`` is the collection handle returned by
``AppDbContext.collection``: add, query and remove over one model class, with
all SQL produced by SQLAlchemy.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import (
    Any,
    AsyncIterator,
    Dict,
    Generic,
    Iterable,
    List,
    Optional,
    Sequence,
    Tuple,
    Type,
    TypeVar,
    Union,
)

from sqlalchemy import func, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import SQLModel

# Generic type for SQLModel entities
EntityType = TypeVar("EntityType", bound=SQLModel)

OrderBy = Union[str, Sequence[str], None]


class AsyncBaseRepository(ABC, Generic[EntityType]):
    """Base async repository interface with common CRUD operations using SQLModel."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], model: Type[EntityType]) -> None:
        """Initialize repository with an async session factory and SQLModel entity class.

        Args:
            session_factory: Factory producing async sessions for database operations
            model: SQLModel entity class for this repository
        """
        self.session_factory = session_factory
        self.model = model

    @abstractmethod
    async def add(self, entity: EntityType, *, session: Optional[AsyncSession] = None) -> EntityType:
        """Create a new entity record.

        Args:
            entity: SQLModel instance to persist
            session: Join this session instead of opening and committing a new one

        Returns:
            Persisted entity with generated fields populated
        """

    @abstractmethod
    async def get(self, entity_id: Any, *, session: Optional[AsyncSession] = None) -> Optional[EntityType]:
        """Get entity by its primary identifier.

        Args:
            entity_id: Primary key value (a tuple for composite keys)
            session: Join this session instead of opening a new one

        Returns:
            Entity instance or None if not found
        """

    @abstractmethod
    async def update(self, entity: EntityType, *, session: Optional[AsyncSession] = None) -> EntityType:
        """Update an existing entity record.

        Args:
            entity: SQLModel instance with updated fields
            session: Join this session instead of opening and committing a new one

        Returns:
            Updated entity instance
        """

    @abstractmethod
    async def remove(self, entity_id: Any, *, session: Optional[AsyncSession] = None) -> bool:
        """Delete entity by its primary identifier.

        Args:
            entity_id: Primary key value
            session: Join this session instead of opening and committing a new one

        Returns:
            True if deleted, False if not found
        """

    @abstractmethod
    async def list(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        filters: Optional[Dict[str, Any]] = None,
        order_by: OrderBy = None,
        *,
        session: Optional[AsyncSession] = None,
    ) -> List[EntityType]:
        """List entities with optional pagination and filtering.

        Args:
            limit: Maximum number of records to return
            offset: Number of records to skip
            filters: Dictionary of field filters
            order_by: Column name or names to sort by (primary key when omitted)
            session: Join this session instead of opening a new one

        Returns:
            List of entity instances
        """


class AsyncQueryBuilder:
    """Utility class for building async SQLModel-based database queries."""

    @staticmethod
    def apply_filters(stmt, model: Type[EntityType], filters: Dict[str, Any]):
        """Apply equality filters to a select statement.

        Keys that are not attributes of ``model`` and ``None`` values are skipped.

        Args:
            stmt: SQLAlchemy select statement
            model: SQLModel entity class
            filters: Dictionary of field filters

        Returns:
            Modified select statement with filters applied
        """
        for key, value in filters.items():
            if value is not None and hasattr(model, key):
                stmt = stmt.where(getattr(model, key) == value)
        return stmt

    @staticmethod
    def apply_pagination(stmt, limit: Optional[int], offset: Optional[int]):
        """Apply pagination to a select statement.

        Args:
            stmt: SQLAlchemy select statement
            limit: Maximum number of records
            offset: Number of records to skip

        Returns:
            Modified select statement with pagination applied
        """
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset is not None:
            stmt = stmt.offset(offset)
        return stmt

    @staticmethod
    def apply_ordering(stmt, model: Type[EntityType], order_by: OrderBy):
        """Sort by the named columns, or by the primary key when none are given.

        A leading ``-`` on a column name sorts that column descending.

        Raises:
            AttributeError: If a named column does not exist on ``model``.
        """
        if order_by is None:
            return stmt.order_by(*inspect(model).primary_key)
        names = [order_by] if isinstance(order_by, str) else list(order_by)
        for name in names:
            descending = name.startswith("-")
            column = getattr(model, name.lstrip("-"))
            stmt = stmt.order_by(column.desc() if descending else column)
        return stmt


class AsyncRepository(AsyncBaseRepository[EntityType]):
    """
    Collection handle for one model class.

    Every operation opens and commits its own session unless ``session=`` is
    given, in which case it only flushes and leaves the commit to the caller.
    That lets several calls share one ``AppDbContext.transaction()``.
    """

    @asynccontextmanager
    async def _scope(self, session: Optional[AsyncSession]) -> AsyncIterator[Tuple[AsyncSession, bool]]:
        if session is not None:
            yield session, False
            return
        async with self.session_factory() as own:
            yield own, True

    async def add(self, entity: EntityType, *, session: Optional[AsyncSession] = None) -> EntityType:
        async with self._scope(session) as (s, owned):
            s.add(entity)
            if owned:
                await s.commit()
                await s.refresh(entity)
            else:
                await s.flush()
            return entity

    async def add_all(
        self, entities: Iterable[EntityType], *, session: Optional[AsyncSession] = None
    ) -> List[EntityType]:
        """Persist several entities in one unit of work."""
        items = [e for e in entities]
        async with self._scope(session) as (s, owned):
            s.add_all(items)
            if owned:
                await s.commit()
                for item in items:
                    await s.refresh(item)
            else:
                await s.flush()
            return items

    async def get(self, entity_id: Any, *, session: Optional[AsyncSession] = None) -> Optional[EntityType]:
        async with self._scope(session) as (s, _owned):
            return await s.get(self.model, entity_id)

    async def list(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        filters: Optional[Dict[str, Any]] = None,
        order_by: OrderBy = None,
        *,
        session: Optional[AsyncSession] = None,
    ) -> List[EntityType]:
        stmt = select(self.model)
        if filters:
            stmt = AsyncQueryBuilder.apply_filters(stmt, self.model, filters)
        stmt = AsyncQueryBuilder.apply_ordering(stmt, self.model, order_by)
        stmt = AsyncQueryBuilder.apply_pagination(stmt, limit, offset)

        async with self._scope(session) as (s, _owned):
            result = await s.execute(stmt)
            return [row for row in result.scalars().all()]

    async def count(
        self, filters: Optional[Dict[str, Any]] = None, *, session: Optional[AsyncSession] = None
    ) -> int:
        """Number of rows matching ``filters``."""
        stmt = select(func.count()).select_from(self.model)
        if filters:
            stmt = AsyncQueryBuilder.apply_filters(stmt, self.model, filters)

        async with self._scope(session) as (s, _owned):
            result = await s.execute(stmt)
            return int(result.scalar_one())

    async def update(self, entity: EntityType, *, session: Optional[AsyncSession] = None) -> EntityType:
        async with self._scope(session) as (s, owned):
            merged = await s.merge(entity)
            if owned:
                await s.commit()
                await s.refresh(merged)
            else:
                await s.flush()
            return merged

    async def remove(self, entity_id: Any, *, session: Optional[AsyncSession] = None) -> bool:
        async with self._scope(session) as (s, owned):
            entity = await s.get(self.model, entity_id)
            if entity is None:
                return False
            await s.delete(entity)
            if owned:
                await s.commit()
            else:
                await s.flush()
            return True

    def __repr__(self) -> str:
        return f"AsyncRepository(model={self.model.__name__})"
