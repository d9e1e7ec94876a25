"""
Database repository layer using SQLModel.

All repositories are built on SQLModel for:
- Type-safe ORM operations with Pydantic validation
- Async-first database access patterns
- Consistent CRUD interface via AsyncBaseRepository
- Query building utilities for filtering, ordering and pagination

Modules:
- base: AsyncBaseRepository interface, AsyncQueryBuilder utilities and the
  generic AsyncRepository collection handle
"""

from .base import AsyncBaseRepository, AsyncQueryBuilder, AsyncRepository, EntityType

__all__ = [
    "AsyncBaseRepository",
    "AsyncQueryBuilder",
    "AsyncRepository",
    "EntityType",
]
