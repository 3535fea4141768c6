"""Base repository implementation for database operations.

This module provides a generic repository pattern implementation with common
database operations that can be inherited by specific repositories.

Features:
- Generic filtered reads
- Type-safe queries
- Common filters and ordering
"""

from typing import Generic, TypeVar, Type, Optional, List, Any, Dict, Union
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from closetai.models.database.base import Base

# Type variable for models
ModelType = TypeVar("ModelType", bound=Base)

class BaseRepository(Generic[ModelType]):
    """Base repository providing common database operations."""

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        """Initialize repository with model and session.

        Args:
            model: SQLAlchemy model class
            session: AsyncSession instance
        """
        self.model = model
        self.session = session

    async def get_multi(
        self,
        *,
        skip: int = 0,
        limit: Optional[int] = 100,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[List[Union[str, tuple]]] = None
    ) -> List[ModelType]:
        """Get multiple records with filtering and pagination.

        Args:
            skip: Number of records to skip
            limit: Maximum number of records to return, None for all
            filters: Dictionary of field filters
            order_by: List of fields, or (field, "asc"/"desc") tuples

        Returns:
            List of model instances
        """
        query = select(self.model)

        # Apply filters
        if filters:
            conditions = []
            for field, value in filters.items():
                if isinstance(value, (list, tuple)):
                    conditions.append(getattr(self.model, field).in_(value))
                else:
                    conditions.append(getattr(self.model, field) == value)
            query = query.where(and_(*conditions))

        # Apply ordering
        if order_by:
            for field in order_by:
                if isinstance(field, tuple):
                    field_name, direction = field
                    query = query.order_by(
                        getattr(getattr(self.model, field_name), direction)()
                    )
                else:
                    query = query.order_by(getattr(self.model, field))

        # Apply pagination
        query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)

        result = await self.session.execute(query)
        return list(result.scalars().all())
