from __future__ import annotations

from typing import Any, ClassVar, Generic, List, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """
    Read-only repository over one tenant-scoped table.

    Rows are filtered by Postgres RLS on `app.tenant_id`, so the session must be
    inside tenant_context. Driver errors propagate unchanged.
    """

    model: ClassVar[Type[Any]]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def paginate(stmt: Select, limit: Optional[int], offset: int) -> Select:
        """Apply offset and, unless limit is None (whole collection), a limit."""
        stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        return stmt

    async def fetch_all(self, stmt: Select) -> List[ModelT]:
        result = await self.session.execute(stmt)
        return list(result.scalars())

    async def get_by_id(self, row_id: UUID) -> Optional[ModelT]:
        result = await self.session.execute(select(self.model).where(self.model.id == row_id))
        return result.scalar_one_or_none()
