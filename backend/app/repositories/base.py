"""
Samanvi Backend — Generic Repository
======================================

What:  Typed CRUD mapping onto one ORM model.
How:   Subclasses set `model` and may override `_scope()` to add criteria
       that every lookup must satisfy (UserRepository hides soft-deleted rows).

Error translation:
    IntegrityError from flush() is classified once, here:
        unique violation (SQLSTATE 23505, "UNIQUE constraint failed") → DuplicateRecordError
        anything else (FK, NOT NULL, CHECK)                           → ConstraintViolationError
    update()/delete() of a row that is not there → RecordNotFoundError
"""

import logging
from typing import Any, Dict, Generic, List, Mapping, Optional, Sequence, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from app.database import Base
from app.exceptions import ConstraintViolationError, DuplicateRecordError, RecordNotFoundError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)

# PostgreSQL SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    """Tell a unique-constraint failure apart from other integrity errors."""
    for candidate in (exc.orig, getattr(exc.orig, "__cause__", None)):
        if candidate is None:
            continue
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if code:
            return code == UNIQUE_VIOLATION
    message = str(exc.orig).lower()
    return "unique" in message or "duplicate key" in message


class BaseRepository(Generic[ModelT]):
    model: Type[ModelT]

    def __init__(self, session: AsyncSession):
        self.session = session

    # ── Query building ────────────────────────────────────────────────────

    def _scope(self) -> List[Any]:
        """Criteria applied to every lookup. Empty for most entities."""
        return []

    def _select(self, *criteria: Any) -> Select:
        conditions = [*self._scope(), *criteria]
        stmt = select(self.model)
        if conditions:
            stmt = stmt.where(*conditions)
        return stmt

    # ── Reads ─────────────────────────────────────────────────────────────

    async def find_by_id(self, entity_id: Any, options: Sequence[Any] = ()) -> Optional[ModelT]:
        stmt = self._select(self.model.id == entity_id)
        if options:
            # Re-populate rows already in the identity map so eager loads apply
            stmt = stmt.options(*options).execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_one(self, *criteria: Any, options: Sequence[Any] = ()) -> Optional[ModelT]:
        stmt = self._select(*criteria).options(*options).limit(1)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def find_many(
        self,
        *criteria: Any,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
        order_by: Sequence[Any] = (),
        options: Sequence[Any] = (),
    ) -> List[ModelT]:
        stmt = self._select(*criteria).options(*options)
        if options:
            stmt = stmt.execution_options(populate_existing=True)
        if order_by:
            stmt = stmt.order_by(*order_by)
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count(self, *criteria: Any) -> int:
        conditions = [*self._scope(), *criteria]
        stmt = select(func.count()).select_from(self.model)
        if conditions:
            stmt = stmt.where(*conditions)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    # ── Writes ────────────────────────────────────────────────────────────

    async def create(self, data: Mapping[str, Any]) -> ModelT:
        entity = self.model(**data)
        self.session.add(entity)
        await self._flush()
        return entity

    async def update(self, entity_id: Any, data: Mapping[str, Any]) -> ModelT:
        entity = await self.find_by_id(entity_id)
        if entity is None:
            raise RecordNotFoundError(context={"model": self.model.__name__, "id": str(entity_id)})
        for key, value in data.items():
            setattr(entity, key, value)
        await self._flush()
        return entity

    async def delete(self, entity_id: Any) -> None:
        entity = await self.find_by_id(entity_id)
        if entity is None:
            raise RecordNotFoundError(context={"model": self.model.__name__, "id": str(entity_id)})
        await self.session.delete(entity)
        await self._flush()

    async def _flush(self) -> None:
        try:
            await self.session.flush()
        except IntegrityError as exc:
            context: Dict[str, Any] = {
                "model": self.model.__name__,
                "original_error": str(exc.orig),
            }
            if is_unique_violation(exc):
                logger.info("Unique constraint rejected %s write", self.model.__name__)
                raise DuplicateRecordError(context=context) from exc
            logger.warning("Integrity error on %s write: %s", self.model.__name__, exc.orig)
            raise ConstraintViolationError(context=context) from exc
