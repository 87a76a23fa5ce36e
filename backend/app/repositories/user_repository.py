"""
Samanvi Backend — User Repository
===================================

Soft-delete lives here: `_scope()` adds `is_active = true` to every
find/count/update/delete lookup, so services never see deactivated users.

The one exception is `find_conflicting()`. Unique constraints cover every
row, active or not, so the duplicate pre-check must look at all of them.
"""

from typing import Any, List, Optional

from sqlalchemy import or_, select

from app.models.user import User
from app.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User

    def _scope(self) -> List[Any]:
        return [User.is_active.is_(True)]

    async def find_by_username(self, username: str) -> Optional[User]:
        return await self.find_one(User.username == username)

    async def find_conflicting(
        self,
        username: Optional[str] = None,
        email: Optional[str] = None,
        exclude_id: Optional[int] = None,
    ) -> Optional[User]:
        """First user (active or not) holding `username` or `email`, other than `exclude_id`."""
        clauses = []
        if username:
            clauses.append(User.username == username)
        if email:
            clauses.append(User.email == email)
        if not clauses:
            return None
        stmt = select(User).where(or_(*clauses))
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        result = await self.session.execute(stmt.limit(1))
        return result.scalars().first()

    async def soft_delete(self, user_id: int) -> User:
        return await self.update(user_id, {"is_active": False})
