"""
Samanvi Backend — User Service
================================

What:  Registration, profile updates, soft deletion and login for voice-app users.
Why:   Keeps the credential rules (hashing, uniform login failure, soft delete)
       out of the HTTP layer.
Who:   Called by the /api/users routes (ungated).

Login Flow:
    1. Look up the ACTIVE user by username
    2. Unknown user → still spend one bcrypt comparison, then fail
    3. Wrong password → fail
    4. Both failures raise the same UnauthorizedError("Invalid credentials"),
       so neither the message nor the timing tells a caller which one happened

Soft Delete:
    delete_user flips is_active. UserRepository hides inactive rows from every
    lookup, so the user then 404s on read and cannot log in, while the row
    (and its reserved username/email) stays in the table.
"""

import logging
from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ConflictError, NotFoundError, UnauthorizedError
from app.repositories.user_repository import UserRepository
from app.schemas.user import (
    LoginRequest,
    LoginResponse,
    LoginUser,
    UserCreate,
    UserEnvelope,
    UserListResponse,
    UserResponse,
    UserUpdate,
)
from app.utils.security import PasswordHasher, password_hasher

logger = logging.getLogger(__name__)

DUPLICATE_USER_MESSAGE = "Username or email already exists"


class UserService:
    def __init__(self, hasher: PasswordHasher):
        self.hasher = hasher

    async def list_users(self, db: AsyncSession) -> UserListResponse:
        users = await UserRepository(db).find_many()
        logger.info("Found %d active users", len(users))
        return UserListResponse(
            message="Users fetched successfully",
            users=[UserResponse.model_validate(user) for user in users],
        )

    async def get_user(self, db: AsyncSession, user_id: int) -> UserResponse:
        user = await UserRepository(db).find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found", context={"user_id": user_id})
        return UserResponse.model_validate(user)

    async def create_user(self, db: AsyncSession, data: UserCreate) -> UserEnvelope:
        repo = UserRepository(db)

        if await repo.find_conflicting(username=data.username, email=data.email):
            logger.info("Registration rejected, username or email taken: %s", data.username)
            raise ConflictError(DUPLICATE_USER_MESSAGE)

        hashed = await self.hasher.hash(data.password)
        user = await repo.create(
            {"username": data.username, "password": hashed, "email": data.email}
        )

        logger.info("User created successfully: %s (ID: %s)", user.username, user.id)
        return UserEnvelope(
            message="User created successfully",
            user=UserResponse.model_validate(user),
        )

    async def update_user(self, db: AsyncSession, user_id: int, data: UserUpdate) -> UserEnvelope:
        repo = UserRepository(db)

        if await repo.find_by_id(user_id) is None:
            raise NotFoundError("User not found", context={"user_id": user_id})

        changes: Dict[str, Any] = data.model_dump(exclude_unset=True)

        if changes.get("username") or changes.get("email"):
            conflict = await repo.find_conflicting(
                username=changes.get("username"),
                email=changes.get("email"),
                exclude_id=user_id,
            )
            if conflict:
                logger.info("Username/email conflict for user ID %s", user_id)
                raise ConflictError(DUPLICATE_USER_MESSAGE)

        if "password" in changes:
            if changes["password"] is None:
                del changes["password"]
            else:
                changes["password"] = await self.hasher.hash(changes["password"])
        if "username" in changes and changes["username"] is None:
            del changes["username"]

        user = await repo.update(user_id, changes)

        logger.info("User updated successfully: %s (ID: %s)", user.username, user.id)
        return UserEnvelope(
            message="User updated successfully",
            user=UserResponse.model_validate(user),
        )

    async def delete_user(self, db: AsyncSession, user_id: int) -> None:
        repo = UserRepository(db)
        if await repo.find_by_id(user_id) is None:
            raise NotFoundError("User not found", context={"user_id": user_id})
        await repo.soft_delete(user_id)
        logger.info("User soft deleted successfully (ID: %s)", user_id)

    async def login(self, db: AsyncSession, data: LoginRequest) -> LoginResponse:
        user = await UserRepository(db).find_by_username(data.username)

        if user is None:
            await self.hasher.burn(data.password)
            logger.info("Login failed for %s", data.username)
            raise UnauthorizedError("Invalid credentials")

        if not await self.hasher.verify(data.password, user.password):
            logger.info("Login failed for %s", data.username)
            raise UnauthorizedError("Invalid credentials")

        logger.info("User logged in successfully: %s (ID: %s)", user.username, user.id)
        return LoginResponse(
            message="Login successful",
            user=LoginUser(id=user.id, username=user.username, email=user.email),
        )


user_service = UserService(hasher=password_hasher)
