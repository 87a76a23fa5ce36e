"""
Samanvi Backend — User Route Handlers
=======================================

What:  Account endpoints for the voice app.
Who:   Called by the mobile voice app; not gated (users authenticate
       themselves through /api/users/login).

Endpoints:
    GET    /api/users              active users
    POST   /api/users              register (201)
    POST   /api/users/login        check credentials
    GET    /api/users/{user_id}    one active user
    PUT    /api/users/{user_id}    partial update (password re-hashed)
    DELETE /api/users/{user_id}    soft delete (204)

The password hash is never part of any response.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.common import ErrorResponse
from app.schemas.user import (
    LoginRequest,
    LoginResponse,
    UserCreate,
    UserEnvelope,
    UserListResponse,
    UserResponse,
    UserUpdate,
)
from app.services.user_service import user_service

router = APIRouter(prefix="/api/users", tags=["Users"])

_VALIDATION = {400: {"description": "Validation error", "model": ErrorResponse}}
_NOT_FOUND = {404: {"description": "User not found", "model": ErrorResponse}}
_CONFLICT = {409: {"description": "Username or email already exists", "model": ErrorResponse}}


@router.get("", response_model=UserListResponse, summary="List active users")
async def list_users(db: AsyncSession = Depends(get_db_session)) -> UserListResponse:
    return await user_service.list_users(db=db)


@router.post(
    "",
    response_model=UserEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={**_VALIDATION, **_CONFLICT},
    summary="Register a user",
)
async def create_user(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db_session),
) -> UserEnvelope:
    return await user_service.create_user(db=db, data=payload)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        **_VALIDATION,
        401: {"description": "Invalid credentials", "model": ErrorResponse},
    },
    summary="Log in with username and password",
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> LoginResponse:
    return await user_service.login(db=db, data=payload)


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    responses={**_VALIDATION, **_NOT_FOUND},
    summary="Get a user",
)
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return await user_service.get_user(db=db, user_id=user_id)


@router.put(
    "/{user_id}",
    response_model=UserEnvelope,
    responses={**_VALIDATION, **_NOT_FOUND, **_CONFLICT},
    summary="Update a user",
)
async def update_user(
    user_id: int,
    payload: UserUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> UserEnvelope:
    return await user_service.update_user(db=db, user_id=user_id, data=payload)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={**_VALIDATION, **_NOT_FOUND},
    summary="Deactivate a user",
)
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await user_service.delete_user(db=db, user_id=user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
