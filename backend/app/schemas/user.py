"""
Samanvi Backend — User Schemas
================================

What:  Registration, update and login payloads plus the public user shapes.
Why:   The password hash lives on the ORM model only; no response model here
       has a password field, so it cannot leak through serialization.

Constraints:
    username: 3-50 chars, letters/digits/underscore only
    password: 6-255 chars
    email:    optional, must be a syntactically valid address
"""

from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field

from app.schemas.common import CamelModel

USERNAME_PATTERN = r"^[a-zA-Z0-9_]+$"


class UserCreate(CamelModel):
    username: str = Field(min_length=3, max_length=50, pattern=USERNAME_PATTERN)
    password: str = Field(min_length=6, max_length=255)
    email: Optional[EmailStr] = None


class UserUpdate(CamelModel):
    """All fields optional; only the ones sent are applied."""

    username: Optional[str] = Field(default=None, min_length=3, max_length=50, pattern=USERNAME_PATTERN)
    password: Optional[str] = Field(default=None, min_length=6, max_length=255)
    email: Optional[EmailStr] = None


class LoginRequest(CamelModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserResponse(CamelModel):
    id: int
    username: str
    email: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class UserEnvelope(CamelModel):
    message: str
    user: UserResponse


class UserListResponse(CamelModel):
    message: str
    users: List[UserResponse]


class LoginUser(CamelModel):
    id: int
    login: bool = True
    username: str
    email: Optional[str] = None


class LoginResponse(CamelModel):
    message: str = "Login successful"
    user: LoginUser
