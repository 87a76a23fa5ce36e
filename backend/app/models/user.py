"""
Samanvi Backend — User SQLAlchemy Model
=========================================

What:  ORM model for the `users` table (voice-app accounts).
Why:   Stores login identity and the soft-delete flag.

Lifecycle:
    1. Created by registration (is_active = true)
    2. Updated in place (username, email, password)
    3. "Deleted" by setting is_active = false. The row is never removed,
       so its username and email stay reserved by the unique constraints.

Query Patterns:
    - Every read goes through UserRepository, which adds is_active = true
    - Login: WHERE username = :u AND is_active → unique index on username
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Integer, String, true
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.utils.time_utils import utc_now


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)

    # Nullable + unique: many users may have no email, but two cannot share one
    email: Mapped[Optional[str]] = mapped_column(String(255), unique=True, nullable=True)

    # bcrypt hash, never the plaintext; never serialized into a response
    password: Mapped[str] = mapped_column(String(255), nullable=False)

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=true(),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', is_active={self.is_active})>"
