"""
Samanvi Backend — Bus SQLAlchemy Model
========================================

What:  ORM model for the `buses` table.
Why:   A bus is the owner of compliance documents.

Table Design Rationale:
    - String ID: opaque identifier, generated application-side (uuid4 hex)
    - registration_no: natural key, unique constraint is the authoritative
      duplicate guard (the service pre-check is only a fast path)
    - documents: newest upload first, matching every endpoint that lists them

Deletion:
    Blocked by BusService while any document references the bus.
    passive_deletes=True keeps SQLAlchemy from loading the collection on
    delete; the foreign key in the database backstops the service check.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.utils.time_utils import utc_now

if TYPE_CHECKING:
    from app.models.bus_document import BusDocument


def generate_id() -> str:
    return uuid.uuid4().hex


class Bus(Base):
    __tablename__ = "buses"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=generate_id)

    registration_no: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    model: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    manufacturer: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    year_of_make: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    owner_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now
    )

    documents: Mapped[List["BusDocument"]] = relationship(
        back_populates="bus",
        order_by="BusDocument.uploaded_at.desc()",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Bus(id={self.id}, registration_no='{self.registration_no}')>"
