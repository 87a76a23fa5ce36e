"""
Samanvi Backend — DocumentType SQLAlchemy Model
=================================================

What:  ORM model for the `document_types` table (Insurance, Permit, ...).
Why:   Document kinds are data, not code, so operators can add new ones.
       The missing-required report matches on `name`.
"""

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.bus import generate_id
from app.utils.time_utils import utc_now

if TYPE_CHECKING:
    from app.models.bus_document import BusDocument


class DocumentType(Base):
    __tablename__ = "document_types"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=generate_id)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now
    )

    documents: Mapped[List["BusDocument"]] = relationship(
        back_populates="doc_type",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<DocumentType(id={self.id}, name='{self.name}')>"
