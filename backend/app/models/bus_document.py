"""
Samanvi Backend — BusDocument SQLAlchemy Model
================================================

What:  ORM model for the `bus_documents` table.
Why:   One uploaded compliance document (the file itself lives elsewhere;
       only its URL is stored).

Expiry semantics:
    expiry_date NULL means the document never expires:
    - it is never reported by the expiring-documents query
    - it always counts as valid in the missing-required report

Indexes:
    - expiry_date: range scans for expiring/expired queries and dashboard counts
    - bus_id, doc_type_id: dependant counts before deletes and per-bus listings
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.bus import generate_id
from app.utils.time_utils import utc_now

if TYPE_CHECKING:
    from app.models.bus import Bus
    from app.models.document_type import DocumentType


class BusDocument(Base):
    __tablename__ = "bus_documents"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=generate_id)

    bus_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("buses.id"), nullable=False, index=True
    )
    doc_type_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("document_types.id"), nullable=False, index=True
    )

    document_number: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    issue_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    expiry_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )
    file_url: Mapped[str] = mapped_column(Text, nullable=False)
    remarks: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )

    bus: Mapped["Bus"] = relationship(back_populates="documents")
    doc_type: Mapped["DocumentType"] = relationship(back_populates="documents")

    def __repr__(self) -> str:
        return (
            f"<BusDocument(id={self.id}, bus_id={self.bus_id}, "
            f"doc_type_id={self.doc_type_id}, expiry_date='{self.expiry_date}')>"
        )
