"""
Samanvi Backend — Bus Repository
==================================

Loader options:
    with_documents()        → documents (newest first) and each document's type
    with_valid_documents()  → same, restricted to documents that have not expired
                              (expiry NULL or ≥ now)
"""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import or_
from sqlalchemy.orm import selectinload

from app.models.bus import Bus
from app.models.bus_document import BusDocument
from app.repositories.base import BaseRepository


class BusRepository(BaseRepository[Bus]):
    model = Bus

    async def find_by_registration_no(self, registration_no: str) -> Optional[Bus]:
        return await self.find_one(Bus.registration_no == registration_no)

    @staticmethod
    def search_criteria(term: str) -> Any:
        """Case-insensitive substring match on any descriptive column (OR)."""
        return or_(
            Bus.registration_no.icontains(term, autoescape=True),
            Bus.model.icontains(term, autoescape=True),
            Bus.manufacturer.icontains(term, autoescape=True),
            Bus.owner_name.icontains(term, autoescape=True),
        )

    @staticmethod
    def with_documents() -> Any:
        return (selectinload(Bus.documents).selectinload(BusDocument.doc_type),)

    @staticmethod
    def with_valid_documents(now: datetime) -> Any:
        valid = or_(BusDocument.expiry_date.is_(None), BusDocument.expiry_date >= now)
        return (selectinload(Bus.documents.and_(valid)).selectinload(BusDocument.doc_type),)
