"""Samanvi Backend — Document Type Repository"""

from typing import List, Optional

from sqlalchemy import select

from app.models.document_type import DocumentType
from app.repositories.base import BaseRepository


class DocumentTypeRepository(BaseRepository[DocumentType]):
    model = DocumentType

    async def find_by_name(self, name: str) -> Optional[DocumentType]:
        return await self.find_one(DocumentType.name == name)

    async def list_names(self) -> List[str]:
        result = await self.session.execute(
            select(DocumentType.name).order_by(DocumentType.name.asc())
        )
        return list(result.scalars().all())
