"""
Samanvi Backend — Bus Document Repository
===========================================

Besides plain CRUD, provides the grouped dependant counts that back the
`_count.documents` field and the delete guards of buses and document types.
"""

from typing import Any, Dict, Iterable

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from app.models.bus_document import BusDocument
from app.repositories.base import BaseRepository


class BusDocumentRepository(BaseRepository[BusDocument]):
    model = BusDocument

    @staticmethod
    def with_relations() -> Any:
        return (selectinload(BusDocument.bus), selectinload(BusDocument.doc_type))

    @staticmethod
    def with_doc_type() -> Any:
        return (selectinload(BusDocument.doc_type),)

    async def count_by(self, column: Any, values: Iterable[Any]) -> Dict[Any, int]:
        """
        Document counts grouped by `column` (BusDocument.bus_id or .doc_type_id).

        Values with no documents are absent from the result; callers default to 0.
        """
        values = list(values)
        if not values:
            return {}
        stmt = (
            select(column, func.count(BusDocument.id))
            .where(column.in_(values))
            .group_by(column)
        )
        result = await self.session.execute(stmt)
        return {key: count for key, count in result.all()}
