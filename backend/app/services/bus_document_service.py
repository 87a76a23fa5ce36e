"""
Samanvi Backend — Bus Document Service
========================================

What:  Compliance documents attached to buses, plus the two fleet-wide
       compliance reports built on top of them.
Who:   Called by the /api/buses/{busId}/documents and /api/documents routes.

Reports:
    Expiring documents (withinDays=N)
        every document whose expiry date falls on or before now + N days,
        soonest first. Already-expired documents are included; documents
        without an expiry date never are.

    Buses missing required documents (types="Insurance,Permit")
        for each bus, the set of type names it holds a VALID document for
        (expiry NULL or still in the future) is compared against the
        required names. Any bus lacking at least one of them is reported.
        With no `types` filter every known document type is required.

    Both read a single `now`, taken once per request, so every row in one
    response is judged against the same instant.
"""

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import NotFoundError
from app.models.bus import Bus
from app.models.bus_document import BusDocument
from app.repositories.bus_document_repository import BusDocumentRepository
from app.repositories.bus_repository import BusRepository
from app.repositories.document_type_repository import DocumentTypeRepository
from app.schemas.bus_document import (
    BusDocumentCreate,
    BusDocumentDetail,
    BusDocumentUpdate,
    BusDocumentWithType,
    BusWithDocuments,
    MissingRequiredResponse,
)
from app.utils.time_utils import days_from_now, utc_now

logger = logging.getLogger(__name__)


def parse_required_types(types: Optional[str]) -> List[str]:
    """Split a comma-separated type list, trimming entries and dropping blanks."""
    if not types:
        return []
    return [name.strip() for name in types.split(",") if name.strip()]


class BusDocumentService:
    async def _load_detail(self, db: AsyncSession, doc_id: str) -> BusDocumentDetail:
        document = await BusDocumentRepository(db).find_by_id(
            doc_id, options=BusDocumentRepository.with_relations()
        )
        if document is None:
            raise NotFoundError("Document not found", context={"doc_id": doc_id})
        return BusDocumentDetail.model_validate(document)

    async def create_document(
        self, db: AsyncSession, bus_id: str, data: BusDocumentCreate
    ) -> BusDocumentDetail:
        if await BusRepository(db).find_by_id(bus_id) is None:
            raise NotFoundError("Bus not found", context={"bus_id": bus_id})
        if await DocumentTypeRepository(db).find_by_id(data.doc_type_id) is None:
            raise NotFoundError("Document type not found", context={"doc_type_id": data.doc_type_id})

        document = await BusDocumentRepository(db).create({**data.model_dump(), "bus_id": bus_id})
        logger.info("Document uploaded successfully for bus %s (ID: %s)", bus_id, document.id)
        return await self._load_detail(db, document.id)

    async def list_bus_documents(self, db: AsyncSession, bus_id: str) -> List[BusDocumentWithType]:
        if await BusRepository(db).find_by_id(bus_id) is None:
            raise NotFoundError("Bus not found", context={"bus_id": bus_id})

        documents = await BusDocumentRepository(db).find_many(
            BusDocument.bus_id == bus_id,
            order_by=(BusDocument.uploaded_at.desc(),),
            options=BusDocumentRepository.with_doc_type(),
        )
        return [BusDocumentWithType.model_validate(document) for document in documents]

    async def get_document(self, db: AsyncSession, doc_id: str) -> BusDocumentDetail:
        return await self._load_detail(db, doc_id)

    async def update_document(
        self, db: AsyncSession, doc_id: str, data: BusDocumentUpdate
    ) -> BusDocumentDetail:
        repo = BusDocumentRepository(db)

        if await repo.find_by_id(doc_id) is None:
            raise NotFoundError("Document not found", context={"doc_id": doc_id})

        changes = data.model_dump(exclude_unset=True)
        for required in ("doc_type_id", "file_url"):
            if required in changes and changes[required] is None:
                del changes[required]

        if "doc_type_id" in changes:
            if await DocumentTypeRepository(db).find_by_id(changes["doc_type_id"]) is None:
                raise NotFoundError(
                    "Document type not found", context={"doc_type_id": changes["doc_type_id"]}
                )

        await repo.update(doc_id, changes)
        logger.info("Document updated successfully (ID: %s)", doc_id)
        return await self._load_detail(db, doc_id)

    async def delete_document(self, db: AsyncSession, doc_id: str) -> None:
        repo = BusDocumentRepository(db)
        if await repo.find_by_id(doc_id) is None:
            raise NotFoundError("Document not found", context={"doc_id": doc_id})
        await repo.delete(doc_id)
        logger.info("Document deleted successfully (ID: %s)", doc_id)

    # ── Compliance reports ────────────────────────────────────────────────

    async def get_expiring_documents(
        self, db: AsyncSession, within_days: int = 30
    ) -> List[BusDocumentDetail]:
        cutoff = days_from_now(within_days)
        documents = await BusDocumentRepository(db).find_many(
            BusDocument.expiry_date.is_not(None),
            BusDocument.expiry_date <= cutoff,
            order_by=(BusDocument.expiry_date.asc(),),
            options=BusDocumentRepository.with_relations(),
        )
        logger.info("Found %d documents expiring within %d days", len(documents), within_days)
        return [BusDocumentDetail.model_validate(document) for document in documents]

    async def get_buses_missing_required(
        self, db: AsyncSession, types: Optional[str] = None
    ) -> MissingRequiredResponse:
        required_types = parse_required_types(types)
        if not required_types:
            required_types = await DocumentTypeRepository(db).list_names()

        now = utc_now()
        buses = await BusRepository(db).find_many(
            order_by=(Bus.created_at.desc(),),
            options=BusRepository.with_valid_documents(now),
        )

        missing = []
        for bus in buses:
            held = {document.doc_type.name for document in bus.documents}
            if any(name not in held for name in required_types):
                missing.append(BusWithDocuments.model_validate(bus))

        logger.info(
            "%d of %d buses are missing at least one of %d required document types",
            len(missing), len(buses), len(required_types),
        )
        return MissingRequiredResponse(
            buses=missing,
            required_types=required_types,
            total=len(missing),
        )


bus_document_service = BusDocumentService()
