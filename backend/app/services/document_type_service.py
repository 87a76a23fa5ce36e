"""
Samanvi Backend — Document Type Service
=========================================

What:  Catalogue of document categories (Insurance, Permit, ...) that every
       bus document is filed under.
Who:   Called by the /api/document-types routes; names also feed the
       missing-required report when no explicit type list is given.

Deletion guard:
    A type still referenced by any bus document cannot be deleted (409).
    The foreign key would reject it anyway; checking first gives the client a
    specific message instead of the generic store error.
"""

import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ConflictError, NotFoundError
from app.models.bus_document import BusDocument
from app.models.document_type import DocumentType
from app.repositories.bus_document_repository import BusDocumentRepository
from app.repositories.document_type_repository import DocumentTypeRepository
from app.schemas.common import DocumentCount
from app.schemas.document_type import (
    DocumentTypeCreate,
    DocumentTypeListItem,
    DocumentTypeResponse,
    DocumentTypeUpdate,
)

logger = logging.getLogger(__name__)

DUPLICATE_TYPE_MESSAGE = "Document type with this name already exists"


class DocumentTypeService:
    async def list_document_types(self, db: AsyncSession) -> List[DocumentTypeListItem]:
        doc_types = await DocumentTypeRepository(db).find_many(
            order_by=(DocumentType.name.asc(),)
        )
        counts = await BusDocumentRepository(db).count_by(
            BusDocument.doc_type_id, [doc_type.id for doc_type in doc_types]
        )
        return [
            DocumentTypeListItem(
                **DocumentTypeResponse.model_validate(doc_type).model_dump(),
                count=DocumentCount(documents=counts.get(doc_type.id, 0)),
            )
            for doc_type in doc_types
        ]

    async def get_document_type(self, db: AsyncSession, type_id: str) -> DocumentTypeResponse:
        doc_type = await DocumentTypeRepository(db).find_by_id(type_id)
        if doc_type is None:
            raise NotFoundError("Document type not found", context={"type_id": type_id})
        return DocumentTypeResponse.model_validate(doc_type)

    async def create_document_type(
        self, db: AsyncSession, data: DocumentTypeCreate
    ) -> DocumentTypeResponse:
        repo = DocumentTypeRepository(db)

        if await repo.find_by_name(data.name):
            logger.info("Document type creation rejected, duplicate name: %s", data.name)
            raise ConflictError(DUPLICATE_TYPE_MESSAGE)

        doc_type = await repo.create(data.model_dump())
        logger.info("Document type created successfully: %s (ID: %s)", doc_type.name, doc_type.id)
        return DocumentTypeResponse.model_validate(doc_type)

    async def update_document_type(
        self, db: AsyncSession, type_id: str, data: DocumentTypeUpdate
    ) -> DocumentTypeResponse:
        repo = DocumentTypeRepository(db)

        if await repo.find_by_id(type_id) is None:
            raise NotFoundError("Document type not found", context={"type_id": type_id})

        changes = data.model_dump(exclude_unset=True)
        name = changes.get("name")
        if name:
            existing = await repo.find_by_name(name)
            if existing is not None and existing.id != type_id:
                logger.info("Document type update rejected, duplicate name: %s", name)
                raise ConflictError(DUPLICATE_TYPE_MESSAGE)
        elif "name" in changes:
            del changes["name"]

        doc_type = await repo.update(type_id, changes)
        logger.info("Document type updated successfully: %s (ID: %s)", doc_type.name, doc_type.id)
        return DocumentTypeResponse.model_validate(doc_type)

    async def delete_document_type(self, db: AsyncSession, type_id: str) -> None:
        repo = DocumentTypeRepository(db)

        if await repo.find_by_id(type_id) is None:
            raise NotFoundError("Document type not found", context={"type_id": type_id})

        in_use = await BusDocumentRepository(db).count(BusDocument.doc_type_id == type_id)
        if in_use > 0:
            logger.info("Document type delete rejected, %d documents use it (ID: %s)", in_use, type_id)
            raise ConflictError("Cannot delete document type that is in use")

        await repo.delete(type_id)
        logger.info("Document type deleted successfully (ID: %s)", type_id)


document_type_service = DocumentTypeService()
