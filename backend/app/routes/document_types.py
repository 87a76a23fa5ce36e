"""
Samanvi Backend — Document Type Route Handlers

    GET    /api/document-types           all types by name, with `_count.documents`
    POST   /api/document-types           create (201)
    GET    /api/document-types/{id}      one type
    PUT    /api/document-types/{id}      partial update
    DELETE /api/document-types/{id}      only while unused (204)

Guarded by the AUTH_DOCUMENT_TYPES gate (API key by default).
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.common import ErrorResponse
from app.schemas.document_type import (
    DocumentTypeCreate,
    DocumentTypeListItem,
    DocumentTypeResponse,
    DocumentTypeUpdate,
)
from app.services.document_type_service import document_type_service

router = APIRouter(prefix="/api", tags=["Document Types"])

_ERRORS = {
    400: {"description": "Validation error", "model": ErrorResponse},
    401: {"description": "Missing credentials", "model": ErrorResponse},
    403: {"description": "Invalid API key", "model": ErrorResponse},
}


@router.get(
    "/document-types",
    response_model=List[DocumentTypeListItem],
    responses=_ERRORS,
    summary="List document types",
)
async def list_document_types(
    db: AsyncSession = Depends(get_db_session),
) -> List[DocumentTypeListItem]:
    return await document_type_service.list_document_types(db=db)


@router.post(
    "/document-types",
    response_model=DocumentTypeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**_ERRORS, 409: {"description": "Duplicate name", "model": ErrorResponse}},
    summary="Create a document type",
)
async def create_document_type(
    payload: DocumentTypeCreate,
    db: AsyncSession = Depends(get_db_session),
) -> DocumentTypeResponse:
    return await document_type_service.create_document_type(db=db, data=payload)


@router.get(
    "/document-types/{type_id}",
    response_model=DocumentTypeResponse,
    responses={**_ERRORS, 404: {"description": "Not found", "model": ErrorResponse}},
    summary="Get a document type",
)
async def get_document_type(
    type_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> DocumentTypeResponse:
    return await document_type_service.get_document_type(db=db, type_id=type_id)


@router.put(
    "/document-types/{type_id}",
    response_model=DocumentTypeResponse,
    responses={
        **_ERRORS,
        404: {"description": "Not found", "model": ErrorResponse},
        409: {"description": "Duplicate name", "model": ErrorResponse},
    },
    summary="Update a document type",
)
async def update_document_type(
    type_id: str,
    payload: DocumentTypeUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> DocumentTypeResponse:
    return await document_type_service.update_document_type(db=db, type_id=type_id, data=payload)


@router.delete(
    "/document-types/{type_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        **_ERRORS,
        404: {"description": "Not found", "model": ErrorResponse},
        409: {"description": "Type still in use", "model": ErrorResponse},
    },
    summary="Delete an unused document type",
)
async def delete_document_type(
    type_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await document_type_service.delete_document_type(db=db, type_id=type_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
