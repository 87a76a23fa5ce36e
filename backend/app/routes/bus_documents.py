"""
Samanvi Backend — Bus Document Route Handlers
===============================================

What:  Upload/edit/delete compliance documents and run the expiry reports.
Who:   Admin tooling; guarded by the AUTH_DOCUMENTS gate (API key by default).

Endpoints:
    GET    /api/documents/expiring?withinDays=30   expiring or expired, soonest first
    GET    /api/buses/missing-required?types=a,b   buses lacking a valid required document
    GET    /api/buses/{bus_id}/documents           a bus's documents, newest first
    POST   /api/buses/{bus_id}/documents           attach a document (201)
    GET    /api/documents/{doc_id}                 document with bus and docType
    PUT    /api/documents/{doc_id}                 partial update
    DELETE /api/documents/{doc_id}                 remove (204)

Route order:
    The two report paths are declared before the `{...}` paths they would
    otherwise collide with, and this router is included ahead of the buses
    router.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.bus_document import (
    BusDocumentCreate,
    BusDocumentDetail,
    BusDocumentUpdate,
    BusDocumentWithType,
    MissingRequiredResponse,
)
from app.schemas.common import ErrorResponse
from app.services.bus_document_service import bus_document_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Bus Documents"])

# A century; now + window must stay a representable datetime
MAX_WINDOW_DAYS = 36500

_ERRORS = {
    400: {"description": "Validation error", "model": ErrorResponse},
    401: {"description": "Missing credentials", "model": ErrorResponse},
    403: {"description": "Invalid API key", "model": ErrorResponse},
}
_NOT_FOUND = {404: {"description": "Bus, document or document type not found", "model": ErrorResponse}}


# ── Reports (literal paths first) ─────────────────────────────────────────


@router.get(
    "/documents/expiring",
    response_model=List[BusDocumentDetail],
    responses=_ERRORS,
    summary="Documents expiring within a window",
    description=(
        "Every document whose expiry date is on or before now + withinDays, "
        "including ones that have already expired. Documents without an expiry "
        "date are never listed."
    ),
)
async def get_expiring_documents(
    within_days: int = Query(default=30, ge=0, le=MAX_WINDOW_DAYS, alias="withinDays"),
    db: AsyncSession = Depends(get_db_session),
) -> List[BusDocumentDetail]:
    return await bus_document_service.get_expiring_documents(db=db, within_days=within_days)


@router.get(
    "/buses/missing-required",
    response_model=MissingRequiredResponse,
    responses=_ERRORS,
    summary="Buses missing a valid required document",
    description=(
        "Required types come from the comma-separated `types` list, or every "
        "document type when omitted. A document counts only while it has not expired."
    ),
)
async def get_buses_missing_required(
    types: Optional[str] = Query(default=None, description="Comma-separated document type names"),
    db: AsyncSession = Depends(get_db_session),
) -> MissingRequiredResponse:
    return await bus_document_service.get_buses_missing_required(db=db, types=types)


# ── Per-bus documents ─────────────────────────────────────────────────────


@router.get(
    "/buses/{bus_id}/documents",
    response_model=List[BusDocumentWithType],
    responses={**_ERRORS, **_NOT_FOUND},
    summary="List a bus's documents",
)
async def list_bus_documents(
    bus_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> List[BusDocumentWithType]:
    return await bus_document_service.list_bus_documents(db=db, bus_id=bus_id)


@router.post(
    "/buses/{bus_id}/documents",
    response_model=BusDocumentDetail,
    status_code=status.HTTP_201_CREATED,
    responses={**_ERRORS, **_NOT_FOUND},
    summary="Attach a document to a bus",
)
async def create_bus_document(
    bus_id: str,
    payload: BusDocumentCreate,
    db: AsyncSession = Depends(get_db_session),
) -> BusDocumentDetail:
    return await bus_document_service.create_document(db=db, bus_id=bus_id, data=payload)


# ── Single document ───────────────────────────────────────────────────────


@router.get(
    "/documents/{doc_id}",
    response_model=BusDocumentDetail,
    responses={**_ERRORS, **_NOT_FOUND},
    summary="Get a document",
)
async def get_document(
    doc_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> BusDocumentDetail:
    return await bus_document_service.get_document(db=db, doc_id=doc_id)


@router.put(
    "/documents/{doc_id}",
    response_model=BusDocumentDetail,
    responses={**_ERRORS, **_NOT_FOUND},
    summary="Update a document",
)
async def update_document(
    doc_id: str,
    payload: BusDocumentUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> BusDocumentDetail:
    return await bus_document_service.update_document(db=db, doc_id=doc_id, data=payload)


@router.delete(
    "/documents/{doc_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={**_ERRORS, **_NOT_FOUND},
    summary="Delete a document",
)
async def delete_document(
    doc_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await bus_document_service.delete_document(db=db, doc_id=doc_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
