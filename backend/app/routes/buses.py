"""
Samanvi Backend — Bus Route Handlers
======================================

What:  CRUD endpoints for the bus fleet.
Who:   Admin tooling; guarded by the AUTH_BUSES gate (API key by default).

Endpoints:
    GET    /api/buses?page=1&limit=10&search=   paginated, searchable list
    POST   /api/buses                           register a bus (201)
    GET    /api/buses/{bus_id}                  bus with its documents
    PUT    /api/buses/{bus_id}                  partial update
    DELETE /api/buses/{bus_id}                  only when no documents remain (204)

Routing note:
    /api/buses/missing-required lives in bus_documents.py, whose router is
    included first so the literal path wins over /api/buses/{bus_id}.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.bus import BusCreate, BusListResponse, BusResponse, BusUpdate
from app.schemas.bus_document import BusWithDocuments
from app.schemas.common import ErrorResponse
from app.services.bus_service import bus_service

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix="/api", tags=["Buses"])

# Keeps (page - 1) * limit inside a 64-bit OFFSET
MAX_PAGE = 1_000_000
MAX_LIMIT = 1000

_ERRORS = {
    400: {"description": "Validation error", "model": ErrorResponse},
    401: {"description": "Missing credentials", "model": ErrorResponse},
    403: {"description": "Invalid API key", "model": ErrorResponse},
}


@router.get(
    "/buses",
    response_model=BusListResponse,
    responses=_ERRORS,
    summary="List buses with pagination and search",
)
async def list_buses(
    page: int = Query(default=1, ge=1, le=MAX_PAGE, description="1-based page number"),
    limit: int = Query(default=10, ge=1, le=MAX_LIMIT, description="Buses per page"),
    search: Optional[str] = Query(
        default=None,
        description="Case-insensitive match on registration number, model, manufacturer or owner",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> BusListResponse:
    return await bus_service.list_buses(db=db, page=page, limit=limit, search=search)


@router.post(
    "/buses",
    response_model=BusResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**_ERRORS, 409: {"description": "Duplicate registration number", "model": ErrorResponse}},
    summary="Register a bus",
)
async def create_bus(
    payload: BusCreate,
    db: AsyncSession = Depends(get_db_session),
) -> BusResponse:
    return await bus_service.create_bus(db=db, data=payload)


@router.get(
    "/buses/{bus_id}",
    response_model=BusWithDocuments,
    responses={**_ERRORS, 404: {"description": "Bus not found", "model": ErrorResponse}},
    summary="Get a bus with its documents",
)
async def get_bus(
    bus_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> BusWithDocuments:
    return await bus_service.get_bus(db=db, bus_id=bus_id)


@router.put(
    "/buses/{bus_id}",
    response_model=BusResponse,
    responses={
        **_ERRORS,
        404: {"description": "Bus not found", "model": ErrorResponse},
        409: {"description": "Duplicate registration number", "model": ErrorResponse},
    },
    summary="Update a bus",
)
async def update_bus(
    bus_id: str,
    payload: BusUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> BusResponse:
    return await bus_service.update_bus(db=db, bus_id=bus_id, data=payload)


@router.delete(
    "/buses/{bus_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        **_ERRORS,
        404: {"description": "Bus not found", "model": ErrorResponse},
        409: {"description": "Bus still has documents", "model": ErrorResponse},
    },
    summary="Delete a bus without documents",
)
async def delete_bus(
    bus_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await bus_service.delete_bus(db=db, bus_id=bus_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
