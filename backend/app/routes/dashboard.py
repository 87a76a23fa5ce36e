"""
Samanvi Backend — Dashboard Route

GET /api/dashboard/stats, guarded by the AUTH_DASHBOARD gate (HTTP Basic by default).
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.common import ErrorResponse
from app.schemas.dashboard import DashboardStats
from app.services.dashboard_service import dashboard_service

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


@router.get(
    "/stats",
    response_model=DashboardStats,
    responses={401: {"description": "Missing or invalid credentials", "model": ErrorResponse}},
    summary="Fleet compliance headline numbers",
)
async def get_dashboard_stats(db: AsyncSession = Depends(get_db_session)) -> DashboardStats:
    return await dashboard_service.get_stats(db=db)
