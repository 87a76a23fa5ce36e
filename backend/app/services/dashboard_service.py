"""
Samanvi Backend — Dashboard Service

Fleet-wide headline numbers for the admin dashboard. Every count is a single
COUNT(*) query; the expiry windows share one `now` so expiring and expired
are judged against the same instant.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.bus_document import BusDocument
from app.repositories.bus_document_repository import BusDocumentRepository
from app.repositories.bus_repository import BusRepository
from app.repositories.document_type_repository import DocumentTypeRepository
from app.repositories.user_repository import UserRepository
from app.schemas.dashboard import DashboardStats
from app.utils.time_utils import days_from_now, utc_now

logger = logging.getLogger(__name__)

EXPIRING_WINDOW_DAYS = 30


class DashboardService:
    async def get_stats(self, db: AsyncSession) -> DashboardStats:
        now = utc_now()
        documents = BusDocumentRepository(db)

        stats = DashboardStats(
            total_buses=await BusRepository(db).count(),
            # UserRepository only counts active users
            total_voice_app_users=await UserRepository(db).count(),
            total_documents=await documents.count(),
            expiring_documents=await documents.count(
                BusDocument.expiry_date <= days_from_now(EXPIRING_WINDOW_DAYS, now)
            ),
            expired_documents=await documents.count(BusDocument.expiry_date < now),
            total_document_types=await DocumentTypeRepository(db).count(),
            last_updated=now,
        )
        logger.debug("Dashboard stats computed: %s", stats.model_dump())
        return stats


dashboard_service = DashboardService()
