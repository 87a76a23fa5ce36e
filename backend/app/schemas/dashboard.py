"""Samanvi Backend — Dashboard Schemas"""

from datetime import datetime

from app.schemas.common import CamelModel


class DashboardStats(CamelModel):
    total_buses: int
    total_voice_app_users: int
    total_documents: int
    expiring_documents: int
    expired_documents: int
    total_document_types: int
    last_updated: datetime
