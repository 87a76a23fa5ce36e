"""
Samanvi Backend — ORM Models Package
======================================

Importing this package registers every table with `Base.metadata`
(used by Alembic autogenerate and by Database.create_all in tests).
"""

from app.models.bus import Bus
from app.models.bus_document import BusDocument
from app.models.document_type import DocumentType
from app.models.user import User

__all__ = ["Bus", "BusDocument", "DocumentType", "User"]
