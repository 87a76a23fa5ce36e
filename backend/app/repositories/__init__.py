"""
Samanvi Backend — Repositories (Persistence Gateway)
======================================================

What:  Data-access layer: one repository per entity over an AsyncSession.
Why:   Keeps SQL out of the services and gives every entity the same small
       surface: find_by_id / find_one / find_many / count / create / update / delete.

Convention:
    - Repositories enforce no business rules (no uniqueness pre-checks, no
      dependant checks); services do that.
    - Writes call flush() so constraint violations surface immediately as
      DuplicateRecordError / ConstraintViolationError. Commit and rollback
      belong to the get_db_session dependency.
    - Relationship loading is requested through `options=` (SQLAlchemy loader
      options), never through separate methods.
"""

from app.repositories.base import BaseRepository
from app.repositories.bus_repository import BusRepository
from app.repositories.bus_document_repository import BusDocumentRepository
from app.repositories.document_type_repository import DocumentTypeRepository
from app.repositories.user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "BusRepository",
    "BusDocumentRepository",
    "DocumentTypeRepository",
    "UserRepository",
]
