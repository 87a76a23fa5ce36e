"""
Samanvi Backend — Bus Service
===============================

What:  CRUD for buses plus the paginated, searchable fleet listing.
Who:   Called by the /api/buses routes.

Listing:
    GET /api/buses?page=2&limit=10&search=volvo
        → skip (page-1)*limit rows, newest first
        → search is a case-insensitive substring match on registration
          number, model, manufacturer or owner name (any of them)
        → each bus carries `_count.documents`, fetched with one grouped query
          for the whole page instead of one query per bus

Uniqueness:
    Registration numbers are unique. The pre-check gives a readable 409; the
    unique constraint still backs it up when two creates race (the store
    error is mapped to 409 "Resource already exists").
"""

import logging
import math
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ConflictError, NotFoundError
from app.models.bus import Bus
from app.models.bus_document import BusDocument
from app.repositories.bus_document_repository import BusDocumentRepository
from app.repositories.bus_repository import BusRepository
from app.schemas.bus import BusCreate, BusListItem, BusListResponse, BusResponse, BusUpdate
from app.schemas.bus_document import BusWithDocuments
from app.schemas.common import DocumentCount, Pagination

logger = logging.getLogger(__name__)

DUPLICATE_BUS_MESSAGE = "Bus with this registration number already exists"


class BusService:
    async def create_bus(self, db: AsyncSession, data: BusCreate) -> BusResponse:
        repo = BusRepository(db)

        if await repo.find_by_registration_no(data.registration_no):
            logger.info("Bus creation rejected, duplicate registration: %s", data.registration_no)
            raise ConflictError(DUPLICATE_BUS_MESSAGE)

        bus = await repo.create(data.model_dump())
        logger.info("Bus created successfully: %s (ID: %s)", bus.registration_no, bus.id)
        return BusResponse.model_validate(bus)

    async def list_buses(
        self,
        db: AsyncSession,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
    ) -> BusListResponse:
        repo = BusRepository(db)
        criteria = [BusRepository.search_criteria(search)] if search else []

        buses = await repo.find_many(
            *criteria,
            offset=(page - 1) * limit,
            limit=limit,
            order_by=(Bus.created_at.desc(),),
        )
        total = await repo.count(*criteria)
        counts = await BusDocumentRepository(db).count_by(
            BusDocument.bus_id, [bus.id for bus in buses]
        )

        logger.info("Listed %d of %d buses (page %d)", len(buses), total, page)
        return BusListResponse(
            buses=[
                BusListItem(
                    **BusResponse.model_validate(bus).model_dump(),
                    count=DocumentCount(documents=counts.get(bus.id, 0)),
                )
                for bus in buses
            ],
            pagination=Pagination(
                page=page,
                limit=limit,
                total=total,
                pages=math.ceil(total / limit),
            ),
        )

    async def get_bus(self, db: AsyncSession, bus_id: str) -> BusWithDocuments:
        bus = await BusRepository(db).find_by_id(bus_id, options=BusRepository.with_documents())
        if bus is None:
            raise NotFoundError("Bus not found", context={"bus_id": bus_id})
        return BusWithDocuments.model_validate(bus)

    async def update_bus(self, db: AsyncSession, bus_id: str, data: BusUpdate) -> BusResponse:
        repo = BusRepository(db)

        if await repo.find_by_id(bus_id) is None:
            raise NotFoundError("Bus not found", context={"bus_id": bus_id})

        changes = data.model_dump(exclude_unset=True)
        registration_no = changes.get("registration_no")
        if registration_no:
            existing = await repo.find_by_registration_no(registration_no)
            if existing is not None and existing.id != bus_id:
                logger.info("Bus update rejected, duplicate registration: %s", registration_no)
                raise ConflictError(DUPLICATE_BUS_MESSAGE)
        elif "registration_no" in changes:
            # Explicit null leaves the registration number untouched
            del changes["registration_no"]

        bus = await repo.update(bus_id, changes)
        logger.info("Bus updated successfully: %s (ID: %s)", bus.registration_no, bus.id)
        return BusResponse.model_validate(bus)

    async def delete_bus(self, db: AsyncSession, bus_id: str) -> None:
        repo = BusRepository(db)

        if await repo.find_by_id(bus_id) is None:
            raise NotFoundError("Bus not found", context={"bus_id": bus_id})

        documents = await BusDocumentRepository(db).count(BusDocument.bus_id == bus_id)
        if documents > 0:
            logger.info("Bus delete rejected, %d documents attached (ID: %s)", documents, bus_id)
            raise ConflictError("Cannot delete bus with existing documents")

        await repo.delete(bus_id)
        logger.info("Bus deleted successfully (ID: %s)", bus_id)


bus_service = BusService()
