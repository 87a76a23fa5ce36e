"""
Samanvi Backend — Default Data Seeder
=======================================

What:  Inserts the standard Indian commercial-vehicle document types.
How:   `python -m app.seed` (from backend/), after `alembic upgrade head`.

Idempotent: names that already exist are skipped, so the seeder can run on
every deploy.
"""

import asyncio
import logging
import sys
from typing import List

from app.config import Settings, settings
from app.database import Database
from app.repositories.document_type_repository import DocumentTypeRepository

logger = logging.getLogger(__name__)

DEFAULT_DOCUMENT_TYPES = [
    {"name": "Insurance", "description": "Vehicle insurance certificate"},
    {"name": "Permit", "description": "Route permit for commercial vehicles"},
    {"name": "Fitness Certificate", "description": "Vehicle fitness certificate"},
    {"name": "Registration Certificate", "description": "Vehicle registration certificate"},
    {"name": "Pollution Certificate", "description": "Pollution under control certificate"},
    {"name": "Tax Receipt", "description": "Road tax payment receipt"},
]


async def seed_document_types(database: Database) -> List[str]:
    """Create every missing default type; returns the names actually created."""
    created = []
    async with database.session_factory() as session:
        async with session.begin():
            repo = DocumentTypeRepository(session)
            for doc_type in DEFAULT_DOCUMENT_TYPES:
                if await repo.find_by_name(doc_type["name"]):
                    logger.info("Document type already exists: %s", doc_type["name"])
                    continue
                await repo.create(doc_type)
                created.append(doc_type["name"])
                logger.info("Created document type: %s", doc_type["name"])
    return created


async def run(config: Settings) -> None:
    database = Database.from_settings(config)
    try:
        created = await seed_document_types(database)
        logger.info("Seeding complete: %d document types created", len(created))
    finally:
        await database.dispose()


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stdout,
    )
    asyncio.run(run(settings))


if __name__ == "__main__":
    main()
