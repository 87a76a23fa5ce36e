"""
Samanvi Backend — Bus Schemas
===============================

What:  Create/update payloads and list/detail shapes for buses.

Year of make:
    The upper bound moves with the calendar (current year + 1, so next
    year's models can be registered), which is why it is a validator and not
    a static `le=` constraint.
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import Field, field_validator

from app.schemas.common import CamelModel, DocumentCount, Pagination

MIN_YEAR_OF_MAKE = 1900


def _check_year(value: Optional[int]) -> Optional[int]:
    if value is None:
        return value
    max_year = datetime.now(timezone.utc).year + 1
    if not MIN_YEAR_OF_MAKE <= value <= max_year:
        raise ValueError(f"Year of make must be between {MIN_YEAR_OF_MAKE} and {max_year}")
    return value


class BusCreate(CamelModel):
    registration_no: str = Field(min_length=1, max_length=64)
    model: Optional[str] = None
    manufacturer: Optional[str] = None
    year_of_make: Optional[int] = None
    owner_name: Optional[str] = None

    @field_validator("year_of_make")
    @classmethod
    def validate_year_of_make(cls, v: Optional[int]) -> Optional[int]:
        return _check_year(v)


class BusUpdate(CamelModel):
    registration_no: Optional[str] = Field(default=None, min_length=1, max_length=64)
    model: Optional[str] = None
    manufacturer: Optional[str] = None
    year_of_make: Optional[int] = None
    owner_name: Optional[str] = None

    @field_validator("year_of_make")
    @classmethod
    def validate_year_of_make(cls, v: Optional[int]) -> Optional[int]:
        return _check_year(v)


class BusResponse(CamelModel):
    id: str
    registration_no: str
    model: Optional[str] = None
    manufacturer: Optional[str] = None
    year_of_make: Optional[int] = None
    owner_name: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class BusListItem(BusResponse):
    count: DocumentCount = Field(default_factory=DocumentCount, alias="_count")


class BusListResponse(CamelModel):
    buses: List[BusListItem]
    pagination: Pagination
