"""
Samanvi Backend — Bus Document Schemas
========================================

What:  Payloads for uploading/editing compliance documents and the nested
       shapes returned by the document, expiry and missing-required endpoints.

Response nesting:
    BusDocumentWithType  → document + docType   (per-bus listings)
    BusDocumentDetail    → document + docType + bus (single document, expiring)
    BusWithDocuments     → bus + documents[+docType] (bus detail, missing-required)

Dates:
    Accepted as ISO 8601 date-times. Naive values are taken as UTC and aware
    values are converted to UTC, so every stored timestamp shares one zone.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import AnyUrl, Field, TypeAdapter, ValidationError, field_validator

from app.schemas.bus import BusResponse
from app.schemas.common import CamelModel
from app.schemas.document_type import DocumentTypeResponse
from app.utils.time_utils import to_utc

_url_adapter = TypeAdapter(AnyUrl)


def _check_url(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        raise ValueError("File URL must be a valid URL") from None
    return value


class BusDocumentCreate(CamelModel):
    doc_type_id: str = Field(min_length=1)
    document_number: Optional[str] = None
    issue_date: Optional[datetime] = None
    expiry_date: Optional[datetime] = None
    remarks: Optional[str] = None
    file_url: str = Field(min_length=1)

    @field_validator("file_url")
    @classmethod
    def validate_file_url(cls, v: str) -> str:
        return _check_url(v)

    @field_validator("issue_date", "expiry_date")
    @classmethod
    def normalise_dates(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_utc(v)


class BusDocumentUpdate(CamelModel):
    """Only the fields present in the request body are written."""

    doc_type_id: Optional[str] = Field(default=None, min_length=1)
    document_number: Optional[str] = None
    issue_date: Optional[datetime] = None
    expiry_date: Optional[datetime] = None
    remarks: Optional[str] = None
    file_url: Optional[str] = Field(default=None, min_length=1)

    @field_validator("file_url")
    @classmethod
    def validate_file_url(cls, v: Optional[str]) -> Optional[str]:
        return _check_url(v)

    @field_validator("issue_date", "expiry_date")
    @classmethod
    def normalise_dates(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_utc(v)


class BusDocumentResponse(CamelModel):
    id: str
    bus_id: str
    doc_type_id: str
    document_number: Optional[str] = None
    issue_date: Optional[datetime] = None
    expiry_date: Optional[datetime] = None
    file_url: str
    remarks: Optional[str] = None
    uploaded_at: datetime


class BusDocumentWithType(BusDocumentResponse):
    doc_type: DocumentTypeResponse


class BusDocumentDetail(BusDocumentWithType):
    bus: BusResponse


class BusWithDocuments(BusResponse):
    documents: List[BusDocumentWithType] = Field(default_factory=list)


class MissingRequiredResponse(CamelModel):
    buses: List[BusWithDocuments]
    required_types: List[str]
    total: int
