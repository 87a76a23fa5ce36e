"""Samanvi Backend — Document Type Schemas"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from app.schemas.common import CamelModel, DocumentCount


class DocumentTypeCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None


class DocumentTypeUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None


class DocumentTypeResponse(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class DocumentTypeListItem(DocumentTypeResponse):
    count: DocumentCount = Field(default_factory=DocumentCount, alias="_count")
