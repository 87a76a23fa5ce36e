"""
Samanvi Backend — Shared Schema Building Blocks
=================================================

What:  Base model with camelCase aliases, validation-error formatting,
       and the response models shared by every route (errors, health, counts).
Why:   One place decides how field names look on the wire and how a list of
       pydantic errors is reported back to the client.
"""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Locations FastAPI prefixes to every error `loc`
_REQUEST_LOCATIONS = {"body", "query", "path", "header", "cookie"}


class CamelModel(BaseModel):
    """
    Base for every API schema.

    - alias_generator: `registration_no` is `registrationNo` in JSON
    - populate_by_name: services may still build models with snake_case kwargs
    - from_attributes: response models validate straight from ORM objects
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def format_validation_errors(errors: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Flatten pydantic/FastAPI error dicts into `{field, location, message}` entries.

    Example:
        {"loc": ("body", "registrationNo"), "msg": "Field required", ...}
        → {"field": "registrationNo", "location": "body", "message": "Field required"}
    """
    details = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        location = None
        if loc and loc[0] in _REQUEST_LOCATIONS:
            location, loc = loc[0], loc[1:]
        details.append(
            {
                "field": ".".join(loc) or location or "",
                "location": location,
                "message": error.get("msg", "Invalid value"),
            }
        )
    return details


class DocumentCount(BaseModel):
    """Dependant-document count, rendered as `_count: {documents: N}`."""

    documents: int = 0


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Fields:
        message:    Human-readable description (always present)
        error:      Machine-readable code (e.g. "validation_error", "conflict")
        details:    Per-field validation failures (validation errors only)
        request_id: Correlation ID for tracing this error in server logs
        stack:      Traceback text, only outside production
    """

    message: str
    error: Optional[str] = None
    details: Optional[Union[List[Dict[str, Any]], Dict[str, Any]]] = None
    request_id: Optional[str] = None
    stack: Optional[str] = None


class MemoryUsage(CamelModel):
    max_rss_kb: Optional[int] = Field(default=None, description="Peak resident set size (KiB)")


class HealthResponse(CamelModel):
    """Liveness/diagnostic payload returned by GET /health."""

    status: str = Field(description="healthy or unhealthy")
    version: str
    environment: str
    database: str = Field(description="connected or disconnected")
    uptime_seconds: float
    pid: int
    platform: str
    python: str
    memory: MemoryUsage
    timestamp: datetime
