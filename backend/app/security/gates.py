"""
Samanvi Backend — Auth Gates
==============================

What:  Request guards attached to whole route groups as router dependencies.
Why:   Buses, documents and document types are admin-only data behind an API
       key; the dashboard is browsed by a human behind HTTP Basic auth.
How:   Every gate is a callable object taking the Request. It either returns
       None (admitted) or raises UnauthorizedError / ForbiddenError, which
       the global handlers render like any other error.

Gate Behaviour:
    ApiKeyGate      x-api-key missing           → 401 "API key is required"
                    x-api-key wrong             → 403 "Invalid API key"
    BasicAuthGate   Authorization missing       → 401 "Authorization header is required"
                    scheme is not Basic         → 401 "Basic authentication is required"
                    undecodable / wrong creds   → 401 "Invalid credentials"
    OpenGate        admits every request

Which gate guards which group is configuration (AUTH_BUSES, AUTH_DOCUMENTS,
AUTH_DOCUMENT_TYPES, AUTH_DASHBOARD); `build_gate()` turns a policy name into
a gate instance.

Secrets are compared with secrets.compare_digest so the time taken does not
depend on how many leading characters matched. An empty configured secret
never matches anything.
"""

import base64
import binascii
import logging
import secrets

from fastapi import Request

from app.config import GatePolicy, Settings
from app.exceptions import ForbiddenError, UnauthorizedError

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-api-key"


def _matches(supplied: str, expected: str) -> bool:
    if not expected:
        return False
    return secrets.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8"))


class ApiKeyGate:
    def __init__(self, api_key: str):
        self.api_key = api_key

    async def __call__(self, request: Request) -> None:
        supplied = request.headers.get(API_KEY_HEADER)
        if not supplied:
            raise UnauthorizedError("API key is required")
        if not _matches(supplied, self.api_key):
            logger.warning(
                "Rejected API key for %s %s from %s",
                request.method,
                request.url.path,
                request.client.host if request.client else "unknown",
            )
            raise ForbiddenError("Invalid API key")


class BasicAuthGate:
    def __init__(self, username: str, password: str):
        self.username = username
        self.password = password

    async def __call__(self, request: Request) -> None:
        header = request.headers.get("authorization")
        if not header:
            raise UnauthorizedError("Authorization header is required")

        scheme, _, encoded = header.partition(" ")
        if scheme.lower() != "basic":
            raise UnauthorizedError("Basic authentication is required")

        try:
            decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            raise UnauthorizedError("Invalid credentials") from None

        # Passwords may contain ':'; the username may not
        username, separator, password = decoded.partition(":")
        if not separator:
            raise UnauthorizedError("Invalid credentials")

        # Evaluate both so a wrong username costs the same as a wrong password
        username_ok = _matches(username, self.username)
        password_ok = _matches(password, self.password)
        if not (username_ok and password_ok):
            logger.warning(
                "Rejected basic credentials for %s %s",
                request.method,
                request.url.path,
            )
            raise UnauthorizedError("Invalid credentials")


class OpenGate:
    async def __call__(self, request: Request) -> None:
        return None


def build_gate(policy: GatePolicy, settings: Settings):
    """Gate instance for a configured policy name ("api_key", "basic" or "none")."""
    if policy == "api_key":
        return ApiKeyGate(settings.admin_api_key)
    if policy == "basic":
        return BasicAuthGate(settings.basic_auth_username, settings.basic_auth_password)
    if policy == "none":
        return OpenGate()
    raise ValueError(f"Unknown gate policy: {policy}")
