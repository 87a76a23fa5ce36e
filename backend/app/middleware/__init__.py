# Middleware package init
"""
Samanvi Backend — Middleware Package
======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Rate Limit] → [Request ID] → [Logging] → [Security Headers]
            → [GZip] → [CORS] → Route Handler

    1. Rate Limit first: abusive clients are turned away before any work
    2. Request ID: correlation ID for the log lines that follow
    3. Logging: sees the final status and the full duration
    4. Security Headers: stamped on every response, errors included
    5. GZip / CORS: Starlette's stock middleware

    Responses travel back through the same chain in reverse.
"""
