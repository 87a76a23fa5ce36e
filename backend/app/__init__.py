"""
Samanvi Backend — Application Package Initializer
===================================================

What: Fleet compliance API: buses, their regulatory documents (insurance,
      permits, fitness certificates, ...) with expiry tracking, document
      categories, voice-app user accounts and an admin dashboard.
Who:  Imported by uvicorn (`app.main:app`), Alembic, the seeder and pytest.

Architecture Note:

    ┌─────────────────────────────────────┐
    │      Routes (API Layer) + Gates     │  ← HTTP concerns, auth per route group
    ├─────────────────────────────────────┤
    │       Services (Business Rules)     │  ← existence, uniqueness, dependants
    ├─────────────────────────────────────┤
    │    Repositories (Persistence)       │  ← SQL, soft-delete scope, store errors
    ├─────────────────────────────────────┤
    │   Models (SQLAlchemy) / Schemas     │  ← tables / camelCase API contracts
    └─────────────────────────────────────┘

    Errors raised in any layer travel up as SamanviError subclasses and are
    rendered by the handlers registered in main.py.
"""

__version__ = "1.0.0"
