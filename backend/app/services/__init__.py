"""
Samanvi Backend — Services Layer
==================================

What:  Business rules sitting between routes (HTTP) and repositories (persistence).
Why:   Routes handle HTTP, services decide what is allowed, repositories talk SQL.
How:   Each service method takes the request's AsyncSession first, validates
       existence/uniqueness/dependants, writes through a repository and
       returns a response schema. Failures are raised as SamanviError
       subclasses and left for the global handlers to report.

Service Inventory:
    - UserService:          voice-app users, login, soft delete
    - BusService:           fleet CRUD, paginated search
    - DocumentTypeService:  document categories
    - BusDocumentService:   per-bus documents, expiring and missing-required reports
    - DashboardService:     headline counts

Every module exposes a ready-made instance (`bus_service`, ...) that routes
import directly; the services hold no per-request state.
"""
