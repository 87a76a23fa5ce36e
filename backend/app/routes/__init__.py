# Routes package init
"""
Samanvi Backend — API Routes Package
======================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - users.py:           /api/users, /api/users/login, /api/users/{id}
    - buses.py:           /api/buses, /api/buses/{id}
    - bus_documents.py:   /api/buses/{busId}/documents, /api/documents/{docId},
                          /api/documents/expiring, /api/buses/missing-required
    - document_types.py:  /api/document-types, /api/document-types/{id}
    - dashboard.py:       /api/dashboard/stats
    - health.py:          /health

Design Principle:
    Routes are THIN: parse the request, call one service method, return its
    result with the right status code. Business rules live in services.

    Routers carry no auth themselves; create_app() attaches the configured
    gate to each router as a dependency when it includes it.
"""
