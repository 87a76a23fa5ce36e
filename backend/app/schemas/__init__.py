"""
Samanvi Backend — Request/Response Schemas
============================================

Pydantic models are the validation layer: every body, query and path value is
coerced and checked here before a service sees it. JSON uses camelCase
aliases (registrationNo, docTypeId, ...) while Python code uses snake_case.
"""
