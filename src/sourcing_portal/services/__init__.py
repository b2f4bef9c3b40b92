"""
sourcing_portal.services

Service layer.

Responsibilities:
- Own transactions (commit points) for each business operation.
- Enforce ownership/role rules and apply the workflow rules.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services raise `services.errors.ServiceError` subclasses; the API layer maps them to
# HTTP responses in one place (`api.errors`).
