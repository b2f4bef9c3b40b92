"""
sourcing_portal.auth

Authentication/authorization package.

Responsibilities:
- JWT helpers and validation.
- Password hashing.
- FastAPI auth dependencies (Principal + role gate).
"""

# Package marker.
