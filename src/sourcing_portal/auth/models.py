"""
sourcing_portal.auth.models

Auth domain models.

Responsibilities:
- Define the authenticated identity type (`Principal`) injected into endpoints.
"""

from __future__ import annotations

from dataclasses import dataclass

from sourcing_portal.db.models import UserRole


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller identity.
    """

    email: str
    role: UserRole
