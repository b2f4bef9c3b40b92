"""
sourcing_portal.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Convert a bearer token into a typed `Principal`.
- Gate endpoints on the caller's role.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from sourcing_portal.api.deps import settings_dep
from sourcing_portal.auth.jwt import JwtConfig, JwtValidationError, decode_and_validate
from sourcing_portal.auth.models import Principal
from sourcing_portal.db.models import UserRole
from sourcing_portal.settings import Settings

_bearer = HTTPBearer(auto_error=False)


def get_principal(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(settings_dep),
) -> Principal:
    if creds is None or not creds.credentials:
        raise HTTPException(
            status_code=HTTP_401_UNAUTHORIZED, detail="No authentication token provided"
        )

    try:
        payload = decode_and_validate(
            cfg=JwtConfig.from_settings(settings), token=creds.credentials
        )
    except JwtValidationError as e:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail=str(e)) from e

    subject = str(payload.get("sub", ""))
    if not subject:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Invalid token subject")
    try:
        role = UserRole(str(payload.get("role", "")))
    except ValueError as e:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Invalid token role") from e

    return Principal(email=subject, role=role)


def require_role(role: UserRole):
    def _dep(principal: Principal = Depends(get_principal)) -> Principal:
        if principal.role != role:
            raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Insufficient role")
        return principal

    return _dep


# --- Module Notes -----------------------------------------------------------
# Ownership checks (request creator only) need the database and live in the service layer;
# these dependencies only look at the token.
