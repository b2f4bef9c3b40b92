"""
sourcing_portal.api.routers.auth

Login and registration endpoints.

Mounted twice by the app factory: at the root (`/login`, `/register`) and under
`/api/auth`.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import EmailStr, Field

from sourcing_portal.api.deps import account_service
from sourcing_portal.api.schemas import ApiModel, AuthResponse
from sourcing_portal.db.models import UserRole
from sourcing_portal.services.account_service import AccountService, LoginResult

router = APIRouter(tags=["auth"])


class LoginRequest(ApiModel):
    # Missing credentials get the same 401 as wrong ones.
    email: str | None = Field(default=None, max_length=256)
    password: str | None = Field(default=None, max_length=256)


class RegisterRequest(ApiModel):
    name: str | None = Field(default=None, max_length=256)
    email: EmailStr | None = None
    password: str | None = Field(default=None, max_length=256)
    role: UserRole | None = None


def _auth_response(result: LoginResult) -> AuthResponse:
    return AuthResponse(token=result.token, role=result.role, name=result.name)


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    accounts: AccountService = Depends(account_service),
) -> AuthResponse:
    return _auth_response(await accounts.login(email=body.email, password=body.password))


@router.post("/register", response_model=AuthResponse)
async def register(
    body: RegisterRequest,
    accounts: AccountService = Depends(account_service),
) -> AuthResponse:
    result = await accounts.register(
        name=body.name,
        email=body.email,
        password=body.password,
        role=body.role,
    )
    return _auth_response(result)
