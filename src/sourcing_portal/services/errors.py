"""
sourcing_portal.services.errors

Exception family raised by the service layer.

Each error carries the HTTP status the API layer should answer with, so routers never
translate errors themselves.
"""

from __future__ import annotations


class ServiceError(Exception):
    status_code: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationFailedError(ServiceError):
    status_code = 400


class AuthenticationError(ServiceError):
    status_code = 401


class PermissionDeniedError(ServiceError):
    status_code = 403


class NotFoundError(ServiceError):
    status_code = 404


class TransitionError(ServiceError):
    status_code = 409
