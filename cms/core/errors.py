from __future__ import annotations

from fastapi import HTTPException, status


class CMSError(HTTPException):
    """Base for domain errors.

    Services raise these directly; ``cms.main`` renders them as
    ``{"error": kind, "detail": message}``.
    """

    kind = "error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal error"

    def __init__(self, detail: str | None = None, headers: dict[str, str] | None = None) -> None:
        super().__init__(status_code=type(self).status_code, detail=detail or self.default_detail, headers=headers)


class ValidationError(CMSError):
    kind = "validation_error"
    status_code = 422
    default_detail = "Invalid input"


class AuthenticationError(CMSError):
    kind = "authentication_error"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Not authenticated"


class AuthorizationError(CMSError):
    kind = "authorization_error"
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Access denied"


class NotFoundError(CMSError):
    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ConflictError(CMSError):
    kind = "conflict"
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict"


class StorageError(CMSError):
    kind = "storage_error"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Storage unavailable"
