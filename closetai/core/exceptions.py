"""Application exception hierarchy.

Exceptions deriving from ``AppException`` carry an HTTP status code and are
rendered by the handler registered in ``closetai.main``. ``EmptyInputError`` is
not an ``AppException``: it signals a programming error that
callers must guard against.
"""

from typing import Any, Dict, Optional

from fastapi import status


class AppException(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: Any, status_code: Optional[int] = None):
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code
        super().__init__(str(detail))


class ValidationError(AppException):
    """A stored recommendation field is missing or malformed."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(self.to_dict())

    def to_dict(self) -> Dict[str, Any]:
        return {"field": self.field, "message": self.message}


class NotFoundError(AppException):
    """Recommendation is absent, expired or owned by another user."""

    status_code = status.HTTP_404_NOT_FOUND


class EmptyWardrobeError(AppException):
    """The user has no active wardrobe items."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str = "Please add some items to your wardrobe first"):
        super().__init__(detail)


class PersistenceError(AppException):
    """A store write failed."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class EmptyInputError(ValueError):
    """An aggregation was asked to reduce an empty sequence."""
