"""
Custom exception hierarchy for consistent error responses.

Usage:
    from skyline.exceptions import NotFoundError, ForbiddenError, ValidationError

    raise NotFoundError(vacation_id)
    raise ForbiddenError("Admin cannot like vacations.")
    raise ValidationError("End date must be after start date.")

These exceptions are caught by the handler registered in main.py and
converted to consistent JSON error responses with the shape:
    {"error": "<message>"}
"""

from fastapi import HTTPException, status


class AppError(HTTPException):
    """Base application error with a default status code."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(
            status_code=self.__class__.status_code,
            detail=message,
        )

    @property
    def message(self) -> str:
        return self.detail


class RouteNotFoundError(AppError):
    """No route matches the request (404)."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, method: str, route: str):
        super().__init__(f"Route {route} on method {method} not found.")


class NotFoundError(AppError):
    """Resource not found (404)."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource_id: str):
        super().__init__(f"_id {resource_id} not found.")


class ValidationError(AppError):
    """Validation error (400)."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)


class UnauthorizedError(AppError):
    """Unauthorized access (401)."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class ForbiddenError(AppError):
    """Forbidden access (403)."""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


class ServiceError(AppError):
    """Internal service error (500)."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)


class ImageStoreError(ServiceError):
    """The external image store rejected or failed a request (502)."""

    status_code = status.HTTP_502_BAD_GATEWAY
