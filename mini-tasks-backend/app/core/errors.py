# File: app/core/errors.py

"""
Error taxonomy shared by the services and the HTTP layer.

Services raise one of the ``ServiceError`` subclasses below. The handlers in
``app.main`` turn them into ``{"code": ..., "message": ...}`` JSON bodies, so
nothing unclassified ever reaches a client.
"""

from fastapi import status


class ServiceError(Exception):
    code = "internal"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class InvalidArgument(ServiceError):
    code = "invalid_argument"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid argument"


class AlreadyExists(ServiceError):
    code = "already_exists"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class Unauthenticated(ServiceError):
    code = "unauthenticated"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class PermissionDenied(ServiceError):
    code = "permission_denied"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Permission denied"


class NotFound(ServiceError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Internal(ServiceError):
    pass
