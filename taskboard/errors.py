"""Error taxonomy raised by the service layer.

Every error carries the HTTP status it maps to and a stable, caller-facing
message. The handlers registered in ``taskboard.main`` render them as
``{"detail": message}``.

    TaskboardError
    ├── ValidationError   422  malformed or missing input
    ├── Unauthorized      401  missing or invalid credential
    ├── Forbidden         403  authenticated but not permitted
    ├── NotFound          404  referenced entity absent
    └── InternalFailure   500  store unreachable or unexpected
"""

from typing import Dict, Optional

from fastapi import status


class TaskboardError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Something went wrong, please try again."

    def __init__(self, message: Optional[str] = None, headers: Optional[Dict[str, str]] = None):
        self.message = message or self.default_message
        self.headers = headers
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.status_code}: {self.message})"


class ValidationError(TaskboardError):
    status_code = 422
    default_message = "Invalid inputs passed, please check your data."


class Unauthorized(TaskboardError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication failed."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(TaskboardError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFound(TaskboardError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found."


class InternalFailure(TaskboardError):
    pass
