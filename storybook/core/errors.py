"""
Error taxonomy shared by services and routers
"""

from fastapi import status


class StorybookError(Exception):
    """Base class for domain errors surfaced to API callers"""
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(StorybookError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class NotAuthorized(StorybookError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not authorized"


class NotFound(StorybookError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ValidationFailure(StorybookError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "Validation failed"


class UpstreamFailure(StorybookError):
    """External provider failed or returned unusable data"""
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Upstream service failed"


class GenerationFailed(UpstreamFailure):
    default_message = "No image generated"
