"""
Error taxonomy shared by the services and the HTTP layer.
"""

from fastapi import status


class GuardianError(Exception):
    """Base error rendered as ``{"error": message}`` by the API."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "internal error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(GuardianError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "missing required fields"


class NotFoundError(GuardianError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "device not found"


class StorageError(GuardianError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "internal storage error"
