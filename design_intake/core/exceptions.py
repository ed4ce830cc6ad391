"""
Custom exceptions for the Design Intake API.
Provides specific error types for different failure scenarios.
"""


class DesignIntakeException(Exception):
    """Base exception for all application errors."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ValidationException(DesignIntakeException):
    """Raised when a file selection or request payload is invalid."""
    pass


class CapacityExceededException(DesignIntakeException):
    """Raised when a selection would push a batch past its file limit."""
    pass


class StorageException(DesignIntakeException):
    """Raised when an object storage operation fails."""
    pass


class CompressionException(DesignIntakeException):
    """Raised when an image cannot be compressed."""
    pass


class BatchNotFoundException(DesignIntakeException):
    """Raised when an upload batch does not exist."""
    pass


class FileEntryNotFoundException(DesignIntakeException):
    """Raised when a file entry is not tracked by a batch."""
    pass


class WebhookException(DesignIntakeException):
    """Raised when forwarding a design request to the webhook fails."""
    pass
