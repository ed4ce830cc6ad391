"""
Abstract base class for object storage repositories.
Defines the contract the upload pipeline uses to transfer one file.
"""
from abc import ABC, abstractmethod
from typing import Callable

ProgressCallback = Callable[[float], None]


class StorageRepository(ABC):
    """Abstract repository interface for resumable file uploads."""

    @abstractmethod
    async def upload(
        self,
        key: str,
        content: bytes,
        content_type: str,
        on_progress: ProgressCallback
    ) -> str:
        """
        Upload content under key and return a fetchable access URL.

        on_progress receives the transferred percentage (0-100) on every
        progress event. Failures raise the underlying error.
        """
        pass


def build_storage_key(filename: str, prefix: str, timestamp_ms: int) -> str:
    """
    Generate the object key for an upload.

    Format: {prefix}/{timestamp_ms}_{filename}
    """
    prefix = prefix.strip('/')
    name = f"{timestamp_ms}_{filename}"
    return f"{prefix}/{name}" if prefix else name
