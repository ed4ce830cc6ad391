"""
Domain models for the file ingestion pipeline.
A FileEntry tracks one selected file from selection to a terminal state.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class FileStatus(str, Enum):
    """Lifecycle status of a file entry."""
    PENDING = "pending"
    COMPRESSING = "compressing"
    UPLOADING = "uploading"
    DONE = "done"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (FileStatus.DONE, FileStatus.ERROR)


# Edges of the entry state machine; terminal states have none.
ALLOWED_TRANSITIONS = {
    FileStatus.PENDING: {FileStatus.COMPRESSING},
    FileStatus.COMPRESSING: {FileStatus.UPLOADING, FileStatus.ERROR},
    FileStatus.UPLOADING: {FileStatus.DONE, FileStatus.ERROR},
    FileStatus.DONE: set(),
    FileStatus.ERROR: set(),
}


@dataclass(frozen=True)
class SelectedFile:
    """A file as picked or dropped by the user, before any processing."""
    name: str
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)

    def __repr__(self):
        return f"SelectedFile(name={self.name}, size={self.size}, content_type={self.content_type})"


@dataclass(frozen=True)
class FileEntry:
    """Immutable snapshot of one tracked file; updates produce a new instance."""
    id: str
    name: str
    size: int
    type: str
    status: FileStatus = FileStatus.PENDING
    progress: int = 0
    url: Optional[str] = None
    error: Optional[str] = None
    compressed_size: Optional[int] = None
    storage_key: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal


@dataclass(frozen=True)
class UploadedFile:
    """Public-facing shape of a successfully uploaded file."""
    name: str
    url: str
    type: str
    original_size: int
    compressed_size: Optional[int] = None


@dataclass(frozen=True)
class CompressionResult:
    """Outcome of the compression stage for one file."""
    content: bytes
    content_type: str
    compressed_size: Optional[int] = None
