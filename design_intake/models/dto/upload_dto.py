"""
Data Transfer Objects for the upload batch API.
Defines request and response schemas for batch and file endpoints.
"""
from typing import List, Optional
from pydantic import BaseModel, Field
from design_intake.models.file_entry import FileEntry, UploadedFile
from design_intake.models.notification import Notification


class BatchCreateRequest(BaseModel):
    """Request schema for opening a new upload batch."""
    max_files: Optional[int] = Field(default=None, ge=1, description="Maximum number of files tracked by the batch")


class FileEntryResponse(BaseModel):
    """One status row of the upload list."""
    id: str
    name: str
    size: int
    size_display: str
    type: str
    status: str
    progress: int
    url: Optional[str] = None
    error: Optional[str] = None
    compressed_size: Optional[int] = None

    @classmethod
    def from_entry(cls, entry: FileEntry, size_display: str) -> "FileEntryResponse":
        return cls(
            id=entry.id,
            name=entry.name,
            size=entry.size,
            size_display=size_display,
            type=entry.type,
            status=entry.status.value,
            progress=entry.progress,
            url=entry.url,
            error=entry.error,
            compressed_size=entry.compressed_size
        )


class UploadedFileResponse(BaseModel):
    """Response schema for a file that finished uploading."""
    name: str
    url: str
    type: str
    original_size: int
    compressed_size: Optional[int] = None

    @classmethod
    def from_uploaded(cls, uploaded: UploadedFile) -> "UploadedFileResponse":
        return cls(
            name=uploaded.name,
            url=uploaded.url,
            type=uploaded.type,
            original_size=uploaded.original_size,
            compressed_size=uploaded.compressed_size
        )


class NotificationResponse(BaseModel):
    """A toast raised while processing the batch."""
    variant: str
    title: str
    description: str

    @classmethod
    def from_notification(cls, notification: Notification) -> "NotificationResponse":
        return cls(
            variant=notification.variant,
            title=notification.title,
            description=notification.description
        )


class BatchResponse(BaseModel):
    """Response schema for the state of an upload batch."""
    batch_id: str
    max_files: int
    files: List[FileEntryResponse]
    uploaded_files: List[UploadedFileResponse]
    notifications: List[NotificationResponse]
    summary: str
    is_processing: bool


class FileSelectionResponse(BaseModel):
    """Response schema for an accepted file selection."""
    batch_id: str
    message: str = Field(..., description="Status message")
    files: List[FileEntryResponse]
