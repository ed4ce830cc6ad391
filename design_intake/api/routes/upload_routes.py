"""
Upload batch API routes.
Handles file selection, live status rows and removal for upload batches.
"""
from typing import List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, File, Response, UploadFile, status
from design_intake.core.dependencies import get_batch_registry, get_file_validation_service
from design_intake.core.exceptions import CapacityExceededException, FileEntryNotFoundException
from design_intake.models.dto.upload_dto import (
    BatchCreateRequest,
    BatchResponse,
    FileEntryResponse,
    FileSelectionResponse,
    NotificationResponse,
    UploadedFileResponse
)
from design_intake.models.file_entry import FileStatus, SelectedFile
from design_intake.services.batch_registry import BatchRegistry, BatchSession
from design_intake.services.file_service import FileValidationService, format_size

router = APIRouter(prefix="/v1/api/batches", tags=["Uploads"])


def _batch_response(session: BatchSession) -> BatchResponse:
    uploader = session.uploader
    entries = uploader.entries
    done = len([entry for entry in entries if entry.status == FileStatus.DONE])
    return BatchResponse(
        batch_id=session.batch_id,
        max_files=uploader.max_files,
        files=[FileEntryResponse.from_entry(entry, format_size(entry.size)) for entry in entries],
        uploaded_files=[UploadedFileResponse.from_uploaded(f) for f in session.uploaded_files],
        notifications=[NotificationResponse.from_notification(n) for n in session.notifier.notifications],
        summary=f"{done} of {len(entries)} files uploaded",
        is_processing=uploader.is_processing
    )


@router.post("", response_model=BatchResponse, status_code=status.HTTP_201_CREATED)
async def create_batch(
    request: Optional[BatchCreateRequest] = None,
    registry: BatchRegistry = Depends(get_batch_registry)
):
    """
    Open a new upload batch.

    - **max_files**: File limit for the batch (defaults to the configured maximum)
    """
    session = registry.create(max_files=request.max_files if request else None)
    return _batch_response(session)


@router.get("/{batch_id}", response_model=BatchResponse)
async def get_batch(
    batch_id: str,
    registry: BatchRegistry = Depends(get_batch_registry)
):
    """
    Get the status rows, uploaded files and notifications of a batch.
    """
    return _batch_response(registry.get(batch_id))


@router.delete("/{batch_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_batch(
    batch_id: str,
    registry: BatchRegistry = Depends(get_batch_registry)
):
    """
    Close a batch.
    """
    registry.delete(batch_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{batch_id}/files", response_model=FileSelectionResponse, status_code=status.HTTP_202_ACCEPTED)
async def select_files(
    batch_id: str,
    background_tasks: BackgroundTasks,
    files: List[UploadFile] = File(..., description="Files picked or dropped by the user"),
    registry: BatchRegistry = Depends(get_batch_registry),
    validation_service: FileValidationService = Depends(get_file_validation_service)
):
    """
    Add a selection of files to a batch.

    The files are compressed and uploaded in the background; poll the batch
    for progress.
    """
    session = registry.get(batch_id)
    uploader = session.uploader

    if not uploader.capacity_guard.check(len(uploader.entries), len(files)):
        raise CapacityExceededException(uploader.capacity_guard.rejection_message())

    selected = []
    for upload in files:
        content = await upload.read()
        selected.append(SelectedFile(
            name=upload.filename or "",
            content=content,
            content_type=upload.content_type or "application/octet-stream"
        ))

    validation_service.validate_selection(selected)

    staged = uploader.stage_files(selected)
    if staged is None:
        raise CapacityExceededException(uploader.capacity_guard.rejection_message())

    background_tasks.add_task(uploader.process, [entry.id for entry in staged])

    return FileSelectionResponse(
        batch_id=batch_id,
        message=f"{len(staged)} file(s) accepted. Upload in progress.",
        files=[FileEntryResponse.from_entry(entry, format_size(entry.size)) for entry in staged]
    )


@router.delete("/{batch_id}/files/{entry_id}", response_model=BatchResponse)
async def remove_file(
    batch_id: str,
    entry_id: str,
    registry: BatchRegistry = Depends(get_batch_registry)
):
    """
    Remove a file from a batch. An upload already in flight is not cancelled.
    """
    session = registry.get(batch_id)
    if not session.uploader.remove_file(entry_id):
        raise FileEntryNotFoundException(f"File '{entry_id}' not found in batch '{batch_id}'")
    return _batch_response(session)


@router.get("/{batch_id}/uploaded", response_model=List[UploadedFileResponse])
async def get_uploaded_files(
    batch_id: str,
    registry: BatchRegistry = Depends(get_batch_registry)
):
    """
    List the files of a batch that finished uploading.
    """
    session = registry.get(batch_id)
    return [UploadedFileResponse.from_uploaded(f) for f in session.uploader.uploaded_files()]
