"""
Batch upload orchestration.

A FileBatchUploader owns one batch of file entries. Each accepted file runs
its own pipeline (compress, then upload) concurrently with its siblings; the
batch is joined once every pipeline settles and the successfully uploaded
files are handed to the host form's callback.

The batch is an immutable tuple that is replaced on every update. Updates
are keyed by entry id, so a pipeline whose entry was removed meanwhile finds
nothing to update and stops without reinserting it. Removal never cancels
work that is already in flight.
"""
import asyncio
import dataclasses
import logging
import time
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Set, Tuple
from design_intake.core import config
from design_intake.models.file_entry import (
    ALLOWED_TRANSITIONS,
    FileEntry,
    FileStatus,
    SelectedFile,
    UploadedFile
)
from design_intake.models.notification import Notification
from design_intake.repositories.storage_repository import StorageRepository, build_storage_key
from design_intake.services.capacity_guard import CapacityGuard
from design_intake.services.compression_service import ImageCompressionService, stored_filename
from design_intake.services.file_service import format_size
from design_intake.services.notification_service import Notifier

logger = logging.getLogger(__name__)

FilesUploadedCallback = Callable[[List[UploadedFile]], None]
EntryUpdatedCallback = Callable[[FileEntry], None]


def _now_ms() -> int:
    return int(time.time() * 1000)


def aggregate_uploaded(entries: Iterable[FileEntry]) -> List[UploadedFile]:
    """Map the finished entries of a batch to their public-facing shape."""
    return [
        UploadedFile(
            name=entry.name,
            url=entry.url,
            type=entry.type,
            original_size=entry.size,
            compressed_size=entry.compressed_size
        )
        for entry in entries
        if entry.status == FileStatus.DONE and entry.url
    ]


class FileBatchUploader:
    """Tracks one batch of selected files through compression and upload."""

    def __init__(
        self,
        storage: StorageRepository,
        compressor: ImageCompressionService,
        notifier: Notifier,
        on_files_uploaded: Optional[FilesUploadedCallback] = None,
        max_files: int = 10,
        on_entry_updated: Optional[EntryUpdatedCallback] = None,
        clock: Callable[[], int] = _now_ms
    ):
        self.storage = storage
        self.compressor = compressor
        self.notifier = notifier
        self.capacity_guard = CapacityGuard(notifier, max_files)
        self.on_files_uploaded = on_files_uploaded
        self.on_entry_updated = on_entry_updated
        self._clock = clock
        self._entries: Tuple[FileEntry, ...] = ()
        self._files: Dict[str, SelectedFile] = {}

    @property
    def max_files(self) -> int:
        return self.capacity_guard.max_files

    @property
    def entries(self) -> Tuple[FileEntry, ...]:
        return self._entries

    @property
    def is_processing(self) -> bool:
        return any(not entry.is_terminal for entry in self._entries)

    def get_entry(self, entry_id: str) -> Optional[FileEntry]:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def uploaded_files(self) -> List[UploadedFile]:
        """Aggregate the current batch; no side effects."""
        return aggregate_uploaded(self._entries)

    def stage_files(self, files: Sequence[SelectedFile]) -> Optional[List[FileEntry]]:
        """
        Accept a selection into the batch.

        Args:
            files: Newly selected files

        Returns:
            The new pending entries, or None if the capacity guard rejected
            the selection (the batch is left unchanged)
        """
        if not self.capacity_guard.check(len(self._entries), len(files)):
            return None

        timestamp = self._clock()
        taken: Set[str] = {entry.id for entry in self._entries}
        staged = []
        for file in files:
            entry_id = self._unique_id(file.name, timestamp, taken)
            taken.add(entry_id)
            staged.append(FileEntry(id=entry_id, name=file.name, size=file.size, type=file.content_type))
            self._files[entry_id] = file

        self._entries = self._entries + tuple(staged)
        logger.info("Staged %d file(s), batch now holds %d", len(staged), len(self._entries))
        return staged

    async def process(self, entry_ids: Sequence[str]) -> None:
        """Run the pipelines of the given entries concurrently and publish once all settle."""
        results = await asyncio.gather(
            *(self._run_pipeline(entry_id) for entry_id in entry_ids),
            return_exceptions=True
        )
        for entry_id, result in zip(entry_ids, results):
            if isinstance(result, Exception):
                logger.error("Pipeline for %s ended with an unexpected error: %s", entry_id, result)
        self._publish()

    async def select_files(self, files: Sequence[SelectedFile]) -> List[FileEntry]:
        """
        Stage a selection and process it to completion.

        Returns:
            The selection's entries after every pipeline settled, minus any
            removed meanwhile; empty if the selection was rejected
        """
        staged = self.stage_files(files)
        if not staged:
            return []

        entry_ids = [entry.id for entry in staged]
        await self.process(entry_ids)
        return [entry for entry in self._entries if entry.id in entry_ids]

    def remove_file(self, entry_id: str) -> bool:
        """
        Drop an entry from the batch and republish the uploaded files.

        Returns:
            False if the entry is not in the batch
        """
        if self.get_entry(entry_id) is None:
            return False

        self._entries = tuple(entry for entry in self._entries if entry.id != entry_id)
        self._files.pop(entry_id, None)
        logger.info("Removed %s from batch", entry_id)
        self._publish()
        return True

    async def _run_pipeline(self, entry_id: str) -> None:
        file = self._files.pop(entry_id, None)
        if file is None:
            return

        if not self._transition(entry_id, FileStatus.COMPRESSING, progress=0):
            return

        try:
            compressed = await self.compressor.compress_file(file)
        except Exception as e:
            logger.exception("Compression stage failed for %s", file.name)
            self._transition(entry_id, FileStatus.ERROR, error=self._error_message(e))
            return

        if compressed.compressed_size is not None and compressed.compressed_size < file.size:
            self.notifier.notify(Notification(
                title="Image compressed",
                description=f"{file.name} reduced from {format_size(file.size)} to {format_size(compressed.compressed_size)}"
            ))

        filename = file.name
        if compressed.content_type != file.content_type:
            filename = stored_filename(file.name, compressed.content_type)
        key = build_storage_key(filename, config.settings.upload_prefix, self._clock())
        if not self._transition(
            entry_id,
            FileStatus.UPLOADING,
            progress=0,
            type=compressed.content_type,
            compressed_size=compressed.compressed_size,
            storage_key=key
        ):
            return

        try:
            url = await self.storage.upload(
                key,
                compressed.content,
                compressed.content_type,
                lambda percentage: self._report_progress(entry_id, percentage)
            )
        except Exception as e:
            logger.warning("Upload failed for %s: %s", file.name, e)
            self._transition(entry_id, FileStatus.ERROR, error=self._error_message(e))
            return

        self._transition(entry_id, FileStatus.DONE, progress=100, url=url)

    def _transition(self, entry_id: str, status: FileStatus, **changes) -> bool:
        entry = self.get_entry(entry_id)
        if entry is None:
            logger.debug("Entry %s left the batch, dropping %s update", entry_id, status.value)
            return False

        if status not in ALLOWED_TRANSITIONS[entry.status]:
            raise ValueError(f"Invalid transition for {entry_id}: {entry.status.value} -> {status.value}")

        self._replace(dataclasses.replace(entry, status=status, **changes))
        return True

    def _report_progress(self, entry_id: str, percentage: float) -> None:
        entry = self.get_entry(entry_id)
        if entry is None or entry.status != FileStatus.UPLOADING:
            return

        progress = max(0, min(100, int(round(percentage))))
        if progress <= entry.progress:
            return
        self._replace(dataclasses.replace(entry, progress=progress))

    def _replace(self, updated: FileEntry) -> None:
        self._entries = tuple(updated if entry.id == updated.id else entry for entry in self._entries)
        if self.on_entry_updated:
            self.on_entry_updated(updated)

    def _publish(self) -> None:
        if self.on_files_uploaded:
            self.on_files_uploaded(self.uploaded_files())

    @staticmethod
    def _unique_id(name: str, timestamp: int, taken: Set[str]) -> str:
        entry_id = f"{name}-{timestamp}"
        suffix = 1
        while entry_id in taken:
            entry_id = f"{name}-{timestamp}-{suffix}"
            suffix += 1
        return entry_id

    @staticmethod
    def _error_message(error: Exception) -> str:
        return str(error) or error.__class__.__name__
