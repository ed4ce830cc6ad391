"""
In-memory registry of upload batches served by the API.
Batches left idle longer than the configured timeout are dropped.
"""
import logging
import time
import uuid
from typing import Callable, Dict, List, Optional
from design_intake.core import config
from design_intake.core.exceptions import BatchNotFoundException
from design_intake.models.file_entry import UploadedFile
from design_intake.repositories.storage_repository import StorageRepository
from design_intake.services.batch_uploader import FileBatchUploader
from design_intake.services.compression_service import ImageCompressionService
from design_intake.services.notification_service import CollectingNotifier

logger = logging.getLogger(__name__)


class BatchSession:
    """One uploader instance plus what its host form has been told."""

    def __init__(self, batch_id: str, uploader: FileBatchUploader, notifier: CollectingNotifier, last_seen: float = 0.0):
        self.batch_id = batch_id
        self.uploader = uploader
        self.notifier = notifier
        self.uploaded_files: List[UploadedFile] = []
        self.last_seen = last_seen

    def on_files_uploaded(self, files: List[UploadedFile]) -> None:
        self.uploaded_files = files

    def __repr__(self):
        return f"BatchSession(batch_id={self.batch_id}, entries={len(self.uploader.entries)})"


class BatchRegistry:
    """Creates and looks up upload batches."""

    def __init__(
        self,
        storage: StorageRepository,
        compressor: ImageCompressionService,
        clock: Callable[[], float] = time.monotonic
    ):
        self.storage = storage
        self.compressor = compressor
        self._clock = clock
        self._sessions: Dict[str, BatchSession] = {}

    def __len__(self):
        return len(self._sessions)

    def create(self, max_files: Optional[int] = None) -> BatchSession:
        """
        Open a new upload batch.

        Args:
            max_files: File limit for the batch, defaults to the configured maximum

        Returns:
            The new BatchSession
        """
        self.expire_idle()

        batch_id = str(uuid.uuid4())
        notifier = CollectingNotifier()
        uploader = FileBatchUploader(
            storage=self.storage,
            compressor=self.compressor,
            notifier=notifier,
            max_files=max_files or config.settings.max_files
        )
        session = BatchSession(batch_id, uploader, notifier, last_seen=self._clock())
        uploader.on_files_uploaded = session.on_files_uploaded
        self._sessions[batch_id] = session
        logger.info("Opened batch %s (max %d files)", batch_id, uploader.max_files)
        return session

    def get(self, batch_id: str) -> BatchSession:
        """
        Raises:
            BatchNotFoundException: If the batch does not exist
        """
        session = self._sessions.get(batch_id)
        if session is None:
            raise BatchNotFoundException(f"Batch '{batch_id}' not found")
        session.last_seen = self._clock()
        return session

    def delete(self, batch_id: str) -> None:
        """
        Forget a batch. Pipelines still running finish against the detached uploader.

        Raises:
            BatchNotFoundException: If the batch does not exist
        """
        self.get(batch_id)
        del self._sessions[batch_id]
        logger.info("Closed batch %s", batch_id)

    def expire_idle(self) -> int:
        """
        Drop batches nobody has looked at within the idle timeout.
        Batches with pipelines still running are kept.

        Returns:
            Number of batches dropped
        """
        cutoff = self._clock() - config.settings.batch_idle_timeout_seconds
        expired = [
            batch_id for batch_id, session in self._sessions.items()
            if session.last_seen < cutoff and not session.uploader.is_processing
        ]
        for batch_id in expired:
            del self._sessions[batch_id]
            logger.info("Expired idle batch %s", batch_id)
        return len(expired)
