"""
S3 Repository for file storage operations.
Performs chunked multipart uploads to Amazon S3 with progress reporting.
"""
import asyncio
import io
import logging
import threading
from urllib.parse import quote
import boto3
from boto3.exceptions import S3UploadFailedError
from boto3.s3.transfer import TransferConfig
from botocore.exceptions import BotoCoreError, ClientError
from design_intake.core import config
from design_intake.core.exceptions import StorageException
from design_intake.repositories.storage_repository import ProgressCallback, StorageRepository

logger = logging.getLogger(__name__)

MB = 1024 * 1024


class UploadProgress:
    """
    Thread-safe progress tracker handed to boto3 as the transfer Callback.

    boto3 reports byte increments from its worker threads; each report is
    converted to a percentage and delivered to the event loop in order.
    """

    def __init__(self, total_bytes: int, on_progress: ProgressCallback, loop: asyncio.AbstractEventLoop):
        self.total_bytes = total_bytes
        self.bytes_transferred = 0
        self._on_progress = on_progress
        self._loop = loop
        self._lock = threading.Lock()

    @property
    def percentage(self) -> float:
        if self.total_bytes == 0:
            return 100.0
        return self.bytes_transferred / self.total_bytes * 100

    def __call__(self, bytes_amount: int) -> None:
        with self._lock:
            self.bytes_transferred += bytes_amount
            percentage = self.percentage
            self._loop.call_soon_threadsafe(self._on_progress, percentage)


class S3StorageRepository(StorageRepository):
    """Repository for S3 file uploads."""

    def __init__(self):
        self.s3_client = boto3.client('s3', region_name=config.settings.aws_region)
        self.bucket_name = config.settings.s3_bucket_name
        chunk_size = config.settings.multipart_chunk_size_mb * MB
        self.transfer_config = TransferConfig(
            multipart_threshold=chunk_size,
            multipart_chunksize=chunk_size
        )

    async def upload(
        self,
        key: str,
        content: bytes,
        content_type: str,
        on_progress: ProgressCallback
    ) -> str:
        """
        Upload a file to S3.

        Args:
            key: S3 object key
            content: File bytes
            content_type: MIME type stored on the object
            on_progress: Receives the transferred percentage

        Returns:
            str: Access URL for the uploaded object

        Raises:
            StorageException: If upload fails
        """
        loop = asyncio.get_running_loop()
        progress = UploadProgress(len(content), on_progress, loop)

        try:
            await asyncio.to_thread(
                self.s3_client.upload_fileobj,
                io.BytesIO(content),
                self.bucket_name,
                key,
                ExtraArgs={'ContentType': content_type},
                Callback=progress,
                Config=self.transfer_config
            )
            logger.info("Uploaded s3://%s/%s (%d bytes)", self.bucket_name, key, len(content))
            return self.get_access_url(key)

        except (S3UploadFailedError, ClientError, BotoCoreError) as e:
            raise StorageException(f"Failed to upload file to S3: {str(e)}") from e

    def get_access_url(self, key: str) -> str:
        """
        Build the URL the uploaded object is fetched from.

        Presigned GET URLs win when an expiry is configured, then the public
        base URL (e.g. a CDN), then the bucket's virtual-hosted URL.
        """
        expiry = config.settings.presigned_url_expiry_seconds
        if expiry > 0:
            try:
                return self.s3_client.generate_presigned_url(
                    'get_object',
                    Params={'Bucket': self.bucket_name, 'Key': key},
                    ExpiresIn=expiry
                )
            except (ClientError, BotoCoreError) as e:
                raise StorageException(f"Failed to create download URL: {str(e)}") from e

        base_url = config.settings.public_base_url.rstrip('/')
        if base_url:
            return f"{base_url}/{quote(key)}"

        return f"https://{self.bucket_name}.s3.{config.settings.aws_region}.amazonaws.com/{quote(key)}"

