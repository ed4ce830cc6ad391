"""
Image compression for oversized uploads.
Images above the size threshold are scaled and re-encoded before upload.
"""
import asyncio
import io
import logging
import os
from typing import Optional
from PIL import Image, ImageOps
from design_intake.core import config
from design_intake.core.exceptions import CompressionException
from design_intake.models.file_entry import CompressionResult, SelectedFile

logger = logging.getLogger(__name__)

QUALITY_STEPS = (90, 80, 70, 60, 50, 40)
FORMAT_EXTENSIONS = {'image/jpeg': '.jpg', 'image/png': '.png', 'image/webp': '.webp'}
DOWNSCALE_FACTOR = 0.8
MIN_DIMENSION = 64


def should_compress(content_type: Optional[str], size: int, threshold_bytes: Optional[int] = None) -> bool:
    """True only for image MIME types strictly larger than the threshold."""
    if threshold_bytes is None:
        threshold_bytes = config.settings.compression_threshold_kb * 1024
    return bool(content_type) and content_type.lower().startswith("image/") and size > threshold_bytes


def stored_filename(name: str, content_type: str) -> str:
    """Swap the extension of a file name for the one matching its re-encoded type."""
    extension = FORMAT_EXTENSIONS.get(content_type)
    if extension is None:
        return name
    stem, _ = os.path.splitext(name)
    return f"{stem}{extension}"


class ImageCompressionService:
    """Service for shrinking large images before upload."""

    def compress_image(self, content: bytes, content_type: str) -> CompressionResult:
        """
        Scale an image to the maximum edge and re-encode it under the size ceiling.

        PNG and WebP images keep their format; everything else is written as
        JPEG. Lossy formats lower quality first and then dimensions until the
        output fits, PNG only lowers dimensions.

        Args:
            content: Original image bytes
            content_type: Declared MIME type

        Returns:
            CompressionResult with the re-encoded bytes and their MIME type

        Raises:
            CompressionException: If the image cannot be decoded or encoded
        """
        max_dimension = config.settings.compression_max_dimension
        max_size = config.settings.compression_max_size_mb * 1024 * 1024

        try:
            with Image.open(io.BytesIO(content)) as source:
                image = ImageOps.exif_transpose(source)
                image.thumbnail((max_dimension, max_dimension), Image.LANCZOS)

                if content_type == 'image/png':
                    return self._encode_png(image, max_size)
                if content_type == 'image/webp':
                    mode = 'RGBA' if image.mode in ('RGBA', 'LA', 'P') else 'RGB'
                    return self._encode_lossy(image.convert(mode), 'WEBP', max_size)
                return self._encode_lossy(image.convert('RGB'), 'JPEG', max_size)

        except CompressionException:
            raise
        except Exception as e:
            raise CompressionException(f"Failed to compress image: {str(e)}") from e

    def _encode_png(self, image: Image.Image, max_size: int) -> CompressionResult:
        while True:
            buffer = io.BytesIO()
            image.save(buffer, format='PNG', optimize=True)
            data = buffer.getvalue()
            if len(data) <= max_size or min(image.size) <= MIN_DIMENSION:
                return CompressionResult(content=data, content_type='image/png', compressed_size=len(data))
            image = self._downscale(image)

    def _encode_lossy(self, image: Image.Image, image_format: str, max_size: int) -> CompressionResult:
        content_type = f"image/{image_format.lower()}"
        while True:
            for quality in QUALITY_STEPS:
                buffer = io.BytesIO()
                image.save(buffer, format=image_format, quality=quality, optimize=True)
                data = buffer.getvalue()
                if len(data) <= max_size:
                    return CompressionResult(content=data, content_type=content_type, compressed_size=len(data))
            if min(image.size) <= MIN_DIMENSION:
                return CompressionResult(content=data, content_type=content_type, compressed_size=len(data))
            image = self._downscale(image)

    def _downscale(self, image: Image.Image) -> Image.Image:
        width, height = image.size
        size = (max(int(width * DOWNSCALE_FACTOR), 1), max(int(height * DOWNSCALE_FACTOR), 1))
        return image.resize(size, Image.LANCZOS)

    async def compress_file(self, file: SelectedFile) -> CompressionResult:
        """
        Run the compression stage for one selected file.

        Files that are not large images pass through untouched. Compression
        runs in a worker thread; if it fails the original file is forwarded
        so the upload still goes ahead.

        Args:
            file: The selected file

        Returns:
            CompressionResult; compressed_size is None when nothing was compressed
        """
        if not should_compress(file.content_type, file.size):
            return CompressionResult(content=file.content, content_type=file.content_type)

        try:
            result = await asyncio.to_thread(self.compress_image, file.content, file.content_type)
        except Exception as e:
            logger.warning("Compression failed for %s, uploading original: %s", file.name, e)
            return CompressionResult(content=file.content, content_type=file.content_type)

        if result.compressed_size >= file.size:
            logger.info("Compressed %s is not smaller than the original, keeping original", file.name)
            return CompressionResult(content=file.content, content_type=file.content_type, compressed_size=file.size)

        logger.info("Compressed %s from %d to %d bytes", file.name, file.size, result.compressed_size)
        return result
