"""
Dependency injection container for FastAPI.
Provides singleton-like behavior for services and repositories.
"""
from functools import lru_cache
from design_intake.repositories.s3_repository import S3StorageRepository
from design_intake.repositories.storage_repository import StorageRepository
from design_intake.services.batch_registry import BatchRegistry
from design_intake.services.compression_service import ImageCompressionService
from design_intake.services.design_request_service import DesignRequestService
from design_intake.services.file_service import FileValidationService


@lru_cache()
def get_storage_repository() -> StorageRepository:
    """Get S3StorageRepository singleton instance."""
    return S3StorageRepository()


@lru_cache()
def get_compression_service() -> ImageCompressionService:
    """Get ImageCompressionService singleton instance."""
    return ImageCompressionService()


@lru_cache()
def get_file_validation_service() -> FileValidationService:
    """Get FileValidationService singleton instance."""
    return FileValidationService()


@lru_cache()
def get_batch_registry() -> BatchRegistry:
    """Get BatchRegistry singleton instance with injected dependencies."""
    return BatchRegistry(
        storage=get_storage_repository(),
        compressor=get_compression_service()
    )


@lru_cache()
def get_design_request_service() -> DesignRequestService:
    """Get DesignRequestService singleton instance."""
    return DesignRequestService()
