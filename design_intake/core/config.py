"""
Core configuration for the Design Intake API.
Manages environment variables, storage and upload pipeline settings.
"""
import os
from typing import List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # AWS Configuration
    aws_region: str = os.getenv("AWS_REGION", "us-east-1")
    s3_bucket_name: str = os.getenv("S3_BUCKET_NAME", "")

    # Storage layout and access URLs
    upload_prefix: str = os.getenv("UPLOAD_PREFIX", "uploads")
    public_base_url: str = os.getenv("PUBLIC_BASE_URL", "")
    presigned_url_expiry_seconds: int = int(os.getenv("PRESIGNED_URL_EXPIRY_SECONDS", "0"))
    multipart_chunk_size_mb: int = int(os.getenv("MULTIPART_CHUNK_SIZE_MB", "8"))

    # API Configuration
    api_title: str = os.getenv("API_TITLE", "Design Intake API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    cors_origins: List[str] = ["http://localhost:3000"]

    # File Upload Limits
    max_files: int = int(os.getenv("MAX_FILES", "10"))
    max_file_size_mb: int = int(os.getenv("MAX_FILE_SIZE_MB", "50"))
    batch_idle_timeout_seconds: int = int(os.getenv("BATCH_IDLE_TIMEOUT_SECONDS", "3600"))

    # Image compression (applied to images above the threshold only)
    compression_threshold_kb: int = int(os.getenv("COMPRESSION_THRESHOLD_KB", "500"))
    compression_max_size_mb: int = int(os.getenv("COMPRESSION_MAX_SIZE_MB", "5"))
    compression_max_dimension: int = int(os.getenv("COMPRESSION_MAX_DIMENSION", "1920"))

    # Design request forwarding
    design_request_webhook_url: str = os.getenv("DESIGN_REQUEST_WEBHOOK_URL", "")
    webhook_timeout_seconds: int = int(os.getenv("WEBHOOK_TIMEOUT_SECONDS", "10"))

    # Environment
    environment: str = os.getenv("ENVIRONMENT", "dev")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
