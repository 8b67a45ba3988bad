"""
Application configuration using Pydantic Settings.
All environment variables are loaded here with sensible defaults.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """Storage settings loaded from environment variables."""

    # Environment
    environment: str = "dev"
    log_level: str = "INFO"

    # S3 / S3-compatible storage
    s3_bucket: str = "objectstore-data"  # Bucket used by get_s3_client()
    s3_region: str = "us-west-2"  # Region the boto3 client signs for
    s3_endpoint: Optional[str] = None  # e.g., http://localhost:9000 for MinIO
    s3_access_key: Optional[str] = None  # Falls back to the boto3 credential chain
    s3_secret_key: Optional[str] = None

    # Max concurrent uploads for upload_bytes_multi
    s3_upload_workers: int = 16

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
