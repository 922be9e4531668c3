"""
Configuration module for the Records Service.
Uses Pydantic BaseSettings for validation - app fails fast if required config is missing.
"""
import logging
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings with validation.
    Required fields will cause the app to fail fast if not provided.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database Configuration
    records_svc_db_dir: str = Field(default="data", description="Database directory")
    records_svc_db_file: str = Field(default="records.db", description="Database filename")
    records_svc_db_busy_timeout: int = Field(default=5000, description="SQLite busy timeout in milliseconds")

    # API Configuration
    records_svc_host: str = Field(default="0.0.0.0", description="API host")
    records_svc_port: int = Field(default=50051, description="API port")
    records_svc_reload: bool = Field(default=False, description="Enable hot reload")

    # Paging Configuration
    records_svc_default_page_size: int = Field(default=10, ge=1, description="Page size used when none is requested")
    records_svc_max_page_size: int = Field(default=100, ge=1, description="Largest page size a caller may request")

    # API Authentication Configuration
    records_svc_api_key: str = Field(
        ...,  # Required - no default means fail fast if missing
        description="API key shared with the BFF for authenticating requests",
        min_length=32,  # Enforce minimum key length for security
    )

    @model_validator(mode="after")
    def validate_paging(self) -> "Settings":
        """Clamp the default page size so it never exceeds the maximum."""
        if self.records_svc_default_page_size > self.records_svc_max_page_size:
            logger.warning(
                "RECORDS_SVC_DEFAULT_PAGE_SIZE exceeds RECORDS_SVC_MAX_PAGE_SIZE, clamping",
                extra={
                    "default_page_size": self.records_svc_default_page_size,
                    "max_page_size": self.records_svc_max_page_size,
                }
            )
            self.records_svc_default_page_size = self.records_svc_max_page_size
        return self

    @property
    def database_path(self) -> str:
        """Get the full database path."""
        return str(Path(self.records_svc_db_dir) / self.records_svc_db_file)

    def ensure_directories(self) -> None:
        """Ensure required directories exist."""
        Path(self.records_svc_db_dir).mkdir(parents=True, exist_ok=True)


# Create global settings instance - fails fast if required config is missing
settings = Settings()

# Ensure directories exist on import
settings.ensure_directories()

# Backwards-compatible exports for existing code
DATABASE_DIR = settings.records_svc_db_dir
DATABASE_FILE = settings.records_svc_db_file
DATABASE_PATH = settings.database_path
DATABASE_BUSY_TIMEOUT = settings.records_svc_db_busy_timeout

API_HOST = settings.records_svc_host
API_PORT = settings.records_svc_port
API_RELOAD = settings.records_svc_reload

DEFAULT_PAGE_SIZE = settings.records_svc_default_page_size
MAX_PAGE_SIZE = settings.records_svc_max_page_size

API_KEY = settings.records_svc_api_key
