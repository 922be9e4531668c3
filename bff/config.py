"""
Configuration module for the prescription BFF.
Uses Pydantic BaseSettings for validation - app fails fast if required config is missing.
"""
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


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

    # Records Service Configuration
    records_svc_url: str = Field(
        default="http://localhost:50051",
        description="Base URL of the Records Service"
    )
    records_svc_api_key: str = Field(
        ...,  # Required - no default means fail fast if missing
        description="API key shared with the Records Service",
        min_length=32,
    )
    records_svc_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Timeout in seconds for each remote call"
    )

    # Server Configuration
    bff_host: str = Field(default="0.0.0.0", description="BFF host")
    bff_port: int = Field(default=4000, description="BFF port")
    bff_reload: bool = Field(default=False, description="Enable hot reload")


# Create global settings instance - fails fast if required config is missing
settings = Settings()

# Backwards-compatible exports for existing code
RECORDS_SVC_URL = settings.records_svc_url
RECORDS_SVC_API_KEY = settings.records_svc_api_key
RECORDS_SVC_TIMEOUT = settings.records_svc_timeout
