"""
API configuration settings.
Loaded from the process environment and a local .env file.
"""

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class APIConfig(BaseSettings):
    """API configuration settings."""

    # API Settings
    api_title: str = "Book Index API"
    api_version: str = "1.0.0"

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 8080
    debug: bool = False

    # Index Engine Settings
    elastic_url: str = Field(..., description="Index engine URL")
    elastic_index: str = "books"
    elastic_refresh: str = "wait_for"
    elastic_request_timeout: float = 10.0

    # CORS Settings
    cors_origins: List[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: List[str] = ["*"]
    cors_allow_headers: List[str] = ["*"]

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"
    log_file: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra fields from .env
    )

    @field_validator('elastic_url')
    @classmethod
    def validate_elastic_url(cls, v):
        """Ensure the engine URL is usable."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError('elastic_url must start with http:// or https://')
        return v.rstrip("/")

    @field_validator('elastic_refresh')
    @classmethod
    def validate_refresh(cls, v):
        """Ensure refresh policy is one the engine accepts."""
        valid_policies = ['true', 'false', 'wait_for']
        if v.lower() not in valid_policies:
            raise ValueError(f'elastic_refresh must be one of: {valid_policies}')
        return v.lower()

    @field_validator('elastic_request_timeout')
    @classmethod
    def validate_timeout(cls, v):
        """Ensure timeout is reasonable."""
        if v <= 0 or v > 300:
            raise ValueError('elastic_request_timeout must be between 0 and 300 seconds')
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'log_level must be one of: {valid_levels}')
        return v.upper()

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v):
        """Ensure log format is valid."""
        valid_formats = ['json', 'console']
        if v.lower() not in valid_formats:
            raise ValueError(f'log_format must be one of: {valid_formats}')
        return v.lower()

    def refresh_policy(self):
        """Refresh argument as the engine client expects it."""
        return {"true": True, "false": False}.get(self.elastic_refresh, self.elastic_refresh)


# Global config instance
config = APIConfig()
