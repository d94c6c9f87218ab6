"""Configuration settings for scooter telemetry parsing."""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """Global parser settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
    )

    # Input
    input_encoding: str = "utf-8"  # Undecodable bytes are replaced, the line then fails validation

    # Schema override (JSON file with packet definitions)
    schema_file: Optional[str] = None

    # Output
    json_pretty: bool = True

    # Logging
    log_level: str = "INFO"
    log_to_file: bool = False
    logs_path: str = "logs"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


# Global settings instance
settings = Settings()
