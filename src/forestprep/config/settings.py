"""Configuration management using Pydantic Settings."""

from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    model_config = SettingsConfigDict(
        env_prefix="FORESTPREP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Input defaults
    default_sheet: str = Field("EarlySingle", description="Worksheet read from Excel workbooks")

    # Validation
    strict: bool = Field(False, description="Treat validation warnings as errors")

    # Directories
    output_dir: Path = Field(Path("output"))

    # Logging
    log_level: str = Field("INFO")
    log_format: str = Field("json", pattern="^(json|text)$")


# Instantiate global settings
settings = Settings()
