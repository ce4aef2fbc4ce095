"""Configuration Management."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Builder settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="UIFORGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")

    # Exported project
    project_name: str = Field(default="uiforge-project", min_length=1, description="Manifest package name")
    project_version: str = Field(default="0.1.0", description="Manifest package version")
    generated_dir: str = Field(
        default="components/generated", min_length=1, description="File namespace for generated components"
    )
    unknown_type_policy: Literal["skip", "abort"] = Field(
        default="skip", description="What export does with instances whose type cannot be resolved"
    )

    # Compilation
    max_source_length: int = Field(default=64 * 1024, gt=0, description="Max generated source size (chars)")
    max_render_depth: int = Field(default=64, gt=0, description="Max nested factory invocations per render")

    # Validation
    max_props_depth: int = Field(default=20, gt=0, description="Max property bag nesting depth")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
