"""
Application configuration management using Pydantic Settings.
"""
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Export subsystem settings loaded from environment variables.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    APP_NAME: str = "ShowExport"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    ENVIRONMENT: str = Field(default="development", pattern="^(development|staging|production)$")

    # Data folders
    DEFAULT_DATA_PATH: Optional[Path] = None
    EXPORTS_FOLDER_NAME: str = "Exports"
    USAGE_FOLDER_NAME: str = "Usage"
    TIMEPOINT_FORMAT: str = "%Y-%m-%d_%H-%M-%S"

    # Output formats
    SHOW_EXTENSION: str = ".show"
    TEXT_EXTENSION: str = ".txt"
    PDF_EXTENSION: str = ".pdf"
    JSON_EXTENSION: str = ".json"
    PROJECT_EXTENSION: str = ".project"
    TEMPLATE_EXTENSION: str = ".fstemplate"
    THEME_EXTENSION: str = ".fstheme"
    ARCHIVE_MANIFEST_NAME: str = "data.json"
    JSON_INDENT: int = 4
    UNNAMED_EXPORT_NAME: str = "Unnamed"
    BATCHABLE_SHOW_FORMATS: List[str] = Field(default=["txt", "show"])

    # PDF capture
    PDF_PAGE_SIZE: str = "A4"
    PDF_PRINT_BACKGROUND: bool = True
    PDF_LANDSCAPE: bool = False

    # Rendering host
    RENDER_HOST_COMMAND: List[str] = Field(default_factory=list)
    RENDER_HOST_UI_FILE: str = "public/index.html"
    RENDER_HOST_DEV_URL: str = "http://localhost:3000"
    RENDER_HOST_STREAM_LIMIT: int = 64 * 1024 * 1024  # base64 PDF pages arrive as one line
    RENDER_HOST_CLOSE_TIMEOUT_SECONDS: float = 5.0

    # Side effects
    REVEAL_OUTPUT_FOLDER: bool = True

    @field_validator("RENDER_HOST_COMMAND", "BATCHABLE_SHOW_FORMATS", mode="before")
    @classmethod
    def assemble_list(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str):
            return [i.strip() for i in v.split(",") if i.strip()]
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.ENVIRONMENT == "development"

    @property
    def render_host_entry(self) -> str:
        """UI entry point the rendering host loads: the bundle in production, the dev server otherwise."""
        if self.is_production:
            return self.RENDER_HOST_UI_FILE
        return self.RENDER_HOST_DEV_URL

    def pdf_options(self) -> Dict[str, Any]:
        """Get the fixed page capture settings."""
        return {
            "margins": {"top": 0, "bottom": 0, "left": 0, "right": 0},
            "page_size": self.PDF_PAGE_SIZE,
            "print_background": self.PDF_PRINT_BACKGROUND,
            "landscape": self.PDF_LANDSCAPE,
        }


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application settings
    """
    return Settings()


# Create a settings instance for easy import
settings = get_settings()
