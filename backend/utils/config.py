"""
ImageWatch Configuration Module.

Centralizes all configuration settings using Pydantic Settings.
Requires Python 3.11+.
"""

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file into os.environ at module import time
# This ensures nested BaseSettings classes can read the values
_env_file = Path(__file__).parent.parent / ".env"
if _env_file.exists():
    load_dotenv(_env_file)
else:
    # Try current working directory
    load_dotenv()


class RefresherSettings(BaseSettings):
    """Image refresher settings."""

    model_config = SettingsConfigDict(env_prefix="REFRESHER_")

    image_path: str = Field(default="", description="URI of the watched image")
    output_dir: Path | None = Field(
        default=None,
        description="Directory for temporary copies (defaults to the project directory)",
    )
    delay_ms: int = Field(default=500, ge=0, le=10000)
    enabled: bool = Field(default=True)


class CodeSettings(BaseSettings):
    """QR code and barcode generation settings."""

    model_config = SettingsConfigDict(env_prefix="CODES_")

    file_path: str = Field(default="%PROJECTDIR%/code.png", description="Output PNG URI")
    error_correction: str = Field(default="L", description="QR error correction level")
    box_size: int = Field(default=10, ge=1, le=100)
    border: int = Field(default=4, ge=0, le=50)
    code39_checksum: bool = Field(default=False)
    write_text: bool = Field(default=True, description="Print the value under barcodes")

    @field_validator("error_correction", mode="before")
    @classmethod
    def parse_error_correction(cls, v: str) -> str:
        """Normalize and validate the QR error correction level."""
        level = str(v).strip().upper()
        if level not in ("L", "M", "Q", "H"):
            raise ValueError(f"unknown error correction level: {v}")
        return level


class APISettings(BaseSettings):
    """API server configuration settings."""

    model_config = SettingsConfigDict(env_prefix="API_")

    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://127.0.0.1:3000"],
        description="Allowed CORS origins",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from comma-separated string or list."""
        if isinstance(v, str):
            return [o.strip() for o in v.split(",") if o.strip()]
        return v


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO")
    format: str = Field(default="json")  # "json" or "console"


class Settings(BaseSettings):
    """Main application settings aggregating all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="ImageWatch")
    app_version: str = Field(default="0.1.0")
    environment: str = Field(default="development")

    # Root for %PROJECTDIR% resource URIs
    project_dir: Path = Field(default_factory=Path.cwd)

    # Sub-settings
    refresher: RefresherSettings = Field(default_factory=RefresherSettings)
    codes: CodeSettings = Field(default_factory=CodeSettings)
    api: APISettings = Field(default_factory=APISettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @property
    def output_dir(self) -> Path:
        """Directory receiving temporary image copies."""
        return self.refresher.output_dir or self.project_dir

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() in ("development", "dev", "local")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns singleton instance of Settings for performance.
    Use dependency injection in FastAPI routes.
    """
    return Settings()
