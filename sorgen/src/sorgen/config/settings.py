"""Application settings using Pydantic Settings."""

from pathlib import Path
from typing import Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv


def find_and_load_env_file() -> Optional[str]:
    """Find and load a .env file in the current directory or its parents."""
    current = Path.cwd().resolve()
    # Check current directory and up to 3 levels up
    for _ in range(4):
        env_path = current / ".env"
        if env_path.exists():
            load_dotenv(env_path, override=False)
            return str(env_path)
        parent = current.parent
        if parent == current:  # Reached root
            break
        current = parent
    return None


class Settings(BaseSettings):
    """Application configuration settings.

    Every field can be overridden with a ``SORGEN_``-prefixed environment
    variable, e.g. ``SORGEN_DEFAULT_ROW_COUNT=500``.
    """

    # Generation Configuration
    seed: Optional[int] = None
    output_dir: Path = Path("output")
    default_row_count: int = 100
    auto_cardinality: bool = False
    validate_output: bool = True
    generate_diagram: bool = False

    # Logging Configuration
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    model_config = SettingsConfigDict(
        env_prefix="SORGEN_",
        env_file=None,  # We load it manually with dotenv
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("default_row_count")
    @classmethod
    def _positive_row_count(cls, value: int) -> int:
        if value <= 0:
            raise ValueError(f"default_row_count must be positive, got {value}")
        return value

    def __init__(self, **kwargs):
        """Initialize settings, loading .env first."""
        find_and_load_env_file()
        super().__init__(**kwargs)
        if self.log_file:
            self.log_file = Path(self.log_file)
            self.log_file.parent.mkdir(parents=True, exist_ok=True)


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
