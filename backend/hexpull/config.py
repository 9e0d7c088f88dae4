"""Application configuration settings."""
import os
import json
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from typing import Optional, List

from .models.board import RotationMode, TapAction


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App settings
    app_name: str = "Hex Pull Board Engine"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS settings - as comma-separated string or JSON array
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    # Board settings
    board_columns: int = 9
    board_rows: int = 9
    palette_size: int = 6
    min_line_length: int = 5
    random_seed: Optional[int] = None

    # Tap defaults used when a request leaves them out
    default_pull_direction: int = 1
    default_rotation: RotationMode = RotationMode.CLOCKWISE
    default_tap_action: TapAction = TapAction.PULL

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("default_pull_direction")
    @classmethod
    def check_direction(cls, value: int) -> int:
        if value not in (1, 2, 3, 4, 5, 6):
            raise ValueError("default_pull_direction must be 1-6")
        return value

    @field_validator("board_columns", "board_rows", "palette_size")
    @classmethod
    def check_positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be at least 1")
        return value

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        return value.upper()

    def get_cors_origins(self) -> List[str]:
        """Parse CORS origins from string (comma-separated or JSON)."""
        if not self.cors_origins:
            return ["http://localhost:5173"]

        # Try JSON parse first
        try:
            origins = json.loads(self.cors_origins)
            if isinstance(origins, list):
                return origins
        except json.JSONDecodeError:
            pass

        # Fall back to comma-separated
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


# Don't use lru_cache in production to allow env var updates
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get settings instance (cached in production for performance)."""
    global _settings
    if _settings is None or os.getenv("DEBUG", "false").lower() == "true":
        _settings = Settings()
    return _settings
