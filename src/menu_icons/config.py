"""Menu Icons configuration using Pydantic Settings."""

from pathlib import Path
from typing import Optional, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


PROJECT_ROOT = Path(__file__).resolve().parents[2]


def get_default_database_url() -> str:
    """Return the default database URL anchored to the project root.

    Returns:
        The sqlite connection URL pointing at menu-icons.db in the project root.
    """
    database_path = PROJECT_ROOT / "menu-icons.db"
    return f"sqlite+aiosqlite:///{database_path.as_posix()}"


class Settings(BaseSettings):
    """Application configuration.

    Loads from ``MENU_ICONS_*`` environment variables and the .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="MENU_ICONS_",
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False

    # Security
    secret_key: str = Field(
        default="CHANGE-ME-IN-PRODUCTION",
        description="Secret key for signing anti-forgery tokens",
    )
    nonce_lifetime_minutes: int = Field(default=1440, ge=1)

    # Database
    database_url: str = Field(default_factory=get_default_database_url)

    # Storage keys
    option_name: str = "menu-icons"
    meta_key: str = "menu-icons"

    # Icon types
    icon_types_file: Optional[Path] = Field(
        default=None,
        description="YAML file listing the registered icon types.",
    )

    # Assets
    assets_url: str = "/static/menu-icons/"
    version: str = "0.3.0"

    # Logging
    log_dir: Path = Field(default_factory=lambda: PROJECT_ROOT / "logs")
    log_max_bytes: int = 1_048_576
    log_retention_days: int = Field(default=5, ge=0)
    uvicorn_log_level: str = "info"

    @field_validator("database_url", mode="before")
    @classmethod
    def normalize_database_url(cls, value: str) -> str:
        """Resolve relative sqlite paths against the project root."""
        sqlite_prefix = "sqlite+aiosqlite:///"
        absolute_prefix = "sqlite+aiosqlite:////"
        if value.startswith(sqlite_prefix) and not value.startswith(absolute_prefix):
            relative_path = value.split(sqlite_prefix, 1)[1]
            if not relative_path or relative_path == ":memory:":
                return value
            database_path = (PROJECT_ROOT / relative_path).resolve()
            return f"{sqlite_prefix}{database_path.as_posix()}"
        return value

    @field_validator("log_dir", "icon_types_file", mode="before")
    @classmethod
    def normalize_path(cls, value: Union[str, Path, None]) -> Optional[Path]:
        """Resolve relative paths against the project root."""
        if value is None or value == "":
            return None
        path = value if isinstance(value, Path) else Path(value)
        if not path.is_absolute():
            return (PROJECT_ROOT / path).resolve()
        return path
