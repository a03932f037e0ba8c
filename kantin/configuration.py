"""Mini README: Centralised configuration for the Kantin card ledger.

Structure:
    * KantinSettings - Pydantic settings model read from ``KANTIN_*`` variables.
    * get_settings - cached accessor shared by the CLI and the web interface.

The data directory is expanded and created during validation so the JSON
card store can write its file without further checks.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, validator
from pydantic_settings import BaseSettings


class KantinSettings(BaseSettings):
    """Runtime configuration for the ledger service."""

    environment: str = Field(
        "development",
        description="Environment label controlling reload and logging defaults.",
    )
    data_directory: Path = Field(
        Path("data"),
        description="Directory holding the persisted card file.",
    )
    data_filename: str = Field(
        "cards.json",
        description="Name of the JSON file the card registry is saved to.",
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface for the HTTP service to bind to.",
    )
    interface_port: int = Field(
        3000,
        description="Port the HTTP service exposes to the card reader and the till page.",
        ge=1,
        le=65535,
    )
    log_level: str = Field(
        "INFO",
        description="Root logging level name.",
    )

    class Config:
        env_prefix = "KANTIN_"
        env_file = ".env"
        case_sensitive = False

    @validator("data_directory", pre=True)
    def _expand_path(cls, value: Optional[str | Path]) -> Path:
        """Ensure configured paths expand user directories and exist."""

        path = Path(value).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @property
    def data_file(self) -> Path:
        """Full path of the card store file."""

        return self.data_directory / self.data_filename


@lru_cache()
def get_settings() -> KantinSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return KantinSettings()
