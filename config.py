import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./bookings.db"


@dataclass(frozen=True)
class Settings:
    host: str
    port: int
    database_url: str
    log_level: str
    legacy_data_dir: Optional[Path]


def load_settings() -> Settings:
    """Read the environment now, so tests can monkeypatch it per case."""
    legacy_dir = os.environ.get("LEGACY_DATA_DIR")
    return Settings(
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "3000")),
        database_url=os.environ.get("DATABASE_URL") or DEFAULT_DATABASE_URL,
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        legacy_data_dir=Path(legacy_dir) if legacy_dir else None,
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
