from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

_PACKAGE_DIR = Path(__file__).resolve().parent


def _optional_path(raw: str | None) -> Path | None:
    return Path(raw) if raw else None


@dataclass(frozen=True)
class AppConfig:
    """
    Runtime configuration for the recommendation service.
    """

    monetization_mode: str = field(
        default_factory=lambda: os.getenv("MONETIZATION_MODE", "affiliate")
    )
    static_catalog_path: Path = _PACKAGE_DIR / "data" / "jacksonville_catalog.json"
    unified_catalog_path: Path | None = field(
        default_factory=lambda: _optional_path(os.getenv("CATALOG_PATH"))
    )
    default_market: str = field(
        default_factory=lambda: os.getenv("DEFAULT_MARKET", "jacksonville")
    )
    max_recommendations: int = 3
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))


DEFAULT_APP_CONFIG = AppConfig()
