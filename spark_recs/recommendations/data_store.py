from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Protocol, Sequence

import pandas as pd
from pydantic import ValidationError

from ..config import DEFAULT_APP_CONFIG, AppConfig
from .models import DEFAULT_RADIUS_KM, Business

logger = logging.getLogger(__name__)

_OPTIONAL_COLUMNS = ("city", "neighborhood", "lat", "lng", "source", "url", "description")


class CatalogLoader(Protocol):
    async def load_catalog(self) -> list[Business]:
        """Return a fresh snapshot of the business catalog."""
        ...


def _normalize(df: pd.DataFrame) -> pd.DataFrame:
    for col in _OPTIONAL_COLUMNS:
        if col not in df.columns:
            df[col] = None

    df["id"] = df["id"].apply(_id_str)
    df["tags"] = (
        df["tags"].apply(lambda t: [str(x) for x in t] if isinstance(t, list) else [])
        if "tags" in df.columns
        else pd.Series([[] for _ in range(len(df))], index=df.index, dtype=object)
    )
    df["radius_km"] = (
        pd.to_numeric(df["radius_km"], errors="coerce") if "radius_km" in df.columns
        else pd.Series(float("nan"), index=df.index)
    )
    # Non-positive radius is as good as missing
    df.loc[~(df["radius_km"] > 0), "radius_km"] = DEFAULT_RADIUS_KM

    for col in ("lat", "lng"):
        df[col] = pd.to_numeric(df[col], errors="coerce")
    for col in _OPTIONAL_COLUMNS:
        df[col] = df[col].astype(object).where(df[col].notna(), None)
    return df


def _present(value) -> bool:
    return value is not None and not (isinstance(value, float) and value != value)


def _id_str(value) -> str | None:
    if not _present(value):
        return None
    # A gap in the column upcasts integer ids to float64
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def read_catalog(path: Path) -> list[Business]:
    """Parse a JSON list of business records into validated ``Business`` models."""
    df = pd.read_json(path, orient="records", dtype=False, convert_dates=False)
    if df.empty or "id" not in df.columns:
        return []
    df = _normalize(df)

    businesses: list[Business] = []
    for record in df.to_dict(orient="records"):
        try:
            businesses.append(
                Business.model_validate({k: v for k, v in record.items() if _present(v)})
            )
        except ValidationError:
            logger.warning("Skipping malformed catalog record %r", record.get("id"), exc_info=True)
    return businesses


class JsonCatalogLoader:
    """
    Loads the unified catalog when one has been saved, else the packaged
    static catalog. The file is re-read on every call so each
    recommendation works from its own snapshot.
    """

    def __init__(self, config: AppConfig = DEFAULT_APP_CONFIG) -> None:
        self.config = config

    def _path(self) -> Path:
        unified = self.config.unified_catalog_path
        if unified is not None and unified.exists():
            return unified
        if unified is not None:
            logger.info("No unified catalog at %s, using static catalog", unified)
        return self.config.static_catalog_path

    async def load_catalog(self) -> list[Business]:
        path = self._path()
        businesses = await asyncio.to_thread(read_catalog, path)
        logger.debug("Loaded %d businesses from %s", len(businesses), path)
        return businesses


class StaticCatalogLoader:
    """Serves a fixed in-memory catalog."""

    def __init__(self, businesses: Sequence[Business]) -> None:
        self._businesses = tuple(businesses)

    async def load_catalog(self) -> list[Business]:
        return list(self._businesses)


class FallbackCatalogLoader:
    """
    Wraps another loader and substitutes the packaged static catalog when
    it fails. Only the load itself is guarded; errors raised further down
    the recommendation pipeline still propagate.
    """

    def __init__(self, primary: CatalogLoader, config: AppConfig = DEFAULT_APP_CONFIG) -> None:
        self.primary = primary
        self.config = config

    async def load_catalog(self) -> list[Business]:
        try:
            return await self.primary.load_catalog()
        except Exception:
            logger.warning("Catalog load failed, using static catalog", exc_info=True)
        return await asyncio.to_thread(get_static_catalog, self.config)


_static: list[Business] | None = None


def get_static_catalog(config: AppConfig = DEFAULT_APP_CONFIG) -> list[Business]:
    """Return the packaged catalog, loading it on first call."""
    global _static
    if _static is None:
        _static = read_catalog(config.static_catalog_path)
    return list(_static)
