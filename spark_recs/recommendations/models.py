from __future__ import annotations

import hashlib
import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_RADIUS_KM = 25.0

_WS_RE = re.compile(r"\s+")
_QUOTES = str.maketrans({"‘": "'", "’": "'", "“": '"', "”": '"'})


class CardType(str, Enum):
    question = "Question"
    mission = "Mission"


class RecommendationType(str, Enum):
    at_home = "at_home"
    outbound = "outbound"
    hybrid = "hybrid"


class Intensity(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class Setting(str, Enum):
    indoor = "indoor"
    outdoor = "outdoor"
    any = "any"


class MonetizationMode(str, Enum):
    affiliate = "affiliate"
    sponsor = "sponsor"


def normalize_card_text(text: str) -> str:
    """Fold case, curly quotes and whitespace so cosmetic drift still matches."""
    return _WS_RE.sub(" ", text.translate(_QUOTES)).strip().casefold()


def card_key(text: str) -> str:
    return hashlib.sha256(normalize_card_text(text).encode()).hexdigest()[:16]


class Card(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str = Field(..., min_length=1)
    category: str = ""
    type: CardType = CardType.question
    id: str | None = None

    @property
    def key(self) -> str:
        return self.id or card_key(self.text)


class CardProfile(BaseModel):
    recommendation_type: RecommendationType = RecommendationType.at_home
    business_categories: list[str] = Field(default_factory=list)
    intensity: Intensity = Intensity.medium
    setting: Setting = Setting.any
    tags: list[str] = Field(default_factory=lambda: ["conversation", "bond"])
    specific_businesses: list[str] = Field(default_factory=list)


class CardAnalysis(BaseModel):
    tags: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    intensity: Intensity = Intensity.medium
    setting: Setting = Setting.any


class GeoCoordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90.0, le=90.0)
    lng: float = Field(..., ge=-180.0, le=180.0)


class UserLocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    city: str = ""
    region: str | None = None
    coord: GeoCoordinate | None = None
    neighborhood: str | None = None
    zip_code: str | None = None


class Business(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    city: str = ""
    neighborhood: str | None = None
    lat: float | None = None
    lng: float | None = None
    radius_km: float = Field(default=DEFAULT_RADIUS_KM, gt=0)
    source: str = "local-sponsor"
    tags: list[str] = Field(default_factory=list)
    url: str = ""
    estimated_commission: float = 0.0
    description: str | None = None

    @field_validator("radius_km", mode="before")
    @classmethod
    def _default_radius(cls, v):
        # null / NaN radius in stored records means "use the default"
        if v is None or v != v:
            return DEFAULT_RADIUS_KM
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def _default_tags(cls, v):
        if v is None or isinstance(v, float):
            return []
        return v

    @property
    def coord(self) -> GeoCoordinate | None:
        if self.lat is None or self.lng is None:
            return None
        return GeoCoordinate(lat=self.lat, lng=self.lng)


# ── HTTP request / response models ──────────────────────────────────────


class RecommendationRequest(BaseModel):
    card: Card
    user_city: str | None = Field(default=None, description="Resolved city of the user")
    user_coord: GeoCoordinate | None = None
    user_location: UserLocation | None = None
    limit: int = Field(default=3, ge=1, le=3)


class RecommendationItem(BaseModel):
    business: Business
    score: float
    source_rank: int
    distance_km: float | None = None


class RecommendationResponse(BaseModel):
    recommendations: list[RecommendationItem]
    needs_recommendation: bool
    total_candidates: int
    monetization_mode: MonetizationMode


class ClassifyResponse(BaseModel):
    card_key: str
    profile: CardProfile
    needs_recommendation: bool


class MonetizationUpdate(BaseModel):
    mode: MonetizationMode


class AffiliateClickRequest(BaseModel):
    business: Business
    user_location: UserLocation | None = None
