from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Sequence

from ..analytics.store import record_event
from ..cards.analyzer import analyze
from ..cards.classifier import needs_recommendation
from ..config import DEFAULT_APP_CONFIG
from ..geo.distance import distances_km
from .data_store import CatalogLoader
from .models import (
    Business,
    Card,
    CardAnalysis,
    GeoCoordinate,
    Intensity,
    MonetizationMode,
    RecommendationItem,
    RecommendationRequest,
    RecommendationResponse,
    Setting,
    UserLocation,
)
from .monetization import DEFAULT_MONETIZATION, MonetizationSettings, source_preference

logger = logging.getLogger(__name__)

MAX_RESULTS = DEFAULT_APP_CONFIG.max_recommendations

LOCATION_WEIGHT = 40.0
UNKNOWN_LOCATION_SCORE = 20.0
KM_PENALTY = 2.0
TAG_WEIGHT = 30.0
KEYWORD_WEIGHT = 20.0
SOURCE_WEIGHT = 10.0
SETTING_BONUS = 5.0
INTENSITY_BONUS = 3.0


@dataclass(frozen=True)
class ScoredBusiness:
    """A catalog entry paired with the score it earned for one call."""

    business: Business
    score: float
    source_rank: int
    distance_km: float | None = None


def _catalog_distances(
    catalog: Sequence[Business], user_coord: GeoCoordinate | None,
) -> list[float | None]:
    if user_coord is None or not catalog:
        return [None] * len(catalog)
    dists = distances_km(user_coord, [b.lat for b in catalog], [b.lng for b in catalog])
    return [None if math.isnan(d) else float(d) for d in dists]


def is_eligible(
    business: Business,
    user_city: str | None,
    neighborhood: str | None,
    distance: float | None,
) -> bool:
    """City match OR neighborhood match OR within the business's radius."""
    if user_city and business.city and business.city.lower() == user_city.lower():
        return True
    if neighborhood and business.neighborhood and (
        neighborhood.lower() in business.neighborhood.lower()
    ):
        return True
    return distance is not None and distance <= business.radius_km


def filter_eligible(
    catalog: Sequence[Business],
    user_city: str | None,
    user_coord: GeoCoordinate | None,
    user_location: UserLocation | None = None,
    default_market: str = DEFAULT_APP_CONFIG.default_market,
) -> list[tuple[Business, float | None]]:
    """
    Return ``(business, distance_km)`` pairs that are close enough to the user.

    When nothing qualifies the default market is served instead, so the
    app never shows an empty slot just because location signals are
    missing or point somewhere we have no listings.
    """
    neighborhood = user_location.neighborhood if user_location else None
    pairs = list(zip(catalog, _catalog_distances(catalog, user_coord)))

    pool = [(b, d) for b, d in pairs if is_eligible(b, user_city, neighborhood, d)]
    if not pool:
        market = default_market.lower()
        pool = [(b, d) for b, d in pairs if market in b.city.lower()]
        logger.debug("No location match, fell back to %d %s businesses", len(pool), market)
    return pool


def score_business(
    business: Business,
    analysis: CardAnalysis,
    distance: float | None,
    mode: MonetizationMode,
) -> ScoredBusiness:
    """Weighted score: location 40, tags 30, keywords 20, source 10, plus bonuses."""
    tags = business.tags
    score = 0.0

    if distance is not None:
        score += max(0.0, LOCATION_WEIGHT - distance * KM_PENALTY)
    else:
        score += UNKNOWN_LOCATION_SCORE

    wanted = analysis.tags
    if wanted:
        matches = sum(1 for t in tags if t in wanted)
        score += matches / len(wanted) * TAG_WEIGHT

    keyword_hits = sum(1 for k in analysis.keywords if any(k in t for t in tags))
    score += keyword_hits / max(len(analysis.keywords), 1) * KEYWORD_WEIGHT

    rank = source_preference(business.source, mode)
    score += rank * SOURCE_WEIGHT

    if analysis.setting != Setting.any and analysis.setting.value in tags:
        score += SETTING_BONUS

    if analysis.intensity == Intensity.high and "adventure" in tags:
        score += INTENSITY_BONUS
    elif analysis.intensity == Intensity.low and "wellness" in tags:
        score += INTENSITY_BONUS

    return ScoredBusiness(business=business, score=score, source_rank=rank, distance_km=distance)


def rank(scored: Sequence[ScoredBusiness]) -> list[ScoredBusiness]:
    """Highest score first; ties go to the preferred source, then by name."""
    return sorted(scored, key=lambda s: (-s.score, -s.source_rank, s.business.name))


async def _recommend(
    card: Card | None,
    user_city: str | None,
    user_coord: GeoCoordinate | None,
    user_location: UserLocation | None,
    loader: CatalogLoader,
    mode: MonetizationMode,
    limit: int,
) -> tuple[list[ScoredBusiness], int]:
    if not needs_recommendation(card):
        logger.debug(
            "Card does not need business recommendations: %r",
            card.text[:50] if card else None,
        )
        return [], 0

    catalog = await loader.load_catalog()
    if not catalog:
        return [], 0

    if user_location is not None:
        user_city = user_city or user_location.city or None
        user_coord = user_coord or user_location.coord

    pool = filter_eligible(catalog, user_city, user_coord, user_location)

    analysis = analyze(card)
    logger.debug(
        "Card analysis for %r: tags=%s keywords=%s intensity=%s setting=%s",
        card.text[:50], analysis.tags, analysis.keywords,
        analysis.intensity.value, analysis.setting.value,
    )

    ranked = rank([score_business(b, analysis, d, mode) for b, d in pool])
    top = ranked[: max(0, min(limit, MAX_RESULTS))]
    logger.info(
        "Top recommendations for %s: %s",
        user_city or "unknown city",
        [(s.business.name, s.business.source, round(s.score, 2)) for s in top],
    )
    return top, len(pool)


async def recommend_nearby(
    card: Card | None,
    user_city: str | None = None,
    user_coord: GeoCoordinate | None = None,
    user_location: UserLocation | None = None,
    *,
    loader: CatalogLoader,
    mode: MonetizationMode | None = None,
    limit: int = MAX_RESULTS,
) -> list[Business]:
    """
    Recommend up to three nearby businesses for *card*.

    Cards that don't require leaving the house return ``[]`` before the
    catalog is touched. Loader failures propagate to the caller.
    """
    mode = mode or DEFAULT_MONETIZATION.mode
    top, _ = await _recommend(card, user_city, user_coord, user_location, loader, mode, limit)
    return [s.business for s in top]


async def get_recommendations(
    request: RecommendationRequest,
    loader: CatalogLoader,
    settings: MonetizationSettings = DEFAULT_MONETIZATION,
) -> RecommendationResponse:
    start_time = time.time()
    mode = settings.mode

    gated = not needs_recommendation(request.card)
    top, total_candidates = await _recommend(
        request.card,
        request.user_city,
        request.user_coord,
        request.user_location,
        loader,
        mode,
        request.limit,
    )

    items = [
        RecommendationItem(
            business=s.business,
            score=round(s.score, 4),
            source_rank=s.source_rank,
            distance_km=round(s.distance_km, 3) if s.distance_km is not None else None,
        )
        for s in top
    ]

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    record_event("recommendation", {
        "card_key": request.card.key,
        "category": request.card.category,
        "city": request.user_city or (request.user_location.city if request.user_location else None),
        "gated": gated,
        "monetization_mode": mode.value,
        "total_candidates": total_candidates,
        "results_returned": len(items),
        "sources": [i.business.source for i in items],
        "response_time_ms": elapsed_ms,
    })

    return RecommendationResponse(
        recommendations=items,
        needs_recommendation=not gated,
        total_candidates=total_candidates,
        monetization_mode=mode,
    )
