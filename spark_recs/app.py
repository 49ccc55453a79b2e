from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, HTTPException

from .affiliate.programs import (
    decorate_with_affiliate_links,
    get_program_stats,
    track_affiliate_click,
)
from .analytics.aggregator import compute_analytics
from .analytics.store import get_events
from .cards.classifier import card_report, classify, needs_recommendation
from .config import DEFAULT_APP_CONFIG
from .recommendations.data_store import (
    CatalogLoader,
    FallbackCatalogLoader,
    JsonCatalogLoader,
)
from .recommendations.models import (
    AffiliateClickRequest,
    Card,
    ClassifyResponse,
    MonetizationUpdate,
    RecommendationRequest,
    RecommendationResponse,
)
from .recommendations.monetization import DEFAULT_MONETIZATION, MonetizationSettings
from .recommendations.retrieval import get_recommendations

logging.basicConfig(
    level=DEFAULT_APP_CONFIG.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Spark Recs Nearby Recommendation API", version="1.0.0")

_loader = JsonCatalogLoader(DEFAULT_APP_CONFIG)


def get_catalog_loader() -> CatalogLoader:
    return _loader


def get_monetization() -> MonetizationSettings:
    return DEFAULT_MONETIZATION


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# ── Card endpoints ───────────────────────────────────────────────────────


@app.post("/cards/classify", response_model=ClassifyResponse)
def classify_card(card: Card) -> ClassifyResponse:
    return ClassifyResponse(
        card_key=card.key,
        profile=classify(card),
        needs_recommendation=needs_recommendation(card),
    )


@app.get("/cards/report")
def cards_report() -> dict:
    rows = card_report()
    return {
        "total": len(rows),
        "with_recommendations": sum(1 for r in rows if r["will_show_recommendation"]),
        "cards": rows,
    }


# ── Recommendation endpoints ─────────────────────────────────────────────


@app.post("/recommendations", response_model=RecommendationResponse)
async def recommendations(
    body: RecommendationRequest,
    loader: CatalogLoader = Depends(get_catalog_loader),
    settings: MonetizationSettings = Depends(get_monetization),
) -> RecommendationResponse:
    response = await get_recommendations(body, FallbackCatalogLoader(loader), settings)

    businesses = decorate_with_affiliate_links(i.business for i in response.recommendations)
    response.recommendations = [
        item.model_copy(update={"business": b})
        for item, b in zip(response.recommendations, businesses)
    ]
    return response


@app.get("/monetization")
def get_mode(settings: MonetizationSettings = Depends(get_monetization)) -> dict:
    return {"mode": settings.mode.value}


@app.put("/monetization")
def set_mode(
    body: MonetizationUpdate,
    settings: MonetizationSettings = Depends(get_monetization),
) -> dict:
    mode = settings.set_mode(body.mode)
    return {"mode": mode.value}


# ── Affiliate endpoints ──────────────────────────────────────────────────


@app.post("/affiliate/click")
def affiliate_click(body: AffiliateClickRequest) -> dict:
    if not body.business.url:
        raise HTTPException(status_code=400, detail="Business has no URL to open")
    event = track_affiliate_click(body.business, body.user_location)
    return {"status": "recorded", "event": event}


@app.get("/affiliate/programs")
def affiliate_programs() -> list[dict]:
    return get_program_stats()


# ── Analytics ────────────────────────────────────────────────────────────


@app.get("/analytics")
def analytics() -> dict:
    return compute_analytics(get_events())
