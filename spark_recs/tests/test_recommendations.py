from __future__ import annotations

import asyncio

import pytest

from spark_recs.analytics.store import clear_events, get_events
from spark_recs.cards import classifier
from spark_recs.cards.classifier import classify, curated_cards
from spark_recs.recommendations import retrieval
from spark_recs.recommendations.data_store import StaticCatalogLoader, get_static_catalog
from spark_recs.recommendations.models import (
    Business,
    Card,
    CardAnalysis,
    CardProfile,
    CardType,
    GeoCoordinate,
    Intensity,
    MonetizationMode,
    RecommendationRequest,
    RecommendationType,
    Setting,
    UserLocation,
)
from spark_recs.recommendations.monetization import MonetizationSettings
from spark_recs.recommendations.retrieval import (
    ScoredBusiness,
    filter_eligible,
    get_recommendations,
    rank,
    recommend_nearby,
    score_business,
)

LANDMARK = Card(
    text="Go to a local landmark you've never visited and take a selfie.",
    category="Adventure Sparks",
    type=CardType.mission,
)
HAPPY_FOOD = Card(text="What's your 'happy' food?")

JAX = GeoCoordinate(lat=30.3322, lng=-81.6557)

RIVER_TOWER = Business(
    id="river-tower",
    name="River Tower Observation Deck",
    city="Jacksonville",
    lat=30.3175,
    lng=-81.6581,
    tags=["entertainment", "outdoor"],
    source="local-sponsor",
    radius_km=25,
)


class CountingLoader:
    def __init__(self, businesses):
        self.businesses = list(businesses)
        self.calls = 0

    async def load_catalog(self):
        self.calls += 1
        return list(self.businesses)


class FailingLoader:
    async def load_catalog(self):
        raise RuntimeError("storage unavailable")


def _biz(id_, name, city="Jacksonville", **kw) -> Business:
    return Business(id=id_, name=name, city=city, **kw)


def _run(coro):
    return asyncio.run(coro)


def _recommend(card, businesses, **kw):
    return _run(recommend_nearby(card, loader=StaticCatalogLoader(businesses), **kw))


# ── Scenarios ────────────────────────────────────────────────────────────


def test_outbound_card_recommends_city_business():
    result = _recommend(LANDMARK, [RIVER_TOWER], user_city="Jacksonville")
    assert [b.name for b in result] == ["River Tower Observation Deck"]


def test_at_home_card_never_touches_catalog_or_analyzer(monkeypatch):
    calls = []
    monkeypatch.setattr(retrieval, "analyze", lambda card: calls.append(card))
    loader = CountingLoader([RIVER_TOWER])

    result = _run(recommend_nearby(HAPPY_FOOD, "Jacksonville", loader=loader))

    assert result == []
    assert loader.calls == 0
    assert calls == []


def test_unknown_card_gets_no_recommendations():
    loader = CountingLoader([RIVER_TOWER])
    result = _run(recommend_nearby(Card(text="Tell me a secret."), "Jacksonville", loader=loader))
    assert result == []
    assert loader.calls == 0


AT_HOME_CARDS = [
    c for c in curated_cards() if classify(c).recommendation_type is RecommendationType.at_home
]


@pytest.mark.parametrize("card", AT_HOME_CARDS, ids=lambda c: c.text[:40])
def test_every_at_home_card_gets_no_recommendations(card):
    loader = CountingLoader(get_static_catalog())
    result = _run(recommend_nearby(card, "Jacksonville", JAX, loader=loader))
    assert result == []
    assert loader.calls == 0


def test_hybrid_card_reaches_catalog(monkeypatch):
    card = Card(text="Cook a dish together, then take it to a park.")
    profile = CardProfile(recommendation_type=RecommendationType.hybrid)
    monkeypatch.setattr(classifier, "_index", {card.key: (card, profile)})
    loader = CountingLoader([RIVER_TOWER])

    result = _run(recommend_nearby(card, "Jacksonville", loader=loader))

    assert loader.calls == 1
    assert [b.id for b in result] == ["river-tower"]


def test_empty_catalog_returns_empty():
    assert _recommend(LANDMARK, [], user_city="Jacksonville") == []


def test_loader_failure_propagates():
    with pytest.raises(RuntimeError):
        _run(recommend_nearby(LANDMARK, "Jacksonville", loader=FailingLoader()))


def test_never_more_than_three():
    catalog = [_biz(f"b{i}", f"Biz {i}", tags=["outdoor"]) for i in range(10)]
    assert len(_recommend(LANDMARK, catalog, user_city="Jacksonville")) == 3
    assert len(_recommend(LANDMARK, catalog, user_city="Jacksonville", limit=10)) == 3
    assert len(_recommend(LANDMARK, catalog, user_city="Jacksonville", limit=2)) == 2


def test_results_are_deterministic():
    catalog = [
        _biz("a", "Alpha", tags=["outdoor"], source="viator"),
        _biz("b", "Bravo", tags=["adventure", "outdoor"]),
        _biz("c", "Charlie", tags=[], source="stubhub"),
        _biz("d", "Delta", tags=["bond"], source="fever"),
    ]
    first = _recommend(LANDMARK, catalog, user_city="Jacksonville")
    second = _recommend(LANDMARK, catalog, user_city="Jacksonville")
    assert [b.id for b in first] == [b.id for b in second]


def test_scores_do_not_leak_into_catalog():
    catalog = [RIVER_TOWER]
    result = _recommend(LANDMARK, catalog, user_city="Jacksonville")
    assert result[0] == RIVER_TOWER
    assert "score" not in result[0].model_dump()
    assert not hasattr(result[0], "_score")


# ── Eligibility ──────────────────────────────────────────────────────────


def test_city_match_ignores_distance():
    far = _biz("far", "Far But Same City", lat=0.0, lng=0.0, radius_km=1)
    pool = filter_eligible([far], "jacksonville", JAX)
    assert [b.id for b, _ in pool] == ["far"]


def test_neighborhood_match():
    biz = _biz("nb", "Five Points Cafe", city="Elsewhere", neighborhood="Riverside / Five Points")
    loc = UserLocation(city="Nowhere", neighborhood="riverside")
    pool = filter_eligible([biz, _biz("jx", "Jax Fallback")], "Nowhere", None, loc)
    assert [b.id for b, _ in pool] == ["nb"]


def test_distance_match_within_radius():
    beach = _biz("beach", "Beach Spot", city="Atlantic Beach", lat=30.3329, lng=-81.3962, radius_km=30)
    pool = filter_eligible([beach], "Orange Park", JAX)
    assert [b.id for b, _ in pool] == ["beach"]
    assert pool[0][1] == pytest.approx(24.9, abs=0.5)


def test_distance_outside_radius_falls_back_to_default_market():
    beach = _biz("beach", "Beach Spot", city="Atlantic Beach", lat=30.3329, lng=-81.3962, radius_km=10)
    jax = _biz("jax", "Downtown Spot", city="Jacksonville Beach")
    pool = filter_eligible([beach, jax], "Orange Park", JAX)
    assert [b.id for b, _ in pool] == ["jax"]


def test_no_location_signals_fall_back_to_jacksonville():
    catalog = [
        _biz("mia", "Miami Spot", city="Miami", tags=["outdoor"]),
        _biz("jax", "Jax Spot", city="Jacksonville", tags=["outdoor"]),
    ]
    result = _recommend(LANDMARK, catalog)
    assert [b.id for b in result] == ["jax"]


def test_fallback_can_be_empty():
    catalog = [_biz("mia", "Miami Spot", city="Miami")]
    assert _recommend(LANDMARK, catalog, user_city="Tampa") == []


def test_user_location_supplies_city_and_coord():
    loc = UserLocation(city="Jacksonville", coord=JAX)
    result = _recommend(LANDMARK, [RIVER_TOWER], user_location=loc)
    assert result == [RIVER_TOWER]


def test_business_without_tags_still_eligible():
    bare = Business.model_validate({"id": "bare", "name": "Bare", "city": "Jacksonville", "tags": None})
    assert _recommend(LANDMARK, [bare], user_city="Jacksonville") == [bare]


# ── Scoring ──────────────────────────────────────────────────────────────

ANALYSIS = CardAnalysis(tags=["adventure", "outdoor", "bond"], keywords=[])


def test_score_without_coordinates():
    scored = score_business(RIVER_TOWER, ANALYSIS, None, MonetizationMode.affiliate)
    # 20 location + 10 tags + 0 keywords + 20 source
    assert scored.score == pytest.approx(50.0)
    assert scored.source_rank == 2


def test_score_with_distance():
    scored = score_business(RIVER_TOWER, ANALYSIS, 5.0, MonetizationMode.sponsor)
    # 30 location + 10 tags + 30 source
    assert scored.score == pytest.approx(70.0)


def test_location_score_never_negative():
    near = score_business(RIVER_TOWER, ANALYSIS, 0.0, MonetizationMode.affiliate)
    far = score_business(RIVER_TOWER, ANALYSIS, 500.0, MonetizationMode.affiliate)
    assert near.score - far.score == pytest.approx(40.0)


def test_empty_wanted_tags_score_zero_tag_term():
    scored = score_business(RIVER_TOWER, CardAnalysis(), None, MonetizationMode.affiliate)
    assert scored.score == pytest.approx(40.0)


def test_keyword_substring_match():
    analysis = CardAnalysis(tags=["x"], keywords=["food", "outdoor"])
    biz = _biz("k", "Keyword", tags=["street-food"], source="unknown-program")
    scored = score_business(biz, analysis, None, MonetizationMode.affiliate)
    # 20 location + half the keywords
    assert scored.score == pytest.approx(30.0)


def test_setting_bonus():
    analysis = CardAnalysis(tags=["x"], setting=Setting.outdoor)
    with_tag = score_business(_biz("a", "A", tags=["outdoor"]), analysis, None, MonetizationMode.affiliate)
    without = score_business(_biz("b", "B", tags=["indoor"]), analysis, None, MonetizationMode.affiliate)
    assert with_tag.score - without.score == pytest.approx(5.0)


def test_intensity_bonus():
    high = CardAnalysis(tags=["x"], intensity=Intensity.high)
    low = CardAnalysis(tags=["x"], intensity=Intensity.low)
    adventure = _biz("a", "A", tags=["adventure"])
    wellness = _biz("w", "W", tags=["wellness"])
    mode = MonetizationMode.affiliate
    assert score_business(adventure, high, None, mode).score == pytest.approx(43.0)
    assert score_business(wellness, high, None, mode).score == pytest.approx(40.0)
    assert score_business(wellness, low, None, mode).score == pytest.approx(43.0)


# ── Ranking ──────────────────────────────────────────────────────────────


def test_rank_orders_by_score_then_source_then_name():
    b = lambda name: _biz(name.lower(), name)  # noqa: E731
    scored = [
        ScoredBusiness(b("Zulu"), 50.0, 1),
        ScoredBusiness(b("Alpha"), 50.0, 1),
        ScoredBusiness(b("Mike"), 50.0, 2),
        ScoredBusiness(b("Top"), 70.0, 0),
    ]
    assert [s.business.name for s in rank(scored)] == ["Top", "Mike", "Alpha", "Zulu"]


def test_results_sorted_by_descending_score():
    catalog = [
        _biz("a", "Alpha", tags=["outdoor"], source="stubhub"),
        _biz("b", "Bravo", tags=["adventure", "outdoor", "bond"], source="viator"),
        _biz("c", "Charlie", tags=["outdoor", "bond"]),
        _biz("d", "Delta", tags=[], source="groupon"),
    ]
    request = RecommendationRequest(card=LANDMARK, user_city="Jacksonville")
    response = _run(get_recommendations(request, StaticCatalogLoader(catalog)))
    scores = [i.score for i in response.recommendations]
    assert scores == sorted(scores, reverse=True)
    assert len(scores) == 3


def test_monetization_mode_changes_sponsor_gap():
    catalog = [
        _biz("local", "Zed's Local Tours", tags=["outdoor"], source="local-sponsor"),
        _biz("viator", "Aardvark Tours", tags=["outdoor"], source="viator"),
    ]
    request = RecommendationRequest(card=LANDMARK, user_city="Jacksonville")
    loader = StaticCatalogLoader(catalog)

    sponsor = _run(get_recommendations(request, loader, MonetizationSettings("sponsor")))
    affiliate = _run(get_recommendations(request, loader, MonetizationSettings("affiliate")))

    assert [i.business.id for i in sponsor.recommendations] == ["local", "viator"]
    assert [i.business.id for i in affiliate.recommendations] == ["local", "viator"]

    sponsor_gap = sponsor.recommendations[0].score - sponsor.recommendations[1].score
    affiliate_gap = affiliate.recommendations[0].score - affiliate.recommendations[1].score
    assert sponsor_gap == pytest.approx(20.0)
    assert affiliate_gap == pytest.approx(10.0)


def test_explicit_mode_overrides_default():
    catalog = [RIVER_TOWER]
    loader = StaticCatalogLoader(catalog)
    request = RecommendationRequest(card=LANDMARK, user_city="Jacksonville")
    response = _run(get_recommendations(request, loader, MonetizationSettings("sponsor")))
    assert response.monetization_mode == MonetizationMode.sponsor
    assert response.recommendations[0].source_rank == 3


# ── Response wrapper ─────────────────────────────────────────────────────


def test_get_recommendations_records_event():
    clear_events()
    request = RecommendationRequest(card=LANDMARK, user_city="Jacksonville")
    response = _run(get_recommendations(request, StaticCatalogLoader([RIVER_TOWER])))

    assert response.needs_recommendation is True
    assert response.total_candidates == 1
    events = get_events("recommendation")
    assert len(events) == 1
    assert events[0]["gated"] is False
    assert events[0]["sources"] == ["local-sponsor"]


def test_get_recommendations_gated_card():
    clear_events()
    request = RecommendationRequest(card=HAPPY_FOOD, user_city="Jacksonville")
    response = _run(get_recommendations(request, StaticCatalogLoader([RIVER_TOWER])))

    assert response.needs_recommendation is False
    assert response.recommendations == []
    assert get_events("recommendation")[0]["gated"] is True


def test_distance_reported_when_coordinates_known():
    request = RecommendationRequest(card=LANDMARK, user_city="Jacksonville", user_coord=JAX)
    response = _run(get_recommendations(request, StaticCatalogLoader([RIVER_TOWER])))
    assert response.recommendations[0].distance_km == pytest.approx(1.64, abs=0.1)
