from __future__ import annotations

import logging
from typing import Any, Iterable

from ..recommendations.models import (
    Card,
    CardProfile,
    CardType,
    RecommendationType,
    card_key,
)
from .content import MISSIONS, QUESTIONS

logger = logging.getLogger(__name__)

_NEEDS_BUSINESS = {RecommendationType.outbound, RecommendationType.hybrid}

_index: dict[str, tuple[Card, CardProfile]] | None = None


def _build_index() -> dict[str, tuple[Card, CardProfile]]:
    index: dict[str, tuple[Card, CardProfile]] = {}
    for card_type, groups in ((CardType.question, QUESTIONS), (CardType.mission, MISSIONS)):
        for category, entries in groups.items():
            for entry in entries:
                fields = {k: v for k, v in entry.items() if k != "text"}
                card = Card(text=entry["text"], category=category, type=card_type)
                index[card.key] = (card, CardProfile(**fields))
    return index


def _get_index() -> dict[str, tuple[Card, CardProfile]]:
    """Return the curated card index, building it on first call."""
    global _index
    if _index is None:
        _index = _build_index()
    return _index


def curated_cards() -> list[Card]:
    return [card for card, _ in _get_index().values()]


def classify(card: Card | None) -> CardProfile:
    """
    Return the curated profile for *card*.

    Cards are matched on their stable key (explicit id, else normalised
    text). Anything not in the curated table is treated as a pure
    conversation card so it never triggers a business suggestion.
    """
    if card is None:
        return CardProfile()
    entry = _get_index().get(card.key)
    if entry is None and card.id:
        # explicit ids from clients may not be ours; fall back to the text key
        entry = _get_index().get(card_key(card.text))
    if entry is None:
        logger.debug("No curated metadata for card %r, using defaults", card.text[:50])
        return CardProfile()
    return entry[1].model_copy(deep=True)


def needs_recommendation(card: Card | None) -> bool:
    return classify(card).recommendation_type in _NEEDS_BUSINESS


def get_business_categories(card: Card | None) -> list[str]:
    return classify(card).business_categories


def card_report(cards: Iterable[Card] | None = None) -> list[dict[str, Any]]:
    """Summarise how each card pairs with businesses (defaults to every curated card)."""
    rows: list[dict[str, Any]] = []
    for card in cards if cards is not None else curated_cards():
        profile = classify(card)
        rows.append({
            "card_key": card.key,
            "text": card.text,
            "category": card.category,
            "type": card.type.value,
            "recommendation_type": profile.recommendation_type.value,
            "business_categories": profile.business_categories,
            "tags": profile.tags,
            "will_show_recommendation": profile.recommendation_type in _NEEDS_BUSINESS,
        })
    return rows
