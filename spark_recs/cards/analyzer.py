from __future__ import annotations

from ..recommendations.models import Card, CardAnalysis, Intensity, Setting

# Keyword families: a family contributes its tag when any keyword is a
# substring of the lower-cased card text. Order here is output order.
KEYWORD_FAMILIES: dict[str, tuple[str, ...]] = {
    "outdoor": (
        "park", "outdoor", "walk", "hike", "beach", "sunset", "sunrise",
        "nature", "garden", "zoo", "arboretum",
    ),
    "indoor": (
        "museum", "gallery", "theater", "concert", "cooking", "class",
        "workshop", "studio", "library", "cafe", "restaurant",
    ),
    "adventure": (
        "explore", "discover", "adventure", "mission", "challenge", "boat",
        "tour", "escape", "thrill",
    ),
    "creative": (
        "art", "creative", "draw", "paint", "music", "poetry", "write",
        "craft", "design", "photography",
    ),
    "bond": (
        "together", "partner", "friend", "bond", "connection", "date",
        "couple", "team", "group",
    ),
    "food": (
        "eat", "food", "restaurant", "cafe", "cooking", "meal", "dining",
        "taste", "flavor",
    ),
    "wellness": (
        "peace", "quiet", "relax", "meditation", "wellness", "spa", "calm",
        "serene",
    ),
}

LOW_INTENSITY_WORDS = ("quiet", "peaceful", "calm")
HIGH_INTENSITY_WORDS = ("extreme", "thrill", "adventure")

# First matching category substring wins
CATEGORY_BASE_TAGS: list[tuple[tuple[str, ...], list[str]]] = [
    (("adventure",), ["adventure", "outdoor", "bond"]),
    (("creative",), ["creative", "indoor", "bond"]),
    (("mirror",), ["creative", "indoor", "wellness", "bond"]),
    (("bond",), ["bond", "indoor", "adventure", "creative"]),
    (("spark", "playful"), ["adventure", "creative", "bond", "food"]),
]
FALLBACK_BASE_TAGS = ["adventure", "bond", "creative"]


def match_keyword_families(text: str) -> list[str]:
    lowered = text.lower()
    return [
        tag
        for tag, words in KEYWORD_FAMILIES.items()
        if any(w in lowered for w in words)
    ]


def _intensity(text: str) -> Intensity:
    intensity = Intensity.medium
    if any(w in text for w in LOW_INTENSITY_WORDS):
        intensity = Intensity.low
    # thrill language wins when both appear
    if any(w in text for w in HIGH_INTENSITY_WORDS):
        intensity = Intensity.high
    return intensity


def _setting(keywords: list[str]) -> Setting:
    outdoor = "outdoor" in keywords
    indoor = "indoor" in keywords
    if outdoor and not indoor:
        return Setting.outdoor
    if indoor and not outdoor:
        return Setting.indoor
    return Setting.any


def _base_tags(category: str) -> list[str]:
    for needles, tags in CATEGORY_BASE_TAGS:
        if any(n in category for n in needles):
            return list(tags)
    return list(FALLBACK_BASE_TAGS)


def analyze(card: Card | None) -> CardAnalysis:
    """
    Build a heuristic profile of *card* from its text and category.

    Keywords come from the text only; the category seeds the base tag
    set, which is then extended with any keyword tags not already in it.
    """
    if card is None:
        return CardAnalysis(tags=["adventure", "bond"])

    text = card.text.lower()
    category = card.category.lower()

    keywords = match_keyword_families(text)
    tags = _base_tags(category)
    tags.extend(k for k in keywords if k not in tags)

    return CardAnalysis(
        tags=tags,
        keywords=keywords,
        intensity=_intensity(text),
        setting=_setting(keywords),
    )
