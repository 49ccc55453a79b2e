"""
Curated card taxonomy.

Each entry pairs a prompt with the metadata the recommender needs:
whether the card requires going somewhere (outbound), can only be
talked through (at_home), or genuinely works both ways (hybrid), and
which kinds of business it pairs with.
"""
from __future__ import annotations

from typing import Any

# Business categories used for pairing
RESTAURANTS = "restaurants"
ENTERTAINMENT = "entertainment"
ARTS_CULTURE = "arts_culture"
OUTDOOR = "outdoor"
SHOPPING = "shopping"
WELLNESS = "wellness"
EDUCATION = "education"
TRANSPORTATION = "transportation"
ACCOMMODATION = "accommodation"

BUSINESS_CATEGORIES = [
    RESTAURANTS,
    ENTERTAINMENT,
    ARTS_CULTURE,
    OUTDOOR,
    SHOPPING,
    WELLNESS,
    EDUCATION,
    TRANSPORTATION,
    ACCOMMODATION,
]


def _talk(text: str, tags: list[str], setting: str = "any") -> dict[str, Any]:
    """A conversation-only card: never paired with a business."""
    return {
        "text": text,
        "recommendation_type": "at_home",
        "business_categories": [],
        "intensity": "low",
        "setting": setting,
        "tags": tags,
    }


def _go(
    text: str,
    categories: list[str],
    intensity: str,
    setting: str,
    tags: list[str],
    specific: list[str],
) -> dict[str, Any]:
    return {
        "text": text,
        "recommendation_type": "outbound",
        "business_categories": categories,
        "intensity": intensity,
        "setting": setting,
        "tags": tags,
        "specific_businesses": specific,
    }


_CHAT = ["conversation", "bond"]
_REFLECT = ["conversation", "reflection", "bond"]

QUESTIONS: dict[str, list[dict[str, Any]]] = {
    "Spark Questions": [
        _talk("What's the most unusual food you've ever tried?", ["food", "conversation", "bond"]),
        _talk(
            "If you could swap lives with a celebrity for one day, who would it be?",
            ["conversation", "fantasy", "bond"],
            setting="indoor",
        ),
        _talk(
            "What's your guilty pleasure TV show or movie?",
            ["entertainment", "conversation", "bond"],
            setting="indoor",
        ),
        _talk("What's the funniest thing you believed as a kid?", _CHAT),
        _talk(
            "If you had a theme song that played when you walked into a room, what would it be?",
            _CHAT,
        ),
        _talk("What's the weirdest talent you have?", _CHAT),
        _talk(
            "If you had to eat one meal for the rest of your life, what would it be?",
            ["food", "conversation", "bond"],
        ),
        _talk("What's the most spontaneous thing you've ever done?", _CHAT),
        _talk("Which fictional character do you relate to the most?", _CHAT),
        _talk("What's the worst haircut you've ever had?", _CHAT),
        _talk("Would you rather explore space or the deep ocean?", _CHAT),
        _talk("What's the strangest thing you've ever collected?", _CHAT),
        _talk("What's your 'happy' food?", ["food", "conversation", "bond"]),
        _talk("If you had a time machine, what's the first year you'd visit?", _CHAT),
        _talk("What's your dream vacation spot?", _CHAT),
        _talk("What's your most used emoji?", _CHAT),
        _talk("Coffee, tea, or neither?", ["food", "conversation", "bond"]),
    ],
    "Mirror Moments": [
        _talk("What's the best advice you've ever received?", _REFLECT, setting="indoor"),
        _talk("When do you feel most at peace?", _REFLECT),
        _talk("What's one fear you'd like to conquer?", _REFLECT),
        _talk("What's something you're proud of that others might not know?", _REFLECT),
        _talk("What's a lesson you learned the hard way?", _REFLECT),
    ],
}

MISSIONS: dict[str, list[dict[str, Any]]] = {
    "Adventure Sparks": [
        _go(
            "Go to the tallest building in your city and take a picture of the view.",
            [ENTERTAINMENT], "medium", "outdoor",
            ["adventure", "outdoor", "bond"],
            ["observation_decks", "skyscrapers", "city_tours"],
        ),
        _go(
            "Visit a local museum or gallery and find your favorite piece.",
            [ARTS_CULTURE], "low", "indoor",
            ["arts", "culture", "bond"],
            ["museums", "art_galleries", "cultural_centers"],
        ),
        _go(
            "Find a hidden gem restaurant with fewer than 20 reviews online.",
            [RESTAURANTS], "medium", "indoor",
            ["food", "adventure", "bond"],
            ["restaurants", "cafes", "food_trucks"],
        ),
        _go(
            "Go to a park and build a mini fort out of natural materials.",
            [OUTDOOR], "medium", "outdoor",
            ["outdoor", "creative", "bond"],
            ["parks", "nature_reserves", "botanical_gardens"],
        ),
        _go(
            "Go to a farmer's market and pick one food neither of you has tried.",
            [RESTAURANTS, SHOPPING], "low", "outdoor",
            ["food", "shopping", "bond"],
            ["farmers_markets", "food_markets", "local_produce"],
        ),
        _go(
            "Go to a bookstore, pick a book for each other, and exchange.",
            [SHOPPING, EDUCATION], "low", "indoor",
            ["shopping", "education", "bond"],
            ["bookstores", "libraries", "book_cafes"],
        ),
        _go(
            "Go to a local landmark you've never visited and take a selfie.",
            [ENTERTAINMENT], "low", "outdoor",
            ["adventure", "outdoor", "bond"],
            ["landmarks", "tourist_attractions", "historical_sites"],
        ),
    ],
    "Creative Charms": [
        _go(
            "Buy a disposable camera and document your day together.",
            [SHOPPING, ARTS_CULTURE], "medium", "any",
            ["creative", "shopping", "bond"],
            ["camera_stores", "electronics", "art_supplies"],
        ),
        _go(
            "Try karaoke, but only pick songs from before the year 2000.",
            [ENTERTAINMENT], "high", "indoor",
            ["music", "entertainment", "bond"],
            ["karaoke_bars", "entertainment_venues", "music_venues"],
        ),
        _go(
            "Go to a pottery studio and make matching mugs.",
            [ARTS_CULTURE, EDUCATION], "medium", "indoor",
            ["creative", "arts", "bond"],
            ["pottery_studios", "art_classes", "craft_workshops"],
        ),
        _go(
            "Go to a thrift store and find the weirdest item under $5.",
            [SHOPPING], "low", "indoor",
            ["shopping", "creative", "bond"],
            ["thrift_stores", "vintage_shops", "antique_stores"],
        ),
    ],
    "Mirror Quests": [
        _go(
            "Go to a quiet park and journal for 15 minutes, then share.",
            [OUTDOOR, WELLNESS], "low", "outdoor",
            ["wellness", "outdoor", "bond"],
            ["parks", "nature_reserves", "wellness_centers"],
        ),
        _go(
            "Visit a local church/temple/mosque and talk about spirituality.",
            [ARTS_CULTURE], "low", "indoor",
            ["spiritual", "culture", "bond"],
            ["religious_sites", "cultural_centers", "meditation_spaces"],
        ),
        _go(
            "Go to a quiet library and each find a book that represents your current chapter in life.",
            [EDUCATION], "low", "indoor",
            ["education", "reflection", "bond"],
            ["libraries", "bookstores", "study_spaces"],
        ),
        _go(
            "Go to a cemetery and find the oldest grave marker.",
            [ARTS_CULTURE], "low", "outdoor",
            ["reflection", "history", "bond"],
            ["cemeteries", "historical_sites", "memorials"],
        ),
    ],
    "Bond Quests": [
        _go(
            "Go to a discount store and buy full outfits for each other under $20.",
            [SHOPPING], "medium", "indoor",
            ["shopping", "creative", "bond"],
            ["thrift_stores", "discount_stores", "fashion_retailers"],
        ),
        _go(
            "Eat at a restaurant where you don't recognize anything on the menu.",
            [RESTAURANTS], "medium", "indoor",
            ["food", "adventure", "bond"],
            ["ethnic_restaurants", "fine_dining", "experimental_cuisine"],
        ),
        _go(
            "Do an open-mic night together (poetry, music, or comedy).",
            [ENTERTAINMENT], "high", "indoor",
            ["entertainment", "creative", "bond"],
            ["comedy_clubs", "music_venues", "poetry_readings"],
        ),
        _go(
            "Go to a fancy store and try on clothes you'd never buy.",
            [SHOPPING], "low", "indoor",
            ["shopping", "bond"],
            ["luxury_stores", "fashion_boutiques", "department_stores"],
        ),
        _go(
            "Go to a local brewery/distillery and do a tasting together.",
            [ENTERTAINMENT, RESTAURANTS], "medium", "indoor",
            ["food", "entertainment", "bond"],
            ["breweries", "distilleries", "wine_tastings"],
        ),
        _go(
            "Go to a local market and buy ingredients for a meal you'll cook together.",
            [SHOPPING, RESTAURANTS], "medium", "indoor",
            ["food", "shopping", "bond"],
            ["grocery_stores", "farmers_markets", "specialty_foods"],
        ),
    ],
}
