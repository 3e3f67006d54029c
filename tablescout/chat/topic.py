"""
Cheap pre-check for off-topic conversations.

Only conversations with no food or dining vocabulary at all in the recent
window are refused here; anything borderline goes to the provider, whose
system prompt carries the actual refusal policy.
"""

from __future__ import annotations

import re

from .models import Message

# Matched as whole words, with an optional plural suffix.
_FOOD_TERMS = [
    # dining and venues
    "restaurant", "food", "foodie", "eat", "eats", "eating", "eatery", "eat out",
    "dining", "dine", "dinner", "lunch", "brunch", "breakfast", "meal", "menu",
    "dish", "cuisine", "cafe", "café", "coffee", "bar", "pub", "bistro", "diner",
    "bakery", "brewery", "takeout", "take-out", "delivery", "reservation", "chef",
    "cook", "cooking", "recipe", "snack", "dessert", "drink", "cocktail", "wine",
    "beer", "hungry", "place", "spot", "joint", "hole in the wall", "food truck",
    "tasting menu", "fine dining", "date night", "happy hour", "michelin", "yelp",
    "omakase", "buffet", "brasserie", "trattoria", "izakaya", "taqueria", "cantina",
    # dishes and ingredients
    "taco", "burrito", "ramen", "pho", "pasta", "bbq", "barbecue", "seafood",
    "oyster", "dim sum", "curry", "biryani", "kebab", "falafel", "bagel", "deli",
    "salad", "soup", "wings", "fries", "ice cream", "donut", "croissant", "tapas",
    "brisket", "prime rib", "bibimbap", "kimchi", "poke", "hummus", "hot pot",
    "carbonara", "lasagna", "risotto", "gnocchi", "paella", "gyro", "shawarma",
    "empanada", "tamale", "ceviche", "udon", "soba", "tempura", "katsu", "bao",
    "banh mi", "pad thai", "laksa", "tikka", "masala", "dosa", "naan", "gelato",
    "crepe", "waffle", "pancake", "pie", "sashimi", "lobster", "crab",
    "shrimp", "clam", "beef", "pork", "lamb", "duck", "tofu", "vegetable", "fish",
    # cuisines, regions and diets
    "italian", "chinese", "japanese", "mexican", "indian", "thai", "french",
    "mediterranean", "korean", "vietnamese", "greek", "spanish", "turkish",
    "lebanese", "moroccan", "ethiopian", "brazilian", "peruvian", "tex-mex",
    "sichuan", "szechuan", "cantonese", "hunan", "taiwanese", "neapolitan",
    "cajun", "creole", "soul food", "southern", "caribbean", "jamaican", "cuban",
    "filipino", "malaysian", "indonesian", "persian", "middle eastern", "halal",
    "kosher", "vegan", "vegetarian", "gluten-free",
]

# Matched anywhere in a word, so compounds like "cheesesteak" count.
_DISH_STEMS = [
    "pizza", "sushi", "burger", "steak", "chicken", "noodle", "dumpling",
    "sandwich", "cheese", "bread", "cake", "cookie", "chocolate", "sausage",
    "bacon", "salmon",
]

_FOOD_RE = re.compile(
    r"\b(?:" + "|".join(re.escape(t) for t in sorted(set(_FOOD_TERMS), key=len, reverse=True)) + r")(?:e?s)?\b"
    r"|" + "|".join(re.escape(s) for s in _DISH_STEMS),
    re.IGNORECASE,
)

# Latest user message plus the exchange right before it.
_RECENT_WINDOW = 3


def is_food_related(text: str) -> bool:
    return bool(_FOOD_RE.search(text or ""))


def conversation_is_food_related(messages: list[Message]) -> bool:
    """True when the latest user message, or the user turn in the exchange
    just before it, mentions food or dining vocabulary.

    Follow-ups such as "is it open late?" pass on the strength of the
    previous turn; a conversation that drifted off topic several turns ago
    does not.
    """
    last_user = max((i for i, m in enumerate(messages) if m.role == "user"), default=None)
    if last_user is None:
        return False
    recent = messages[max(0, last_user - _RECENT_WINDOW + 1):last_user + 1]
    return any(is_food_related(m.content) for m in recent if m.role == "user")
