"""Order domain constants.

Rejection codes and user-facing messages shared by the order validator and
the inventory transaction manager, plus the draft engine's annotation
reasons.
"""

from decimal import Decimal

from django.db import models

PRICE_TOLERANCE = Decimal("0.001")


class RejectionCode(models.TextChoices):
    UNKNOWN_BASE = "unknown_base", "Unknown base"
    UNKNOWN_SIZE = "unknown_size", "Unknown size"
    TOO_MANY_INGREDIENTS = "too_many_ingredients", "Too many ingredients"
    DUPLICATE_INGREDIENT = "duplicate_ingredient", "Duplicate ingredient"
    UNKNOWN_INGREDIENT = "unknown_ingredient", "Unknown ingredient"
    INGREDIENT_NOT_AVAILABLE = "ingredient_not_available", "Ingredient not available"
    MISSING_REQUIRED_INGREDIENT = (
        "missing_required_ingredient",
        "Missing required ingredient",
    )
    INCOMPATIBLE_INGREDIENTS = "incompatible_ingredients", "Incompatible ingredients"
    PRICE_MISMATCH = "price_mismatch", "Price mismatch"
    AVAILABILITY_CONFLICT = "availability_conflict", "Availability conflict"


MSG_UNKNOWN_BASE = "This base dish does not exist."
MSG_UNKNOWN_SIZE = "This size of dish does not exist."
MSG_TOO_MANY_INGREDIENTS = "Too many ingredients selected."
MSG_DUPLICATE_INGREDIENT = "An ingredient cannot be chosen twice."
MSG_UNKNOWN_INGREDIENT = "The ingredient {name} does not exist."
MSG_NOT_AVAILABLE = "One of the chosen ingredients ({name}) is no more available."
MSG_MISSING_REQUIRED = "A required ingredient is missing: {name} -> {required}."
MSG_INCOMPATIBLE = (
    "Incompatible ingredients present in the list: {name} incompatible with {other}."
)
MSG_PRICE_MISMATCH = "Wrong price."


# Draft annotation reasons
REASON_NOT_AVAILABLE = "not available"
REASON_REQUIRED_BY = "required by selected ingredient"
REASON_MAX_REACHED = "max ingredients for this size reached"
REASON_REQUIRED_MISSING = "required ingredient missing"
REASON_INCOMPATIBLE = "incompatible ingredient selected"
REASON_SIZE_TOO_SMALL = (
    "with this size you can choose only {max_ingredients} ingredients "
    "(now {count})"
)
