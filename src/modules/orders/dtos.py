"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateOrderDTO``: a submitted order, as the client sent it.
- ``DraftRequestDTO``: a draft edit (previous selection + event).
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from modules.orders.drafts import DraftEvent, Selection

# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order submissions.

    Only shape is checked here.  Catalog rules (duplicates, prerequisites,
    price, ...) belong to ``validate_order`` so that every rejection carries
    its specific reason.  ``ingredients`` may be empty.
    """

    model_config = ConfigDict(frozen=True)

    size: str
    base: str
    ingredients: List[str] = []
    price: Decimal

    @field_validator("price")
    @classmethod
    def price_must_not_be_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Price cannot be negative.")
        return v

    @field_validator("size", "base")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Must not be empty.")
        return v


class DraftRequestDTO(BaseModel):
    """Immutable DTO for one draft edit.

    ``previous`` is ``None`` for the first request of an editing session.
    """

    model_config = ConfigDict(frozen=True)

    previous: Optional[Selection] = None
    event: DraftEvent

