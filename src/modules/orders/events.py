"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderPlaced(DomainEvent):
    """Raised after an order and its stock decrements are committed."""

    user_id: Any = None
    ingredients: Tuple[str, ...] = ()


@dataclass(frozen=True)
class OrderCancelled(DomainEvent):
    """Raised after an order is deleted and its stock given back."""

    user_id: Any = None
