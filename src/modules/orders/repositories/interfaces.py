"""Order repository interface.

Extends ``IRepository[Order]`` with the queries the order use cases need:
atomic creation with items, owner-scoped reads and a locking read for
cancellation.

The service and inventory layers depend exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional

from django.db import models

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The aggregate is an ``Order`` plus its ``OrderItem`` children; every
    method that touches both must be atomic.
    """

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Insert an order with its items.

        ``data`` must include ``user_id``, ``size``, ``base``, ``price`` and
        ``ingredients`` (names, in submission order).  Every name must exist
        in the menu.
        """

    @abstractmethod
    def get_for_owner(self, id: str, user_id: Any) -> Optional[Order]:
        """Retrieve an order only if it belongs to *user_id*."""

    @abstractmethod
    def get_for_update(self, id: str, user_id: Any) -> Optional[Order]:
        """Like ``get_for_owner`` but row-locks the order (SELECT FOR UPDATE).

        Must be called inside a transaction.
        """

    @abstractmethod
    def list_for_owner(self, user_id: Any) -> "models.QuerySet[Order]":
        """Orders of *user_id*, newest first, with items prefetched."""
