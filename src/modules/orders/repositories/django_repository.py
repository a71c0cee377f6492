"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.  ``create`` is
wrapped in ``transaction.atomic()`` so an order is never visible without its
items; when called from an outer transaction it becomes a savepoint.

Cancellation locks the order row with ``select_for_update()`` so two
concurrent cancels of the same order serialize and only one restocks.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import DEFAULT_DB_ALIAS, transaction

from modules.menu.models import Ingredient
from modules.orders.models import Order, OrderItem
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    def __init__(self, using: str = DEFAULT_DB_ALIAS) -> None:
        self.using = using

    def _queryset(self):
        return Order.objects.using(self.using).prefetch_related("items__ingredient")

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    def create(self, data: Dict[str, Any]) -> Order:
        with transaction.atomic(using=self.using):
            order = Order(
                user_id=data["user_id"],
                size=data["size"],
                base=data["base"],
                price=data["price"],
            )
            order.save(using=self.using)

            names = list(data.get("ingredients", []))
            ids = dict(
                Ingredient.objects.using(self.using)
                .filter(name__in=names)
                .values_list("name", "id")
            )
            items = [
                OrderItem(order=order, ingredient_id=ids[name], position=position)
                for position, name in enumerate(names)
            ]
            OrderItem.objects.using(self.using).bulk_create(items)

        log = logger.bind(order_id=str(order.id), item_count=len(items))
        log.info("order.persisted")
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with items eagerly loaded.

        Returns ``None`` for non-existent or malformed IDs.
        """
        try:
            return self._queryset().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_owner(self, id: str, user_id: Any) -> Optional[Order]:
        try:
            return self._queryset().filter(id=id, user_id=user_id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str, user_id: Any) -> Optional[Order]:
        """Retrieve an owned order with a row-level lock.

        Items are prefetched so the caller can iterate them while the row
        is locked.  Returns ``None`` for non-existent or malformed IDs.
        """
        try:
            return (
                Order.objects.using(self.using)
                .select_for_update()
                .prefetch_related("items__ingredient")
                .filter(id=id, user_id=user_id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None):
        queryset = self._queryset()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def list_for_owner(self, user_id: Any):
        return self.list({"user_id": user_id})

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete(self, entity: Order) -> None:
        order_id = str(entity.id)
        entity.delete(using=self.using)
        logger.info("order.deleted", order_id=order_id)
