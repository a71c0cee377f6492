"""Order and OrderItem models.

Business rules implemented:
- An order belongs to exactly one user; ``user`` is stamped by the server.
- Orders are immutable once created: there is no update path, only
  deletion (cancellation), which the inventory transaction manager performs.
- ``size`` and ``base`` are stored by name, as chosen at order time.
- ``OrderItem`` links an order to an ingredient; ``position`` keeps the
  ingredients in the order they were submitted.
"""

from __future__ import annotations

from datetime import date

from django.conf import settings
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel


class Order(BaseModel):
    """Order aggregate root.

    The UUIDv7 ``id`` is assigned on insert; ``created_at`` doubles as the
    order date.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="orders",
    )
    price = models.DecimalField(max_digits=8, decimal_places=2)
    size = models.CharField(max_length=32)
    base = models.CharField(max_length=32)

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "-created_at"], name="orders_user_created_idx"),
        ]

    @property
    def date(self) -> date:
        return timezone.localdate(self.created_at)

    @property
    def ingredient_names(self) -> list[str]:
        """Ingredient names in submission order (uses prefetched items)."""
        return [item.ingredient.name for item in self.items.all()]

    def __str__(self) -> str:
        return f"Order {self.id} ({self.size} {self.base})"


class OrderItem(BaseModel):
    """One ingredient of an order.

    ``ingredient`` is PROTECTed: a catalog entry that appears in a live order
    cannot be removed from the menu.
    """

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    ingredient = models.ForeignKey(
        "menu.Ingredient",
        on_delete=models.PROTECT,
        related_name="order_items",
    )
    position = models.PositiveSmallIntegerField()

    class Meta:
        db_table = "order_items"
        ordering = ["position"]
        constraints = [
            models.UniqueConstraint(
                fields=["order", "ingredient"],
                name="order_items_unique_ingredient",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order_id} #{self.position}: {self.ingredient_id}"
