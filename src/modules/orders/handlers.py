"""Event handlers for Orders domain events."""

from __future__ import annotations

import structlog

from modules.orders.events import OrderCancelled, OrderPlaced
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderPlacedHandler(IEventHandler[OrderPlaced]):
    def handle(self, event: OrderPlaced) -> None:
        logger.info(
            "order.event.placed",
            order_id=str(event.aggregate_id),
            user_id=event.user_id,
            ingredient_count=len(event.ingredients),
        )


class OrderCancelledHandler(IEventHandler[OrderCancelled]):
    def handle(self, event: OrderCancelled) -> None:
        logger.info(
            "order.event.cancelled",
            order_id=str(event.aggregate_id),
            user_id=event.user_id,
        )


order_placed_handler = OrderPlacedHandler()
order_cancelled_handler = OrderCancelledHandler()
