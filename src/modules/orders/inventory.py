"""Inventory transaction manager.

The only code path that writes orders or moves stock.  Both operations run
in a single database transaction:

``create``
    For every ingredient, in name order, one conditional decrement
    (``quantity = quantity - 1 WHERE quantity > 0``), then the order and
    its items are inserted.  A decrement that matches no row means another
    order took the last unit after this one was validated: the whole
    transaction is rolled back and ``AvailabilityConflict`` is raised.

``cancel``
    The order row is locked, every tracked ingredient gets one unit back
    and the order is deleted.  A missing, foreign or already cancelled
    order affects zero rows, which makes cancel idempotent.

Both operations touch ingredient rows in sorted name order, so a create
and a cancel sharing ingredients cannot deadlock on each other's rows.
Events are published only after commit.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, Optional

import structlog
from django.db import DEFAULT_DB_ALIAS, DatabaseError, transaction

from modules.orders.events import OrderCancelled, OrderPlaced
from modules.orders.exceptions import AvailabilityConflict, StorageError
from shared.infrastructure.bus import event_bus

if TYPE_CHECKING:
    from modules.menu.repositories.interfaces import IMenuRepository
    from modules.orders.dtos import CreateOrderDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from shared.domain.bus import IEventBus

logger = structlog.get_logger(__name__)

STORAGE_ERROR_MESSAGE = "The order could not be stored. Please try again."


class InventoryTransactionManager:
    """Atomic order creation and cancellation with stock bookkeeping.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        menu_repository: IMenuRepository,
        bus: Optional[IEventBus] = None,
        using: str = DEFAULT_DB_ALIAS,
    ) -> None:
        self._order_repo = order_repository
        self._menu_repo = menu_repository
        self._bus = bus if bus is not None else event_bus
        self.using = using

    def create(self, user_id: Any, candidate: CreateOrderDTO, price: Decimal) -> Order:
        """Take one unit of every ingredient and store the order.

        *candidate* must already have passed ``validate_order``; *price* is
        the server-computed total.

        Raises:
            AvailabilityConflict: an ingredient sold out after validation.
            StorageError: any other database failure.
        """
        log = logger.bind(user_id=user_id, size=candidate.size, base=candidate.base)
        try:
            with transaction.atomic(using=self.using):
                for name in sorted(set(candidate.ingredients)):
                    if not self._menu_repo.consume_stock(name):
                        log.warning("inventory.availability_conflict", ingredient=name)
                        raise AvailabilityConflict(name)

                order = self._order_repo.create(
                    {
                        "user_id": user_id,
                        "size": candidate.size,
                        "base": candidate.base,
                        "price": price,
                        "ingredients": list(candidate.ingredients),
                    }
                )
                event = OrderPlaced(
                    aggregate_id=order.id,
                    user_id=user_id,
                    ingredients=tuple(candidate.ingredients),
                )
                transaction.on_commit(
                    lambda: self._bus.publish(event), using=self.using
                )
        except DatabaseError as exc:
            log.error("inventory.create_failed", error=str(exc))
            raise StorageError(STORAGE_ERROR_MESSAGE) from exc

        log.info("inventory.order_created", order_id=str(order.id))
        return order

    def cancel(self, order_id: str, user_id: Any) -> int:
        """Delete an owned order and give its stock back.

        Returns the number of orders removed: ``1``, or ``0`` when there was
        nothing to cancel.

        Raises:
            StorageError: any database failure; nothing was changed.
        """
        log = logger.bind(order_id=str(order_id), user_id=user_id)
        try:
            with transaction.atomic(using=self.using):
                order = self._order_repo.get_for_update(order_id, user_id)
                if order is None:
                    log.info("inventory.cancel_noop")
                    return 0

                for name in sorted(item.ingredient.name for item in order.items.all()):
                    self._menu_repo.restock(name)

                event = OrderCancelled(aggregate_id=order.id, user_id=user_id)
                self._order_repo.delete(order)
                transaction.on_commit(
                    lambda: self._bus.publish(event), using=self.using
                )
        except DatabaseError as exc:
            log.error("inventory.cancel_failed", error=str(exc))
            raise StorageError(STORAGE_ERROR_MESSAGE) from exc

        log.info("inventory.order_cancelled")
        return 1
