"""Order service layer (use cases).

Orchestrates placing, listing, viewing and cancelling orders, plus the
stateless draft endpoint.  The service validates against a fresh catalog
snapshot; the inventory transaction manager owns every write and the
transaction boundary.

Business rules enforced:
- An order is admitted only if ``validate_order`` accepts it.
- The stored price is the one computed by the server, never the client's.
- Users only ever see and cancel their own orders.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, Tuple

import structlog

from modules.menu.services import MenuService
from modules.orders.drafts import Selection, read_only_selection, recompute
from modules.orders.exceptions import OrderNotFound
from modules.orders.pricing import calculate_price, selection_price
from modules.orders.validators import validate_order

if TYPE_CHECKING:
    from django.db import models

    from modules.menu.repositories.interfaces import IMenuRepository
    from modules.orders.dtos import CreateOrderDTO, DraftRequestDTO
    from modules.orders.inventory import InventoryTransactionManager
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use cases.

    Receives repositories and the inventory manager via constructor
    injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        menu_repository: IMenuRepository,
        inventory: InventoryTransactionManager,
    ) -> None:
        self._order_repo = order_repository
        self._menu = MenuService(menu_repository)
        self._inventory = inventory

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def place_order(self, user_id: Any, dto: CreateOrderDTO) -> Order:
        """Validate *dto* and store it for *user_id*.

        Raises:
            OrderRejected: the order breaks a catalog rule.
            AvailabilityConflict: stock ran out between validation and commit.
            StorageError: unexpected database failure.
        """
        log = logger.bind(user_id=user_id, size=dto.size, base=dto.base)
        log.info("order.placement_started", ingredient_count=len(dto.ingredients))

        catalog = self._menu.get_catalog()
        result = validate_order(dto, catalog)
        if not result.ok:
            log.warning("order.rejected", code=str(result.code), reason=result.reason)
        result.raise_for_rejection()

        price = calculate_price(dto.size, dto.ingredients, catalog)
        order = self._inventory.create(user_id, dto, price)

        log.info("order.created", order_id=str(order.id), price=str(price))
        # Re-fetch with prefetch for output
        return self._order_repo.get_by_id(str(order.id)) or order

    def cancel_order(self, order_id: str, user_id: Any) -> int:
        """Cancel an owned order; returns the number of orders removed."""
        rows = self._inventory.cancel(order_id, user_id)
        logger.info(
            "order.cancel_requested",
            order_id=str(order_id),
            user_id=user_id,
            rows_affected=rows,
        )
        return rows

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_orders(self, user_id: Any) -> "models.QuerySet[Order]":
        return self._order_repo.list_for_owner(user_id)

    def get_order(self, order_id: str, user_id: Any) -> Order:
        """Retrieve an owned order.

        Raises:
            OrderNotFound: the order does not exist or is someone else's.
        """
        order = self._order_repo.get_for_owner(order_id, user_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def draft_for_order(self, order_id: str, user_id: Any) -> Tuple[Selection, Decimal]:
        """Read-only draft of a placed order and the price it was stored with."""
        order = self.get_order(order_id, user_id)
        catalog = self._menu.get_catalog()
        selection = read_only_selection(
            order.size, order.base, order.ingredient_names, catalog
        )
        return selection, order.price


class DraftService:
    """Runs the draft engine against the current catalog."""

    def __init__(self, menu_repository: IMenuRepository) -> None:
        self._menu = MenuService(menu_repository)

    def recompute(self, dto: DraftRequestDTO) -> Tuple[Selection, Decimal]:
        catalog = self._menu.get_catalog()
        selection = recompute(dto.previous, dto.event, catalog)
        return selection, selection_price(selection, catalog)
