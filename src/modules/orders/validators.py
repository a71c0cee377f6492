"""Order validator: the authoritative admission rules.

``validate_order`` is a pure function of the candidate order and a catalog
snapshot.  Checks run in a fixed order and stop at the first failure, so a
caller always gets the single most basic problem with its order.

Stock is checked here too, but only against the snapshot: it can be stale by
the time the order is written.  The conditional decrement in
``InventoryTransactionManager.create`` has the final word.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Optional, Sequence

from modules.orders.constants import (
    MSG_DUPLICATE_INGREDIENT,
    MSG_INCOMPATIBLE,
    MSG_MISSING_REQUIRED,
    MSG_NOT_AVAILABLE,
    MSG_PRICE_MISMATCH,
    MSG_TOO_MANY_INGREDIENTS,
    MSG_UNKNOWN_BASE,
    MSG_UNKNOWN_INGREDIENT,
    MSG_UNKNOWN_SIZE,
    PRICE_TOLERANCE,
    RejectionCode,
)
from modules.orders.exceptions import OrderRejected
from modules.orders.pricing import calculate_price

if TYPE_CHECKING:
    from modules.menu.catalog import Catalog
    from modules.orders.dtos import CreateOrderDTO


@dataclass(frozen=True)
class ValidationResult:
    code: Optional[str] = None
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.code is None

    def raise_for_rejection(self) -> None:
        if not self.ok:
            raise OrderRejected(self.code, self.reason)


ACCEPTED = ValidationResult()


def _reject(code: str, reason: str) -> ValidationResult:
    return ValidationResult(code=code, reason=reason)


def validate_order(candidate: CreateOrderDTO, catalog: Catalog) -> ValidationResult:
    """Decide whether *candidate* may be placed against *catalog*."""
    ingredients: Sequence[str] = candidate.ingredients

    if catalog.base_of(candidate.base) is None:
        return _reject(RejectionCode.UNKNOWN_BASE, MSG_UNKNOWN_BASE)

    size = catalog.size_of(candidate.size)
    if size is None:
        return _reject(RejectionCode.UNKNOWN_SIZE, MSG_UNKNOWN_SIZE)

    if len(ingredients) > size.max_ingredients:
        return _reject(RejectionCode.TOO_MANY_INGREDIENTS, MSG_TOO_MANY_INGREDIENTS)

    if len(set(ingredients)) != len(ingredients):
        return _reject(RejectionCode.DUPLICATE_INGREDIENT, MSG_DUPLICATE_INGREDIENT)

    entries = []
    for name in ingredients:
        entry = catalog.ingredient_of(name)
        if entry is None:
            return _reject(
                RejectionCode.UNKNOWN_INGREDIENT,
                MSG_UNKNOWN_INGREDIENT.format(name=name),
            )
        entries.append(entry)

    for entry in entries:
        if not entry.is_available:
            return _reject(
                RejectionCode.INGREDIENT_NOT_AVAILABLE,
                MSG_NOT_AVAILABLE.format(name=entry.name),
            )

    chosen = frozenset(ingredients)
    for entry in entries:
        if entry.requires is not None and entry.requires not in chosen:
            return _reject(
                RejectionCode.MISSING_REQUIRED_INGREDIENT,
                MSG_MISSING_REQUIRED.format(name=entry.name, required=entry.requires),
            )

    for entry in entries:
        for other in ingredients:
            if other in entry.incompatibilities:
                return _reject(
                    RejectionCode.INCOMPATIBLE_INGREDIENTS,
                    MSG_INCOMPATIBLE.format(name=entry.name, other=other),
                )

    expected = calculate_price(candidate.size, ingredients, catalog)
    if abs(expected - Decimal(candidate.price)) > PRICE_TOLERANCE:
        return _reject(RejectionCode.PRICE_MISMATCH, MSG_PRICE_MISMATCH)

    return ACCEPTED
