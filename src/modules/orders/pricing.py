"""Price calculator.

``price = price(size) + sum(price(ingredient))``.  Pure functions over a
``Catalog``; nothing is cached, so a refreshed catalog is always priced
with its own numbers.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Iterable, Optional

if TYPE_CHECKING:
    from modules.menu.catalog import Catalog
    from modules.orders.drafts import Selection

ZERO = Decimal("0.00")


def calculate_price(
    size: Optional[str], ingredients: Iterable[str], catalog: Catalog
) -> Decimal:
    """Total for *size* plus *ingredients*.

    An unset or unknown size prices the whole dish at zero.  Unknown
    ingredient names contribute nothing (the validator rejects them first).
    """
    size_entry = catalog.size_of(size)
    if size_entry is None:
        return ZERO
    total = size_entry.price
    for name in ingredients:
        entry = catalog.ingredient_of(name)
        if entry is not None:
            total += entry.price
    return total


def selection_price(selection: Selection, catalog: Catalog) -> Decimal:
    return calculate_price(selection.size, selection.ingredients, catalog)
