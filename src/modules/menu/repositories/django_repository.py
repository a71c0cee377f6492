"""Django ORM implementation of the menu repository.

Stock writes are expressed as one ``UPDATE ... WHERE`` per unit with an
``F()`` expression, so the database evaluates the guard and the write
atomically; there is no read-then-write window for two concurrent orders
to oversell the last unit.
"""

from __future__ import annotations

from typing import Dict, Set

import structlog
from django.db import DEFAULT_DB_ALIAS
from django.db.models import F

from modules.menu.catalog import BaseEntry, Catalog, IngredientEntry, SizeEntry
from modules.menu.models import Base, Ingredient, IngredientIncompatibility, Size
from modules.menu.repositories.interfaces import IMenuRepository

logger = structlog.get_logger(__name__)


class MenuDjangoRepository(IMenuRepository):
    """Concrete menu repository backed by Django ORM."""

    def __init__(self, using: str = DEFAULT_DB_ALIAS) -> None:
        self.using = using

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def list_sizes(self):
        return Size.objects.using(self.using).all()

    def list_bases(self):
        return Base.objects.using(self.using).all()

    def list_ingredients(self):
        return Ingredient.objects.using(self.using).select_related("requires")

    def incompatibility_map(self) -> Dict[str, Set[str]]:
        """Map every ingredient name to the names it cannot be combined with."""
        pairs = IngredientIncompatibility.objects.using(self.using).values_list(
            "first__name", "second__name"
        )
        result: Dict[str, Set[str]] = {}
        for first, second in pairs:
            result.setdefault(first, set()).add(second)
            result.setdefault(second, set()).add(first)
        return result

    def load_catalog(self) -> Catalog:
        incompatibilities = self.incompatibility_map()
        catalog = Catalog(
            sizes=[
                SizeEntry(
                    name=size.name,
                    price=size.price,
                    max_ingredients=size.max_ingredients,
                )
                for size in self.list_sizes()
            ],
            bases=[BaseEntry(name=base.name) for base in self.list_bases()],
            ingredients=[
                IngredientEntry(
                    name=ingredient.name,
                    price=ingredient.price,
                    quantity=ingredient.quantity,
                    requires=ingredient.requires.name if ingredient.requires else None,
                    incompatibilities=frozenset(
                        incompatibilities.get(ingredient.name, ())
                    ),
                )
                for ingredient in self.list_ingredients()
            ],
        )
        logger.debug("menu.catalog_loaded", ingredient_count=len(catalog))
        return catalog

    # ------------------------------------------------------------------
    # Stock
    # ------------------------------------------------------------------

    def consume_stock(self, name: str) -> bool:
        manager = Ingredient.objects.using(self.using)
        updated = manager.filter(
            name=name,
            quantity__isnull=False,
            quantity__gt=0,
        ).update(quantity=F("quantity") - 1)
        if updated:
            return True
        # Nothing decremented: either unlimited, sold out, or unknown.
        return manager.filter(name=name, quantity__isnull=True).exists()

    def restock(self, name: str) -> None:
        Ingredient.objects.using(self.using).filter(
            name=name,
            quantity__isnull=False,
        ).update(quantity=F("quantity") + 1)
