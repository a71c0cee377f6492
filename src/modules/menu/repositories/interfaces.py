"""Menu repository interface.

The catalog is read as a whole (``load_catalog``) and stock is moved one
unit at a time with conditional writes.  The service and inventory layers
depend exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Dict, Set

from django.db import models

if TYPE_CHECKING:
    from modules.menu.catalog import Catalog
    from modules.menu.models import Base, Ingredient, Size


class IMenuRepository(ABC):
    """Repository contract for the menu catalog and its stock counters."""

    @abstractmethod
    def load_catalog(self) -> Catalog:
        """Build a fresh immutable snapshot of the whole catalog."""

    @abstractmethod
    def list_sizes(self) -> "models.QuerySet[Size]":
        """List sizes in display order."""

    @abstractmethod
    def list_bases(self) -> "models.QuerySet[Base]":
        """List bases in display order."""

    @abstractmethod
    def list_ingredients(self) -> "models.QuerySet[Ingredient]":
        """List ingredients with their prerequisite eagerly loaded."""

    @abstractmethod
    def incompatibility_map(self) -> Dict[str, Set[str]]:
        """Map every ingredient name to the names it cannot be combined with."""

    @abstractmethod
    def consume_stock(self, name: str) -> bool:
        """Take one unit of *name*.

        Must be a single conditional write: decrement only if the quantity is
        tracked and currently positive.  Returns ``True`` when a unit was
        taken or the ingredient is unlimited, ``False`` otherwise (sold out
        or unknown).  Callers run it inside a transaction.
        """

    @abstractmethod
    def restock(self, name: str) -> None:
        """Give back one unit of a tracked ingredient (no-op if unlimited)."""
