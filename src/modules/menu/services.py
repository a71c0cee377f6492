"""Menu service layer.

Serves catalog reads.  Every call to ``get_catalog`` pulls a fresh snapshot
from the store; callers decide how often to refresh.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from modules.menu.catalog import Catalog
    from modules.menu.repositories.interfaces import IMenuRepository

logger = structlog.get_logger(__name__)


class MenuService:
    """Application service for catalog reads.

    Receives an ``IMenuRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IMenuRepository) -> None:
        self._repo = repository

    def get_catalog(self) -> Catalog:
        return self._repo.load_catalog()

    def list_sizes(self):
        return self._repo.list_sizes()

    def list_bases(self):
        return self._repo.list_bases()

    def ingredients_with_incompatibilities(self):
        """Return ``(ingredients, incompatibility map)`` for the listing endpoint."""
        return self._repo.list_ingredients(), self._repo.incompatibility_map()
