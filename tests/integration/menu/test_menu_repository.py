"""Integration tests for ``MenuDjangoRepository``.

Covers:
- Catalog snapshot built from the store (requires, symmetric incompatibilities).
- Conditional stock decrement: tracked, unlimited, sold out, unknown.
- Restock of tracked and unlimited ingredients.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.menu.models import Ingredient
from modules.menu.repositories import MenuDjangoRepository

pytestmark = pytest.mark.integration


@pytest.fixture()
def repo():
    return MenuDjangoRepository()


class TestLoadCatalog:
    def test_snapshot_matches_store(self, repo, menu):
        catalog = repo.load_catalog()
        assert [s.name for s in catalog.all_sizes()] == ["small", "medium", "large"]
        assert len(catalog) == len(menu)
        truffle = catalog.ingredient_of("truffle")
        assert truffle.requires == "mushrooms"
        assert truffle.quantity == 2
        assert truffle.price == Decimal("3.00")
        assert catalog.ingredient_of("olives").quantity is None

    def test_incompatibilities_read_back_symmetrically(self, repo, menu):
        catalog = repo.load_catalog()
        assert catalog.ingredient_of("mushrooms").incompatibilities == {"eggs", "ham"}
        assert "mushrooms" in catalog.ingredient_of("ham").incompatibilities

    def test_snapshot_is_detached_from_store(self, repo, menu):
        catalog = repo.load_catalog()
        Ingredient.objects.filter(name="mushrooms").update(quantity=0)
        assert catalog.ingredient_of("mushrooms").quantity == 3
        assert repo.load_catalog().ingredient_of("mushrooms").quantity == 0

    def test_empty_store(self, repo):
        assert len(repo.load_catalog()) == 0


class TestStock:
    def test_consume_tracked(self, repo, menu):
        assert repo.consume_stock("mushrooms") is True
        menu["mushrooms"].refresh_from_db()
        assert menu["mushrooms"].quantity == 2

    def test_consume_unlimited_leaves_null(self, repo, menu):
        assert repo.consume_stock("olives") is True
        menu["olives"].refresh_from_db()
        assert menu["olives"].quantity is None

    def test_consume_sold_out_never_goes_negative(self, repo, menu):
        assert repo.consume_stock("tuna") is False
        menu["tuna"].refresh_from_db()
        assert menu["tuna"].quantity == 0

    def test_consume_unknown(self, repo, menu):
        assert repo.consume_stock("pineapple") is False

    def test_last_unit_goes_once(self, repo, menu):
        Ingredient.objects.filter(name="truffle").update(quantity=1)
        assert repo.consume_stock("truffle") is True
        assert repo.consume_stock("truffle") is False

    def test_restock_tracked(self, repo, menu):
        repo.restock("tuna")
        menu["tuna"].refresh_from_db()
        assert menu["tuna"].quantity == 1

    def test_restock_unlimited_is_noop(self, repo, menu):
        repo.restock("olives")
        menu["olives"].refresh_from_db()
        assert menu["olives"].quantity is None
