from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient

from modules.menu.catalog import BaseEntry, Catalog, IngredientEntry, SizeEntry
from modules.menu.models import Base, Ingredient, IngredientIncompatibility, Size

User = get_user_model()

# name, price, max_ingredients
SIZES = [
    ("small", "5.00", 3),
    ("medium", "7.00", 5),
    ("large", "9.00", 7),
]

BASES = ["pizza", "pasta", "salad"]

# name, price, quantity (None = unlimited), requires; alphabetical = menu order
INGREDIENTS = [
    ("anchovies", "1.50", None, None),
    ("eggs", "1.00", None, None),
    ("ham", "1.20", None, None),
    ("mozzarella", "1.00", None, None),
    ("mushrooms", "0.80", 3, None),
    ("olives", "0.70", None, None),
    ("parmesan", "1.20", None, "mozzarella"),
    ("tomatoes", "0.50", 20, "olives"),
    ("truffle", "3.00", 2, "mushrooms"),
    ("tuna", "1.50", 0, None),
]

INCOMPATIBILITIES = [
    ("anchovies", "olives"),
    ("eggs", "mushrooms"),
    ("eggs", "tomatoes"),
    ("ham", "mushrooms"),
]


def build_catalog(overrides=None, drop=()):
    """Pure ``Catalog`` with the test menu.

    ``overrides`` maps an ingredient name to field overrides (e.g.
    ``{"mushrooms": {"quantity": 0}}``); ``drop`` removes ingredients.
    """
    overrides = overrides or {}
    peers = {}
    for first, second in INCOMPATIBILITIES:
        if first in drop or second in drop:
            continue
        peers.setdefault(first, set()).add(second)
        peers.setdefault(second, set()).add(first)

    ingredients = []
    for name, price, quantity, requires in INGREDIENTS:
        if name in drop:
            continue
        fields = {
            "name": name,
            "price": Decimal(price),
            "quantity": quantity,
            "requires": requires,
            "incompatibilities": frozenset(peers.get(name, ())),
        }
        fields.update(overrides.get(name, {}))
        ingredients.append(IngredientEntry(**fields))

    return Catalog(
        sizes=[
            SizeEntry(name=name, price=Decimal(price), max_ingredients=limit)
            for name, price, limit in SIZES
        ],
        bases=[BaseEntry(name=name) for name in BASES],
        ingredients=ingredients,
    )


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """Throttle counters live in the cache; start every test from zero."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def catalog():
    return build_catalog()


@pytest.fixture()
def catalog_factory():
    """The test menu with per-test changes, see ``build_catalog``."""
    return build_catalog


@pytest.fixture()
def menu():
    """Persist the test menu; returns ingredients by name."""
    for position, (name, price, limit) in enumerate(SIZES):
        Size.objects.create(
            name=name, price=Decimal(price), max_ingredients=limit, position=position
        )
    for position, name in enumerate(BASES):
        Base.objects.create(name=name, position=position)

    ingredients = {}
    for name, price, quantity, _ in INGREDIENTS:
        ingredients[name] = Ingredient.objects.create(
            name=name, price=Decimal(price), quantity=quantity
        )
    for name, _, _, requires in INGREDIENTS:
        if requires:
            ingredients[name].requires = ingredients[requires]
            ingredients[name].save(update_fields=["requires"])
    for first, second in INCOMPATIBILITIES:
        IngredientIncompatibility.objects.create(
            first=ingredients[first], second=ingredients[second]
        )
    return ingredients


@pytest.fixture()
def user():
    return User.objects.create_user(username="alice", password="testpass123")


@pytest.fixture()
def other_user():
    return User.objects.create_user(username="bob", password="testpass123")


@pytest.fixture()
def auth_client(user):
    """APIClient with a force-authenticated Django user."""
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def step_up_client(user):
    """APIClient whose token says the user passed the second factor."""
    client = APIClient()
    client.force_authenticate(user=user, token={"auth_method": "totp"})
    return client
