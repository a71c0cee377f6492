from __future__ import annotations

from decimal import Decimal
from typing import Optional

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from modules.menu.models import Base, Ingredient, IngredientIncompatibility, Size

SIZES = [
    # name, price, max_ingredients
    ("small", Decimal("5.00"), 3),
    ("medium", Decimal("7.00"), 5),
    ("large", Decimal("9.00"), 7),
]

BASES = ["pizza", "pasta", "salad"]

INGREDIENTS = [
    # name, price, quantity (None = unlimited), requires
    ("anchovies", Decimal("1.50"), None, None),
    ("avocado", Decimal("1.00"), 10, None),
    ("bacon", Decimal("1.50"), None, None),
    ("carrots", Decimal("0.40"), None, None),
    ("eggs", Decimal("1.00"), None, None),
    ("ham", Decimal("1.20"), None, None),
    ("mozzarella", Decimal("1.00"), None, None),
    ("mushrooms", Decimal("0.80"), 3, None),
    ("olives", Decimal("0.70"), None, None),
    ("parmesan", Decimal("1.20"), None, "mozzarella"),
    ("potatoes", Decimal("0.30"), None, "carrots"),
    ("salami", Decimal("1.50"), 5, None),
    ("tomatoes", Decimal("0.50"), 20, "olives"),
    ("truffle", Decimal("3.00"), 2, "mushrooms"),
    ("tuna", Decimal("1.50"), None, "olives"),
]

INCOMPATIBILITIES = [
    ("eggs", "mushrooms"),
    ("eggs", "tomatoes"),
    ("ham", "mushrooms"),
    ("olives", "anchovies"),
    ("tomatoes", "avocado"),
]


class Command(BaseCommand):
    help = "Seed database with the menu catalog and development users."

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("Seeding development data...")

        users_created = self._seed_users()
        sizes = self._seed_sizes()
        bases = self._seed_bases()
        ingredients = self._seed_ingredients()
        pairs = self._seed_incompatibilities()

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={users_created}, "
                f"sizes={sizes}, "
                f"bases={bases}, "
                f"ingredients={ingredients}, "
                f"incompatibilities={pairs}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        created = 0
        if not User.objects.filter(username="admin").exists():
            User.objects.create_superuser("admin", password="admin123")
            created += 1
        for username in ("user1", "user2", "user3"):
            if not User.objects.filter(username=username).exists():
                User.objects.create_user(username, password=f"{username}pass")
                created += 1
        return created

    def _seed_sizes(self) -> int:
        self.stdout.write("Creating sizes...")
        for position, (name, price, max_ingredients) in enumerate(SIZES):
            Size.objects.update_or_create(
                name=name,
                defaults={
                    "price": price,
                    "max_ingredients": max_ingredients,
                    "position": position,
                },
            )
        self.stdout.write(self.style.SUCCESS("Creating sizes... Done!"))
        return len(SIZES)

    def _seed_bases(self) -> int:
        for position, name in enumerate(BASES):
            Base.objects.update_or_create(name=name, defaults={"position": position})
        return len(BASES)

    def _seed_ingredients(self) -> int:
        self.stdout.write("Creating ingredients...")
        # Prerequisites point at rows that must already exist.
        for name, price, quantity, _ in INGREDIENTS:
            Ingredient.objects.update_or_create(
                name=name,
                defaults={"price": price, "quantity": quantity},
            )
        for name, _, _, requires in INGREDIENTS:
            required: Optional[Ingredient] = (
                Ingredient.objects.get(name=requires) if requires else None
            )
            Ingredient.objects.filter(name=name).update(requires=required)
        self.stdout.write(self.style.SUCCESS("Creating ingredients... Done!"))
        return len(INGREDIENTS)

    def _seed_incompatibilities(self) -> int:
        created = 0
        for first, second in INCOMPATIBILITIES:
            a, b = sorted((first, second))
            _, was_created = IngredientIncompatibility.objects.get_or_create(
                first=Ingredient.objects.get(name=a),
                second=Ingredient.objects.get(name=b),
            )
            created += int(was_created)
        return created
