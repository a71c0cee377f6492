"""Menu catalog models: sizes, bases, ingredients and incompatibilities.

Business rules implemented:
- Names are unique per catalog table and are the lookup key everywhere.
- ``Ingredient.quantity`` is the inventory counter; ``NULL`` means unlimited
  and a tracked quantity can never go negative (DB check constraint).
- ``Ingredient.requires`` is a single-hop prerequisite (no chains resolved).
- Incompatibility is stored once per unordered pair and read back
  symmetrically, so the catalog can never hold a one-sided exclusion.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel


class Size(BaseModel):
    """Dish size with its price and ingredient ceiling."""

    name = models.CharField(max_length=32, unique=True)
    price = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    max_ingredients = models.PositiveSmallIntegerField()
    position = models.PositiveSmallIntegerField(default=0)

    class Meta:
        db_table = "menu_sizes"
        ordering = ["position", "name"]

    def __str__(self) -> str:
        return f"{self.name} (max {self.max_ingredients})"


class Base(BaseModel):
    name = models.CharField(max_length=32, unique=True)
    position = models.PositiveSmallIntegerField(default=0)

    class Meta:
        db_table = "menu_bases"
        ordering = ["position", "name"]

    def __str__(self) -> str:
        return self.name


class Ingredient(BaseModel):
    """Orderable ingredient with live stock.

    Stock is only ever changed with conditional ``UPDATE`` statements issued
    by the menu repository, never by loading and re-saving the row.
    """

    name = models.CharField(max_length=64, unique=True)
    price = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    quantity = models.PositiveIntegerField(null=True, blank=True, default=None)
    requires = models.ForeignKey(
        "self",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="required_by",
    )

    class Meta:
        db_table = "menu_ingredients"
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__isnull=True) | models.Q(quantity__gte=0),
                name="menu_ingredients_quantity_non_negative",
            ),
        ]

    @property
    def is_unlimited(self) -> bool:
        return self.quantity is None

    def clean(self) -> None:
        super().clean()
        if self.requires_id is not None and self.requires_id == self.id:
            raise ValidationError({"requires": "An ingredient cannot require itself."})

    def __str__(self) -> str:
        stock = "unlimited" if self.is_unlimited else self.quantity
        return f"{self.name} ({stock})"


class IngredientIncompatibility(BaseModel):
    """Unordered exclusion between two ingredients."""

    first = models.ForeignKey(
        Ingredient,
        on_delete=models.CASCADE,
        related_name="+",
    )
    second = models.ForeignKey(
        Ingredient,
        on_delete=models.CASCADE,
        related_name="+",
    )

    class Meta:
        db_table = "menu_incompatibilities"
        constraints = [
            models.UniqueConstraint(
                fields=["first", "second"],
                name="menu_incompatibilities_unique_pair",
            ),
            models.CheckConstraint(
                condition=~models.Q(first=models.F("second")),
                name="menu_incompatibilities_distinct",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.first_id} x {self.second_id}"
