import decimal

import django.core.validators
import django.db.models.deletion
import uuid6
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Base",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("name", models.CharField(max_length=32, unique=True)),
                ("position", models.PositiveSmallIntegerField(default=0)),
            ],
            options={
                "db_table": "menu_bases",
                "ordering": ["position", "name"],
            },
        ),
        migrations.CreateModel(
            name="Size",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("name", models.CharField(max_length=32, unique=True)),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=8,
                        validators=[
                            django.core.validators.MinValueValidator(
                                decimal.Decimal("0.00")
                            )
                        ],
                    ),
                ),
                ("max_ingredients", models.PositiveSmallIntegerField()),
                ("position", models.PositiveSmallIntegerField(default=0)),
            ],
            options={
                "db_table": "menu_sizes",
                "ordering": ["position", "name"],
            },
        ),
        migrations.CreateModel(
            name="Ingredient",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("name", models.CharField(max_length=64, unique=True)),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=8,
                        validators=[
                            django.core.validators.MinValueValidator(
                                decimal.Decimal("0.00")
                            )
                        ],
                    ),
                ),
                (
                    "quantity",
                    models.PositiveIntegerField(blank=True, default=None, null=True),
                ),
                (
                    "requires",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="required_by",
                        to="menu.ingredient",
                    ),
                ),
            ],
            options={
                "db_table": "menu_ingredients",
                "ordering": ["name"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            ("quantity__isnull", True),
                            ("quantity__gte", 0),
                            _connector="OR",
                        ),
                        name="menu_ingredients_quantity_non_negative",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="IngredientIncompatibility",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "first",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="+",
                        to="menu.ingredient",
                    ),
                ),
                (
                    "second",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="+",
                        to="menu.ingredient",
                    ),
                ),
            ],
            options={
                "db_table": "menu_incompatibilities",
                "constraints": [
                    models.UniqueConstraint(
                        fields=("first", "second"),
                        name="menu_incompatibilities_unique_pair",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            ("first", models.F("second")), _negated=True
                        ),
                        name="menu_incompatibilities_distinct",
                    ),
                ],
            },
        ),
    ]
