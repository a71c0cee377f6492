"""Menu DRF serializers (read-only catalog output)."""

from __future__ import annotations

from rest_framework import serializers

from modules.menu.models import Base, Ingredient, Size


class SizeSerializer(serializers.ModelSerializer):
    class Meta:
        model = Size
        fields = ["name", "price", "max_ingredients"]
        read_only_fields = fields


class BaseSerializer(serializers.ModelSerializer):
    class Meta:
        model = Base
        fields = ["name"]
        read_only_fields = fields


class IngredientSerializer(serializers.ModelSerializer):
    """Ingredient with its prerequisite and incompatibilities by name.

    ``quantity`` is ``null`` for unlimited ingredients.  Incompatibilities are
    read from the ``incompatibilities`` context map (name -> set of names)
    so the listing costs a single extra query.
    """

    requires = serializers.SlugRelatedField(slug_field="name", read_only=True)
    incompatibilities = serializers.SerializerMethodField()

    class Meta:
        model = Ingredient
        fields = ["name", "price", "quantity", "requires", "incompatibilities"]
        read_only_fields = fields

    def get_incompatibilities(self, obj: Ingredient) -> list[str]:
        mapping = self.context.get("incompatibilities", {})
        return sorted(mapping.get(obj.name, ()))
