"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.models import Order

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateOrderSerializer(serializers.Serializer):
    """Validates the shape of an order submission.

    ``price`` is what the client displayed; it is only compared against the
    server's own total.  Catalog rules are checked by the service.
    """

    size = serializers.CharField(max_length=32)
    base = serializers.CharField(max_length=32)
    ingredients = serializers.ListField(
        child=serializers.CharField(max_length=64),
        allow_empty=True,
        default=list,
    )
    price = serializers.FloatField(min_value=0)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for a placed order with its ingredient names."""

    user_id = serializers.IntegerField(read_only=True)
    date = serializers.DateField(read_only=True)
    ingredients = serializers.ListField(
        child=serializers.CharField(),
        source="ingredient_names",
        read_only=True,
    )

    class Meta:
        model = Order
        fields = [
            "id",
            "user_id",
            "date",
            "price",
            "size",
            "base",
            "ingredients",
            "created_at",
        ]
        read_only_fields = fields
