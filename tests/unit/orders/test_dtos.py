"""Unit tests for order DTOs (shape checks only)."""

from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import ValidationError

from modules.orders.drafts import Initialize, ToggleIngredient
from modules.orders.dtos import CreateOrderDTO, DraftRequestDTO

pytestmark = pytest.mark.unit


class TestCreateOrderDTO:
    def test_ingredients_default_to_empty(self):
        dto = CreateOrderDTO(size="small", base="pizza", price=Decimal("5.00"))
        assert dto.ingredients == []

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            CreateOrderDTO(size="small", base="pizza", price=Decimal("-0.01"))

    @pytest.mark.parametrize("field", ["size", "base"])
    def test_blank_names_rejected(self, field):
        data = {"size": "small", "base": "pizza", "price": Decimal("5.00")}
        data[field] = "   "
        with pytest.raises(ValidationError):
            CreateOrderDTO(**data)

    def test_is_frozen(self):
        dto = CreateOrderDTO(size="small", base="pizza", price=Decimal("5.00"))
        with pytest.raises(ValidationError):
            dto.size = "large"


class TestDraftRequestDTO:
    def test_first_request_has_no_previous(self):
        dto = DraftRequestDTO.model_validate({"event": {"type": "initialize"}})
        assert dto.previous is None
        assert isinstance(dto.event, Initialize)

    def test_event_is_dispatched_on_type(self):
        dto = DraftRequestDTO.model_validate(
            {
                "previous": {"size": "small", "base": "pizza", "ingredients": []},
                "event": {"type": "toggle_ingredient", "name": "olives", "selected": True},
            }
        )
        assert isinstance(dto.event, ToggleIngredient)
        assert dto.previous.size == "small"

    def test_unknown_event_type_rejected(self):
        with pytest.raises(ValidationError):
            DraftRequestDTO.model_validate({"event": {"type": "explode"}})
