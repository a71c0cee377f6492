"""Menu API views.

Public, read-only catalog listing.  The catalog is small, so responses are
not paginated.
"""

from __future__ import annotations

from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.menu.models import Base, Ingredient, Size
from modules.menu.repositories.django_repository import MenuDjangoRepository
from modules.menu.serializers import (
    BaseSerializer,
    IngredientSerializer,
    SizeSerializer,
)
from modules.menu.services import MenuService


class _MenuViewSet(GenericViewSet):
    permission_classes = [AllowAny]
    pagination_class = None

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = MenuService(repository=MenuDjangoRepository())


class SizeViewSet(_MenuViewSet):
    queryset = Size.objects.all()
    serializer_class = SizeSerializer

    def list(self, request: Request) -> Response:
        """GET /api/v1/sizes/"""
        serializer = SizeSerializer(self._service.list_sizes(), many=True)
        return Response(serializer.data)


class BaseViewSet(_MenuViewSet):
    queryset = Base.objects.all()
    serializer_class = BaseSerializer

    def list(self, request: Request) -> Response:
        """GET /api/v1/bases/"""
        serializer = BaseSerializer(self._service.list_bases(), many=True)
        return Response(serializer.data)


class IngredientViewSet(_MenuViewSet):
    queryset = Ingredient.objects.all()
    serializer_class = IngredientSerializer

    def list(self, request: Request) -> Response:
        """GET /api/v1/ingredients/"""
        ingredients, incompatibilities = (
            self._service.ingredients_with_incompatibilities()
        )
        serializer = IngredientSerializer(
            ingredients,
            many=True,
            context={"incompatibilities": incompatibilities},
        )
        return Response(serializer.data)
