"""Order API views.

Exposes the ``OrderService`` and ``DraftService`` via HTTP using DRF
ViewSets.  Domain exceptions are caught and translated into appropriate
HTTP status codes; the view never swallows generic exceptions.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.permissions import BasePermission, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.core.pagination import StandardResultsSetPagination
from modules.core.permissions import HasStepUpAuthentication
from modules.menu.repositories.django_repository import MenuDjangoRepository
from modules.orders.drafts import Selection
from modules.orders.dtos import CreateOrderDTO, DraftRequestDTO
from modules.orders.exceptions import (
    AvailabilityConflict,
    OrderNotFound,
    OrderRejected,
    StorageError,
)
from modules.orders.filters import OrderFilter
from modules.orders.inventory import InventoryTransactionManager
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import CreateOrderSerializer, OrderSerializer
from modules.orders.services import DraftService, OrderService


def _draft_payload(selection: Selection, price: Decimal) -> Dict[str, Any]:
    return {"selection": selection.model_dump(mode="json"), "price": str(price)}


def _not_found() -> Response:
    return Response({"detail": "Order not found."}, status=status.HTTP_404_NOT_FOUND)


class OrderViewSet(GenericViewSet):
    queryset = Order.objects.all()
    """ViewSet for Order operations.

    Uses ``OrderService`` with injected repositories (DIP).
    Does **not** extend ``ModelViewSet``; all ORM access goes through
    the service/repository layer.  Every query is scoped to the caller.
    """

    filterset_class = OrderFilter
    ordering_fields = ["created_at", "price"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        order_repository = OrderDjangoRepository()
        menu_repository = MenuDjangoRepository()
        self._service = OrderService(
            order_repository=order_repository,
            menu_repository=menu_repository,
            inventory=InventoryTransactionManager(order_repository, menu_repository),
        )

    def get_permissions(self) -> list[BasePermission]:
        if self.action == "destroy":
            return [IsAuthenticated(), HasStepUpAuthentication()]
        return super().get_permissions()

    def get_throttles(self) -> list[BaseThrottle]:
        """Per-action throttling scopes."""
        throttle_scope: str | None
        if self.action == "create":
            throttle_scope = "order_creation"
        elif self.action in {"list", "retrieve"}:
            throttle_scope = "order_listing"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    def get_queryset(self):
        return self._service.list_orders(self.request.user.id)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/

        422 when the order breaks a catalog rule, 409 when an ingredient
        sold out while the order was being stored.
        """
        create_serializer = CreateOrderSerializer(data=request.data)
        create_serializer.is_valid(raise_exception=True)

        data = create_serializer.validated_data
        dto = CreateOrderDTO(
            size=data["size"],
            base=data["base"],
            ingredients=data["ingredients"],
            price=Decimal(str(data["price"])),
        )

        try:
            order = self._service.place_order(request.user.id, dto)
        except OrderRejected as exc:
            return Response(
                {"detail": exc.reason, "code": exc.code},
                status=status.HTTP_422_UNPROCESSABLE_ENTITY,
            )
        except AvailabilityConflict as exc:
            return Response(
                {"detail": str(exc), "code": exc.code},
                status=status.HTTP_409_CONFLICT,
            )
        except StorageError as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        out = OrderSerializer(order)
        return Response(out.data, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/

        Filtering (size, base, date range, price range) is handled by
        ``OrderFilter``; ordering by ``OrderingFilter``.  Paginated.
        """
        queryset = self.filter_queryset(self.get_queryset())

        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(queryset, request)
        serializer = OrderSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        if pk is None:
            return _not_found()
        try:
            order = self._service.get_order(pk, request.user.id)
        except OrderNotFound:
            return _not_found()
        serializer = OrderSerializer(order)
        return Response(serializer.data)

    @action(detail=True, methods=["get"])
    def draft(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/draft/

        The placed order as a read-only draft.
        """
        if pk is None:
            return _not_found()
        try:
            selection, price = self._service.draft_for_order(pk, request.user.id)
        except OrderNotFound:
            return _not_found()
        return Response(_draft_payload(selection, price))

    # ------------------------------------------------------------------
    # Cancel
    # ------------------------------------------------------------------

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/orders/{pk}/

        Requires step-up authentication.  Idempotent: cancelling a missing
        or already cancelled order answers ``rows_affected: 0``.
        """
        try:
            rows = self._service.cancel_order(pk or "", request.user.id)
        except StorageError as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        return Response({"rows_affected": rows})


class DraftViewSet(GenericViewSet):
    """Stateless draft engine endpoint.

    The client sends its previous selection and one edit; the server
    answers with the recomputed selection and its price.
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = DraftService(menu_repository=MenuDjangoRepository())

    def create(self, request: Request) -> Response:
        """POST /api/v1/drafts/"""
        try:
            dto = DraftRequestDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            errors = [
                {"loc": [str(part) for part in error["loc"]], "msg": error["msg"]}
                for error in exc.errors()
            ]
            return Response(
                {"detail": "Invalid draft request.", "errors": errors},
                status=status.HTTP_400_BAD_REQUEST,
            )

        selection, price = self._service.recompute(dto)
        return Response(_draft_payload(selection, price))
