"""Order URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.orders.views import DraftViewSet, OrderViewSet

router = DefaultRouter(trailing_slash=True)
router.register("orders", OrderViewSet, basename="order")
router.register("drafts", DraftViewSet, basename="draft")

urlpatterns = router.urls
