"""Menu URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.menu.views import BaseViewSet, IngredientViewSet, SizeViewSet

router = DefaultRouter(trailing_slash=True)
router.register("sizes", SizeViewSet, basename="size")
router.register("bases", BaseViewSet, basename="base")
router.register("ingredients", IngredientViewSet, basename="ingredient")

urlpatterns = router.urls
