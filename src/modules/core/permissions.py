"""Permission classes shared by the API modules."""

from __future__ import annotations

from django.conf import settings
from rest_framework.permissions import BasePermission


class HasStepUpAuthentication(BasePermission):
    """Allow only sessions that re-authenticated with a second factor.

    The access token must carry ``settings.STEP_UP_CLAIM`` set to
    ``settings.STEP_UP_METHOD`` (a list of methods, as in ``amr``, is also
    accepted).  Tokens without claims never pass.
    """

    message = "This action requires a step-up authenticated session."

    def has_permission(self, request, view) -> bool:
        claims = request.auth
        if claims is None or not hasattr(claims, "get"):
            return False
        value = claims.get(settings.STEP_UP_CLAIM)
        if isinstance(value, (list, tuple)):
            return settings.STEP_UP_METHOD in value
        return value == settings.STEP_UP_METHOD
