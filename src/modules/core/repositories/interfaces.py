"""Generic repository interface.

``IRepository[T]`` is the base contract that aggregate repositories extend.
Service code depends on it, never on the Django ORM directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional, TypeVar

from django.db import models

T = TypeVar("T", bound=models.Model)


class IRepository(ABC, Generic[T]):
    """Read and delete operations shared by every aggregate repository.

    ``T`` is the aggregate root model (e.g. ``Order``).  Creation is left to
    the concrete contracts because every aggregate takes different input.
    """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Retrieve an entity by primary key; ``None`` if missing or malformed."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> "models.QuerySet[T]":
        """Return a lazily evaluated queryset, optionally filtered."""

    @abstractmethod
    def delete(self, entity: T) -> None:
        """Remove *entity* permanently."""
