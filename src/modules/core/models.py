"""Base abstract model shared by the menu and orders modules.

Provides ``BaseModel``: UUIDv7 primary key + ``created_at`` timestamp.

Catalog rows and orders are never edited through the ORM's ``save()`` once
stock starts moving (stock changes go through conditional ``UPDATE``
statements), so there is no ``updated_at`` bookkeeping here.
"""

from __future__ import annotations

import uuid6
from django.db import models


class BaseModel(models.Model):
    """Abstract base with UUIDv7 PK and creation timestamp."""

    id = models.UUIDField(
        primary_key=True,
        default=uuid6.uuid7,
        editable=False,
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True
