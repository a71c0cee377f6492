"""Order domain exceptions.

Raised by the Service Layer and the inventory transaction manager when an
order cannot be admitted.  The API layer (Views) catches these and
translates them into HTTP responses.
"""

from __future__ import annotations

from modules.orders.constants import MSG_NOT_AVAILABLE, RejectionCode


class OrderRejected(Exception):
    """The submitted order breaks a catalog rule; nothing was changed.

    Client-correctable: the ``reason`` is safe to echo back.
    """

    def __init__(self, code: str, reason: str) -> None:
        super().__init__(reason)
        self.code = code
        self.reason = reason


class AvailabilityConflict(Exception):
    """An ingredient ran out between validation and commit.

    The whole order was rolled back; no stock moved.
    """

    code = RejectionCode.AVAILABILITY_CONFLICT

    def __init__(self, ingredient: str) -> None:
        super().__init__(MSG_NOT_AVAILABLE.format(name=ingredient))
        self.ingredient = ingredient


class OrderNotFound(Exception):
    """The order does not exist or belongs to another user."""


class StorageError(Exception):
    """Unexpected persistence failure; the transaction was rolled back.

    The message is opaque on purpose and can be shown to the caller.
    """
