"""Menu domain exceptions."""

from __future__ import annotations


class CatalogIntegrityError(Exception):
    """Catalog data violates a structural rule (e.g. asymmetric incompatibility).

    This is a data bug in the menu store, not something the engines tolerate.
    """
