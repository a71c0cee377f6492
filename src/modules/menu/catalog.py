"""Immutable catalog snapshot.

A ``Catalog`` is what the draft engine, the price calculator and the order
validator read.  It is built wholesale from the menu store (see
``MenuDjangoRepository.load_catalog``) or directly from entries in tests,
and is never mutated afterwards; a refresh means building a new one.

Entries are Pydantic v2 models with ``frozen=True`` so they can be shared
freely between requests and dumped straight into API responses.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, FrozenSet, Iterable, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator

from modules.menu.exceptions import CatalogIntegrityError


class SizeEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    price: Decimal
    max_ingredients: int

    @field_validator("max_ingredients")
    @classmethod
    def max_ingredients_must_not_be_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("max_ingredients cannot be negative.")
        return v


class BaseEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str


class IngredientEntry(BaseModel):
    """Catalog view of an ingredient.

    ``quantity`` is ``None`` for unlimited ingredients.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    price: Decimal
    quantity: Optional[int] = None
    requires: Optional[str] = None
    incompatibilities: FrozenSet[str] = frozenset()

    @property
    def is_unlimited(self) -> bool:
        return self.quantity is None

    @property
    def is_available(self) -> bool:
        return self.quantity is None or self.quantity > 0


class Catalog:
    """Read-only, name-indexed snapshot of sizes, bases and ingredients.

    Iteration order of ``all_*`` follows the order the entries were given in,
    which is the menu store's display order.

    Raises:
        CatalogIntegrityError: duplicate names, a ``requires`` or
            incompatibility pointing at an unknown ingredient, a
            self-reference, or an incompatibility listed on one side only.
    """

    def __init__(
        self,
        sizes: Iterable[SizeEntry] = (),
        bases: Iterable[BaseEntry] = (),
        ingredients: Iterable[IngredientEntry] = (),
    ) -> None:
        self._sizes = _index(sizes, "size")
        self._bases = _index(bases, "base")
        self._ingredients = _index(ingredients, "ingredient")
        self._dependents: Dict[str, Tuple[str, ...]] = {}
        self._check_integrity()

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def size_of(self, name: Optional[str]) -> Optional[SizeEntry]:
        return self._sizes.get(name) if name is not None else None

    def base_of(self, name: Optional[str]) -> Optional[BaseEntry]:
        return self._bases.get(name) if name is not None else None

    def ingredient_of(self, name: Optional[str]) -> Optional[IngredientEntry]:
        return self._ingredients.get(name) if name is not None else None

    def all_sizes(self) -> Tuple[SizeEntry, ...]:
        return tuple(self._sizes.values())

    def all_bases(self) -> Tuple[BaseEntry, ...]:
        return tuple(self._bases.values())

    def all_ingredients(self) -> Tuple[IngredientEntry, ...]:
        return tuple(self._ingredients.values())

    def dependents_of(self, name: str) -> Tuple[str, ...]:
        """Names of the ingredients whose ``requires`` is *name*."""
        return self._dependents.get(name, ())

    def __len__(self) -> int:
        return len(self._ingredients)

    def __repr__(self) -> str:
        return (
            f"<Catalog sizes={len(self._sizes)} bases={len(self._bases)} "
            f"ingredients={len(self._ingredients)}>"
        )

    # ------------------------------------------------------------------
    # Integrity
    # ------------------------------------------------------------------

    def _check_integrity(self) -> None:
        dependents: Dict[str, list] = {}
        for ingredient in self._ingredients.values():
            name = ingredient.name
            if ingredient.requires is not None:
                if ingredient.requires == name:
                    raise CatalogIntegrityError(f"{name} requires itself.")
                if ingredient.requires not in self._ingredients:
                    raise CatalogIntegrityError(
                        f"{name} requires unknown ingredient {ingredient.requires}."
                    )
                dependents.setdefault(ingredient.requires, []).append(name)
            for other in ingredient.incompatibilities:
                if other == name:
                    raise CatalogIntegrityError(f"{name} is incompatible with itself.")
                peer = self._ingredients.get(other)
                if peer is None:
                    raise CatalogIntegrityError(
                        f"{name} is incompatible with unknown ingredient {other}."
                    )
                if name not in peer.incompatibilities:
                    raise CatalogIntegrityError(
                        f"Incompatibility {name} -> {other} is not symmetric."
                    )
        self._dependents = {key: tuple(value) for key, value in dependents.items()}


def _index(entries: Iterable, kind: str) -> Dict[str, object]:
    index: Dict[str, object] = {}
    for entry in entries:
        if entry.name in index:
            raise CatalogIntegrityError(f"Duplicate {kind} name: {entry.name}.")
        index[entry.name] = entry
    return index
