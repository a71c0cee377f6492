"""Draft engine.

Keeps a customer's in-progress dish consistent with the catalog while it is
being edited.  The whole engine is one pure function::

    recompute(previous, event, catalog) -> Selection

Every edit produces a brand new ``Selection`` whose annotations are rebuilt
from scratch in a fixed pass order.  A pass may only explain an ingredient
that no earlier pass has explained (first writer wins):

1. re-admit the previous selection name by name through the toggle rules
   (refused names are dropped), then apply the edit (edits the resulting
   state does not allow are ignored);
2. sold-out ingredients -> ``not available``;
3. a selected prerequisite of a selected ingredient is locked;
4. selection at the size ceiling -> every unselected ingredient is disabled
   and the remaining passes are skipped;
5. prerequisite not selected -> ``required ingredient missing``;
6. incompatible with a selected ingredient.

The engine never raises on user edits.  It is an advisory mirror of
``modules.orders.validators``; the server re-checks everything on submit.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Annotated, Dict, Iterable, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from modules.menu.catalog import Catalog
from modules.orders.constants import (
    REASON_INCOMPATIBLE,
    REASON_MAX_REACHED,
    REASON_NOT_AVAILABLE,
    REASON_REQUIRED_BY,
    REASON_REQUIRED_MISSING,
    REASON_SIZE_TOO_SMALL,
)
from modules.orders.pricing import selection_price

# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------


class Annotation(BaseModel):
    """Why an option cannot be toggled right now.

    ``related`` names the other ingredient involved, when there is one.
    """

    model_config = ConfigDict(frozen=True)

    disabled: bool = False
    reason: str = ""
    related: Optional[str] = None


ENABLED = Annotation()
LOCKED = Annotation(disabled=True)


class Selection(BaseModel):
    """Immutable snapshot of a draft.

    ``ingredients`` is kept in catalog order so equal drafts compare equal
    regardless of the order the toggles happened in.
    """

    model_config = ConfigDict(frozen=True)

    size: Optional[str] = None
    base: Optional[str] = None
    ingredients: Tuple[str, ...] = ()
    ingredient_annotations: Dict[str, Annotation] = Field(default_factory=dict)
    size_annotations: Dict[str, Annotation] = Field(default_factory=dict)
    read_only: bool = False

    @property
    def selected_count(self) -> int:
        return len(self.ingredients)

    def is_selected(self, name: str) -> bool:
        return name in self.ingredients

    def annotation_for(self, name: str) -> Annotation:
        return self.ingredient_annotations.get(name, ENABLED)


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


class Initialize(BaseModel):
    """Start a fresh draft; unknown or missing names fall back to the first entry."""

    model_config = ConfigDict(frozen=True)

    type: Literal["initialize"] = "initialize"
    size: Optional[str] = None
    base: Optional[str] = None


class ChangeSize(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["change_size"] = "change_size"
    size: str


class ChangeBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["change_base"] = "change_base"
    base: str


class ToggleIngredient(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["toggle_ingredient"] = "toggle_ingredient"
    name: str
    selected: bool


class RefreshCatalog(BaseModel):
    """Re-annotate against a newer catalog snapshot (stock changed elsewhere)."""

    model_config = ConfigDict(frozen=True)

    type: Literal["refresh_catalog"] = "refresh_catalog"


DraftEvent = Annotated[
    Union[Initialize, ChangeSize, ChangeBase, ToggleIngredient, RefreshCatalog],
    Field(discriminator="type"),
]


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


def recompute(
    previous: Optional[Selection], event: DraftEvent, catalog: Catalog
) -> Selection:
    """Return the draft that results from applying *event* to *previous*.

    Read-only selections (historical orders) are returned unchanged.
    """
    if previous is not None and previous.read_only:
        return previous
    size, base, selected = _apply_edit(previous, event, catalog)
    return Selection(
        size=size,
        base=base,
        ingredients=selected,
        ingredient_annotations=annotate_ingredients(size, selected, catalog),
        size_annotations=annotate_sizes(size, len(selected), catalog),
    )


def annotate_ingredients(
    size: Optional[str], selected: Iterable[str], catalog: Catalog
) -> Dict[str, Annotation]:
    """Passes 2-6 for every catalog ingredient."""
    chosen = frozenset(selected)
    ingredients = catalog.all_ingredients()
    notes: Dict[str, Annotation] = {entry.name: ENABLED for entry in ingredients}

    def mark(name: str, reason: str, related: Optional[str] = None) -> None:
        if notes[name].reason:
            return
        notes[name] = Annotation(disabled=True, reason=reason, related=related)

    for entry in ingredients:
        if entry.quantity == 0:
            mark(entry.name, REASON_NOT_AVAILABLE)

    for entry in ingredients:
        if entry.name in chosen and entry.requires in chosen:
            mark(entry.requires, REASON_REQUIRED_BY, entry.name)

    if len(chosen) >= _max_ingredients(size, catalog):
        for entry in ingredients:
            if entry.name not in chosen:
                mark(entry.name, REASON_MAX_REACHED)
        return notes

    for entry in ingredients:
        if entry.requires is not None and entry.requires not in chosen:
            mark(entry.name, REASON_REQUIRED_MISSING, entry.requires)

    for entry in ingredients:
        for other in ingredients:
            if other.name in entry.incompatibilities and other.name in chosen:
                mark(entry.name, REASON_INCOMPATIBLE, other.name)
                break

    return notes


def annotate_sizes(
    size: Optional[str], count: int, catalog: Catalog
) -> Dict[str, Annotation]:
    """Disable every other size that could not hold *count* ingredients."""
    notes: Dict[str, Annotation] = {}
    for entry in catalog.all_sizes():
        if entry.name != size and count > entry.max_ingredients:
            notes[entry.name] = Annotation(
                disabled=True,
                reason=REASON_SIZE_TOO_SMALL.format(
                    max_ingredients=entry.max_ingredients, count=count
                ),
            )
        else:
            notes[entry.name] = ENABLED
    return notes


def read_only_selection(
    size: str, base: str, ingredients: Iterable[str], catalog: Catalog
) -> Selection:
    """Present a past order: its choices enabled, everything else disabled.

    No pass runs; a placed order is a fact, not something to re-validate.
    """
    chosen = tuple(ingredients)
    ingredient_notes = {
        entry.name: ENABLED if entry.name in chosen else LOCKED
        for entry in catalog.all_ingredients()
    }
    for name in chosen:
        ingredient_notes.setdefault(name, ENABLED)
    size_notes = {
        entry.name: ENABLED if entry.name == size else LOCKED
        for entry in catalog.all_sizes()
    }
    return Selection(
        size=size,
        base=base,
        ingredients=chosen,
        ingredient_annotations=ingredient_notes,
        size_annotations=size_notes,
        read_only=True,
    )


@dataclass(frozen=True)
class Draft:
    """A ``Selection`` together with the catalog it was computed against."""

    selection: Selection
    catalog: Catalog

    @classmethod
    def start(
        cls, catalog: Catalog, size: Optional[str] = None, base: Optional[str] = None
    ) -> Draft:
        return cls(recompute(None, Initialize(size=size, base=base), catalog), catalog)

    def apply(self, event: DraftEvent) -> Draft:
        return Draft(recompute(self.selection, event, self.catalog), self.catalog)

    def toggle(self, name: str, selected: bool = True) -> Draft:
        return self.apply(ToggleIngredient(name=name, selected=selected))

    def change_size(self, size: str) -> Draft:
        return self.apply(ChangeSize(size=size))

    def refresh(self, catalog: Catalog) -> Draft:
        return Draft(recompute(self.selection, RefreshCatalog(), catalog), catalog)

    @property
    def price(self) -> Decimal:
        return selection_price(self.selection, self.catalog)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _apply_edit(
    previous: Optional[Selection], event: DraftEvent, catalog: Catalog
) -> Tuple[Optional[str], Optional[str], Tuple[str, ...]]:
    """Pass 1: the size, base and selected names after *event*."""
    if previous is None or isinstance(event, Initialize):
        wanted_size = event.size if isinstance(event, Initialize) else None
        wanted_base = event.base if isinstance(event, Initialize) else None
        size = _known_size(wanted_size, catalog)
        base = _known_base(wanted_base, catalog)
        selected: Tuple[str, ...] = ()
        if isinstance(event, Initialize):
            return size, base, selected
    else:
        size = _known_size(previous.size, catalog)
        base = _known_base(previous.base, catalog)
        selected = _readmit(size, previous.ingredients, catalog)

    if isinstance(event, ChangeSize):
        target = catalog.size_of(event.size)
        if target is not None and len(selected) <= target.max_ingredients:
            size = target.name
    elif isinstance(event, ChangeBase):
        if catalog.base_of(event.base) is not None:
            base = event.base
    elif isinstance(event, ToggleIngredient):
        name = event.name
        if event.selected and name not in selected:
            if _admissible(name, size, selected, catalog):
                selected = _in_catalog_order(selected + (name,), catalog)
        elif not event.selected and name in selected:
            if not any(dep in selected for dep in catalog.dependents_of(name)):
                selected = tuple(n for n in selected if n != name)
    return size, base, selected


def _admissible(
    name: str, size: Optional[str], selected: Tuple[str, ...], catalog: Catalog
) -> bool:
    return not annotate_ingredients(size, selected, catalog).get(name, LOCKED).disabled


def _readmit(
    size: Optional[str], names: Iterable[str], catalog: Catalog
) -> Tuple[str, ...]:
    """Rebuild a selection by toggling *names* on one at a time.

    Names the toggle rules refuse are dropped.  Pending names are retried
    until a round admits nothing, so a prerequisite listed after its
    dependent in catalog order is still picked up.
    """
    pending = list(_in_catalog_order(names, catalog))
    selected: Tuple[str, ...] = ()
    admitted = True
    while pending and admitted:
        admitted = False
        for name in list(pending):
            if _admissible(name, size, selected, catalog):
                selected = _in_catalog_order(selected + (name,), catalog)
                pending.remove(name)
                admitted = True
    return selected


def _known_size(name: Optional[str], catalog: Catalog) -> Optional[str]:
    if catalog.size_of(name) is not None:
        return name
    sizes = catalog.all_sizes()
    return sizes[0].name if sizes else None


def _known_base(name: Optional[str], catalog: Catalog) -> Optional[str]:
    if catalog.base_of(name) is not None:
        return name
    bases = catalog.all_bases()
    return bases[0].name if bases else None


def _max_ingredients(size: Optional[str], catalog: Catalog) -> int:
    entry = catalog.size_of(size)
    return entry.max_ingredients if entry is not None else 0


def _in_catalog_order(names: Iterable[str], catalog: Catalog) -> Tuple[str, ...]:
    wanted = set(names)
    return tuple(e.name for e in catalog.all_ingredients() if e.name in wanted)
