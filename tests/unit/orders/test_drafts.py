"""Unit tests for the draft engine.

Covers:
- Initialization defaults and fallbacks.
- Annotation passes: sold out, prerequisite lock, size ceiling,
  missing prerequisite, incompatibility (first reason wins).
- Edits the current state does not allow are ignored.
- Size annotations and refused size changes.
- Catalog refresh.
- A client-supplied previous selection is re-admitted, never trusted.
- Read-only drafts of placed orders.
- Size cap, prerequisites and incompatibilities over short edit sequences.
"""

from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import TypeAdapter

from modules.orders.constants import (
    REASON_INCOMPATIBLE,
    REASON_MAX_REACHED,
    REASON_NOT_AVAILABLE,
    REASON_REQUIRED_BY,
    REASON_REQUIRED_MISSING,
)
from modules.orders.drafts import (
    ChangeBase,
    ChangeSize,
    Draft,
    DraftEvent,
    Initialize,
    RefreshCatalog,
    Selection,
    ToggleIngredient,
    read_only_selection,
    recompute,
)

pytestmark = pytest.mark.unit


def _disabled(selection):
    return {
        name
        for name, note in selection.ingredient_annotations.items()
        if note.disabled
    }


class TestInitialize:
    def test_defaults_to_first_size_and_base(self, catalog):
        selection = Draft.start(catalog).selection
        assert selection.size == "small"
        assert selection.base == "pizza"
        assert selection.ingredients == ()
        assert not selection.read_only

    def test_explicit_size_and_base(self, catalog):
        selection = recompute(None, Initialize(size="large", base="salad"), catalog)
        assert (selection.size, selection.base) == ("large", "salad")

    def test_unknown_names_fall_back(self, catalog):
        selection = recompute(None, Initialize(size="giant", base="soup"), catalog)
        assert (selection.size, selection.base) == ("small", "pizza")

    def test_initial_annotations(self, catalog):
        selection = Draft.start(catalog).selection
        assert _disabled(selection) == {"parmesan", "tomatoes", "truffle", "tuna"}
        assert selection.annotation_for("tuna").reason == REASON_NOT_AVAILABLE
        missing = selection.annotation_for("truffle")
        assert missing.reason == REASON_REQUIRED_MISSING
        assert missing.related == "mushrooms"

    def test_every_catalog_ingredient_is_annotated(self, catalog):
        selection = Draft.start(catalog).selection
        assert set(selection.ingredient_annotations) == {
            entry.name for entry in catalog.all_ingredients()
        }

    def test_empty_catalog(self):
        from modules.menu.catalog import Catalog

        selection = Draft.start(Catalog()).selection
        assert selection.size is None
        assert selection.base is None
        assert selection.ingredient_annotations == {}


class TestToggle:
    def test_select_enables_dependent_and_disables_incompatible(self, catalog):
        selection = Draft.start(catalog).toggle("mushrooms").selection
        assert selection.ingredients == ("mushrooms",)
        assert not selection.annotation_for("truffle").disabled
        ham = selection.annotation_for("ham")
        assert ham.disabled
        assert ham.reason == REASON_INCOMPATIBLE
        assert ham.related == "mushrooms"
        assert selection.annotation_for("eggs").disabled

    def test_prerequisite_is_locked_while_dependent_selected(self, catalog):
        draft = Draft.start(catalog).toggle("mushrooms").toggle("truffle")
        lock = draft.selection.annotation_for("mushrooms")
        assert lock.disabled
        assert lock.reason == REASON_REQUIRED_BY
        assert lock.related == "truffle"

    def test_deselecting_locked_prerequisite_is_ignored(self, catalog):
        draft = Draft.start(catalog).toggle("mushrooms").toggle("truffle")
        after = draft.toggle("mushrooms", selected=False)
        assert after.selection.ingredients == ("mushrooms", "truffle")

    def test_deselecting_dependent_unlocks_prerequisite(self, catalog):
        draft = (
            Draft.start(catalog)
            .toggle("mushrooms")
            .toggle("truffle")
            .toggle("truffle", selected=False)
        )
        assert draft.selection.ingredients == ("mushrooms",)
        assert not draft.selection.annotation_for("mushrooms").disabled

    def test_disabled_ingredients_cannot_be_selected(self, catalog):
        draft = Draft.start(catalog)
        for name in ("truffle", "tuna", "pineapple"):
            assert draft.toggle(name).selection.ingredients == ()

    def test_incompatible_ingredient_cannot_be_selected(self, catalog):
        draft = Draft.start(catalog).toggle("mushrooms").toggle("ham")
        assert draft.selection.ingredients == ("mushrooms",)

    def test_ingredients_kept_in_catalog_order(self, catalog):
        draft = Draft.start(catalog).toggle("olives").toggle("anchovies", False)
        draft = draft.toggle("mozzarella")
        assert draft.selection.ingredients == ("mozzarella", "olives")

    def test_redundant_toggles_are_no_ops(self, catalog):
        draft = Draft.start(catalog).toggle("olives")
        assert draft.toggle("olives").selection == draft.selection
        assert draft.toggle("ham", selected=False).selection == draft.selection

    def test_toggle_without_previous_starts_from_defaults(self, catalog):
        selection = recompute(None, ToggleIngredient(name="olives", selected=True), catalog)
        assert selection.size == "small"
        assert selection.ingredients == ("olives",)


class TestSizeCeiling:
    def test_full_selection_disables_everything_else(self, catalog):
        draft = (
            Draft.start(catalog)
            .toggle("mushrooms")
            .toggle("truffle")
            .toggle("olives")
        )
        selection = draft.selection
        assert selection.selected_count == 3
        assert selection.annotation_for("mozzarella").reason == REASON_MAX_REACHED
        # Earlier passes keep their reason.
        assert selection.annotation_for("tuna").reason == REASON_NOT_AVAILABLE
        assert selection.annotation_for("mushrooms").reason == REASON_REQUIRED_BY
        assert not selection.annotation_for("olives").disabled

    def test_cannot_exceed_ceiling(self, catalog):
        draft = (
            Draft.start(catalog).toggle("mushrooms").toggle("truffle").toggle("olives")
        )
        assert draft.toggle("mozzarella").selection.selected_count == 3

    def test_bigger_size_lifts_ceiling(self, catalog):
        draft = (
            Draft.start(catalog)
            .toggle("mushrooms")
            .toggle("truffle")
            .toggle("olives")
            .change_size("medium")
            .toggle("mozzarella")
        )
        assert draft.selection.size == "medium"
        assert draft.selection.ingredients == (
            "mozzarella",
            "mushrooms",
            "olives",
            "truffle",
        )

    def test_smaller_size_refused_when_selection_too_big(self, catalog):
        draft = (
            Draft.start(catalog, size="medium")
            .toggle("mushrooms")
            .toggle("truffle")
            .toggle("olives")
            .toggle("mozzarella")
        )
        assert draft.change_size("small").selection.size == "medium"

        small = draft.selection.size_annotations["small"]
        assert small.disabled
        assert small.reason == "with this size you can choose only 3 ingredients (now 4)"
        assert not draft.selection.size_annotations["large"].disabled

    def test_size_annotations_all_enabled_for_small_selection(self, catalog):
        selection = Draft.start(catalog).toggle("olives").selection
        assert not any(note.disabled for note in selection.size_annotations.values())

    def test_unknown_size_change_is_ignored(self, catalog):
        draft = Draft.start(catalog).change_size("giant")
        assert draft.selection.size == "small"


class TestBase:
    def test_change_base(self, catalog):
        selection = Draft.start(catalog).apply(ChangeBase(base="salad")).selection
        assert selection.base == "salad"

    def test_unknown_base_is_ignored(self, catalog):
        selection = Draft.start(catalog).apply(ChangeBase(base="soup")).selection
        assert selection.base == "pizza"


class TestRefresh:
    def test_sold_out_selection_is_dropped_and_flagged(self, catalog, catalog_factory):
        draft = Draft.start(catalog).toggle("mushrooms")
        refreshed = draft.refresh(catalog_factory({"mushrooms": {"quantity": 0}}))
        assert refreshed.selection.ingredients == ()
        note = refreshed.selection.annotation_for("mushrooms")
        assert note.disabled
        assert note.reason == REASON_NOT_AVAILABLE

    def test_sold_out_prerequisite_drops_its_dependent(self, catalog, catalog_factory):
        draft = Draft.start(catalog).toggle("mushrooms").toggle("truffle")
        refreshed = draft.refresh(catalog_factory({"mushrooms": {"quantity": 0}}))
        assert refreshed.selection.ingredients == ()
        assert refreshed.selection.annotation_for("truffle").reason == (
            REASON_REQUIRED_MISSING
        )

    def test_restocked_ingredient_becomes_selectable(self, catalog, catalog_factory):
        draft = Draft.start(catalog)
        refreshed = draft.refresh(catalog_factory({"tuna": {"quantity": 4}}))
        assert not refreshed.selection.annotation_for("tuna").disabled

    def test_removed_ingredient_is_dropped(self, catalog, catalog_factory):
        draft = Draft.start(catalog).toggle("olives").toggle("mozzarella")
        refreshed = draft.refresh(catalog_factory(drop=("olives", "tomatoes")))
        assert refreshed.selection.ingredients == ("mozzarella",)
        assert "olives" not in refreshed.selection.ingredient_annotations

    def test_refresh_event_without_changes_is_stable(self, catalog):
        draft = Draft.start(catalog).toggle("olives")
        again = recompute(draft.selection, RefreshCatalog(), catalog)
        assert again == draft.selection


class TestUntrustedPrevious:
    def test_over_the_cap_is_trimmed(self, catalog):
        forged = Selection(
            size="small",
            base="pizza",
            ingredients=("anchovies", "eggs", "ham", "mozzarella", "olives"),
        )
        selection = recompute(forged, RefreshCatalog(), catalog)

        assert selection.ingredients == ("anchovies", "eggs", "ham")
        assert selection.annotation_for("mozzarella").reason == REASON_MAX_REACHED

    def test_incompatible_pair_keeps_first_in_menu_order(self, catalog):
        forged = Selection(
            size="medium", base="pizza", ingredients=("olives", "anchovies")
        )
        selection = recompute(forged, RefreshCatalog(), catalog)

        assert selection.ingredients == ("anchovies",)
        note = selection.annotation_for("olives")
        assert note.reason == REASON_INCOMPATIBLE
        assert note.related == "anchovies"

    def test_dependent_without_prerequisite_is_dropped(self, catalog):
        forged = Selection(size="medium", base="pizza", ingredients=("truffle",))
        selection = recompute(forged, RefreshCatalog(), catalog)
        assert selection.ingredients == ()

    def test_sold_out_and_unknown_names_are_dropped(self, catalog):
        forged = Selection(
            size="medium", base="pizza", ingredients=("tuna", "caviar", "olives")
        )
        selection = recompute(forged, RefreshCatalog(), catalog)
        assert selection.ingredients == ("olives",)

    def test_forged_state_is_cleaned_before_the_edit(self, catalog):
        forged = Selection(
            size="small",
            base="pizza",
            ingredients=("anchovies", "eggs", "ham", "mozzarella"),
        )
        event = ToggleIngredient(name="olives", selected=True)
        selection = recompute(forged, event, catalog)

        # The cap is already reached by the re-admitted names.
        assert selection.ingredients == ("anchovies", "eggs", "ham")

    def test_consistent_selection_survives_unchanged(self, catalog):
        draft = Draft.start(catalog, size="medium")
        draft = draft.toggle("mushrooms").toggle("truffle")
        again = recompute(draft.selection, RefreshCatalog(), catalog)
        assert again.ingredients == ("mushrooms", "truffle")


class TestReadOnly:
    def test_read_only_selection(self, catalog):
        selection = read_only_selection("small", "pizza", ["mushrooms", "truffle"], catalog)
        assert selection.read_only
        assert _disabled(selection) == {
            entry.name for entry in catalog.all_ingredients()
        } - {"mushrooms", "truffle"}
        assert not selection.size_annotations["small"].disabled
        assert selection.size_annotations["large"].disabled

    def test_edits_leave_read_only_selection_unchanged(self, catalog):
        selection = read_only_selection("small", "pizza", ["olives"], catalog)
        for event in (
            ToggleIngredient(name="olives", selected=False),
            ChangeSize(size="large"),
            Initialize(),
        ):
            assert recompute(selection, event, catalog) is selection


class TestPriceAndEvents:
    def test_draft_price(self, catalog):
        draft = Draft.start(catalog).toggle("mushrooms").toggle("truffle")
        assert draft.price == Decimal("8.80")

    def test_empty_draft_costs_size_price(self, catalog):
        assert Draft.start(catalog, size="large").price == Decimal("9.00")

    def test_events_parse_from_json_payload(self):
        adapter = TypeAdapter(DraftEvent)
        event = adapter.validate_python(
            {"type": "toggle_ingredient", "name": "olives", "selected": True}
        )
        assert isinstance(event, ToggleIngredient)
        assert isinstance(adapter.validate_python({"type": "refresh_catalog"}), RefreshCatalog)

    def test_selection_round_trips_through_json(self, catalog):
        from modules.orders.drafts import Selection

        selection = Draft.start(catalog).toggle("mushrooms").selection
        assert Selection.model_validate(selection.model_dump(mode="json")) == selection


class TestSmallDishScenario:
    """Size "small" holds 2; mushroom is unlimited, truffle is sold out."""

    @pytest.fixture()
    def small_menu(self):
        from modules.menu.catalog import BaseEntry, Catalog, IngredientEntry, SizeEntry

        return Catalog(
            sizes=[SizeEntry(name="small", price=Decimal("4.00"), max_ingredients=2)],
            bases=[BaseEntry(name="pizza")],
            ingredients=[
                IngredientEntry(name="basil", price=Decimal("0.20")),
                IngredientEntry(name="mushroom", price=Decimal("0.80")),
                IngredientEntry(name="onion", price=Decimal("0.30")),
                IngredientEntry(name="truffle", price=Decimal("3.00"), quantity=0),
            ],
        )

    def test_sold_out_truffle_cannot_be_selected(self, small_menu):
        selection = Draft.start(small_menu).toggle("truffle").selection
        assert selection.ingredients == ()
        assert selection.annotation_for("truffle").reason == REASON_NOT_AVAILABLE

    def test_reaching_the_cap_disables_the_rest(self, small_menu):
        selection = Draft.start(small_menu).toggle("mushroom").toggle("onion").selection
        assert selection.ingredients == ("mushroom", "onion")
        assert selection.annotation_for("basil").reason == REASON_MAX_REACHED
        assert selection.annotation_for("truffle").disabled


class TestInvariants:
    """Every short edit sequence keeps the draft within its rules."""

    EVENTS = [
        *(
            ToggleIngredient(name=name, selected=True)
            for name in ("mushrooms", "truffle", "olives", "tomatoes", "mozzarella", "ham")
        ),
        *(
            ToggleIngredient(name=name, selected=False)
            for name in ("mushrooms", "olives", "mozzarella")
        ),
        ChangeSize(size="small"),
        ChangeSize(size="medium"),
    ]

    def test_reachable_selections(self, catalog):
        from itertools import product

        for sequence in product(self.EVENTS, repeat=3):
            selection = Draft.start(catalog, size="medium").selection
            for event in sequence:
                selection = recompute(selection, event, catalog)

                size = catalog.size_of(selection.size)
                assert selection.selected_count <= size.max_ingredients

                for name in selection.ingredients:
                    entry = catalog.ingredient_of(name)
                    assert entry.requires is None or entry.requires in selection.ingredients
                    assert not entry.incompatibilities & set(selection.ingredients)
