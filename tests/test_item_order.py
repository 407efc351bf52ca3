import pytest

from shoplist.common.errors import InvalidInputError
from shoplist.common.schemas.cart import CompletedView, Direction, check_invariants
from shoplist.domain.cart.item_order import (
    CUSTOM_ITEM_PREFIX,
    add_item,
    change_category,
    move_item,
    new_custom_item,
    set_checked,
    set_completed_view,
    set_edit_mode,
    set_quantity,
)
from shoplist.domain.cart.reconciler import build_initial_state

from conftest import FIXED_NOW, make_cart, make_item


@pytest.fixture
def state():
    cart = make_cart(
        make_item("A", "Bananas"),
        make_item("B", "Baby Spinach"),
        make_item("C", "Avocado"),
        make_item("M", "Whole Milk"),
    )
    return build_initial_state(cart, now=FIXED_NOW)


class TestAddItem:
    def test_appends_to_category(self, state):
        item = make_item("N", "Napkins", quantity=2)
        new_state = add_item(state, "household", item)

        assert new_state.item_order["household"] == ["N"]
        assert new_state.item_category["N"] == "household"
        assert new_state.checked_items["N"] is False
        assert new_state.updated_quantities["N"] == 2
        assert new_state.cart.item_ids()[-1] == "N"
        assert check_invariants(new_state) == []
        assert "N" not in state.item_category

    def test_explicit_quantity_overrides_item(self, state):
        new_state = add_item(state, "household", make_item("N", "Napkins"), quantity=4)
        assert new_state.updated_quantities["N"] == 4
        assert new_state.cart.items[-1].quantity == 4

    @pytest.mark.parametrize("quantity", [0, -1, 1.5, "2", True])
    def test_bad_quantity_is_noop(self, state, quantity):
        assert add_item(state, "produce", make_item("N", "Napkins"), quantity=quantity) is state

    def test_duplicate_asin_is_noop(self, state):
        assert add_item(state, "produce", make_item("A", "More Bananas")) is state

    def test_unknown_category_falls_back(self, state):
        new_state = add_item(state, "deleted", make_item("N", "Napkins"))
        assert new_state.item_category["N"] == "uncategorized"
        assert new_state.item_order["uncategorized"][-1] == "N"


def test_new_custom_item():
    item = new_custom_item("  Birthday candles ", quantity=3, price="2.50")
    assert item.asin.startswith(CUSTOM_ITEM_PREFIX)
    assert item.title == "Birthday candles"
    assert item.quantity == 3
    assert item.user_added is True
    assert new_custom_item("x").asin != new_custom_item("x").asin

    with pytest.raises(InvalidInputError):
        new_custom_item("   ")


class TestMoveItem:
    def test_move_down_then_up(self, state):
        assert state.item_order["produce"] == ["A", "B", "C"]
        moved = move_item(state, "A", "produce", Direction.DOWN)
        assert moved.item_order["produce"] == ["B", "A", "C"]
        moved = move_item(moved, "A", "produce", Direction.UP)
        assert moved.item_order["produce"] == ["A", "B", "C"]

    def test_first_item_up_is_noop(self, state):
        assert move_item(state, "A", "produce", Direction.UP) is state

    def test_last_item_down_is_noop(self, state):
        assert move_item(state, "C", "produce", "down") is state

    def test_item_not_in_category_is_noop(self, state):
        assert move_item(state, "M", "produce", Direction.UP) is state


class TestChangeCategory:
    def test_moves_to_end_of_target(self, state):
        new_state = change_category(state, "A", "produce", "dairy")
        assert new_state.item_order["produce"] == ["B", "C"]
        assert new_state.item_order["dairy"] == ["M", "A"]
        assert new_state.item_category["A"] == "dairy"
        assert check_invariants(new_state) == []

    def test_same_category_is_noop(self, state):
        assert change_category(state, "A", "produce", "produce") is state

    def test_unknown_target_falls_back(self, state):
        new_state = change_category(state, "A", "produce", "gone")
        assert new_state.item_category["A"] == "uncategorized"
        assert check_invariants(new_state) == []

    def test_wrong_source_still_consistent(self, state):
        new_state = change_category(state, "A", "frozen", "dairy")
        assert "A" not in new_state.item_order["produce"]
        assert check_invariants(new_state) == []

    def test_target_is_current_category_is_noop(self, state):
        # caller's source is stale; the item already lives in the target
        assert change_category(state, "A", "dairy", "produce") is state
        assert state.item_order["produce"] == ["A", "B", "C"]

    def test_unknown_item_is_noop(self, state):
        assert change_category(state, "ZZZ", "produce", "dairy") is state


class TestCheckedAndQuantity:
    def test_set_checked(self, state):
        checked = set_checked(state, "A", True)
        assert checked.is_checked("A")
        assert not state.is_checked("A")
        assert not set_checked(checked, "A", False).is_checked("A")

    def test_set_checked_unknown_is_noop(self, state):
        assert set_checked(state, "ZZZ", True) is state

    def test_set_quantity(self, state):
        updated = set_quantity(state, "A", 0)
        assert updated.updated_quantities["A"] == 0
        assert state.updated_quantities["A"] == 1

    @pytest.mark.parametrize("quantity", [-1, 2.5, "3", None])
    def test_set_quantity_rejects_bad_values(self, state, quantity):
        with pytest.raises(InvalidInputError):
            set_quantity(state, "A", quantity)


def test_view_settings(state):
    assert set_edit_mode(state, True).edit_mode is True
    assert set_completed_view(state, "hide").completed_view == CompletedView.HIDE
    assert state.edit_mode is False
    assert state.completed_view == CompletedView.ALL


def test_edits_bump_last_updated(state):
    assert set_checked(state, "A", True).last_updated > FIXED_NOW
