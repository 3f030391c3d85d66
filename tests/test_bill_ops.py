from dataclasses import replace

import pytest

import bill_ops
from bill_ops import BillError
from computations import compute_item_splits, compute_person_totals
from models import PERSON_COLORS


@pytest.fixture
def bill():
    b = bill_ops.new_bill("Dinner")
    for name in ("Alice", "Bob", "Charlie"):
        b = bill_ops.add_person(b, name)
    return b


def ids(bill):
    return [p.id for p in bill.people]


def test_new_bill_defaults():
    b = bill_ops.new_bill()
    assert b.title == "New Bill"
    assert b.status == "draft"
    assert b.tax_tip_allocation == "proportional"
    assert b.people == [] and b.items == []
    assert b.id != bill_ops.new_bill().id


def test_add_person_picks_unused_palette_colors(bill):
    assert [p.color for p in bill.people] == PERSON_COLORS[:3]
    assert len(set(ids(bill))) == 3


def test_add_person_with_explicit_color(bill):
    b = bill_ops.add_person(bill, "Dana", color="#123456")
    assert b.people[-1].name == "Dana"
    assert b.people[-1].color == "#123456"


def test_next_color_falls_back_to_random_hex():
    b = bill_ops.new_bill()
    for i in range(len(PERSON_COLORS)):
        b = bill_ops.add_person(b, f"P{i}")
    color = bill_ops.next_color(b.people)
    assert color.startswith("#") and len(color) == 7


def test_edits_do_not_mutate_input(bill):
    before = [p.id for p in bill.people]
    bill_ops.add_person(bill, "Dana")
    bill_ops.add_item(bill, "Pizza", "20.00")
    bill_ops.set_tax(bill, "3.00")
    assert [p.id for p in bill.people] == before
    assert bill.items == []
    assert bill.tax == ""


def test_add_item_defaults_to_everyone(bill):
    b = bill_ops.add_item(bill, "Pizza", "20.00")
    item = b.items[0]
    assert item.split_with == ids(bill)
    assert item.method == "even"
    assert item.quantity == 1
    assert item.custom_splits is None


def test_add_item_drops_unknown_and_duplicate_people(bill):
    alice = bill.people[0].id
    b = bill_ops.add_item(bill, "Soda", "2.00", split_with=[alice, "ghost", alice])
    assert b.items[0].split_with == [alice]


def test_add_item_clamps_quantity(bill):
    assert bill_ops.add_item(bill, "A", "1", quantity=0).items[0].quantity == 1
    assert bill_ops.add_item(bill, "A", "1", quantity=5000).items[0].quantity == 999


def test_add_item_rejects_unknown_method(bill):
    with pytest.raises(BillError):
        bill_ops.add_item(bill, "A", "1", method="random")


def test_remove_person_cascades_to_items(bill):
    alice, bob, charlie = ids(bill)
    b = bill_ops.add_item(bill, "Pizza", "30.00")
    b = bill_ops.add_item(b, "Wine", "20.00", split_with=[bob, charlie], method="shares",
                          custom_splits={bob: 1, charlie: 3})

    b = bill_ops.remove_person(b, charlie)

    assert ids(b) == [alice, bob]
    for item in b.items:
        assert charlie not in item.split_with
        assert charlie not in (item.custom_splits or {})
        assert charlie not in compute_item_splits(item, b.people)
    assert compute_item_splits(b.items[0], b.people) == {alice: 15.0, bob: 15.0}
    assert compute_item_splits(b.items[1], b.people) == {bob: 20.0}
    assert sum(t.subtotal for t in compute_person_totals(b)) == 50.0


def test_remove_unknown_person(bill):
    with pytest.raises(BillError):
        bill_ops.remove_person(bill, "ghost")


def test_update_person(bill):
    person = bill.people[1]
    renamed = replace(person, name="Robert")
    b = bill_ops.update_person(bill, renamed)
    assert b.people[1].name == "Robert"
    assert bill.people[1].name == "Bob"


def test_update_item_cleans_split_with(bill):
    b = bill_ops.add_item(bill, "Pizza", "20.00")
    item = replace(b.items[0], split_with=[bill.people[0].id, "ghost"], quantity=-2)
    b2 = bill_ops.update_item(b, item)
    assert b2.items[0].split_with == [bill.people[0].id]
    assert b2.items[0].quantity == 1


def test_update_unknown_item(bill):
    b = bill_ops.add_item(bill, "Pizza", "20.00")
    item = replace(b.items[0], id="ghost")
    with pytest.raises(BillError):
        bill_ops.update_item(b, item)


def test_remove_and_duplicate_item(bill):
    b = bill_ops.add_item(bill, "Pizza", "20.00")
    b = bill_ops.add_item(b, "Wine", "12.00")
    pizza, wine = b.items

    dup = bill_ops.duplicate_item(b, pizza.id)
    assert [i.name for i in dup.items] == ["Pizza", "Pizza", "Wine"]
    assert dup.items[1].id != pizza.id
    assert dup.items[1].split_with == pizza.split_with
    assert dup.items[1].split_with is not pizza.split_with

    removed = bill_ops.remove_item(b, pizza.id)
    assert [i.name for i in removed.items] == ["Wine"]
    with pytest.raises(BillError):
        bill_ops.remove_item(removed, pizza.id)


def test_toggle_assign_all_and_clear(bill):
    alice, bob, charlie = ids(bill)
    b = bill_ops.add_item(bill, "Pizza", "20.00", split_with=[])
    item_id = b.items[0].id

    b = bill_ops.toggle_person_on_item(b, item_id, bob)
    b = bill_ops.toggle_person_on_item(b, item_id, alice)
    assert b.items[0].split_with == [alice, bob]

    b = bill_ops.toggle_person_on_item(b, item_id, bob)
    assert b.items[0].split_with == [alice]

    b = bill_ops.assign_all(b, item_id)
    assert b.items[0].split_with == [alice, bob, charlie]

    b = bill_ops.clear_assignments(b, item_id)
    assert b.items[0].split_with == []

    with pytest.raises(BillError):
        bill_ops.toggle_person_on_item(b, item_id, "ghost")


def test_split_method_and_custom_splits(bill):
    alice, bob, _ = ids(bill)
    b = bill_ops.add_item(bill, "Cake", "12.00", split_with=[alice, bob])
    item_id = b.items[0].id

    b = bill_ops.set_split_method(b, item_id, "shares")
    assert b.items[0].custom_splits == {}
    b = bill_ops.set_custom_split(b, item_id, alice, 1)
    b = bill_ops.set_custom_split(b, item_id, bob, 2)
    assert compute_item_splits(b.items[0], b.people) == {alice: 4.0, bob: 8.0}

    b = bill_ops.set_split_method(b, item_id, "even")
    assert b.items[0].custom_splits is None

    with pytest.raises(BillError):
        bill_ops.set_split_method(b, item_id, "weird")
    with pytest.raises(BillError):
        bill_ops.set_custom_split(b, item_id, "ghost", 1)


def test_bill_level_setters(bill):
    b = bill_ops.set_title(bill, "Lunch")
    b = bill_ops.set_status(b, "closed")
    b = bill_ops.set_tip(b, "4.00")
    b = bill_ops.set_discount(b, "1.00")
    b = bill_ops.set_notes(b, "paid by card")
    b = bill_ops.set_tax_tip_allocation(b, "even")
    assert (b.title, b.status, b.tip, b.discount, b.notes, b.tax_tip_allocation) == (
        "Lunch", "closed", "4.00", "1.00", "paid by card", "even")

    with pytest.raises(BillError):
        bill_ops.set_status(b, "archived")
    with pytest.raises(BillError):
        bill_ops.set_tax_tip_allocation(b, "specific")
