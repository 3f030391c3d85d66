import itertools

import pytest

from models import Bill, Item, Person

_ids = itertools.count(1)


def make_person(id=None, name="Test Person", color="#6366f1"):
    return Person(id=id or f"person-{next(_ids)}", name=name, color=color)


def make_item(id=None, name="Test Item", price="10.00", split_with=None,
              method="even", custom_splits=None, quantity=1):
    return Item(
        id=id or f"item-{next(_ids)}",
        name=name,
        price=price,
        quantity=quantity,
        split_with=list(split_with or []),
        method=method,
        custom_splits=custom_splits,
    )


def make_bill(people=None, items=None, tax="", tip="", discount="",
              tax_tip_allocation="proportional", **kwargs):
    return Bill(
        id=kwargs.pop("id", f"bill-{next(_ids)}"),
        title=kwargs.pop("title", "Test Bill"),
        status=kwargs.pop("status", "active"),
        tax=tax,
        tip=tip,
        discount=discount,
        tax_tip_allocation=tax_tip_allocation,
        people=list(people or []),
        items=list(items or []),
        **kwargs,
    )


@pytest.fixture
def trio():
    """Alice, Bob and Charlie, in that roster order."""
    return [
        make_person("1", "Alice"),
        make_person("2", "Bob", "#d97706"),
        make_person("3", "Charlie", "#dc2626"),
    ]


@pytest.fixture
def restaurant_bill(trio):
    """Pizza shared by Alice and Bob, drinks for Alice only."""
    alice, bob, _ = trio
    return make_bill(
        title="Restaurant Bill",
        people=[alice, bob],
        items=[
            make_item("pizza", "Pizza", "20.00", [alice.id, bob.id]),
            make_item("drinks", "Drinks", "8.00", [alice.id]),
        ],
        tax="2.50",
        tip="5.00",
    )
