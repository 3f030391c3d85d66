"""
Editing operations on bill snapshots.

Every function takes a Bill and returns a new Bill; the input is left
untouched, so callers can keep old snapshots around (history, sharing)
without copying.
"""
from __future__ import annotations
import logging
import random
from dataclasses import replace
from typing import Dict, List, Optional

from models import (
    ALLOCATION_MODES,
    BILL_STATUSES,
    PERSON_COLORS,
    SPLIT_METHODS,
    Bill,
    Item,
    Person,
)
from utils import new_id

logger = logging.getLogger(__name__)

MAX_QUANTITY = 999


class BillError(ValueError):
    """Invalid edit: unknown id or unsupported value"""


def _check_choice(value: str, choices, what: str) -> str:
    if value not in choices:
        raise BillError(f"Unknown {what} {value!r}; expected one of {', '.join(choices)}")
    return value


def clamp_quantity(quantity) -> int:
    """Quantity as an int from 1 to MAX_QUANTITY; junk becomes 1"""
    try:
        q = int(quantity)
    except (OverflowError, TypeError, ValueError):
        q = 1
    return max(1, min(MAX_QUANTITY, q))


def _find_item(bill: Bill, item_id: str) -> Item:
    for item in bill.items:
        if item.id == item_id:
            return item
    raise BillError(f"No item with id {item_id!r}")


def _replace_item(bill: Bill, new_item: Item) -> Bill:
    return replace(bill, items=[new_item if i.id == new_item.id else i for i in bill.items])


def _known_ids(bill: Bill, person_ids) -> List[str]:
    """Keep ids of people on the bill, in roster order"""
    wanted = set(person_ids or [])
    return [p.id for p in bill.people if p.id in wanted]


def next_color(people: List[Person]) -> str:
    """First palette color nobody uses yet, else a random one"""
    used = {p.color for p in people}
    for color in PERSON_COLORS:
        if color not in used:
            return color
    return "#" + "".join(random.choice("0123456789ABCDEF") for _ in range(6))


# ---------- Bill ----------
def new_bill(title: str = "New Bill", tax_tip_allocation: str = "proportional") -> Bill:
    return Bill(
        id=new_id(),
        title=title,
        tax_tip_allocation=_check_choice(tax_tip_allocation, ALLOCATION_MODES, "allocation mode"),
    )


def set_title(bill: Bill, title: str) -> Bill:
    return replace(bill, title=title)


def set_notes(bill: Bill, notes: str) -> Bill:
    return replace(bill, notes=notes)


def set_status(bill: Bill, status: str) -> Bill:
    return replace(bill, status=_check_choice(status, BILL_STATUSES, "status"))


def set_tax(bill: Bill, tax: str) -> Bill:
    return replace(bill, tax=str(tax))


def set_tip(bill: Bill, tip: str) -> Bill:
    return replace(bill, tip=str(tip))


def set_discount(bill: Bill, discount: str) -> Bill:
    return replace(bill, discount=str(discount))


def set_tax_tip_allocation(bill: Bill, mode: str) -> Bill:
    return replace(bill, tax_tip_allocation=_check_choice(mode, ALLOCATION_MODES, "allocation mode"))


# ---------- People ----------
def add_person(bill: Bill, name: str, color: Optional[str] = None) -> Bill:
    """Append a person to the roster; the new person is bill.people[-1]"""
    person = Person(id=new_id(), name=name, color=color or next_color(bill.people))
    return replace(bill, people=bill.people + [person])


def update_person(bill: Bill, person: Person) -> Bill:
    if not any(p.id == person.id for p in bill.people):
        raise BillError(f"No person with id {person.id!r}")
    return replace(bill, people=[person if p.id == person.id else p for p in bill.people])


def remove_person(bill: Bill, person_id: str) -> Bill:
    """Remove a person and every reference to them from the items"""
    if not any(p.id == person_id for p in bill.people):
        raise BillError(f"No person with id {person_id!r}")

    items = []
    for item in bill.items:
        custom = item.custom_splits
        if custom is not None and person_id in custom:
            custom = {k: v for k, v in custom.items() if k != person_id}
        items.append(replace(
            item,
            split_with=[pid for pid in item.split_with if pid != person_id],
            custom_splits=custom,
        ))

    logger.debug("removed person %s from bill %s", person_id, bill.id)
    return replace(bill, people=[p for p in bill.people if p.id != person_id], items=items)


# ---------- Items ----------
def add_item(
    bill: Bill,
    name: str,
    price: str,
    split_with: Optional[List[str]] = None,
    method: str = "even",
    custom_splits: Optional[Dict[str, float]] = None,
    quantity: int = 1,
) -> Bill:
    """Append an item; split_with defaults to everybody on the bill"""
    if split_with is None:
        split_with = [p.id for p in bill.people]
    item = Item(
        id=new_id(),
        name=name,
        price=str(price),
        quantity=clamp_quantity(quantity),
        split_with=_known_ids(bill, split_with),
        method=_check_choice(method, SPLIT_METHODS, "split method"),
        custom_splits=dict(custom_splits) if custom_splits is not None else None,
    )
    return replace(bill, items=bill.items + [item])


def update_item(bill: Bill, item: Item) -> Bill:
    """Swap in a changed item, dropping assignments to people not on the bill"""
    _find_item(bill, item.id)
    _check_choice(item.method, SPLIT_METHODS, "split method")
    cleaned = replace(
        item,
        price=str(item.price),
        quantity=clamp_quantity(item.quantity),
        split_with=_known_ids(bill, item.split_with),
    )
    return _replace_item(bill, cleaned)


def remove_item(bill: Bill, item_id: str) -> Bill:
    _find_item(bill, item_id)
    return replace(bill, items=[i for i in bill.items if i.id != item_id])


def duplicate_item(bill: Bill, item_id: str) -> Bill:
    """Insert a copy of an item right after it"""
    source = _find_item(bill, item_id)
    copy = replace(
        source,
        id=new_id(),
        split_with=list(source.split_with),
        custom_splits=dict(source.custom_splits) if source.custom_splits is not None else None,
    )
    items: List[Item] = []
    for item in bill.items:
        items.append(item)
        if item.id == item_id:
            items.append(copy)
    return replace(bill, items=items)


def toggle_person_on_item(bill: Bill, item_id: str, person_id: str) -> Bill:
    item = _find_item(bill, item_id)
    if person_id in item.split_with:
        split_with = [pid for pid in item.split_with if pid != person_id]
    else:
        split_with = _known_ids(bill, item.split_with + [person_id])
        if person_id not in split_with:
            raise BillError(f"No person with id {person_id!r}")
    return _replace_item(bill, replace(item, split_with=split_with))


def assign_all(bill: Bill, item_id: str) -> Bill:
    item = _find_item(bill, item_id)
    return _replace_item(bill, replace(item, split_with=[p.id for p in bill.people]))


def clear_assignments(bill: Bill, item_id: str) -> Bill:
    item = _find_item(bill, item_id)
    return _replace_item(bill, replace(item, split_with=[]))


def set_split_method(bill: Bill, item_id: str, method: str) -> Bill:
    """Change an item's split method; custom splits start over empty"""
    item = _find_item(bill, item_id)
    _check_choice(method, SPLIT_METHODS, "split method")
    custom = None if method == "even" else {}
    return _replace_item(bill, replace(item, method=method, custom_splits=custom))


def set_custom_split(bill: Bill, item_id: str, person_id: str, value: float) -> Bill:
    """Set one person's share / percent / exact amount on an item"""
    item = _find_item(bill, item_id)
    if not any(p.id == person_id for p in bill.people):
        raise BillError(f"No person with id {person_id!r}")
    custom = dict(item.custom_splits or {})
    custom[person_id] = value
    return _replace_item(bill, replace(item, custom_splits=custom))
