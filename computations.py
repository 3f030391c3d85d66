"""
Business logic and computations for SplitBill

All distribution happens in integer cents. Whenever an amount is divided
between people, everyone but the last person (in roster order) gets a
computed portion and the last person gets whatever is left, so the parts
always add back up to the whole.
"""
from __future__ import annotations
import logging
from decimal import Decimal
from typing import Callable, Dict, List

from models import Bill, BillSummary, Item, ItemBreakdown, Person, PersonTotal
from utils import from_cents, parse_amount, parse_decimal, round_half_up, to_cents

logger = logging.getLogger(__name__)

CHARGES = ("tax", "tip", "discount")


def selected_people(item: Item, people: List[Person]) -> List[Person]:
    """People sharing an item, in roster order"""
    ids = set(item.split_with)
    return [p for p in people if p.id in ids]


def split_with_remainder(
    total_cents: int,
    person_ids: List[str],
    portion: Callable[[str], int]
) -> Dict[str, int]:
    """Give every person but the last portion(id) cents, the last one gets the rest"""
    out: Dict[str, int] = {}
    assigned = 0
    for pid in person_ids[:-1]:
        cents = portion(pid)
        out[pid] = cents
        assigned += cents
    out[person_ids[-1]] = total_cents - assigned
    return out


def allocate_evenly(amount_cents: int, person_ids: List[str]) -> Dict[str, int]:
    """Floor-divide an amount between people"""
    base = amount_cents // len(person_ids)
    return split_with_remainder(amount_cents, person_ids, lambda pid: base)


def allocate_proportionally(
    amount_cents: int,
    weights: Dict[str, int],
    total_weight: int
) -> Dict[str, int]:
    """Divide an amount by weight (person subtotals), rounding half up"""
    return split_with_remainder(
        amount_cents,
        list(weights),
        lambda pid: round_half_up(Decimal(amount_cents * weights[pid]) / total_weight),
    )


def _custom_value(item: Item, person_id: str) -> Decimal:
    return parse_decimal((item.custom_splits or {}).get(person_id, 0))


def item_split_cents(item: Item, people: List[Person]) -> Dict[str, int]:
    """
    Split one item between its people, in cents.
    Returns an empty dict when nobody is selected, when a custom method has
    no custom splits at all, or when shares add up to zero.
    """
    ids = [p.id for p in selected_people(item, people)]
    if not ids:
        return {}

    price_cents = to_cents(item.price)

    if item.method == "even":
        return allocate_evenly(price_cents, ids)

    if item.custom_splits is None:
        return {}

    if item.method == "shares":
        shares = {pid: _custom_value(item, pid) for pid in ids}
        total_shares = sum(shares.values())
        if total_shares == 0:
            return {}
        return split_with_remainder(
            price_cents, ids,
            lambda pid: round_half_up(price_cents * shares[pid] / total_shares),
        )

    if item.method == "percent":
        return split_with_remainder(
            price_cents, ids,
            lambda pid: round_half_up(price_cents * _custom_value(item, pid) / 100),
        )

    if item.method == "exact":
        return {pid: to_cents(_custom_value(item, pid)) for pid in ids}

    logger.debug("item %s has unknown split method %r", item.id, item.method)
    return {}


def compute_item_splits(item: Item, people: List[Person]) -> Dict[str, float]:
    """
    How much each selected person owes for one item.
    Exact amounts are passed through as given, the other methods always add
    up to the item price.
    """
    if item.method == "exact":
        if item.custom_splits is None:
            return {}
        return {
            p.id: parse_amount(item.custom_splits.get(p.id, 0))
            for p in selected_people(item, people)
        }
    return {pid: from_cents(c) for pid, c in item_split_cents(item, people).items()}


def _person_cents(bill: Bill) -> List[Dict[str, int]]:
    """Per-person subtotal, tax, tip, discount and total in cents, roster order"""
    rows = [
        {"subtotal": 0, "tax": 0, "tip": 0, "discount": 0, "total": 0}
        for _ in bill.people
    ]
    index = {p.id: i for i, p in enumerate(bill.people)}

    for item in bill.items:
        for pid, cents in item_split_cents(item, bill.people).items():
            i = index.get(pid)
            if i is None:
                logger.debug("item %s references unknown person %s", item.id, pid)
                continue
            rows[i]["subtotal"] += cents

    bill_subtotal = sum(r["subtotal"] for r in rows)

    if bill_subtotal != 0:
        ids = [p.id for p in bill.people]
        subtotals = {pid: rows[index[pid]]["subtotal"] for pid in ids}
        proportional = bill.tax_tip_allocation == "proportional"
        for charge in CHARGES:
            amount = to_cents(getattr(bill, charge))
            if proportional:
                alloc = allocate_proportionally(amount, subtotals, bill_subtotal)
            else:
                alloc = allocate_evenly(amount, ids)
            for pid, cents in alloc.items():
                rows[index[pid]][charge] = cents

    for r in rows:
        r["total"] = r["subtotal"] + r["tax"] + r["tip"] - r["discount"]
    return rows


def _person_total(person: Person, row: Dict[str, int]) -> PersonTotal:
    return PersonTotal(
        person_id=person.id,
        subtotal=from_cents(row["subtotal"]),
        tax=from_cents(row["tax"]),
        tip=from_cents(row["tip"]),
        discount=from_cents(row["discount"]),
        total=from_cents(row["total"]),
    )


def compute_person_totals(bill: Bill) -> List[PersonTotal]:
    """
    Compute what each person owes.
    Tax, tip and discount are split by subtotal ("proportional") or equally
    ("even"); nothing is allocated while the bill subtotal is zero.
    """
    return [_person_total(p, r) for p, r in zip(bill.people, _person_cents(bill))]


def get_bill_summary(bill: Bill) -> BillSummary:
    """Bill-level totals summed over people, plus the per-person totals"""
    rows = _person_cents(bill)
    sums = {k: sum(r[k] for r in rows) for k in ("subtotal",) + CHARGES}
    total = sums["subtotal"] + sums["tax"] + sums["tip"] - sums["discount"]
    return BillSummary(
        subtotal=from_cents(sums["subtotal"]),
        tax=from_cents(sums["tax"]),
        tip=from_cents(sums["tip"]),
        discount=from_cents(sums["discount"]),
        total=from_cents(total),
        person_totals=[_person_total(p, r) for p, r in zip(bill.people, rows)],
    )


def get_item_breakdowns(bill: Bill) -> List[ItemBreakdown]:
    """Per-item splits, in item order"""
    return [
        ItemBreakdown(
            item_id=item.id,
            item_name=item.name,
            item_price=parse_amount(item.price),
            splits=compute_item_splits(item, bill.people),
        )
        for item in bill.items
    ]
