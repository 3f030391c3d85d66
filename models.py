"""
Data models for SplitBill
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional


SPLIT_METHODS = ("even", "shares", "percent", "exact")
BILL_STATUSES = ("draft", "active", "closed")
ALLOCATION_MODES = ("proportional", "even")

PERSON_COLORS = [
    "#6366f1",
    "#d97706",
    "#dc2626",
    "#22c55e",
    "#f59e0b",
    "#8b5cf6",
    "#06b6d4",
    "#ef4444",
    "#10b981",
    "#f97316",
]


@dataclass
class Person:
    """Participant on a bill"""
    id: str
    name: str
    color: str = PERSON_COLORS[0]


@dataclass
class Item:
    """Line item and who shares it"""
    id: str
    name: str
    price: str  # decimal string, parsed only when computing
    quantity: int = 1
    split_with: List[str] = field(default_factory=list)  # person ids
    method: str = "even"
    # shares / percent / exact amount per person id, depending on method
    custom_splits: Optional[Dict[str, float]] = None


@dataclass
class Bill:
    """Complete bill snapshot"""
    id: str
    title: str = "New Bill"
    status: str = "draft"
    tax: str = ""
    tip: str = ""
    discount: str = ""
    tax_tip_allocation: str = "proportional"
    people: List[Person] = field(default_factory=list)
    items: List[Item] = field(default_factory=list)
    notes: str = ""


@dataclass
class PersonTotal:
    """What one person owes, in dollars"""
    person_id: str
    subtotal: float = 0.0
    tax: float = 0.0
    tip: float = 0.0
    discount: float = 0.0
    total: float = 0.0


@dataclass
class ItemBreakdown:
    item_id: str
    item_name: str
    item_price: float
    splits: Dict[str, float]


@dataclass
class BillSummary:
    subtotal: float
    tax: float
    tip: float
    discount: float
    total: float
    person_totals: List[PersonTotal]
