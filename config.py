"""
Configuration, logging setup and bill snapshot conversion for SplitBill
"""
from __future__ import annotations
import json
import logging
import os
from typing import Any, Dict, Optional

from models import ALLOCATION_MODES, Bill, Item, Person
from utils import app_dir, new_id
import bill_ops

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class BillFormatError(ValueError):
    """Snapshot data that cannot be turned into a Bill"""


def setup_logging(level: Optional[str] = None) -> None:
    """Configure logging; level from argument, $SPLITBILL_LOG_LEVEL, or WARNING"""
    name = (level or os.environ.get("SPLITBILL_LOG_LEVEL") or "WARNING").upper()
    logging.basicConfig(level=getattr(logging, name, logging.WARNING), format=LOG_FORMAT)


def load_settings(path: str) -> Dict[str, Any]:
    """Load settings dict from JSON file"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return {}
    except (json.JSONDecodeError, UnicodeDecodeError) as ex:
        logger.warning("Ignoring unreadable settings file %s: %s", path, ex)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring settings file %s: expected a JSON object", path)
        return {}
    return data


def get_default_bill() -> Bill:
    """Create a new bill with the title, allocation mode and people from settings.json"""
    settings = load_settings(os.path.join(app_dir(), "settings.json"))

    mode = settings.get("tax_tip_allocation", "proportional")
    if mode not in ALLOCATION_MODES:
        logger.warning("Unknown tax_tip_allocation %r in settings, using proportional", mode)
        mode = "proportional"

    bill = bill_ops.new_bill(str(settings.get("title") or "New Bill"), mode)
    for name in settings.get("people", []):
        bill = bill_ops.add_person(bill, str(name))
    return bill


def _money_str(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def migrate_bill_schema(data: Dict[str, Any]) -> Dict[str, Any]:
    """Fill in fields older snapshots don't have"""
    migrated = dict(data)
    if not migrated.get("status"):
        migrated["status"] = "draft"
    if not migrated.get("notes"):
        migrated["notes"] = ""
    for key in ("tax", "tip", "discount"):
        migrated[key] = _money_str(migrated.get(key))
    migrated["items"] = [
        {**item, "quantity": item.get("quantity") or 1, "price": _money_str(item.get("price"))}
        for item in migrated.get("items") or []
    ]
    return migrated


def bill_to_dict(bill: Bill) -> dict:
    """Convert Bill object to the camelCase snapshot the UI uses"""
    return {
        "id": bill.id,
        "title": bill.title,
        "status": bill.status,
        "tax": bill.tax,
        "tip": bill.tip,
        "discount": bill.discount,
        "taxTipAllocation": bill.tax_tip_allocation,
        "notes": bill.notes,
        "people": [{"id": p.id, "name": p.name, "color": p.color} for p in bill.people],
        "items": [
            {
                "id": i.id,
                "name": i.name,
                "price": i.price,
                "quantity": i.quantity,
                "splitWith": list(i.split_with),
                "method": i.method,
                **({"customSplits": dict(i.custom_splits)} if i.custom_splits is not None else {}),
            }
            for i in bill.items
        ],
    }


def dict_to_bill(d: dict) -> Bill:
    """Convert snapshot dict (possibly from an older version) to Bill object"""
    if not isinstance(d, dict):
        raise BillFormatError(f"Expected a bill object, got {type(d).__name__}")
    try:
        d = migrate_bill_schema(d)
        people = [
            Person(id=str(p["id"]), name=str(p.get("name", "")), color=p.get("color") or bill_ops.next_color([]))
            for p in d.get("people") or []
        ]
        items = [
            Item(
                id=str(i["id"]),
                name=str(i.get("name", "")),
                price=i["price"],
                quantity=bill_ops.clamp_quantity(i["quantity"]),
                split_with=[str(pid) for pid in i.get("splitWith") or []],
                method=i.get("method") or "even",
                custom_splits=dict(i["customSplits"]) if i.get("customSplits") is not None else None,
            )
            for i in d["items"]
        ]
    except (AttributeError, KeyError, TypeError, ValueError) as ex:
        raise BillFormatError(f"Malformed bill snapshot: {ex}") from ex

    return Bill(
        id=str(d.get("id") or new_id()),
        title=str(d.get("title", "New Bill")),
        status=d["status"],
        tax=d["tax"],
        tip=d["tip"],
        discount=d["discount"],
        tax_tip_allocation=d.get("taxTipAllocation") or "proportional",
        people=people,
        items=items,
        notes=d["notes"],
    )
