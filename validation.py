"""
Input validation for SplitBill.

These checks are advisory: they tell the user what looks wrong but the
computations run on whatever is entered.
"""
from __future__ import annotations
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Union

from models import Item
from utils import parse_amount, parse_decimal

MAX_AMOUNT = 999999.99
MAX_SHARES = 1000
PERSON_NAME_MAX_LENGTH = 50
ITEM_NAME_MAX_LENGTH = 100
BILL_TITLE_MAX_LENGTH = 200
TOLERANCE = Decimal("0.01")

_PERSON_NAME_CHARS = re.compile(r"[a-zA-Z0-9\s\-'.]+")


@dataclass
class ValidationResult:
    is_valid: bool
    value: Union[str, int, float]
    error: Optional[str] = None


def validate_currency_input(text: str) -> ValidationResult:
    """
    Sanitize a money field: digits and one decimal point, at most two
    decimals, no more than 999999.99.
    """
    if not text or not text.strip():
        return ValidationResult(True, "")

    sanitized = re.sub(r"[^0-9.]", "", text)
    parts = sanitized.split(".")
    if len(parts) > 2:
        sanitized = parts[0] + "." + "".join(parts[1:])
    if len(parts) == 2 and len(parts[1]) > 2:
        sanitized = parts[0] + "." + parts[1][:2]

    if not sanitized or sanitized == ".":
        return ValidationResult(True, "")

    if float(sanitized) > MAX_AMOUNT:
        return ValidationResult(False, sanitized, "Amount cannot exceed $999,999.99")
    return ValidationResult(True, sanitized)


def validate_percentage(text: str) -> ValidationResult:
    result = validate_currency_input(text)
    if not result.is_valid or result.value in ("", "0"):
        return result
    if float(result.value) > 100:
        return ValidationResult(False, result.value, "Percentage cannot exceed 100%")
    return result


def validate_shares(text: str) -> ValidationResult:
    """Share counts are whole numbers from 1 to 1000"""
    if not text or not text.strip():
        return ValidationResult(True, "")
    sanitized = re.sub(r"[^0-9]", "", text)
    if not sanitized:
        return ValidationResult(True, "")
    n = int(sanitized)
    if n <= 0:
        return ValidationResult(False, sanitized, "Shares must be greater than 0")
    if n > MAX_SHARES:
        return ValidationResult(False, sanitized, "Shares cannot exceed 1000")
    return ValidationResult(True, sanitized)


def _validate_text(text: str, max_length: int, label: str) -> ValidationResult:
    trimmed = text.strip()
    if not trimmed:
        return ValidationResult(False, text, f"{label} cannot be empty")
    if len(trimmed) > max_length:
        return ValidationResult(False, text, f"{label} cannot exceed {max_length} characters")
    return ValidationResult(True, trimmed)


def validate_person_name(name: str) -> ValidationResult:
    result = _validate_text(name, PERSON_NAME_MAX_LENGTH, "Name")
    if result.is_valid and not _PERSON_NAME_CHARS.fullmatch(result.value):
        return ValidationResult(False, name, "Name contains invalid characters")
    return result


def validate_item_name(name: str) -> ValidationResult:
    return _validate_text(name, ITEM_NAME_MAX_LENGTH, "Item name")


def validate_bill_title(title: str) -> ValidationResult:
    return _validate_text(title, BILL_TITLE_MAX_LENGTH, "Bill title")


def item_warnings(item: Item) -> List[str]:
    """Things about an item the user probably wants to fix"""
    warnings = []
    if not item.name or not item.name.strip():
        warnings.append("Item name is missing")
    if parse_amount(item.price) <= 0:
        warnings.append("Price is required")
    if not item.split_with:
        warnings.append("No one assigned")

    if item.custom_splits and item.method in ("percent", "exact"):
        total = sum(parse_decimal(v) for v in item.custom_splits.values())
        if item.method == "percent" and abs(total - 100) > TOLERANCE:
            warnings.append("% must add to 100")
        if item.method == "exact" and abs(total - parse_decimal(item.price)) > TOLERANCE:
            warnings.append("Exact amounts must equal total")
    return warnings
