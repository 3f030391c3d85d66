"""
Utility functions for SplitBill
"""
from __future__ import annotations
import os
import re
import sys
import uuid
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Union

Number = Union[int, float, Decimal]

FLOAT_MAX = Decimal(sys.float_info.max)

_NUMERIC_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def numeric_prefix(text: str) -> str:
    """Return the leading numeric part of a string, or '' if there is none"""
    m = _NUMERIC_PREFIX.match(text or "")
    return m.group(1) if m else ""


def parse_decimal(x: Union[str, Number, None]) -> Decimal:
    """
    Parse a money value the way a browser parseFloat would: only the leading
    numeric prefix counts, anything unparseable is zero.
    """
    if x is None:
        return Decimal(0)
    if isinstance(x, Decimal):
        d = x
    elif isinstance(x, (int, float)):
        d = Decimal(str(x))
    else:
        prefix = numeric_prefix(str(x))
        if not prefix:
            return Decimal(0)
        try:
            d = Decimal(prefix)
        except InvalidOperation:
            return Decimal(0)
    # past float range parseFloat gives Infinity, which counts as junk
    if not d.is_finite() or abs(d) > FLOAT_MAX:
        return Decimal(0)
    return d


def parse_amount(x: Union[str, Number, None]) -> float:
    """Convert string to float safely, returning 0.0 on junk input"""
    return float(parse_decimal(x))


def round_half_up(value: Decimal) -> int:
    """Round to the nearest integer, halves away from zero"""
    with localcontext() as ctx:
        # quantize needs every digit of the integer part
        ctx.prec = max(ctx.prec, value.adjusted() + 2)
        return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def to_cents(x: Union[str, Number, None]) -> int:
    """Money value to integer cents"""
    return round_half_up(parse_decimal(x) * 100)


def from_cents(cents: int) -> float:
    """Integer cents back to a dollar amount"""
    return float(Decimal(cents) / 100)


def new_id() -> str:
    return str(uuid.uuid4())


def app_dir() -> str:
    """
    Get application data directory: $SPLITBILL_HOME, or ~/.splitbill
    Creates directory if it doesn't exist.
    """
    path = os.environ.get("SPLITBILL_HOME") or os.path.join(os.path.expanduser("~"), ".splitbill")
    os.makedirs(path, exist_ok=True)
    return path
