"""
Excel export functionality for SplitBill
"""
from __future__ import annotations
import logging

from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils import get_column_letter

from models import Bill
from computations import get_bill_summary, get_item_breakdowns
from utils import from_cents, to_cents

logger = logging.getLogger(__name__)

MONEY_FORMAT = "0.00"


def _style_header(ws, row=1):
    """Apply header styling to worksheet row"""
    header_font = Font(bold=True, color="FFFFFF")
    fill = PatternFill("solid", fgColor="4F81BD")
    align = Alignment(horizontal="center", vertical="center")
    thin = Side(style="thin", color="A0A0A0")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    for cell in ws[row]:
        cell.font = header_font
        cell.fill = fill
        cell.alignment = align
        cell.border = border


def _style_totals(ws, row):
    for cell in ws[row]:
        cell.font = Font(bold=True)
        cell.fill = PatternFill("solid", fgColor="D9E1F2")


def _autosize_columns(ws, min_width=10, max_width=45):
    """Auto-size columns based on content"""
    for col in range(1, ws.max_column + 1):
        letter = get_column_letter(col)
        max_len = 0
        for cell in ws[letter]:
            if cell.value is not None:
                max_len = max(max_len, len(str(cell.value)))
        ws.column_dimensions[letter].width = max(min_width, min(max_width, max_len + 2))


def _money_columns(ws, first_col, last_col):
    for r in range(2, ws.max_row + 1):
        for c in range(first_col, last_col + 1):
            ws.cell(r, c).number_format = MONEY_FORMAT


def export_excel(bill: Bill, filepath: str) -> None:
    """
    Export bill to Excel file with two sheets:
    - Items: each item's price and what each person owes for it
    - Summary: subtotal, tax, tip, discount and total per person
    Values come straight from the computations, already exact to the cent.
    """
    wb = Workbook()
    # remove default sheet
    wb.remove(wb.active)

    people = bill.people
    summary = get_bill_summary(bill)
    breakdowns = get_item_breakdowns(bill)
    items_by_id = {i.id: i for i in bill.items}
    # all item prices, assigned or not
    prices_total = from_cents(sum(to_cents(i.price) for i in bill.items))

    # Items sheet
    ws = wb.create_sheet("Items")
    ws.append(["Item", "Qty", "Price", "Method"] + [p.name for p in people])
    _style_header(ws, 1)
    ws.freeze_panes = "B2"

    for b in breakdowns:
        item = items_by_id[b.item_id]
        ws.append(
            [b.item_name, item.quantity, b.item_price, item.method]
            + [b.splits.get(p.id, 0.0) for p in people]
        )

    ws.append(["TOTAL", "", prices_total, ""] + [t.subtotal for t in summary.person_totals])
    _style_totals(ws, ws.max_row)
    _money_columns(ws, 3, 3)
    _money_columns(ws, 5, 4 + len(people))
    _autosize_columns(ws)

    # Summary sheet
    ws = wb.create_sheet("Summary")
    ws.append(["Person", "Subtotal", "Tax", "Tip", "Discount", "Total"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    names = {p.id: p.name for p in people}
    for t in summary.person_totals:
        ws.append([names[t.person_id], t.subtotal, t.tax, t.tip, t.discount, t.total])
    ws.append(["TOTAL", summary.subtotal, summary.tax, summary.tip, summary.discount, summary.total])
    _style_totals(ws, ws.max_row)
    _money_columns(ws, 2, 6)
    _autosize_columns(ws)

    wb.save(filepath)
    logger.info("Exported bill %s (%d items, %d people) to %s", bill.id, len(bill.items), len(people), filepath)
