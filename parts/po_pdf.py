"""Purchase order PDF rendering with fpdf2."""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from django.conf import settings
from fpdf import FPDF
from fpdf.enums import XPos, YPos

from .formatting import format_currency, format_date, format_datetime, format_number

logger = logging.getLogger(__name__)

PRIMARY = (30, 64, 175)
MUTED = (100, 116, 139)
BORDER = (203, 213, 225)
HEADER_FILL = (241, 245, 249)

STATUS_LABELS = {
    "pending": "Pending",
    "ordered": "Ordered",
    "partially_received": "Partially received",
    "received": "Received",
    "cancelled": "Cancelled",
}

# part number, name, category, qty, notes
COLUMNS = (("Part #", 30), ("Name", 62), ("Category", 28), ("Qty", 16), ("Notes", 54))


def _field(obj: Any, name: str, default: Any = None) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


class PurchaseOrderPDF(FPDF):
    def __init__(self, font_path: Optional[str] = None):
        super().__init__(format="A4")
        self.unicode_font = False
        self.body_font = "Helvetica"
        if font_path:
            self.add_font("Body", "", font_path)
            self.add_font("Body", "B", font_path)
            self.body_font = "Body"
            self.unicode_font = True
        self.set_auto_page_break(auto=True, margin=20)
        self.generated_at = datetime.now()

    def text_for(self, value: Any) -> str:
        text = "" if value is None else str(value)
        if self.unicode_font:
            return text
        return text.replace("₪", "ILS ").encode("latin-1", "replace").decode("latin-1")

    def use_font(self, size: float, bold: bool = False, color=(15, 23, 42)) -> None:
        self.set_font(self.body_font, "B" if bold else "", size)
        self.set_text_color(*color)

    def line_cell(self, w: float, h: float, text: Any, **kwargs) -> None:
        self.cell(w, h, self.text_for(text), new_x=XPos.LMARGIN, new_y=YPos.NEXT, **kwargs)

    def footer(self) -> None:
        self.set_y(-15)
        self.use_font(8, color=MUTED)
        self.cell(
            0,
            8,
            self.text_for(
                f"Page {self.page_no()}/{{nb}} - generated {format_datetime(self.generated_at)}"
            ),
            align="C",
        )


def _header(pdf: PurchaseOrderPDF, po_data, company) -> None:
    pdf.use_font(16, bold=True, color=PRIMARY)
    pdf.line_cell(0, 9, _field(company, "name", ""))
    pdf.use_font(9, color=MUTED)
    for key in ("address", "city", "phone", "email"):
        value = _field(company, key)
        if value:
            pdf.line_cell(0, 5, value)
    top = pdf.t_margin
    pdf.set_xy(pdf.w - pdf.r_margin - 70, top)
    pdf.use_font(18, bold=True, color=PRIMARY)
    pdf.cell(70, 9, "PURCHASE ORDER", align="R", new_x=XPos.LEFT, new_y=YPos.NEXT)
    pdf.use_font(11, bold=True)
    pdf.cell(70, 7, pdf.text_for(_field(po_data, "po_number", "")), align="R")
    pdf.set_y(max(pdf.get_y(), top + 30))
    pdf.set_draw_color(*PRIMARY)
    pdf.line(pdf.l_margin, pdf.get_y(), pdf.w - pdf.r_margin, pdf.get_y())
    pdf.ln(4)


def _boxes(pdf: PurchaseOrderPDF, po_data, supplier) -> None:
    width = (pdf.w - pdf.l_margin - pdf.r_margin - 6) / 2
    y = pdf.get_y()
    supplier_lines = [
        _field(supplier, "company_name") or _field(supplier, "name"),
        _field(supplier, "primary_contact_name"),
        _field(supplier, "primary_contact_phone"),
        _field(supplier, "email"),
        _field(supplier, "address"),
    ]
    status = _field(po_data, "status", "")
    info_lines = [
        f"Order date: {format_date(_field(po_data, 'order_date'))}",
        f"Expected delivery: {format_date(_field(po_data, 'expected_delivery_date')) or '-'}",
        f"Status: {STATUS_LABELS.get(status, status)}",
    ]
    for x, title, lines in (
        (pdf.l_margin, "Supplier", [line for line in supplier_lines if line]),
        (pdf.l_margin + width + 6, "Order details", info_lines),
    ):
        pdf.set_xy(x, y)
        pdf.set_fill_color(*HEADER_FILL)
        pdf.use_font(10, bold=True, color=PRIMARY)
        pdf.cell(width, 7, title, fill=True, new_x=XPos.LEFT, new_y=YPos.NEXT)
        pdf.use_font(9)
        for line in lines:
            pdf.cell(width, 5, pdf.text_for(line), new_x=XPos.LEFT, new_y=YPos.NEXT)
    pdf.set_y(y + 7 + 5 * max(len(supplier_lines), len(info_lines)) + 4)


def _items_table(pdf: PurchaseOrderPDF, items) -> Tuple[int, int, Decimal, bool]:
    pdf.set_draw_color(*BORDER)
    pdf.set_fill_color(*HEADER_FILL)
    pdf.use_font(9, bold=True)
    for title, width in COLUMNS:
        pdf.cell(width, 7, title, border=1, fill=True)
    pdf.ln()
    pdf.use_font(9)
    count = quantity = 0
    total = Decimal("0")
    priced = False
    for item in items:
        qty = int(_field(item, "quantity_ordered", _field(item, "quantity", 0)) or 0)
        price = _field(item, "unit_price")
        if price is not None:
            priced = True
            total += Decimal(str(price)) * qty
        values = (
            _field(item, "part_number", ""),
            _field(item, "part_name", _field(item, "name", "")),
            _field(item, "category", ""),
            format_number(qty),
            _field(item, "notes", "") or "",
        )
        for (_, width), value in zip(COLUMNS, values):
            text = pdf.text_for(value)
            while text and pdf.get_string_width(text) > width - 2:
                text = text[:-1]
            pdf.cell(width, 7, text, border=1)
        pdf.ln()
        count += 1
        quantity += qty
    return count, quantity, total, priced


def generate_purchase_order_pdf(
    po_data: Any,
    company: Any,
    supplier: Any,
    items: Iterable[Any],
    project: Optional[Dict[str, Any]] = None,
) -> Tuple[bytes, str]:
    """Render a purchase order and return ``(pdf_bytes, filename)``.

    ``po_data``, ``company`` and ``supplier`` may be dicts or objects with
    matching attributes. Raises ``ValueError`` if any of them is missing or
    there are no items.
    """
    items = list(items or [])
    if not po_data or not _field(po_data, "po_number"):
        raise ValueError("Purchase order data is required.")
    if not company:
        raise ValueError("Company details are required.")
    if not supplier:
        raise ValueError("Supplier details are required.")
    if not items:
        raise ValueError("At least one item is required.")

    pdf = PurchaseOrderPDF(getattr(settings, "PDF_FONT_PATH", None) or None)
    pdf.add_page()
    _header(pdf, po_data, company)
    _boxes(pdf, po_data, supplier)

    if project:
        pdf.use_font(10, bold=True, color=PRIMARY)
        pdf.line_cell(0, 6, f"Project: {_field(project, 'name', '')}")
        pdf.use_font(9)
        if _field(project, "address"):
            pdf.line_cell(0, 5, _field(project, "address"))
        pdf.ln(2)

    count, quantity, total, priced = _items_table(pdf, items)

    pdf.ln(3)
    pdf.use_font(10, bold=True)
    pdf.line_cell(0, 6, f"Lines: {count}    Total quantity: {format_number(quantity)}")
    if priced:
        pdf.line_cell(0, 6, f"Total amount: {format_currency(total)}")

    notes = _field(po_data, "notes")
    if notes:
        pdf.ln(3)
        pdf.set_fill_color(*HEADER_FILL)
        pdf.use_font(10, bold=True, color=PRIMARY)
        pdf.line_cell(0, 7, "Notes", fill=True)
        pdf.use_font(9)
        pdf.multi_cell(0, 5, pdf.text_for(notes), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    pdf.ln(14)
    pdf.set_draw_color(*MUTED)
    half = (pdf.w - pdf.l_margin - pdf.r_margin) / 2
    y = pdf.get_y()
    pdf.line(pdf.l_margin, y, pdf.l_margin + half - 10, y)
    pdf.line(pdf.l_margin + half + 10, y, pdf.w - pdf.r_margin, y)
    pdf.use_font(9, color=MUTED)
    pdf.cell(half, 6, "Ordered by")
    pdf.set_x(pdf.l_margin + half + 10)
    pdf.cell(half - 10, 6, "Supplier confirmation")

    po_number = _field(po_data, "po_number")
    logger.debug("Rendered PDF for %s with %s lines", po_number, count)
    return bytes(pdf.output()), f"purchase-order-{po_number}.pdf"
