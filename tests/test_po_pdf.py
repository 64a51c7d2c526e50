from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from parts.po_pdf import PurchaseOrderPDF, generate_purchase_order_pdf

COMPANY = {"name": "LiftDesk Elevators Ltd.", "city": "Haifa", "phone": "04-5550000"}
SUPPLIER = SimpleNamespace(
    company_name="Schindler Parts",
    primary_contact_name="Noa",
    primary_contact_phone=None,
    email="orders@schindler.test",
    address=None,
)
PO = {
    "po_number": "PO-2024-0007",
    "order_date": date(2024, 3, 1),
    "expected_delivery_date": None,
    "status": "pending",
    "notes": "Deliver to the north gate.",
}
ITEMS = [
    {
        "part_number": "MTR-01",
        "part_name": "Door motor",
        "category": "Motor",
        "quantity_ordered": 2,
        "unit_price": Decimal("450.00"),
        "notes": "Ticket #12",
    },
    {
        "part_number": "CBL-9",
        "part_name": "Traction cable with a name far too long for its column",
        "category": "Cables",
        "quantity_ordered": 30,
        "unit_price": None,
    },
]


def test_generate_pdf_returns_bytes_and_filename():
    content, filename = generate_purchase_order_pdf(
        PO, COMPANY, SUPPLIER, ITEMS, project={"name": "Ticket #12 Lift stuck"}
    )
    assert content.startswith(b"%PDF")
    assert filename == "purchase-order-PO-2024-0007.pdf"


def test_generate_pdf_accepts_objects():
    po = SimpleNamespace(**PO)
    items = [SimpleNamespace(**ITEMS[0])]
    content, _ = generate_purchase_order_pdf(po, COMPANY, SUPPLIER, items)
    assert content.startswith(b"%PDF")


@pytest.mark.parametrize(
    "po, company, supplier, items, message",
    [
        (None, COMPANY, SUPPLIER, ITEMS, "Purchase order data is required."),
        ({"po_number": ""}, COMPANY, SUPPLIER, ITEMS, "Purchase order data is required."),
        (PO, None, SUPPLIER, ITEMS, "Company details are required."),
        (PO, COMPANY, None, ITEMS, "Supplier details are required."),
        (PO, COMPANY, SUPPLIER, [], "At least one item is required."),
    ],
)
def test_generate_pdf_requires_inputs(po, company, supplier, items, message):
    with pytest.raises(ValueError, match=message):
        generate_purchase_order_pdf(po, company, supplier, items)


def test_text_for_replaces_unencodable_characters():
    pdf = PurchaseOrderPDF()
    assert pdf.text_for("₪12") == "ILS 12"
    assert pdf.text_for("מנוע") == "????"
    assert pdf.text_for(None) == ""
