from __future__ import annotations

import pytest

from invoice_importer.models.candidate_invoice import CandidateInvoice, InvoiceStatus, InvoiceType, LineItem, parse_amount


def test_defaults():
    candidate = CandidateInvoice(invoice_number="INV-1")
    assert candidate.invoice_type == InvoiceType.PROFORMA.value
    assert candidate.currency == "USD"
    assert candidate.status == InvoiceStatus.PENDING.value
    assert candidate.items == ()
    assert candidate.due_date is None


def test_payload_uses_camel_case_and_omits_missing_due_date():
    candidate = CandidateInvoice(
        invoice_number="INV-1",
        invoice_type="proforma",
        customer_name="Acme",
        customer_country="US",
        invoice_date="2024-01-01",
        total_amount=300,
        items=(LineItem(product_name="Paracetamol", quantity=10, unit_price=30, total_price=300),),
        source_row=2,
    )
    payload = candidate.to_payload()
    assert "dueDate" not in payload
    assert "source_row" not in payload and "sourceRow" not in payload
    assert payload == {
        "invoiceNumber": "INV-1",
        "invoiceType": "proforma",
        "customerName": "Acme",
        "customerCountry": "US",
        "invoiceDate": "2024-01-01",
        "totalAmount": 300,
        "currency": "USD",
        "status": "pending",
        "items": [{"productName": "Paracetamol", "quantity": 10, "unitPrice": 30, "totalPrice": 300}],
    }


def test_payload_includes_due_date_when_set():
    payload = CandidateInvoice(invoice_number="INV-1", due_date="2024-02-01").to_payload()
    assert payload["dueDate"] == "2024-02-01"


def test_source_row_is_ignored_by_equality():
    assert CandidateInvoice(invoice_number="A", source_row=2) == CandidateInvoice(invoice_number="A", source_row=9)


def test_candidate_is_frozen():
    candidate = CandidateInvoice(invoice_number="A")
    with pytest.raises(AttributeError):
        candidate.status = "paid"


def test_vocabularies():
    assert [t.value for t in InvoiceType] == ["proforma", "pre-shipment", "post-shipment"]
    assert [s.value for s in InvoiceStatus] == ["draft", "pending", "paid", "overdue", "cancelled"]


@pytest.mark.parametrize(
    "value, expected",
    [
        (10, 10),
        (2.5, 2.5),
        ("10", 10),
        (" 2.50 ", 2.5),
        ("", None),
        ("abc", None),
        (None, None),
        (True, None),
        (-1, None),
        ("nan", None),
        (float("inf"), None),
    ],
)
def test_parse_amount(value, expected):
    assert parse_amount(value) == expected
