from __future__ import annotations

import io
import json

from clawprint.cli import (
    check_invoice_status,
    create_invoice,
    generate_invoice,
    generate_payment_link,
    list_invoices,
)
from clawprint.errors import APIRequestError

INVOICE = {
    "invoice_id": "inv_1",
    "invoice_number": "INV-0001",
    "business_id": "biz_1",
    "customer_email": "c@example.com",
    "line_items": [
        {"description": "Service", "quantity": 1, "unit_price": 5000, "tax_rate": 10}
    ],
    "amount": 5000,
    "tax_amount": 500,
    "total_amount": 5500,
    "currency": "USD",
    "status": "draft",
    "due_date": "2026-03-20",
}


def _invoice(**changes):
    return {**INVOICE, **changes}


def test_create_invoice_sends_parsed_line_items(make_client) -> None:
    client, transport = make_client({("POST", "/invoices"): _invoice()})
    out = io.StringIO()
    err = io.StringIO()

    rc = create_invoice.main(
        [
            "--business-id",
            "biz_1",
            "--customer-email",
            "c@example.com",
            "--line-items",
            '[{"description":"Service","quantity":1,"unit_price":5000,"tax_rate":10}]',
        ],
        client=client,
        stdout=out,
        stderr=err,
    )

    assert rc == 0, err.getvalue()
    method, path, body = transport.calls[0]
    assert (method, path) == ("POST", "/invoices")
    assert body["business_id"] == "biz_1"
    assert body["line_items"] == [
        {"description": "Service", "quantity": 1, "unit_price": 5000, "tax_rate": 10}
    ]
    text = out.getvalue()
    assert "Expected total: $5500.00" in text
    assert "Invoice created successfully" in text
    assert "Total: USD 5500.00" in text
    assert "generate-payment-link --invoice-id inv_1" in text


def test_create_invoice_uses_example_items_when_none_given(make_client) -> None:
    client, transport = make_client({("POST", "/invoices"): _invoice()})
    out = io.StringIO()

    rc = create_invoice.main(
        ["--business-id", "biz_1", "--customer-email", "c@example.com"],
        client=client,
        stdout=out,
        stderr=io.StringIO(),
    )

    assert rc == 0
    assert "No line items provided, using example" in out.getvalue()
    items = transport.calls[0][2]["line_items"]
    assert items[0]["description"] == "Consulting Services"
    assert items[0]["quantity"] == 10


def test_create_invoice_rejects_malformed_line_items(make_client) -> None:
    client, transport = make_client()
    err = io.StringIO()

    rc = create_invoice.main(
        ["--business-id", "biz_1", "--customer-email", "c@example.com", "--line-items", "[oops"],
        client=client,
        stdout=io.StringIO(),
        stderr=err,
    )

    assert rc == 1
    assert "invalid JSON for --line-items" in err.getvalue()
    assert transport.calls == []


def test_create_invoice_rejects_invalid_line_item(make_client) -> None:
    client, transport = make_client()
    err = io.StringIO()

    rc = create_invoice.main(
        [
            "--business-id",
            "biz_1",
            "--customer-email",
            "c@example.com",
            "--line-items",
            '[{"description":"Service","quantity":0,"unit_price":10}]',
        ],
        client=client,
        stdout=io.StringIO(),
        stderr=err,
    )

    assert rc == 1
    assert "invalid line item" in err.getvalue()
    assert "quantity" in err.getvalue()
    assert transport.calls == []


def test_generate_invoice_creates_invoice_then_link(make_client) -> None:
    client, transport = make_client(
        {
            ("POST", "/invoices"): _invoice(),
            ("POST", "/invoices/inv_1/payment-link"): {
                "payment_link_url": "https://pay.example/inv_1",
            },
        }
    )
    out = io.StringIO()

    rc = generate_invoice.main(
        [
            "--business-id",
            "biz_1",
            "--amount",
            "99.50",
            "--description",
            "Consulting",
            "--customer-email",
            "c@example.com",
        ],
        client=client,
        stdout=out,
        stderr=io.StringIO(),
    )

    assert rc == 0
    assert [(m, p) for m, p, _ in transport.calls] == [
        ("POST", "/invoices"),
        ("POST", "/invoices/inv_1/payment-link"),
    ]
    assert transport.calls[0][2]["line_items"] == [
        {"description": "Consulting", "quantity": 1, "unit_price": 99.5}
    ]
    assert "Payment URL: https://pay.example/inv_1" in out.getvalue()


def test_generate_invoice_json_output_holds_both_responses(make_client) -> None:
    link = {"payment_link_url": "https://pay.example/inv_1"}
    client, _ = make_client(
        {
            ("POST", "/invoices"): _invoice(),
            ("POST", "/invoices/inv_1/payment-link"): link,
        }
    )
    out = io.StringIO()

    rc = generate_invoice.main(
        [
            "--business-id",
            "biz_1",
            "--amount",
            "10",
            "--description",
            "x",
            "--customer-email",
            "c@example.com",
            "--json",
        ],
        client=client,
        stdout=out,
        stderr=io.StringIO(),
    )

    assert rc == 0
    assert json.loads(out.getvalue()) == {"invoice": _invoice(), "payment_link": link}


def test_generate_invoice_rejects_non_positive_amount(make_client) -> None:
    client, transport = make_client()
    err = io.StringIO()

    rc = generate_invoice.main(
        [
            "--business-id",
            "biz_1",
            "--amount",
            "-5",
            "--description",
            "x",
            "--customer-email",
            "c@example.com",
        ],
        client=client,
        stdout=io.StringIO(),
        stderr=err,
    )

    assert rc == 1
    assert "--amount must be greater than 0" in err.getvalue()
    assert transport.calls == []


def test_payment_link_reused_when_invoice_already_has_one(make_client) -> None:
    client, transport = make_client(
        {("GET", "/invoices/inv_1"): _invoice(stripe_payment_link="https://pay.example/old")}
    )
    out = io.StringIO()

    rc = generate_payment_link.main(
        ["--invoice-id", "inv_1"], client=client, stdout=out, stderr=io.StringIO()
    )

    assert rc == 0
    assert "already exists" in out.getvalue()
    assert "https://pay.example/old" in out.getvalue()
    assert transport.calls == [("GET", "/invoices/inv_1", None)]


def test_payment_link_generated_when_missing(make_client) -> None:
    client, transport = make_client(
        {
            ("GET", "/invoices/inv_1"): _invoice(),
            ("POST", "/invoices/inv_1/payment-link"): {
                "payment_link_url": "https://pay.example/new",
                "stripe_invoice_id": "in_123",
            },
        }
    )
    out = io.StringIO()

    rc = generate_payment_link.main(
        ["--invoice-id", "inv_1"], client=client, stdout=out, stderr=io.StringIO()
    )

    assert rc == 0
    assert "Payment Link: https://pay.example/new" in out.getvalue()
    assert "Stripe Invoice ID: in_123" in out.getvalue()
    assert transport.calls[-1] == ("POST", "/invoices/inv_1/payment-link", None)


def test_payment_link_not_found_hint(make_client) -> None:
    client, _ = make_client(
        {
            ("GET", "/invoices/inv_x"): APIRequestError(
                "Invoice not found", status_code=404, body={"error": "Invoice not found"}
            )
        }
    )
    err = io.StringIO()

    rc = generate_payment_link.main(
        ["--invoice-id", "inv_x"], client=client, stdout=io.StringIO(), stderr=err
    )

    assert rc == 1
    assert "Invoice not found. Check the invoice ID." in err.getvalue()


def test_check_invoice_status_draft_without_link(make_client) -> None:
    client, _ = make_client({("GET", "/invoices/inv_1"): _invoice()})
    out = io.StringIO()

    rc = check_invoice_status.main(
        ["--invoice-id", "inv_1"], client=client, stdout=out, stderr=io.StringIO()
    )

    assert rc == 0
    text = out.getvalue()
    assert "📝 DRAFT" in text
    assert "TOTAL:    USD 5500.00" in text
    assert "No payment link generated yet." in text
    assert "Next step: Generate payment link" in text


def test_check_invoice_status_paid(make_client) -> None:
    client, _ = make_client(
        {
            ("GET", "/invoices/inv_1"): _invoice(
                status="paid",
                paid_at="2026-03-01T10:00:00Z",
                stripe_payment_link="https://pay.example/inv_1",
            )
        }
    )
    out = io.StringIO()

    rc = check_invoice_status.main(
        ["--invoice-id", "inv_1"], client=client, stdout=out, stderr=io.StringIO()
    )

    assert rc == 0
    text = out.getvalue()
    assert "Paid:     2026-03-01" in text
    assert "URL:       https://pay.example/inv_1" in text
    assert "Payment received!" in text
    assert "No payment link generated yet." not in text


def test_list_invoices_renders_rows_and_clamps_limit(make_client) -> None:
    client, transport = make_client(
        {
            ("GET", "/invoices?business_id=biz_1&status=paid&limit=100"): {
                "invoices": [_invoice(status="paid")]
            }
        }
    )
    out = io.StringIO()

    rc = list_invoices.main(
        ["--business-id", "biz_1", "--status", "paid", "--limit", "500"],
        client=client,
        stdout=out,
        stderr=io.StringIO(),
    )

    assert rc == 0
    assert "Invoices for biz_1: 1" in out.getvalue()
    assert "INV-0001" in out.getvalue()
    assert transport.calls[0][1] == "/invoices?business_id=biz_1&status=paid&limit=100"


def test_list_invoices_rejects_zero_limit(make_client) -> None:
    client, transport = make_client()
    err = io.StringIO()

    rc = list_invoices.main(
        ["--business-id", "biz_1", "--limit", "0"],
        client=client,
        stdout=io.StringIO(),
        stderr=err,
    )

    assert rc == 1
    assert "--limit must be >= 1" in err.getvalue()
    assert transport.calls == []


def test_generate_invoice_reports_created_invoice_when_link_fails(make_client) -> None:
    client, transport = make_client(
        {
            ("POST", "/invoices"): _invoice(invoice_id="inv_created_1"),
            ("POST", "/invoices/inv_created_1/payment-link"): APIRequestError(
                "stripe down", status_code=502, body={"error": "stripe down"}
            ),
        }
    )
    err = io.StringIO()

    rc = generate_invoice.main(
        [
            "--business-id",
            "biz_1",
            "--amount",
            "100",
            "--description",
            "Consulting",
            "--customer-email",
            "c@example.com",
        ],
        client=client,
        stdout=io.StringIO(),
        stderr=err,
    )

    assert rc == 1
    text = err.getvalue()
    assert "Status: 502" in text
    assert "Invoice inv_created_1 was created without a payment link." in text
    assert "generate-payment-link --invoice-id inv_created_1" in text
    assert len(transport.calls) == 2
