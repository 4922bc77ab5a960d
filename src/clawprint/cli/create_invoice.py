"""Create an invoice for a Clawprint business."""

from __future__ import annotations

import json
import sys
from typing import Sequence

from clawprint.cli.common import EXIT_SUCCESS, build_parser, format_date, money, print_json, run_command
from clawprint.cli.invoices import example_line_items, parse_line_items, print_line_items
from clawprint.client import ClawprintClient
from clawprint.models import Invoice, InvoiceCreateRequest, compute_invoice_totals

PROG = "create-invoice"


def _build_parser():
    parser = build_parser(
        PROG,
        "Create an invoice with one or more line items.",
        examples=(
            "create-invoice \\",
            "    --business-id biz_abc123 \\",
            "    --customer-email client@example.com \\",
            '    --customer-name "John Smith" \\',
            "    --line-items '[{\"description\":\"Service\",\"quantity\":1,\"unit_price\":5000}]'",
        ),
    )
    parser.add_argument("--business-id", default=None)
    parser.add_argument("--customer-email", default=None)
    parser.add_argument("--customer-name", default=None)
    parser.add_argument("--invoice-number", default=None)
    parser.add_argument("--due-date", default=None, help="Due date (YYYY-MM-DD)")
    parser.add_argument("--line-items", default=None, help="JSON array of line items")
    return parser


def _run(args, client: ClawprintClient, stdout) -> int:
    line_items = parse_line_items(args.line_items)
    if not line_items:
        line_items = example_line_items()
        if not args.json:
            print("📝 No line items provided, using example:", file=stdout)
            print(
                json.dumps([item.to_payload() for item in line_items], indent=2),
                file=stdout,
            )
            print("", file=stdout)

    request = InvoiceCreateRequest(
        business_id=args.business_id,
        customer_email=args.customer_email,
        customer_name=args.customer_name,
        invoice_number=args.invoice_number,
        due_date=args.due_date,
        line_items=line_items,
    )

    if not args.json:
        preview = compute_invoice_totals(line_items)
        print(f"🧮 Expected total: {money(preview.total_amount)}", file=stdout)
        print("🔄 Creating invoice...", file=stdout)

    response = client.invoices.create(request.to_payload())
    if args.json:
        print_json(stdout, response)
        return EXIT_SUCCESS

    invoice = Invoice.model_validate(response)
    currency = invoice.currency
    print("✅ Invoice created successfully!", file=stdout)
    print("", file=stdout)
    print(f"📄 Invoice ID: {invoice.invoice_id}", file=stdout)
    print(f"📝 Invoice Number: {invoice.invoice_number or '-'}", file=stdout)
    print(f"👤 Customer: {invoice.customer_name or invoice.customer_email}", file=stdout)
    print(f"💰 Total: {money(invoice.total_amount, currency)}", file=stdout)
    print(f"   ├ Subtotal: {money(invoice.amount, currency)}", file=stdout)
    print(f"   └ Tax: {money(invoice.tax_amount, currency)}", file=stdout)
    print(f"📅 Due: {format_date(invoice.due_date)}", file=stdout)
    print(f"📊 Status: {invoice.status}", file=stdout)
    print("", file=stdout)

    if invoice.line_items:
        print("📋 Line Items:", file=stdout)
        print_line_items(stdout, invoice.line_items, currency)
        print("", file=stdout)

    print("🚀 Next steps:", file=stdout)
    print(
        f"  1. Generate payment link: generate-payment-link --invoice-id {invoice.invoice_id}",
        file=stdout,
    )
    print("  2. Share link with customer to receive payment", file=stdout)
    print(
        f"  3. Track payment status: check-invoice-status --invoice-id {invoice.invoice_id}",
        file=stdout,
    )
    return EXIT_SUCCESS


def main(
    argv: Sequence[str] | None = None,
    *,
    client: ClawprintClient | None = None,
    stdout=sys.stdout,
    stderr=sys.stderr,
) -> int:
    return run_command(
        parser=_build_parser(),
        argv=argv,
        handler=_run,
        action="creating invoice",
        client=client,
        stdout=stdout,
        stderr=stderr,
        required=("business-id", "customer-email"),
        hints={
            404: ("Business not found. Check the business ID.",),
            409: ("An invoice with this number already exists.",),
        },
    )


if __name__ == "__main__":
    raise SystemExit(main())
