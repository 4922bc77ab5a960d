"""Show invoice details and payment status."""

from __future__ import annotations

import sys
from typing import Sequence

from clawprint.cli.common import (
    EXIT_SUCCESS,
    WIDE_RULE_WIDTH,
    build_parser,
    format_date,
    money,
    print_json,
    rule,
    run_command,
)
from clawprint.cli.invoices import print_line_items, status_label
from clawprint.client import ClawprintClient
from clawprint.models import Invoice

PROG = "check-invoice-status"

_NEXT_STEP = {
    "sent": "💡 Waiting for customer payment...",
    "paid": "✅ Payment received! Thank you.",
    "overdue": "⚠️  Invoice is overdue. Follow up with customer.",
}


def _build_parser():
    parser = build_parser(
        PROG,
        "Show invoice details and payment status.",
        examples=("check-invoice-status --invoice-id inv_abc123",),
    )
    parser.add_argument("--invoice-id", default=None)
    return parser


def _run(args, client: ClawprintClient, stdout) -> int:
    invoice_id = args.invoice_id
    if not args.json:
        print("🔄 Fetching invoice...", file=stdout)
    response = client.invoices.get(invoice_id)
    if args.json:
        print_json(stdout, response)
        return EXIT_SUCCESS

    invoice = Invoice.model_validate(response)
    currency = invoice.currency
    heavy = rule("═", WIDE_RULE_WIDTH)

    print("", file=stdout)
    print(heavy, file=stdout)
    print("📄 INVOICE", file=stdout)
    print(heavy, file=stdout)
    print("", file=stdout)
    print("📋 Invoice Details:", file=stdout)
    print(f"   Invoice ID:      {invoice.invoice_id}", file=stdout)
    print(f"   Invoice Number:  {invoice.invoice_number or '-'}", file=stdout)
    print(f"   Business ID:     {invoice.business_id}", file=stdout)
    print("", file=stdout)
    print("👤 Customer:", file=stdout)
    print(f"   Name:     {invoice.customer_name or '(Not provided)'}", file=stdout)
    print(f"   Email:    {invoice.customer_email}", file=stdout)
    print("", file=stdout)
    print("📅 Dates:", file=stdout)
    print(f"   Issued:   {format_date(invoice.issued_date)}", file=stdout)
    print(f"   Due:      {format_date(invoice.due_date)}", file=stdout)
    if invoice.paid_at:
        print(f"   Paid:     {format_date(invoice.paid_at)}", file=stdout)
    if invoice.viewed_at:
        print(f"   Viewed:   {format_date(invoice.viewed_at)}", file=stdout)
    print("", file=stdout)
    print("📊 Status:", file=stdout)
    print(f"   Status:   {status_label(invoice.status)}", file=stdout)
    print("", file=stdout)
    print("💰 Amount:", file=stdout)
    print(f"   Subtotal: {money(invoice.amount, currency)}", file=stdout)
    print(f"   Tax:      {money(invoice.tax_amount, currency)}", file=stdout)
    print(f"   TOTAL:    {money(invoice.total_amount, currency)}", file=stdout)
    print("", file=stdout)

    if invoice.line_items:
        print("📦 Line Items:", file=stdout)
        print_line_items(stdout, invoice.line_items, currency)
        print("", file=stdout)

    if invoice.stripe_payment_link:
        print("💳 Payment Link:", file=stdout)
        print(f"   URL:       {invoice.stripe_payment_link}", file=stdout)
        if invoice.stripe_invoice_id:
            print(f"   Stripe ID: {invoice.stripe_invoice_id}", file=stdout)
        print("", file=stdout)
    elif invoice.status not in ("paid", "cancelled"):
        print("⚠️  No payment link generated yet.", file=stdout)
        print(f"   Generate one: generate-payment-link --invoice-id {invoice_id}", file=stdout)
        print("", file=stdout)

    if invoice.notes:
        print("📝 Notes:", file=stdout)
        print(f"   {invoice.notes}", file=stdout)
        print("", file=stdout)
    if invoice.payment_terms:
        print("📋 Payment Terms:", file=stdout)
        print(f"   {invoice.payment_terms}", file=stdout)
        print("", file=stdout)

    print(heavy, file=stdout)
    if invoice.status == "draft":
        print("💡 Next step: Generate payment link to send to customer", file=stdout)
        print(f"   generate-payment-link --invoice-id {invoice_id}", file=stdout)
    elif invoice.status in _NEXT_STEP:
        print(_NEXT_STEP[invoice.status], file=stdout)
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
        action="checking invoice status",
        client=client,
        stdout=stdout,
        stderr=stderr,
        required=("invoice-id",),
        hints={404: ("Invoice not found. Check the invoice ID.",)},
    )


if __name__ == "__main__":
    raise SystemExit(main())
