"""Bill a customer in one step: single-item invoice plus a payment link."""

from __future__ import annotations

import sys
from functools import partial
from typing import Sequence

from clawprint.cli.common import (
    EXIT_FAILURE,
    EXIT_SUCCESS,
    InputError,
    build_parser,
    format_date,
    money,
    print_json,
    report_client_error,
    run_command,
)
from clawprint.client import ClawprintClient
from clawprint.errors import ClawprintError
from clawprint.models import Invoice, InvoiceCreateRequest, LineItem, PaymentLink

PROG = "generate-invoice"


def _build_parser():
    parser = build_parser(
        PROG,
        "Create a single-item invoice and a Stripe payment link for it.",
        examples=(
            "generate-invoice \\",
            "    --business-id biz_abc123 \\",
            "    --amount 1000 \\",
            '    --description "Consulting services" \\',
            "    --customer-email client@example.com",
        ),
    )
    parser.add_argument("--business-id", default=None)
    parser.add_argument("--amount", default=None, help="Amount to bill (e.g. 1000 or 99.50)")
    parser.add_argument("--description", default=None)
    parser.add_argument("--customer-email", default=None)
    parser.add_argument("--customer-name", default=None)
    parser.add_argument("--due-date", default=None, help="Due date (YYYY-MM-DD)")
    return parser


def _parse_amount(raw: str) -> float:
    try:
        amount = float(raw)
    except ValueError as exc:
        raise InputError(f"--amount must be a number, got {raw!r}") from exc
    if amount <= 0:
        raise InputError("--amount must be greater than 0")
    return amount


def _run(args, client: ClawprintClient, stdout, stderr) -> int:
    amount = _parse_amount(args.amount)
    request = InvoiceCreateRequest(
        business_id=args.business_id,
        customer_email=args.customer_email,
        customer_name=args.customer_name,
        due_date=args.due_date,
        line_items=[LineItem(description=args.description, quantity=1, unit_price=amount)],
    )

    if not args.json:
        print("🔄 Generating invoice...", file=stdout)
        print(f"   Business: {args.business_id}", file=stdout)
        print(f"   Amount: {money(amount)}", file=stdout)
        print(f"   Description: {args.description}", file=stdout)
        print(f"   Customer: {args.customer_email}", file=stdout)

    created = client.invoices.create(request.to_payload())
    invoice = Invoice.model_validate(created)
    try:
        link_response = client.invoices.generate_payment_link(invoice.invoice_id)
    except ClawprintError as exc:
        report_client_error(stderr, "generating payment link", exc)
        print("", file=stderr)
        print(f"   Invoice {invoice.invoice_id} was created without a payment link.", file=stderr)
        print("   Do not re-run generate-invoice. Retry the link with:", file=stderr)
        print(f"   generate-payment-link --invoice-id {invoice.invoice_id}", file=stderr)
        return EXIT_FAILURE

    if args.json:
        print_json(stdout, {"invoice": created, "payment_link": link_response})
        return EXIT_SUCCESS

    link = PaymentLink.model_validate(link_response)
    print("", file=stdout)
    print("✅ Invoice generated!", file=stdout)
    print(f"📄 Invoice ID: {invoice.invoice_id}", file=stdout)
    print(f"💰 Total: {money(invoice.total_amount, invoice.currency)}", file=stdout)
    print(f"📅 Due: {format_date(invoice.due_date)}", file=stdout)
    print(f"📊 Status: {invoice.status}", file=stdout)
    print("", file=stdout)
    print(f"💳 Payment URL: {link.payment_link_url}", file=stdout)
    print("", file=stdout)
    print("Send this link to your customer to collect payment.", file=stdout)
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
        handler=partial(_run, stderr=stderr),
        action="generating invoice",
        client=client,
        stdout=stdout,
        stderr=stderr,
        required=("business-id", "amount", "description", "customer-email"),
        hints={404: ("Business not found. Check the business ID.",)},
    )


if __name__ == "__main__":
    raise SystemExit(main())
