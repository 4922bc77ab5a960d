"""Create a Stripe payment link for an existing invoice."""

from __future__ import annotations

import sys
from typing import Sequence

from clawprint.cli.common import EXIT_SUCCESS, build_parser, format_date, money, print_json, run_command
from clawprint.client import ClawprintClient
from clawprint.models import Invoice, PaymentLink

PROG = "generate-payment-link"


def _build_parser():
    parser = build_parser(
        PROG,
        "Create a Stripe payment link for an invoice (reuses an existing one).",
        examples=("generate-payment-link --invoice-id inv_abc123",),
    )
    parser.add_argument("--invoice-id", default=None)
    return parser


def _run(args, client: ClawprintClient, stdout) -> int:
    invoice_id = args.invoice_id
    if not args.json:
        print("🔄 Fetching invoice...", file=stdout)
    invoice = Invoice.model_validate(client.invoices.get(invoice_id))

    if invoice.stripe_payment_link:
        if args.json:
            print_json(
                stdout,
                {"payment_link_url": invoice.stripe_payment_link, "existing": True},
            )
            return EXIT_SUCCESS
        print("✨ Payment link already exists for this invoice:", file=stdout)
        print(f"🔗 {invoice.stripe_payment_link}", file=stdout)
        print("   Share this URL with the customer to collect payment", file=stdout)
        return EXIT_SUCCESS

    if not args.json:
        print("✅ Invoice found:", file=stdout)
        print(f"📄 Invoice: {invoice.invoice_number or invoice.invoice_id}", file=stdout)
        print(f"👤 Customer: {invoice.customer_name or invoice.customer_email}", file=stdout)
        print(f"💰 Amount: {money(invoice.total_amount, invoice.currency)}", file=stdout)
        print("", file=stdout)
        print("🔄 Generating Stripe payment link...", file=stdout)

    response = client.invoices.generate_payment_link(invoice_id)
    if args.json:
        print_json(stdout, response)
        return EXIT_SUCCESS

    link = PaymentLink.model_validate(response)
    print("✅ Payment link generated successfully!", file=stdout)
    print("", file=stdout)
    print(f"🔗 Payment Link: {link.payment_link_url}", file=stdout)
    if link.stripe_invoice_id:
        print(f"   Stripe Invoice ID: {link.stripe_invoice_id}", file=stdout)
    if link.expires_at:
        print(f"   Expires: {format_date(link.expires_at)}", file=stdout)
    print("", file=stdout)
    print("📊 Next steps:", file=stdout)
    print("   1. Send the link to your customer via email or message", file=stdout)
    print("   2. Customer clicks the link and pays via Stripe", file=stdout)
    print("   3. Payment is automatically recorded in the invoice", file=stdout)
    print(f"   4. Check status: check-invoice-status --invoice-id {invoice_id}", file=stdout)
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
        action="generating payment link",
        client=client,
        stdout=stdout,
        stderr=stderr,
        required=("invoice-id",),
        hints={
            404: ("Invoice not found. Check the invoice ID.",),
            409: (
                "A payment link may already exist for this invoice.",
                "Check it with: check-invoice-status --invoice-id <id>",
            ),
        },
    )


if __name__ == "__main__":
    raise SystemExit(main())
