"""List the invoices of a business."""

from __future__ import annotations

import sys
from typing import Sequence

from clawprint.cli.common import (
    EXIT_SUCCESS,
    InputError,
    build_parser,
    format_date,
    money,
    print_json,
    rule,
    run_command,
)
from clawprint.cli.invoices import STATUS_EMOJI
from clawprint.client import MAX_INVOICE_LIST_LIMIT, ClawprintClient
from clawprint.models import Invoice

PROG = "list-invoices"


def _build_parser():
    parser = build_parser(
        PROG,
        "List the invoices of a business.",
        examples=("list-invoices --business-id biz_abc123 --status paid --limit 20",),
    )
    parser.add_argument("--business-id", default=None)
    parser.add_argument("--status", choices=sorted(STATUS_EMOJI), default=None)
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help=f"Maximum invoices to return (capped at {MAX_INVOICE_LIST_LIMIT})",
    )
    return parser


def _run(args, client: ClawprintClient, stdout) -> int:
    if args.limit is not None and args.limit < 1:
        raise InputError("--limit must be >= 1")

    response = client.invoices.list(args.business_id, status=args.status, limit=args.limit)
    if args.json:
        print_json(stdout, response)
        return EXIT_SUCCESS

    raw_invoices = response.get("invoices", []) if isinstance(response, dict) else response
    invoices = [Invoice.model_validate(item) for item in raw_invoices or []]

    print(f"🧾 Invoices for {args.business_id}: {len(invoices)}", file=stdout)
    print(rule(), file=stdout)
    if not invoices:
        print("   (none)", file=stdout)
    for invoice in invoices:
        emoji = STATUS_EMOJI.get(invoice.status, "❓")
        print(
            f"{emoji} {invoice.invoice_number or invoice.invoice_id}  "
            f"{money(invoice.total_amount, invoice.currency)}  "
            f"{invoice.status}  due {format_date(invoice.due_date)}",
            file=stdout,
        )
    print(rule(), file=stdout)
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
        action="listing invoices",
        client=client,
        stdout=stdout,
        stderr=stderr,
        required=("business-id",),
        hints={404: ("Business not found. Check the business ID.",)},
    )


if __name__ == "__main__":
    raise SystemExit(main())
