"""Show the financial summary of a business."""

from __future__ import annotations

import sys
from typing import Sequence

from clawprint.cli.common import EXIT_SUCCESS, build_parser, money, print_json, rule, run_command
from clawprint.client import ClawprintClient
from clawprint.models import FINANCIAL_PERIODS, Financials

PROG = "get-financials"

_EXPENSE_LABELS = {
    "stripe_fees": "Stripe fees",
    "clawprint_fees": "Clawprint fees",
    "registered_agent": "Registered agent",
    "bookkeeping": "Bookkeeping",
}


def _build_parser():
    parser = build_parser(
        PROG,
        "Show revenue, expenses and balance for a business.",
        examples=("get-financials --business-id biz_abc123 --period month",),
    )
    parser.add_argument("--business-id", default=None, help="Business id (biz_...)")
    parser.add_argument("--period", choices=FINANCIAL_PERIODS, default="all")
    return parser


def _expense_label(key: str) -> str:
    return _EXPENSE_LABELS.get(key, key.replace("_", " ").capitalize())


def _run(args, client: ClawprintClient, stdout) -> int:
    if not args.json:
        print(f"Getting financials for business: {args.business_id}", file=stdout)
        print(f"Period: {args.period}", file=stdout)

    response = client.businesses.get_financials(args.business_id, args.period)
    if args.json:
        print_json(stdout, response)
        return EXIT_SUCCESS

    financials = Financials.model_validate(response)
    summary = financials.summary
    print("", file=stdout)
    print("📊 Financial Summary", file=stdout)
    print(rule(), file=stdout)
    if financials.period_start and financials.period_end:
        print(f"Period: {financials.period_start} to {financials.period_end}", file=stdout)
    print("", file=stdout)
    print(f"💰 Revenue: {money(summary.revenue)}", file=stdout)
    print("", file=stdout)
    print("💸 Expenses:", file=stdout)
    total = summary.expenses.get("total")
    for key, value in summary.expenses.items():
        if key == "total":
            continue
        print(f"   {_expense_label(key)}: {money(value)}", file=stdout)
    if total is None:
        total = sum(value for key, value in summary.expenses.items() if key != "total")
    print("   ─────────────────", file=stdout)
    print(f"   Total: {money(total)}", file=stdout)
    print("", file=stdout)
    print(f"📈 Net Income: {money(summary.net_income)}", file=stdout)
    print("", file=stdout)
    print(f"🏦 Current Balance: {money(summary.current_balance)}", file=stdout)
    print(rule(), file=stdout)

    print("", file=stdout)
    print(f"Recent Transactions: {len(financials.transactions)}", file=stdout)
    for txn in financials.transactions:
        print(
            f"   {txn.date or '-'}  {money(txn.amount):>12}  {txn.description or txn.type or ''}",
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
        action="getting financials",
        client=client,
        stdout=stdout,
        stderr=stderr,
        required=("business-id",),
        hints={404: ("Business not found. Check the business ID.",)},
    )


if __name__ == "__main__":
    raise SystemExit(main())
