"""Check the formation status of a business."""

from __future__ import annotations

import sys
from typing import Sequence

from clawprint.cli.common import EXIT_SUCCESS, build_parser, print_json, rule, run_command
from clawprint.client import ClawprintClient
from clawprint.models import BusinessStatus

PROG = "check-status"


def _build_parser():
    parser = build_parser(
        PROG,
        "Check the formation status of a business.",
        examples=("check-status --business-id biz_abc123",),
    )
    parser.add_argument("--business-id", default=None, help="Business id (biz_...)")
    return parser


def _print_step(stdout, title: str, section: dict, details: tuple[tuple[str, str], ...]) -> None:
    print("", file=stdout)
    print(f"{title}: {section.get('status', 'unknown')}", file=stdout)
    for key, label in details:
        if section.get(key):
            print(f"   {label}: {section[key]}", file=stdout)


def _run(args, client: ClawprintClient, stdout) -> int:
    business_id = args.business_id
    if not args.json:
        print(f"Checking status for business: {business_id}", file=stdout)

    response = client.businesses.get_status(business_id)
    if args.json:
        print_json(stdout, response)
        return EXIT_SUCCESS

    status = BusinessStatus.model_validate(response)
    print("", file=stdout)
    print("📊 Business Status", file=stdout)
    print(rule(), file=stdout)
    if status.name:
        print(f"Business: {status.name} ({status.business_id})", file=stdout)
    print(f"Overall: {status.status.upper()}", file=stdout)
    _print_step(
        stdout,
        "📄 LLC Formation",
        status.llc,
        (("state", "State"), ("file_number", "File #"), ("filed_date", "Filed")),
    )
    _print_step(
        stdout,
        "🏦 EIN",
        status.ein,
        (("number", "Number"), ("estimated_date", "Expected")),
    )
    _print_step(
        stdout,
        "💰 Bank Account",
        status.bank_account,
        (
            ("provider", "Provider"),
            ("account", "Account"),
            ("estimated_date", "Expected"),
        ),
    )
    if status.sponsor:
        print("", file=stdout)
        verification = status.sponsor.get("verification_status", "unknown")
        print(f"👤 Sponsor: {verification}", file=stdout)
        if status.sponsor.get("email"):
            print(f"   Email: {status.sponsor['email']}", file=stdout)
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
        action="checking status",
        client=client,
        stdout=stdout,
        stderr=stderr,
        required=("business-id",),
        hints={404: ("Business not found. Check the business ID.",)},
    )


if __name__ == "__main__":
    raise SystemExit(main())
