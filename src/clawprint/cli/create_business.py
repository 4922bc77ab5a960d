"""Create a new agent-operated business (Delaware LLC by default)."""

from __future__ import annotations

import sys
from typing import Sequence

from clawprint.cli.common import EXIT_SUCCESS, build_parser, print_json, run_command
from clawprint.client import ClawprintClient
from clawprint.models import Business, BusinessCreateRequest

PROG = "create-business"


def _build_parser():
    parser = build_parser(
        PROG,
        "Create a new agent-operated business.",
        examples=(
            'create-business --name "Acme AI Services" \\',
            '    --purpose "Software development and consulting" \\',
            "    --sponsor sponsor@example.com",
        ),
    )
    parser.add_argument("--name", default=None, help="Legal name of the business")
    parser.add_argument("--purpose", default=None, help="Business purpose")
    parser.add_argument("--sponsor", default=None, help="Sponsor email address")
    parser.add_argument("--type", default=None, help="Entity type (server default: llc)")
    parser.add_argument("--state", default=None, help="Formation state (server default: delaware)")
    parser.add_argument("--agent-id", default=None, help="Optional agent session id")
    return parser


def _run(args, client: ClawprintClient, stdout) -> int:
    request = BusinessCreateRequest(
        legal_name=args.name,
        purpose=args.purpose,
        sponsor_email=args.sponsor,
        type=args.type,
        formation_state=args.state,
        agent_id=args.agent_id,
    )
    if not args.json:
        print("🔄 Creating business...", file=stdout)
        print(f"   Name: {args.name}", file=stdout)
        print(f"   Purpose: {args.purpose}", file=stdout)
        print(f"   Sponsor: {args.sponsor}", file=stdout)

    response = client.businesses.create(request.to_payload())
    if args.json:
        print_json(stdout, response)
        return EXIT_SUCCESS

    business = Business.model_validate(response)
    print("", file=stdout)
    print("✅ Business creation initiated!", file=stdout)
    print(f"🏢 Business ID: {business.business_id}", file=stdout)
    print(f"📊 Status: {business.status or 'unknown'}", file=stdout)
    if business.sponsor_verification_sent is not None:
        sent = "sent" if business.sponsor_verification_sent else "not sent"
        print(f"✉️  Sponsor verification: {sent}", file=stdout)
    if business.estimated_completion:
        print(f"📅 Estimated completion: {business.estimated_completion}", file=stdout)
    if business.next_steps:
        print("", file=stdout)
        print("🚀 Next steps:", file=stdout)
        for index, step in enumerate(business.next_steps, start=1):
            print(f"  {index}. {step}", file=stdout)
    print("", file=stdout)
    print(f"💡 Track progress: check-status --business-id {business.business_id}", file=stdout)
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
        action="creating business",
        client=client,
        stdout=stdout,
        stderr=stderr,
        required=("name", "purpose", "sponsor"),
        hints={
            409: ("A business with this name may already exist.",),
            404: ("Sponsor not found. Check the sponsor email.",),
        },
    )


if __name__ == "__main__":
    raise SystemExit(main())
