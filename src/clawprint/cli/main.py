"""Top-level ``bootprint`` command: dispatches to one command module per process."""

from __future__ import annotations

import subprocess
import sys
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version
from typing import Sequence

EXIT_SUCCESS = 0
EXIT_UNKNOWN_COMMAND = 1

COMMANDS: dict[str, tuple[str, str]] = {
    "create-business": ("clawprint.cli.create_business", "Create a new agent-operated business"),
    "check-status": ("clawprint.cli.check_status", "Check formation status"),
    "generate-invoice": ("clawprint.cli.generate_invoice", "Generate a payment invoice"),
    "get-financials": ("clawprint.cli.get_financials", "View financial summary"),
    "create-invoice": ("clawprint.cli.create_invoice", "Create an invoice with line items"),
    "list-invoices": ("clawprint.cli.list_invoices", "List invoices of a business"),
    "generate-payment-link": (
        "clawprint.cli.generate_payment_link",
        "Create a payment link for an invoice",
    ),
    "check-invoice-status": ("clawprint.cli.check_invoice_status", "Show invoice payment status"),
    "setup-agent": ("clawprint.cli.setup_agent", "Register an agent and store credentials"),
    "check-api": ("clawprint.cli.check_api", "Check API connectivity"),
    "test-api": ("clawprint.cli.integration", "Run live API integration checks"),
    "test-auth": ("clawprint.cli.auth_checks", "Run live API authentication checks"),
}

_HELP_ALIASES = ("help", "--help", "-h")


def _sdk_version() -> str:
    try:
        return pkg_version("clawprint")
    except PackageNotFoundError:
        return "0.0.0+local"


def usage_text() -> str:
    width = max(len(name) for name in COMMANDS) + 4
    lines = [
        "Bootprint CLI - Business infrastructure for AI agents",
        "",
        "Usage:",
        "  bootprint <command> [options]",
        "",
        "Commands:",
    ]
    for name, (_, summary) in COMMANDS.items():
        lines.append(f"  {name.ljust(width)}{summary}")
    lines.append(f"  {'help'.ljust(width)}Show this help message")
    lines.extend(
        [
            "",
            "Examples:",
            '  bootprint create-business --name "Acme AI" --purpose "Software" '
            "--sponsor you@example.com",
            "  bootprint check-status --business-id biz_abc123",
            "  bootprint generate-invoice --business-id biz_abc123 --amount 1000 "
            '--description "Consulting" --customer-email client@example.com',
            "  bootprint get-financials --business-id biz_abc123",
        ]
    )
    return "\n".join(lines)


def exit_status(returncode: int) -> int:
    """Map a child killed by signal N (negative returncode) to the shell convention 128 + N."""
    if returncode < 0:
        return 128 + abs(returncode)
    return returncode


def build_command(module: str, args: Sequence[str]) -> list[str]:
    return [sys.executable, "-m", module, *args]


def main(argv: Sequence[str] | None = None, *, stdout=sys.stdout, stderr=sys.stderr) -> int:
    args = list(sys.argv[1:] if argv is None else argv)

    if not args or args[0] in _HELP_ALIASES:
        print(usage_text(), file=stdout)
        return EXIT_SUCCESS

    if args[0] == "--version":
        print(f"bootprint {_sdk_version()}", file=stdout)
        return EXIT_SUCCESS

    command, rest = args[0], args[1:]
    entry = COMMANDS.get(command)
    if entry is None:
        print(f'Error: Unknown command "{command}"', file=stderr)
        print('Run "bootprint help" to see available commands.', file=stderr)
        return EXIT_UNKNOWN_COMMAND

    module, _ = entry
    completed = subprocess.run(build_command(module, rest), check=False)
    return exit_status(completed.returncode)


if __name__ == "__main__":
    raise SystemExit(main())
