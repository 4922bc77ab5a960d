"""Flag parsing, error reporting and formatting shared by the CLI commands."""

from __future__ import annotations

import argparse
import json
import re
from datetime import datetime
from typing import Any, Callable, Mapping, Sequence

from pydantic import ValidationError

from clawprint.client import ClawprintClient
from clawprint.errors import APIRequestError, ClawprintError, ConfigError, CredentialStoreError
from clawprint.logging import get_logger, setup_logging

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

RULE_WIDTH = 50
WIDE_RULE_WIDTH = 60

_SECRET_PATTERNS = (
    (re.compile(r"\bsk_[A-Za-z0-9_\-]+"), "sk_[REDACTED]"),
    (re.compile(r"(?i)(bearer\s+)(\S+)"), r"\1[REDACTED]"),
    (re.compile(r"(?i)(secret_key\s*[=:]\s*)([^,\s]+)"), r"\1[REDACTED]"),
)

logger = get_logger(__name__)

Handler = Callable[[argparse.Namespace, "ClawprintClient | None", Any], int]


class InputError(ValueError):
    """User-supplied input was rejected before any request."""


class UsageError(InputError):
    """Required flags are missing or flags could not be parsed."""


class CommandParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting with status 2."""

    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(message)


def build_parser(prog: str, description: str, *, examples: Sequence[str] = ()) -> CommandParser:
    epilog = None
    if examples:
        epilog = "Example:\n" + "\n".join(f"  {line}" for line in examples)
    parser = CommandParser(
        prog=prog,
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )
    parser.add_argument("--json", action="store_true", help="Print the raw API response as JSON")
    parser.add_argument("--verbose", action="store_true", help="Log request/response details")
    return parser


def parse_flags(
    parser: CommandParser,
    argv: Sequence[str] | None,
    *,
    required: Sequence[str] = (),
) -> argparse.Namespace:
    args = parser.parse_args(argv)
    missing = [f"--{name}" for name in required if not getattr(args, name.replace("-", "_"))]
    if missing:
        raise UsageError(f"missing required arguments: {', '.join(missing)}")
    return args


def sanitize_error_text(value: str) -> str:
    redacted = value
    for pattern, replacement in _SECRET_PATTERNS:
        redacted = pattern.sub(replacement, redacted)
    return redacted


def print_error(stderr, message: str, *, code: int = EXIT_FAILURE) -> int:
    print(f"❌ Error: {sanitize_error_text(message)}", file=stderr)
    return code


def print_usage_error(stderr, parser: CommandParser, exc: UsageError) -> int:
    print(f"❌ Error: {exc}", file=stderr)
    print("", file=stderr)
    print(parser.format_usage().rstrip(), file=stderr)
    if parser.epilog:
        print("", file=stderr)
        print(parser.epilog, file=stderr)
    return EXIT_FAILURE


def report_client_error(
    stderr,
    action: str,
    exc: ClawprintError,
    *,
    hints: Mapping[int, Sequence[str]] | None = None,
) -> int:
    print(f"❌ Error {action}:", file=stderr)
    if isinstance(exc, APIRequestError):
        print(f"   Status: {exc.status_code}", file=stderr)
        print(f"   Message: {sanitize_error_text(exc.message)}", file=stderr)
        hint_lines = (hints or {}).get(exc.status_code)
        if hint_lines:
            print("", file=stderr)
            for line in hint_lines:
                print(f"   {line}", file=stderr)
    else:
        print(f"   {sanitize_error_text(str(exc))}", file=stderr)
    return EXIT_FAILURE


def run_command(
    *,
    parser: CommandParser,
    argv: Sequence[str] | None,
    handler: Handler,
    action: str,
    client: ClawprintClient | None,
    stdout,
    stderr,
    required: Sequence[str] = (),
    hints: Mapping[int, Sequence[str]] | None = None,
    needs_client: bool = True,
) -> int:
    """Parse flags, build the client if needed, run ``handler`` and map failures to exit codes."""
    try:
        args = parse_flags(parser, argv, required=required)
    except UsageError as exc:
        return print_usage_error(stderr, parser, exc)

    setup_logging(verbose=args.verbose, stream=stderr)
    logger.debug("command invoked", command=parser.prog)

    if client is None and needs_client:
        try:
            client = ClawprintClient()
        except (ConfigError, CredentialStoreError) as exc:
            return print_error(stderr, f"config error: {exc}")

    try:
        return handler(args, client, stdout)
    except InputError as exc:
        return print_error(stderr, str(exc))
    except ValidationError as exc:
        return print_error(stderr, f"invalid data: {describe_validation_error(exc)}")
    except ClawprintError as exc:
        return report_client_error(stderr, action, exc, hints=hints)


def describe_validation_error(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc']) or 'value'}: {error['msg']}"
        for error in exc.errors()
    )


def print_json(stdout, payload: object) -> None:
    print(json.dumps(payload, indent=2, sort_keys=True), file=stdout)


def rule(char: str = "─", width: int = RULE_WIDTH) -> str:
    return char * width


def money(value: object, currency: str | None = None) -> str:
    try:
        amount = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        amount = 0.0
    if currency:
        return f"{currency} {amount:.2f}"
    if amount < 0:
        return f"-${abs(amount):.2f}"
    return f"${amount:.2f}"


def format_date(value: str | None) -> str:
    if not value:
        return "-"
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        return value
