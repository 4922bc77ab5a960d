"""Check API connectivity and local configuration."""

from __future__ import annotations

import sys
from typing import Sequence

from clawprint.cli.common import (
    EXIT_FAILURE,
    EXIT_SUCCESS,
    WIDE_RULE_WIDTH,
    build_parser,
    print_json,
    rule,
    run_command,
    sanitize_error_text,
)
from clawprint.client import ClawprintClient
from clawprint.errors import ClawprintError
from clawprint.models import Health

PROG = "check-api"


def _build_parser():
    return build_parser(PROG, "Check Clawprint API connectivity and configuration.")


def _service_line(name: str, state: str | None) -> str:
    mark = "✅" if state == "up" else "❌"
    return f"   {name}: {mark} {state or 'unknown'}"


def _run(args, client: ClawprintClient, stdout) -> int:
    heavy = rule("═", WIDE_RULE_WIDTH)
    try:
        response = client.health()
    except ClawprintError as exc:
        if args.json:
            print_json(
                stdout,
                {
                    "api_url": client.base_url,
                    "reachable": False,
                    "error": sanitize_error_text(str(exc)),
                },
            )
            return EXIT_FAILURE
        print("🔍 Clawprint API Connectivity Check", file=stdout)
        print(f"   API URL: {client.base_url}", file=stdout)
        print("   Health endpoint: ❌ Unreachable", file=stdout)
        print(f"   Error: {sanitize_error_text(str(exc))}", file=stdout)
        print("", file=stdout)
        print("🔧 Troubleshooting:", file=stdout)
        print("   1. Check that the API server is running", file=stdout)
        print(f"   2. Verify CLAWPRINT_API_URL is correct (current: {client.base_url})", file=stdout)
        print("   3. Check firewall/network settings", file=stdout)
        print("   4. Review API server logs for errors", file=stdout)
        return EXIT_FAILURE

    health = Health.model_validate(response)
    if args.json:
        print_json(
            stdout,
            {
                "api_url": client.base_url,
                "api_key_configured": bool(client.api_key),
                "reachable": True,
                "health": response,
            },
        )
        return EXIT_SUCCESS

    print("🔍 Clawprint API Connectivity Check", file=stdout)
    print(heavy, file=stdout)
    print("", file=stdout)
    print("📋 Configuration:", file=stdout)
    print(f"   API URL: {client.base_url}", file=stdout)
    print(f"   API Key: {'✅ Set' if client.api_key else '❌ Not set'}", file=stdout)
    if not client.api_key:
        print("", file=stdout)
        print("⚠️  Warning: API key not configured", file=stdout)
        print("   Run setup-agent or set CLAWPRINT_API_KEY", file=stdout)
    print("", file=stdout)
    print("📋 Connectivity:", file=stdout)
    print("   Health endpoint: ✅ Reachable", file=stdout)
    print(f"   API Version: {health.version or 'unknown'}", file=stdout)
    for name, state in sorted(health.services.items()):
        print(_service_line(name.capitalize(), state), file=stdout)
    print("", file=stdout)
    if health.status == "healthy":
        print("✅ API is healthy and ready to use!", file=stdout)
    else:
        print("⚠️  API is reachable but some services are degraded", file=stdout)
    print(heavy, file=stdout)
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
        action="checking API",
        client=client,
        stdout=stdout,
        stderr=stderr,
    )


if __name__ == "__main__":
    raise SystemExit(main())
