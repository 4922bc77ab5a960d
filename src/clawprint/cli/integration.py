"""Live integration checks against a running Clawprint API.

Creates real agents, sponsors, businesses and invoices. Pass ``--cleanup`` to
dissolve the created business at the end.
"""

from __future__ import annotations

import sys
import time
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, Sequence

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
from clawprint.errors import APIRequestError, ClawprintError

PROG = "test-api"

TEST_EMAIL_DOMAIN = "clawprint.test"


class CheckFailed(AssertionError):
    pass


def expect(condition: object, message: str) -> None:
    if not condition:
        raise CheckFailed(message)


def expect_rejected(call: Callable[[], Any], status_code: int) -> APIRequestError:
    """Run ``call`` and require it to fail with ``status_code``."""
    try:
        call()
    except APIRequestError as exc:
        expect(exc.status_code == status_code, f"expected {status_code}, got {exc.status_code}")
        return exc
    raise CheckFailed(f"expected {status_code}, request succeeded")


@dataclass
class SuiteResult:
    passed: list[str] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.passed) + len(self.failed)


def new_stamp() -> str:
    return str(int(time.time() * 1000))


class CheckRunner:
    """Runs named checks, printing one line each and collecting a ``SuiteResult``.

    Subclasses provide ``stdout``, ``quiet`` and ``result`` attributes.
    """

    stdout: Any
    quiet: bool
    result: SuiteResult

    def _say(self, line: str = "") -> None:
        if not self.quiet:
            print(line, file=self.stdout)

    def check(self, name: str, fn: Callable[[], None]) -> bool:
        try:
            fn()
        except (CheckFailed, ClawprintError, AttributeError, KeyError, TypeError) as exc:
            message = sanitize_error_text(str(exc))
            self.result.failed.append((name, message))
            self._say(f"❌ {name}")
            self._say(f"   Error: {message}")
            return False
        self.result.passed.append(name)
        self._say(f"✅ {name}")
        return True


@dataclass
class IntegrationSuite(CheckRunner):
    client: ClawprintClient
    stdout: Any
    cleanup: bool = False
    quiet: bool = False
    stamp: str = field(default_factory=new_stamp)
    result: SuiteResult = field(default_factory=SuiteResult)
    business_id: str | None = None
    sponsor_email: str | None = None

    def run(self) -> SuiteResult:
        self._say("🚀 Starting Clawprint API Integration Tests")
        self._say(rule("═", WIDE_RULE_WIDTH))

        self._say("")
        self._say("📋 Health")
        self.check("Health check", self._health)

        self._say("")
        self._say("📋 Agents")
        agent_email = f"test-agent-{self.stamp}@{TEST_EMAIL_DOMAIN}"
        if self.check("Agent registration", lambda: self._register(agent_email)):
            self.check("Duplicate registration rejected", lambda: self._duplicate(agent_email))

        self._say("")
        self._say("📋 Sponsors")
        self.sponsor_email = f"test-sponsor-{self.stamp}@{TEST_EMAIL_DOMAIN}"
        self.check("Create sponsor", self._create_sponsor)
        self.check("Get sponsor by email", self._get_sponsor)

        self._say("")
        self._say("📋 Businesses")
        self.check("Create business", self._create_business)
        self.check("List businesses", self._list_businesses)
        if self.business_id:
            self.check("Get business by ID", self._get_business)
            self.check("Get business status", self._get_status)
            self.check("Get business financials", self._get_financials)
            self.check("Update business", self._update_business)

            self._say("")
            self._say("📋 Invoices")
            self.check("Create invoice", self._create_invoice)
            self.check("List invoices", self._list_invoices)

            if self.cleanup:
                self._say("")
                self.check("Dissolve business", self._dissolve)
        return self.result

    def _health(self) -> None:
        health = self.client.health()
        expect(health.get("status") == "healthy", f"status is {health.get('status')!r}")

    def _register(self, email: str) -> None:
        agent = self.client.agents.register(email, "Test Agent")
        public_key = str(agent.get("public_key") or "")
        secret_key = str(agent.get("secret_key") or "")
        expect(public_key.startswith("pk_"), "public key should start with pk_")
        expect(secret_key.startswith("sk_"), "secret key should start with sk_")

    def _duplicate(self, email: str) -> None:
        expect_rejected(lambda: self.client.agents.register(email, "Test Agent"), 409)

    def _create_sponsor(self) -> None:
        sponsor = self.client.sponsors.get_or_create(
            {"email": self.sponsor_email, "first_name": "Test", "last_name": "Sponsor"}
        )
        expect(sponsor.get("email") == self.sponsor_email, "sponsor email mismatch")

    def _get_sponsor(self) -> None:
        sponsor = self.client.sponsors.get_by_email(self.sponsor_email)
        expect(sponsor and sponsor.get("email") == self.sponsor_email, "sponsor email mismatch")

    def _create_business(self) -> None:
        business = self.client.businesses.create(
            {
                "legal_name": f"Acme AI {self.stamp}",
                "purpose": "Integration testing",
                "sponsor_email": self.sponsor_email,
                "type": "llc",
                "formation_state": "delaware",
            }
        )
        expect(business.get("business_id"), "no business_id returned")
        self.business_id = business["business_id"]
        expect(business.get("status") == "forming", f"status is {business.get('status')!r}")

    def _list_businesses(self) -> None:
        businesses = self.client.businesses.list()
        expect(isinstance(businesses, list) and businesses, "expected a non-empty list")

    def _get_business(self) -> None:
        business = self.client.businesses.get(self.business_id)
        expect(business.get("business_id") == self.business_id, "business_id mismatch")

    def _get_status(self) -> None:
        status = self.client.businesses.get_status(self.business_id)
        expect(status.get("business_id") == self.business_id, "business_id mismatch")

    def _get_financials(self) -> None:
        financials = self.client.businesses.get_financials(self.business_id, "all")
        expect(financials.get("business_id") == self.business_id, "business_id mismatch")

    def _update_business(self) -> None:
        purpose = "Updated purpose for testing"
        updated = self.client.businesses.update(self.business_id, {"purpose": purpose})
        expect(updated.get("purpose") == purpose, "purpose was not updated")

    def _create_invoice(self) -> None:
        invoice = self.client.invoices.create(
            {
                "business_id": self.business_id,
                "customer_email": f"customer-{self.stamp}@example.com",
                "line_items": [
                    {"description": "Service", "quantity": 1, "unit_price": 5000, "tax_rate": 10}
                ],
            }
        )
        expect(invoice.get("invoice_id"), "no invoice_id returned")
        for key, expected in (("amount", 5000), ("tax_amount", 500), ("total_amount", 5500)):
            actual = invoice.get(key)
            expect(
                actual is not None and Decimal(str(actual)) == expected,
                f"{key} is {actual!r}, expected {expected}",
            )

    def _list_invoices(self) -> None:
        listing = self.client.invoices.list(self.business_id)
        expect(isinstance(listing.get("invoices"), list), "expected an invoices array")

    def _dissolve(self) -> None:
        self.client.businesses.dissolve(self.business_id)


def _build_parser():
    parser = build_parser(PROG, "Run live integration checks against the Clawprint API.")
    parser.add_argument("--cleanup", action="store_true", help="Dissolve test data afterwards")
    return parser


def result_payload(result: SuiteResult, **extra: Any) -> dict[str, Any]:
    return {
        "total": result.total,
        "passed": result.passed,
        "failed": [{"name": name, "error": error} for name, error in result.failed],
        **extra,
    }


def print_summary(stdout, result: SuiteResult) -> None:
    print("", file=stdout)
    print(rule("═", WIDE_RULE_WIDTH), file=stdout)
    print("📊 Test Summary", file=stdout)
    print(f"   Total:  {result.total}", file=stdout)
    print(f"   ✅ Passed: {len(result.passed)}", file=stdout)
    print(f"   ❌ Failed: {len(result.failed)}", file=stdout)
    if result.total:
        print(f"   Success Rate: {round(len(result.passed) * 100 / result.total)}%", file=stdout)


def print_verdict(stdout, result: SuiteResult) -> int:
    print("", file=stdout)
    if result.failed:
        print("⚠️  Some tests failed. Check errors above.", file=stdout)
        return EXIT_FAILURE
    print("🎉 All tests passed!", file=stdout)
    return EXIT_SUCCESS


def _run(args, client: ClawprintClient, stdout) -> int:
    suite = IntegrationSuite(client=client, stdout=stdout, cleanup=args.cleanup, quiet=args.json)
    result = suite.run()

    if args.json:
        print_json(stdout, result_payload(result, business_id=suite.business_id))
        return EXIT_FAILURE if result.failed else EXIT_SUCCESS

    print_summary(stdout, result)
    if suite.business_id and not args.cleanup:
        print("", file=stdout)
        print("💡 Test data created:", file=stdout)
        print(f"   Business: {suite.business_id}", file=stdout)
        print(f"   Sponsor: {suite.sponsor_email}", file=stdout)
        print("   Run with --cleanup to dissolve test data", file=stdout)
    return print_verdict(stdout, result)


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
        action="running integration tests",
        client=client,
        stdout=stdout,
        stderr=stderr,
    )


if __name__ == "__main__":
    raise SystemExit(main())
