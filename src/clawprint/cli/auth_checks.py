"""Live authentication checks against a running Clawprint API.

Registers throwaway agents, then sends requests with missing, malformed and
wrong credentials. Every rejection must be a 401, and the protected endpoints
must accept a freshly issued key.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Callable, Optional, Sequence

from clawprint.cli.common import (
    EXIT_FAILURE,
    EXIT_SUCCESS,
    WIDE_RULE_WIDTH,
    build_parser,
    print_json,
    rule,
    run_command,
)
from clawprint.cli.integration import (
    TEST_EMAIL_DOMAIN,
    CheckFailed,
    CheckRunner,
    SuiteResult,
    expect,
    expect_rejected,
    new_stamp,
    print_summary,
    print_verdict,
    result_payload,
)
from clawprint.client import ClawprintClient
from clawprint.errors import APIRequestError
from clawprint.transport import HTTPTransport, build_auth_header

PROG = "test-auth"

# Authorization header value (None sends no header) -> client using it.
Connector = Callable[[Optional[str]], ClawprintClient]

PROTECTED_ENDPOINTS: tuple[tuple[str, str, dict | None], ...] = (
    ("GET", "/businesses", None),
    ("POST", "/businesses", {"legal_name": "Test", "sponsor_email": "test@example.com"}),
    ("GET", "/invoices?business_id=test", None),
)


class FixedAuthTransport(HTTPTransport):
    """HTTPTransport that sends ``authorization`` verbatim, or no header at all."""

    def __init__(self, *, base_url: str, timeout: float, authorization: str | None) -> None:
        super().__init__(base_url=base_url, timeout=timeout)
        self.authorization = authorization

    def headers(self) -> dict[str, str]:
        headers = super().headers()
        if self.authorization is not None:
            headers["Authorization"] = self.authorization
        return headers


def http_connector(base_url: str, timeout: float) -> Connector:
    clients: dict[str | None, ClawprintClient] = {}

    def connect(authorization: str | None) -> ClawprintClient:
        if authorization not in clients:
            transport = FixedAuthTransport(
                base_url=base_url,
                timeout=timeout,
                authorization=authorization,
            )
            clients[authorization] = ClawprintClient(
                base_url=base_url,
                timeout=timeout,
                transport=transport,
            )
        return clients[authorization]

    return connect


@dataclass
class AuthSuite(CheckRunner):
    connect: Connector
    stdout: Any
    quiet: bool = False
    stamp: str = field(default_factory=new_stamp)
    result: SuiteResult = field(default_factory=SuiteResult)
    api_key: str | None = None
    public_key: str | None = None
    business_id: str | None = None
    first_email: str | None = None

    def _email(self, tag: str) -> str:
        return f"test-{tag}-{self.stamp}@{TEST_EMAIL_DOMAIN}"

    @property
    def anonymous(self) -> ClawprintClient:
        return self.connect(None)

    @property
    def authed(self) -> ClawprintClient:
        return self.connect(build_auth_header(self.api_key or ""))

    def run(self) -> SuiteResult:
        self._say("🔐 API Authentication Test Suite")
        self._say(rule("═", WIDE_RULE_WIDTH))

        self._say("")
        self._say("📋 Agent Registration")
        self.check("Health check returns version", self._health)
        self.check("Register agent with email only", self._register_email_only)
        self.check("Register agent with email and name", self._register_with_name)
        if self.first_email:
            self.check("Reject duplicate email", self._duplicate_email)
        self.check("Reject invalid email format", self._invalid_email)
        self.check("Reject missing email", self._missing_email)
        if not self.check("Register agent for auth checks", self._register_auth_agent):
            return self.result

        self._say("")
        self._say("🔑 Bearer Token Authentication")
        self.check("Accept valid Bearer token", self._valid_token)
        self.check("Reject missing Authorization header", self._missing_header)
        for name, header in (
            ("Reject invalid Bearer format", "InvalidFormat"),
            ("Reject Bearer without token", "Bearer "),
            ("Reject malformed token", "Bearer invalid:token:format"),
            ("Reject unknown public key", build_auth_header("pk_unknown:sk_unknown")),
            ("Reject wrong secret key", build_auth_header(f"{self.public_key}:sk_wrong")),
        ):
            self.check(name, partial(self._rejects_header, header))

        self._say("")
        self._say("🛡️  Protected Endpoints")
        for method, path, body in PROTECTED_ENDPOINTS:
            self.check(f"{method} {path} requires auth", partial(self._requires_auth, method, path))
            self.check(
                f"{method} {path} accepts valid auth",
                partial(self._accepts_auth, method, path, body),
            )

        self._say("")
        self._say("🏢 Business Lifecycle")
        self.check("Create business with authentication", self._create_business)
        if self.business_id:
            self.check("Get business with authentication", self._get_business)

        self._say("")
        self._say("📄 Invoice Operations")
        self.check("Create invoice requires authentication", self._invoice_requires_auth)
        if self.business_id:
            self.check("Create invoice with authentication", self._create_invoice)
            self.check("List invoices with authentication", self._list_invoices)
        return self.result

    def _health(self) -> None:
        health = self.anonymous.health()
        expect(health.get("version"), "health check should return a version")

    def _register_email_only(self) -> None:
        email = self._email("agent")
        agent = self.anonymous.request("POST", "/agents", {"email": email})
        expect(agent.get("user"), "registration should return the user")
        public_key = str(agent.get("public_key") or "")
        secret_key = str(agent.get("secret_key") or "")
        expect(public_key.startswith("pk_"), "public key should start with pk_")
        expect(secret_key.startswith("sk_"), "secret key should start with sk_")
        self.first_email = email

    def _register_with_name(self) -> None:
        email = self._email("named")
        agent = self.anonymous.agents.register(email, "Test Agent")
        user = agent.get("user") or {}
        expect(user.get("email") == email, "user email should match")
        expect(user.get("display_name") == "Test Agent", "display name should match")

    def _post_agent(self, body: dict) -> Callable[[], Any]:
        return partial(self.anonymous.request, "POST", "/agents", body)

    def _duplicate_email(self) -> None:
        expect_rejected(self._post_agent({"email": self.first_email}), 409)

    def _invalid_email(self) -> None:
        expect_rejected(self._post_agent({"email": "not-an-email"}), 400)

    def _missing_email(self) -> None:
        expect_rejected(self._post_agent({"display_name": "Test"}), 400)

    def _register_auth_agent(self) -> None:
        agent = self.anonymous.agents.register(self._email("auth"), "Test Agent for Auth")
        public_key = agent.get("public_key")
        secret_key = agent.get("secret_key")
        expect(public_key and secret_key, "registration returned no key pair")
        self.public_key = public_key
        self.api_key = f"{public_key}:{secret_key}"

    def _valid_token(self) -> None:
        businesses = self.authed.businesses.list()
        expect(isinstance(businesses, list), "expected a list of businesses")

    def _missing_header(self) -> None:
        exc = expect_rejected(self.anonymous.businesses.list, 401)
        expect("Authorization" in exc.message, "error should mention Authorization")

    def _rejects_header(self, header: str) -> None:
        expect_rejected(self.connect(header).businesses.list, 401)

    def _requires_auth(self, method: str, path: str) -> None:
        expect_rejected(partial(self.anonymous.request, method, path), 401)

    def _accepts_auth(self, method: str, path: str, body: dict | None) -> None:
        try:
            self.authed.request(method, path, body)
        except APIRequestError as exc:
            # Validation errors still prove the key was accepted.
            expect(exc.status_code == 400, f"expected 200/201/400, got {exc.status_code}")

    def _create_business(self) -> None:
        business = self.authed.businesses.create(
            {
                "legal_name": f"Test Business {self.stamp}",
                "sponsor_email": f"sponsor-{self.stamp}@example.com",
            }
        )
        expect(business.get("business_id"), "no business_id returned")
        self.business_id = business["business_id"]

    def _get_business(self) -> None:
        business = self.authed.businesses.get(self.business_id)
        expect(business.get("business_id") == self.business_id, "business_id mismatch")

    def _invoice_requires_auth(self) -> None:
        expect_rejected(
            partial(
                self.anonymous.invoices.create,
                {
                    "business_id": "test",
                    "customer_email": "test@example.com",
                    "line_items": [{"description": "Test", "quantity": 1, "unit_price": 100}],
                },
            ),
            401,
        )

    def _create_invoice(self) -> None:
        invoice = self.authed.invoices.create(
            {
                "business_id": self.business_id,
                "customer_email": f"customer-{self.stamp}@example.com",
                "line_items": [
                    {"description": "Test Service", "quantity": 1, "unit_price": 5000, "tax_rate": 10}
                ],
            }
        )
        expect(invoice.get("invoice_id"), "no invoice_id returned")

    def _list_invoices(self) -> None:
        listing = self.authed.invoices.list(self.business_id)
        if not isinstance(listing, dict) or not isinstance(listing.get("invoices"), list):
            raise CheckFailed("expected an invoices array")


def _build_parser():
    return build_parser(PROG, "Run live authentication checks against the Clawprint API.")


def _run(args, client: ClawprintClient, stdout, connect: Connector | None = None) -> int:
    if connect is None:
        connect = http_connector(client.base_url, client.timeout)
    suite = AuthSuite(connect=connect, stdout=stdout, quiet=args.json)
    result = suite.run()

    if args.json:
        print_json(stdout, result_payload(result))
        return EXIT_FAILURE if result.failed else EXIT_SUCCESS

    print_summary(stdout, result)
    return print_verdict(stdout, result)


def main(
    argv: Sequence[str] | None = None,
    *,
    client: ClawprintClient | None = None,
    connect: Connector | None = None,
    stdout=sys.stdout,
    stderr=sys.stderr,
) -> int:
    return run_command(
        parser=_build_parser(),
        argv=argv,
        handler=partial(_run, connect=connect),
        action="running authentication checks",
        client=client,
        stdout=stdout,
        stderr=stderr,
    )


if __name__ == "__main__":
    raise SystemExit(main())
