"""Register an agent and store its credentials in the local ``.env`` file."""

from __future__ import annotations

import re
import sys
from typing import Sequence

from clawprint.cli.common import EXIT_SUCCESS, InputError, build_parser, print_json, run_command
from clawprint.client import ClawprintClient
from clawprint.credentials import API_KEY_ENV_VAR, API_URL_ENV_VAR, default_env_path, store_credentials
from clawprint.errors import ClawprintError
from clawprint.models import AgentRegistration, AgentRegistrationRequest

PROG = "setup-agent"

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class MissingKeysError(ClawprintError):
    """Registration succeeded but the response carried no key pair."""


def _build_parser():
    parser = build_parser(
        PROG,
        "Register an agent with the Clawprint API and store its credentials.",
        examples=('setup-agent --email my-agent@clawprint.ai --name "My Agent"',),
    )
    parser.add_argument("--email", default=None, help="Agent email address")
    parser.add_argument("--name", default=None, help="Display name")
    parser.add_argument(
        "--env-file",
        default=None,
        help="Credential file to update (default: $CLAWPRINT_ENV_FILE or ./.env)",
    )
    return parser


def mask_secret(secret: str, visible: int = 8) -> str:
    return f"{secret[:visible]}..."


def _run(args, client: ClawprintClient, stdout) -> int:
    email = args.email.strip()
    if not _EMAIL_RE.match(email):
        raise InputError("invalid email address")
    request = AgentRegistrationRequest(email=email, display_name=args.name)
    env_path = args.env_file or default_env_path()

    if not args.json:
        print("🔐 Clawprint Agent Setup", file=stdout)
        print("", file=stdout)
        print("📡 Registering agent with Clawprint API...", file=stdout)
        print(f"   API: {client.base_url}", file=stdout)
        print(f"   Email: {email}", file=stdout)
        if args.name:
            print(f"   Name: {args.name}", file=stdout)
        print("", file=stdout)

    response = client.agents.register(request.email, request.display_name)
    registration = AgentRegistration.model_validate(response)
    if not registration.public_key or not registration.secret_key:
        raise MissingKeysError("server did not return API keys")

    written = store_credentials(
        public_key=registration.public_key,
        secret_key=registration.secret_key,
        api_url=client.base_url,
        path=env_path,
    )

    if args.json:
        print_json(
            stdout,
            {
                "email": email,
                "public_key": registration.public_key,
                "credentials_file": str(written),
            },
        )
        return EXIT_SUCCESS

    print("✅ Agent registered successfully!", file=stdout)
    print("", file=stdout)
    print("📋 API Credentials:", file=stdout)
    print(f"   Public Key: {registration.public_key}", file=stdout)
    print(f"   Secret Key: {mask_secret(registration.secret_key)}", file=stdout)
    print("", file=stdout)
    print(f"💾 Credentials saved to: {written}", file=stdout)
    print(f"   {API_KEY_ENV_VAR}={registration.public_key}:<secret>", file=stdout)
    print(f"   {API_URL_ENV_VAR}={client.base_url}", file=stdout)
    print("", file=stdout)
    print("⚠️  Keep your secret key safe!", file=stdout)
    print("   Do not commit .env to version control.", file=stdout)
    print("   Do not share your secret key.", file=stdout)
    print("", file=stdout)
    print("🚀 Next: check-api, then create-business", file=stdout)
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
        action="registering agent",
        client=client,
        stdout=stdout,
        stderr=stderr,
        required=("email",),
        hints={
            409: (
                "This email is already registered.",
                "Use a different email address.",
            ),
        },
    )


if __name__ == "__main__":
    raise SystemExit(main())
