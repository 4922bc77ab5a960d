"""Clawprint client public surface."""

from clawprint.client import (
    AgentsAPI,
    BusinessesAPI,
    ClawprintClient,
    InvoicesAPI,
    SponsorsAPI,
    get_client,
)
from clawprint.config import DEFAULT_API_URL, Settings, load_settings
from clawprint.credentials import read_env, store_credentials, write_env
from clawprint.errors import (
    APIRequestError,
    APITimeoutError,
    ClawprintError,
    ConfigError,
    CredentialStoreError,
    RequestEncodingError,
    ResponseParseError,
    TransportError,
)
from clawprint.models import LineItem, compute_invoice_totals
from clawprint.transport import HTTPTransport

__all__ = [
    "ClawprintClient",
    "get_client",
    "AgentsAPI",
    "BusinessesAPI",
    "SponsorsAPI",
    "InvoicesAPI",
    "HTTPTransport",
    "Settings",
    "load_settings",
    "DEFAULT_API_URL",
    "read_env",
    "write_env",
    "store_credentials",
    "ClawprintError",
    "TransportError",
    "APITimeoutError",
    "APIRequestError",
    "ResponseParseError",
    "RequestEncodingError",
    "CredentialStoreError",
    "ConfigError",
    "LineItem",
    "compute_invoice_totals",
]
