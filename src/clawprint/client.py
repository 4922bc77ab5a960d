"""Typed client for Clawprint API endpoints."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol
from urllib.parse import quote, urlencode

from clawprint.config import load_settings
from clawprint.models import FINANCIAL_PERIODS
from clawprint.transport import HTTPTransport

MAX_INVOICE_LIST_LIMIT = 100


class Transport(Protocol):
    def request(self, method: str, path: str, body: object | None = None) -> Any:
        ...


def _segment(value: str) -> str:
    return quote(str(value), safe="")


class _Resource:
    def __init__(self, client: ClawprintClient) -> None:
        self._client = client

    def _request(self, method: str, path: str, body: object | None = None) -> Any:
        return self._client.request(method, path, body)


class AgentsAPI(_Resource):
    def register(self, email: str, display_name: str | None = None) -> dict:
        return self._request("POST", "/agents", {"email": email, "display_name": display_name})


class BusinessesAPI(_Resource):
    def create(self, data: dict) -> dict:
        return self._request("POST", "/businesses", data)

    def list(self) -> list:
        return self._request("GET", "/businesses")

    def get(self, business_id: str) -> dict:
        return self._request("GET", f"/businesses/{_segment(business_id)}")

    def get_status(self, business_id: str) -> dict:
        return self._request("GET", f"/businesses/{_segment(business_id)}/status")

    def get_financials(self, business_id: str, period: str = "all") -> dict:
        if period not in FINANCIAL_PERIODS:
            raise ValueError(f"period must be one of: {', '.join(FINANCIAL_PERIODS)}")
        query = urlencode({"period": period})
        return self._request("GET", f"/businesses/{_segment(business_id)}/financials?{query}")

    def update(self, business_id: str, updates: dict) -> dict:
        return self._request("PATCH", f"/businesses/{_segment(business_id)}", updates)

    def dissolve(self, business_id: str) -> dict:
        return self._request("DELETE", f"/businesses/{_segment(business_id)}")


class SponsorsAPI(_Resource):
    def get_or_create(self, data: dict) -> dict:
        return self._request("POST", "/sponsors", data)

    def get_by_email(self, email: str) -> dict:
        return self._request("GET", f"/sponsors?{urlencode({'email': email})}")


class InvoicesAPI(_Resource):
    def create(self, data: dict) -> dict:
        return self._request("POST", "/invoices", data)

    def list(
        self,
        business_id: str,
        *,
        status: str | None = None,
        limit: int | None = None,
    ) -> dict:
        params: dict[str, object] = {"business_id": business_id}
        if status:
            params["status"] = status
        if limit is not None:
            limit = int(limit)
            if limit < 1:
                raise ValueError("limit must be >= 1")
            params["limit"] = min(limit, MAX_INVOICE_LIST_LIMIT)
        return self._request("GET", f"/invoices?{urlencode(params)}")

    def get(self, invoice_id: str) -> dict:
        return self._request("GET", f"/invoices/{_segment(invoice_id)}")

    def update(self, invoice_id: str, updates: dict) -> dict:
        return self._request("PATCH", f"/invoices/{_segment(invoice_id)}", updates)

    def delete(self, invoice_id: str) -> dict:
        return self._request("DELETE", f"/invoices/{_segment(invoice_id)}")

    def generate_payment_link(self, invoice_id: str) -> dict:
        return self._request("POST", f"/invoices/{_segment(invoice_id)}/payment-link")

    def get_payment_link(self, invoice_id: str) -> dict:
        return self._request("GET", f"/invoices/{_segment(invoice_id)}/payment-link")


@dataclass
class ClawprintClient:
    """Resource-grouped facade over one transport.

    Unset options fall back to ``CLAWPRINT_API_URL`` / ``CLAWPRINT_API_KEY`` and
    then to the local credential file.
    """

    base_url: str | None = None
    api_key: str | None = None
    timeout: float | None = None
    transport: Transport | None = None
    agents: AgentsAPI = field(init=False, repr=False)
    businesses: BusinessesAPI = field(init=False, repr=False)
    sponsors: SponsorsAPI = field(init=False, repr=False)
    invoices: InvoicesAPI = field(init=False, repr=False)

    def __post_init__(self) -> None:
        settings = load_settings(api_url=self.base_url, api_key=self.api_key, timeout=self.timeout)
        self.base_url = settings.api_url
        self.api_key = settings.api_key
        self.timeout = settings.timeout
        if self.transport is None:
            self.transport = HTTPTransport(
                base_url=self.base_url,
                api_key=self.api_key,
                timeout=self.timeout,
            )
        self.agents = AgentsAPI(self)
        self.businesses = BusinessesAPI(self)
        self.sponsors = SponsorsAPI(self)
        self.invoices = InvoicesAPI(self)

    def request(self, method: str, path: str, body: object | None = None) -> Any:
        return self.transport.request(method, path, body)

    def health(self) -> dict:
        return self.request("GET", "/health")


_default_client: ClawprintClient | None = None


def get_client(**options: Any) -> ClawprintClient:
    """Return the process-wide client, creating it on first use.

    Options only apply to that first call.
    """
    global _default_client
    if _default_client is None:
        _default_client = ClawprintClient(**options)
    return _default_client


__all__ = [
    "MAX_INVOICE_LIST_LIMIT",
    "Transport",
    "AgentsAPI",
    "BusinessesAPI",
    "SponsorsAPI",
    "InvoicesAPI",
    "ClawprintClient",
    "get_client",
]
