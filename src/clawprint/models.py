"""Wire models for Clawprint API resources.

Response models allow extra fields: the server owns these resources and may
add to them. Request models forbid extras so typos fail before any request.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

FINANCIAL_PERIODS = ("month", "quarter", "year", "all")
FinancialPeriod = Literal["month", "quarter", "year", "all"]


class _Request(BaseModel):
    model_config = ConfigDict(extra="forbid")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class _Response(BaseModel):
    model_config = ConfigDict(extra="allow")


class LineItem(_Request):
    description: str = Field(..., min_length=1)
    quantity: float = Field(..., gt=0)
    unit_price: float = Field(..., ge=0)
    tax_rate: Optional[float] = Field(default=None, ge=0)
    type: Optional[str] = None

    @property
    def subtotal(self) -> Decimal:
        return Decimal(str(self.quantity)) * Decimal(str(self.unit_price))

    @property
    def tax(self) -> Decimal:
        if not self.tax_rate:
            return Decimal("0")
        return self.subtotal * Decimal(str(self.tax_rate)) / Decimal("100")


class InvoiceLineItem(LineItem):
    """Line item as returned by the server; may carry server-side fields."""

    model_config = ConfigDict(extra="allow")


class InvoiceTotals(BaseModel):
    amount: Decimal
    tax_amount: Decimal
    total_amount: Decimal


def compute_invoice_totals(line_items: List[LineItem]) -> InvoiceTotals:
    amount = sum((item.subtotal for item in line_items), Decimal("0"))
    tax_amount = sum((item.tax for item in line_items), Decimal("0"))
    return InvoiceTotals(amount=amount, tax_amount=tax_amount, total_amount=amount + tax_amount)


class AgentRegistrationRequest(_Request):
    email: str = Field(..., min_length=3)
    display_name: Optional[str] = None


class AgentRegistration(_Response):
    public_key: Optional[str] = None
    secret_key: Optional[str] = None
    message: Optional[str] = None
    user: Optional[Dict[str, Any]] = None

    @property
    def api_key(self) -> str:
        return f"{self.public_key}:{self.secret_key}"


class BusinessCreateRequest(_Request):
    legal_name: str = Field(..., min_length=1)
    sponsor_email: str = Field(..., min_length=3)
    purpose: Optional[str] = None
    type: Optional[str] = None
    formation_state: Optional[str] = None
    agent_id: Optional[str] = None


class Business(_Response):
    business_id: str
    legal_name: Optional[str] = None
    purpose: Optional[str] = None
    sponsor_email: Optional[str] = None
    type: Optional[str] = None
    formation_state: Optional[str] = None
    status: Optional[str] = None
    sponsor_verification_sent: Optional[bool] = None
    estimated_completion: Optional[str] = None
    next_steps: List[str] = Field(default_factory=list)


class BusinessStatus(_Response):
    business_id: str
    name: Optional[str] = None
    status: str = "unknown"
    created_at: Optional[str] = None
    llc: Dict[str, Any] = Field(default_factory=dict)
    ein: Dict[str, Any] = Field(default_factory=dict)
    bank_account: Dict[str, Any] = Field(default_factory=dict)
    sponsor: Dict[str, Any] = Field(default_factory=dict)


class Transaction(_Response):
    id: Optional[str] = None
    date: Optional[str] = None
    type: Optional[str] = None
    description: Optional[str] = None
    amount: float = 0.0
    status: Optional[str] = None


class FinancialSummary(_Response):
    revenue: float = 0.0
    expenses: Dict[str, float] = Field(default_factory=dict)
    net_income: float = 0.0
    current_balance: float = 0.0


class Financials(_Response):
    business_id: str
    period: str = "all"
    period_start: Optional[str] = None
    period_end: Optional[str] = None
    summary: FinancialSummary = Field(default_factory=FinancialSummary)
    transactions: List[Transaction] = Field(default_factory=list)


class SponsorRequest(_Request):
    email: str = Field(..., min_length=3)
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class Sponsor(_Response):
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class InvoiceCreateRequest(_Request):
    business_id: str = Field(..., min_length=1)
    customer_email: str = Field(..., min_length=3)
    line_items: List[LineItem] = Field(..., min_length=1)
    customer_name: Optional[str] = None
    invoice_number: Optional[str] = None
    due_date: Optional[str] = None


class Invoice(_Response):
    invoice_id: str
    invoice_number: Optional[str] = None
    business_id: Optional[str] = None
    customer_email: Optional[str] = None
    customer_name: Optional[str] = None
    line_items: List[InvoiceLineItem] = Field(default_factory=list)
    amount: float = 0.0
    tax_amount: float = 0.0
    total_amount: float = 0.0
    currency: str = "USD"
    status: str = "draft"
    due_date: Optional[str] = None
    issued_date: Optional[str] = None
    paid_at: Optional[str] = None
    viewed_at: Optional[str] = None
    notes: Optional[str] = None
    payment_terms: Optional[str] = None
    stripe_payment_link: Optional[str] = None
    stripe_invoice_id: Optional[str] = None


class PaymentLink(_Response):
    payment_link_url: str
    stripe_invoice_id: Optional[str] = None
    expires_at: Optional[str] = None


class Health(_Response):
    status: str = "unknown"
    version: Optional[str] = None
    services: Dict[str, str] = Field(default_factory=dict)


__all__ = [
    "FINANCIAL_PERIODS",
    "FinancialPeriod",
    "LineItem",
    "InvoiceLineItem",
    "InvoiceTotals",
    "compute_invoice_totals",
    "AgentRegistrationRequest",
    "AgentRegistration",
    "BusinessCreateRequest",
    "Business",
    "BusinessStatus",
    "Transaction",
    "FinancialSummary",
    "Financials",
    "SponsorRequest",
    "Sponsor",
    "InvoiceCreateRequest",
    "Invoice",
    "PaymentLink",
    "Health",
]
