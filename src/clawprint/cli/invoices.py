"""Invoice input parsing and rendering shared by the invoice commands."""

from __future__ import annotations

import json
from typing import Sequence

from pydantic import ValidationError

from clawprint.cli.common import InputError, describe_validation_error, money
from clawprint.models import LineItem

EXAMPLE_LINE_ITEMS = (
    {
        "description": "Consulting Services",
        "quantity": 10,
        "unit_price": 500,
        "type": "service",
        "tax_rate": 10,
    },
)

STATUS_EMOJI = {
    "draft": "📝",
    "sent": "📤",
    "viewed": "👀",
    "paid": "✅",
    "overdue": "⚠️",
    "cancelled": "❌",
    "refunded": "↩️",
}


class LineItemsError(InputError):
    """``--line-items`` is not valid JSON or does not describe line items."""


def parse_line_items(raw: str | None) -> list[LineItem]:
    if raw is None:
        return []
    try:
        decoded = json.loads(raw)
    except ValueError as exc:
        raise LineItemsError(
            "invalid JSON for --line-items; must be a JSON array of line items"
        ) from exc
    if isinstance(decoded, dict):
        decoded = [decoded]
    if not isinstance(decoded, list):
        raise LineItemsError("--line-items must be a JSON array of line items")
    try:
        return [LineItem.model_validate(item) for item in decoded]
    except ValidationError as exc:
        raise LineItemsError(f"invalid line item: {describe_validation_error(exc)}") from exc


def example_line_items() -> list[LineItem]:
    return [LineItem.model_validate(item) for item in EXAMPLE_LINE_ITEMS]


def status_label(status: str) -> str:
    return f"{STATUS_EMOJI.get(status, '❓')} {status.upper()}"


def print_line_items(stdout, items: Sequence[LineItem], currency: str | None = None) -> None:
    for index, item in enumerate(items, start=1):
        print(f"   {index}. {item.description}", file=stdout)
        unit = money(item.unit_price, currency)
        line_total = money(item.subtotal, currency)
        print(f"      {item.quantity:g} × {unit} = {line_total}", file=stdout)
        if item.tax_rate:
            print(f"      Tax: {item.tax_rate:g}% = {money(item.tax, currency)}", file=stdout)
