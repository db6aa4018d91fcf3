"""Display helpers registered as Jinja2 filters."""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from shared.codes.paystack_codes import status_tone


NAIRA_SIGN = "₦"
NOT_AVAILABLE = "N/A"
MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_amount(kobo: Any) -> str:
    """Kobo -> Naira, e.g. 150050 -> "₦1,500.50"; non-numeric amounts render as 0."""
    try:
        naira = Decimal(str(kobo or 0)) / 100
    except InvalidOperation:
        naira = Decimal(0)
    if not naira.is_finite():
        naira = Decimal(0)
    sign = "-" if naira < 0 else ""
    return f"{sign}{NAIRA_SIGN}{abs(naira):,.2f}"


def format_date(value: Any) -> str:
    """ISO timestamp -> "5 Jan 2024, 09:30" (UTC); "N/A" when missing."""
    if not value:
        return NOT_AVAILABLE
    if not isinstance(value, str):
        return str(value)
    raw = value.strip()
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return value
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return f"{parsed.day} {MONTHS[parsed.month - 1]} {parsed.year}, {parsed.hour:02d}:{parsed.minute:02d}"


def status_label(status: Any) -> str:
    if not status:
        return ""
    status = str(status)
    return status[:1].upper() + status[1:]


def or_not_available(value: Any) -> Any:
    return value or NOT_AVAILABLE


def results_summary(current_page: int, per_page: int, total: int) -> str:
    first = (current_page - 1) * per_page + 1
    last = min(current_page * per_page, total)
    noun = "transaction" if total == 1 else "transactions"
    return f"Showing {first}-{last} of {total} {noun}"


FILTERS = {
    "amount": format_amount,
    "datetime": format_date,
    "status_label": status_label,
    "status_tone": status_tone,
    "or_na": or_not_available,
}
