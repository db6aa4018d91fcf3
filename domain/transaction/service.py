"""
Transaction domain rules: Action ID matching, pagination arithmetic, date
normalisation and refund ownership.

All functions are pure and operate on a single fetched page (at most
PER_PAGE records).
"""
from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from .entity import Refund, Transaction


PER_PAGE = 50
ACTION_ID_FIELD_NAME = "Action ID"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def is_action_id_filter(action_id: Optional[str]) -> bool:
    """A filter is active only for a non-blank Action ID."""
    return bool(action_id and action_id.strip())


def _is_action_id_field(field: Any, action_id: str) -> bool:
    if not isinstance(field, dict) or "value" not in field:
        return False
    named = (
        field.get("display_name") == ACTION_ID_FIELD_NAME
        or field.get("variable_name") == ACTION_ID_FIELD_NAME
    )
    # Exact, case-sensitive comparison; a numeric value never equals a string
    return named and field["value"] == action_id


def matches_action_id(transaction: Transaction, action_id: str) -> bool:
    return any(_is_action_id_field(f, action_id) for f in transaction.custom_fields())


def filter_by_action_id(transactions: Iterable[Transaction], action_id: str) -> list[Transaction]:
    """Keep transactions carrying an "Action ID" custom field equal to `action_id`.

    Only the given page is inspected; matches on other upstream pages are not
    seen. Callers must recompute pagination from the returned length.
    """
    return [t for t in transactions if matches_action_id(t, action_id)]


def total_pages(total: int, per_page: int = PER_PAGE) -> int:
    if per_page <= 0:
        return 0
    return math.ceil(total / per_page)


def to_utc_iso(value: str) -> str:
    """Normalise an ISO-8601 date/date-time to `YYYY-MM-DDTHH:MM:SS.mmmZ`.

    Naive values are taken as UTC. Raises ValueError when unparseable.
    """
    raw = value.strip()
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    else:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.strftime("%Y-%m-%dT%H:%M:%S.") + f"{parsed.microsecond // 1000:03d}Z"


def parse_transaction_id(raw: str) -> Optional[int]:
    """Leading-integer parse of a path id ("12345", "12345abc" -> 12345; "abc" -> None)."""
    match = _LEADING_INT.match(raw or "")
    if not match:
        return None
    return int(match.group(1))


def refunds_for_transaction(refunds: Iterable[Refund], transaction_id: Optional[int]) -> list[Refund]:
    """Refunds owned by `transaction_id`; a None id owns nothing."""
    if transaction_id is None:
        return []
    return [r for r in refunds if r.owning_transaction_id() == transaction_id]
