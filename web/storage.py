"""
Persistence boundary for the last search.

`KeyValueStore` is the injectable slot (browser local storage in spirit):
`InMemoryStore` for tests and a cookie-backed store for the server-rendered
pages. `SearchParamsStore` encodes/decodes the JSON snapshot on top of it.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol
from urllib.parse import quote, unquote

from starlette.responses import Response

from domain.common.exceptions import ParseException


STORAGE_KEY = "transactionSearchParams"
COOKIE_MAX_AGE = 60 * 60 * 24 * 365


class KeyValueStore(Protocol):
    def load(self) -> Optional[str]: ...

    def save(self, value: str) -> None: ...

    def clear(self) -> None: ...


class InMemoryStore:
    def __init__(self, value: Optional[str] = None) -> None:
        self.value = value
        self.writes = 0

    def load(self) -> Optional[str]:
        return self.value

    def save(self, value: str) -> None:
        self.value = value
        self.writes += 1

    def clear(self) -> None:
        self.value = None


class CookieStore:
    """Reads the slot from request cookies; writes are queued until `apply()`."""

    _UNSET = object()

    def __init__(self, cookies: Mapping[str, str], key: str = STORAGE_KEY) -> None:
        self.key = key
        self._current: Optional[str] = None
        raw = cookies.get(key)
        if raw:
            self._current = unquote(raw)
        self._pending: Any = self._UNSET

    def load(self) -> Optional[str]:
        return self._current

    def save(self, value: str) -> None:
        self._current = value
        self._pending = value

    def clear(self) -> None:
        self._current = None
        self._pending = None

    def apply(self, response: Response) -> None:
        if self._pending is self._UNSET:
            return
        if self._pending is None:
            response.delete_cookie(self.key)
        else:
            response.set_cookie(
                self.key,
                quote(self._pending, safe=""),
                max_age=COOKIE_MAX_AGE,
                httponly=True,
                samesite="lax",
            )


@dataclass(frozen=True)
class SearchParams:
    start_date: str
    end_date: str
    action_id: Optional[str] = None


@dataclass(frozen=True)
class StoredSearch:
    params: SearchParams
    page: int = 1

    def to_json(self) -> str:
        payload: dict[str, Any] = {
            "startDate": self.params.start_date,
            "endDate": self.params.end_date,
        }
        if self.params.action_id is not None:
            payload["actionId"] = self.params.action_id
        payload["page"] = self.page
        return json.dumps(payload)

    @classmethod
    def from_json(cls, raw: str) -> "StoredSearch":
        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise ParseException("Stored search is not valid JSON", raw=raw) from exc
        if not isinstance(data, dict):
            raise ParseException("Stored search is not an object", raw=raw)
        start, end = data.get("startDate"), data.get("endDate")
        if not isinstance(start, str) or not isinstance(end, str):
            raise ParseException("Stored search has no date range", raw=raw)
        action_id = data.get("actionId")
        if action_id is not None and not isinstance(action_id, str):
            raise ParseException("Stored actionId is not a string", raw=raw)
        page = data.get("page")
        # A missing or zero page means "first page"
        if not isinstance(page, int) or isinstance(page, bool) or page < 1:
            page = 1
        return cls(params=SearchParams(start, end, action_id), page=page)


class SearchParamsStore:
    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def load(self) -> Optional[StoredSearch]:
        """Last saved search; raises ParseException when the slot is corrupt."""
        raw = self.store.load()
        if not raw:
            return None
        return StoredSearch.from_json(raw)

    def save(self, value: StoredSearch) -> None:
        self.store.save(value.to_json())

    def clear(self) -> None:
        self.store.clear()
