import json
from urllib.parse import quote

import pytest
from starlette.responses import Response

from domain.common.exceptions import ParseException
from web.storage import (
    STORAGE_KEY,
    CookieStore,
    InMemoryStore,
    SearchParams,
    SearchParamsStore,
    StoredSearch,
)


def test_snapshot_shape():
    stored = StoredSearch(SearchParams("2024-01-01T00:00:00", "2024-01-02T23:59:59", "A1"), page=3)
    assert json.loads(stored.to_json()) == {
        "startDate": "2024-01-01T00:00:00",
        "endDate": "2024-01-02T23:59:59",
        "actionId": "A1",
        "page": 3,
    }


def test_action_id_omitted_when_absent():
    stored = StoredSearch(SearchParams("a", "b"))
    assert "actionId" not in json.loads(stored.to_json())


@pytest.mark.parametrize("raw", ["not json", "[1, 2]", '{"startDate": 1, "endDate": "x"}', '{"startDate": "x"}'])
def test_malformed_snapshot_raises_parse_error(raw):
    with pytest.raises(ParseException):
        StoredSearch.from_json(raw)


@pytest.mark.parametrize("page", [None, 0, -2, "3", True])
def test_invalid_page_falls_back_to_first(page):
    raw = json.dumps({"startDate": "a", "endDate": "b", "page": page})
    assert StoredSearch.from_json(raw).page == 1


def test_params_store_round_trip_on_memory_slot():
    slot = InMemoryStore()
    store = SearchParamsStore(slot)
    assert store.load() is None
    store.save(StoredSearch(SearchParams("a", "b", None), page=2))
    assert slot.writes == 1
    assert store.load() == StoredSearch(SearchParams("a", "b", None), page=2)
    store.clear()
    assert slot.value is None


def test_cookie_store_reads_percent_encoded_value():
    raw = json.dumps({"startDate": "a", "endDate": "b", "page": 2})
    store = CookieStore({STORAGE_KEY: quote(raw, safe="")})
    assert store.load() == raw


def test_cookie_store_writes_on_apply():
    store = CookieStore({})
    store.save('{"startDate": "a"}')
    response = Response()
    store.apply(response)
    header = response.headers["set-cookie"]
    assert header.startswith(f"{STORAGE_KEY}=%7B%22startDate%22")
    assert "HttpOnly" in header


def test_cookie_store_clear_deletes_cookie():
    store = CookieStore({STORAGE_KEY: "garbage"})
    store.clear()
    response = Response()
    store.apply(response)
    assert 'Max-Age=0' in response.headers["set-cookie"]


def test_cookie_store_untouched_writes_nothing():
    response = Response()
    CookieStore({STORAGE_KEY: "x"}).apply(response)
    assert "set-cookie" not in response.headers
