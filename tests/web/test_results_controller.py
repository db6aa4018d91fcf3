import json

import pytest

from core.response import error_response, success_response
from web.results import Empty, Failed, Idle, ResultsController, Succeeded
from web.storage import InMemoryStore, SearchParams, SearchParamsStore
from tests.fakes import make_transaction


class StubQueryClient:
    """Answers date-range queries from a canned list of pages."""

    def __init__(self, pages=None, total_pages=3, error=None):
        self.pages = pages or {}
        self.total_pages = total_pages
        self.error = error
        self.calls = []

    async def fetch_transactions_by_date_range(self, start_date, end_date, page=1, action_id=None):
        self.calls.append((start_date, end_date, page, action_id))
        if self.error:
            return error_response(self.error)
        transactions = self.pages.get(page, [])
        return success_response(data={
            "transactions": transactions,
            "pagination": {"total": 120, "totalPages": self.total_pages, "currentPage": page, "perPage": 50},
        })


PARAMS = SearchParams("2024-01-01T00:00:00", "2024-01-31T23:59:59", "A1")


def _controller(client, slot=None):
    slot = slot if slot is not None else InMemoryStore()
    return ResultsController(client=client, store=SearchParamsStore(slot)), slot


@pytest.mark.asyncio
async def test_search_persists_and_succeeds():
    client = StubQueryClient(pages={1: [make_transaction(1), make_transaction(2)]})
    controller, slot = _controller(client)
    assert isinstance(controller.state, Idle)
    assert not controller.search_performed

    await controller.search(PARAMS)

    assert isinstance(controller.state, Succeeded)
    assert [t.id for t in controller.transactions] == [1, 2]
    assert controller.current_page == 1
    assert controller.total_pages == 3
    assert controller.total_results == 120
    assert json.loads(slot.value) == {
        "startDate": "2024-01-01T00:00:00",
        "endDate": "2024-01-31T23:59:59",
        "actionId": "A1",
        "page": 1,
    }
    assert client.calls == [("2024-01-01T00:00:00", "2024-01-31T23:59:59", 1, "A1")]
    assert controller.summary() == "Showing 1-50 of 120 transactions"


@pytest.mark.asyncio
async def test_empty_result():
    controller, _ = _controller(StubQueryClient(pages={}))
    await controller.search(PARAMS)
    assert isinstance(controller.state, Empty)
    assert controller.transactions == []
    assert controller.search_performed


@pytest.mark.asyncio
async def test_failed_result_keeps_error():
    controller, _ = _controller(StubQueryClient(error="Failed to fetch transactions: Invalid key"))
    await controller.search(PARAMS)
    assert controller.state == Failed(error="Failed to fetch transactions: Invalid key")


@pytest.mark.asyncio
async def test_change_page_requeries_and_persists():
    client = StubQueryClient(pages={1: [make_transaction(1)], 2: [make_transaction(51)]})
    controller, slot = _controller(client)
    await controller.search(PARAMS)

    assert await controller.change_page(2)
    assert controller.current_page == 2
    assert [t.id for t in controller.transactions] == [51]
    assert json.loads(slot.value)["page"] == 2
    assert client.calls[-1][2] == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("page", [0, -1, 4, 1])
async def test_change_page_no_ops(page):
    client = StubQueryClient(pages={1: [make_transaction(1)]})
    controller, slot = _controller(client)
    await controller.search(PARAMS)
    writes = slot.writes

    assert not await controller.change_page(page)
    assert len(client.calls) == 1
    assert slot.writes == writes
    assert controller.current_page == 1


@pytest.mark.asyncio
async def test_change_page_without_search_is_a_no_op():
    client = StubQueryClient()
    controller, slot = _controller(client)
    assert not await controller.change_page(2)
    assert client.calls == []
    assert slot.writes == 0


@pytest.mark.asyncio
async def test_restore_queries_stored_page():
    stored = json.dumps({"startDate": PARAMS.start_date, "endDate": PARAMS.end_date, "page": 2})
    client = StubQueryClient(pages={2: [make_transaction(51)]})
    controller, _ = _controller(client, InMemoryStore(stored))

    assert await controller.restore()
    assert controller.current_page == 2
    assert controller.search_params == SearchParams(PARAMS.start_date, PARAMS.end_date, None)
    assert client.calls == [(PARAMS.start_date, PARAMS.end_date, 2, None)]


@pytest.mark.asyncio
async def test_restore_with_malformed_slot_clears_it_and_stays_idle():
    client = StubQueryClient()
    controller, slot = _controller(client, InMemoryStore("{not json"))

    assert not await controller.restore()
    assert isinstance(controller.state, Idle)
    assert slot.value is None
    assert client.calls == []


@pytest.mark.asyncio
async def test_restore_with_nothing_stored():
    controller, _ = _controller(StubQueryClient())
    assert not await controller.restore()
    assert isinstance(controller.state, Idle)


@pytest.mark.asyncio
async def test_pagination_control_follows_state():
    controller, _ = _controller(StubQueryClient(pages={1: [make_transaction(1)]}, total_pages=1))
    await controller.search(PARAMS)
    assert controller.pagination() is None


@pytest.mark.asyncio
async def test_fetch_without_search_params_stays_idle():
    client = StubQueryClient(pages={1: [make_transaction(1)]})
    controller, _ = _controller(client)

    await controller._perform(1)

    assert isinstance(controller.state, Idle)
    assert client.calls == []
