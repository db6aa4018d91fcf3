import pytest

from application.dtos.transactions import PaystackMeta, TransactionPage
from application.services.transaction_service import TransactionQueryService, build_query
from domain.common.exceptions import UpstreamException, ValidationException
from domain.transaction.entity import Refund, Transaction
from tests.fakes import make_transaction


class StubGateway:
    provider = "stub"

    def __init__(self, transactions=None, total=None, refunds=None, error=None):
        self.transactions = [Transaction.model_validate(t) for t in (transactions or [])]
        self.total = total if total is not None else len(self.transactions)
        self.refunds = [Refund.model_validate(r) for r in (refunds or [])]
        self.error = error
        self.calls = []
        self.closed = False

    async def list_transactions(self, *, page, per_page, start, end):  # type: ignore[override]
        self.calls.append({"page": page, "per_page": per_page, "start": start, "end": end})
        if self.error:
            raise self.error
        return TransactionPage(transactions=self.transactions, meta=PaystackMeta(total=self.total))

    async def get_transaction(self, transaction_id):  # type: ignore[override]
        if self.error:
            raise self.error
        return self.transactions[0]

    async def list_refunds(self):  # type: ignore[override]
        if self.error:
            raise self.error
        return self.refunds

    async def aclose(self):  # type: ignore[override]
        self.closed = True


def test_build_query_requires_both_dates():
    for start, end in [(None, "2024-01-02"), ("2024-01-01", None), ("", ""), ("  ", "2024-01-02")]:
        with pytest.raises(ValidationException) as exc:
            build_query(start, end)
        assert exc.value.message == "Start date and end date are required"
        assert exc.value.status_code == 400


def test_build_query_rejects_unparseable_dates():
    with pytest.raises(ValidationException) as exc:
        build_query("yesterday", "2024-01-02")
    assert exc.value.field == "startDate"


def test_build_query_normalises_to_utc():
    query = build_query("2024-01-01T09:00:00", "2024-01-03T17:30:59", page=2, action_id="A1")
    assert query.start == "2024-01-01T09:00:00.000Z"
    assert query.end == "2024-01-03T17:30:59.000Z"
    assert query.page == 2
    assert query.action_id == "A1"


@pytest.mark.asyncio
async def test_list_without_action_id_passes_upstream_page_through():
    gateway = StubGateway(transactions=[make_transaction(1), make_transaction(2)], total=120)
    svc = TransactionQueryService(gateway=gateway)
    result = await svc.list_transactions(build_query("2024-01-01", "2024-01-31", page=2, action_id="  "))
    assert [t.id for t in result.transactions] == [1, 2]
    assert result.pagination.total == 120
    assert result.pagination.totalPages == 3
    assert result.pagination.currentPage == 2
    assert result.pagination.perPage == 50
    assert gateway.calls == [
        {"page": 2, "per_page": 50, "start": "2024-01-01T00:00:00.000Z", "end": "2024-01-31T00:00:00.000Z"}
    ]


@pytest.mark.asyncio
async def test_action_id_filter_recomputes_pagination_from_page():
    gateway = StubGateway(
        transactions=[make_transaction(1, action_id="A1"), make_transaction(2, action_id="B2"), make_transaction(3, action_id="A1")],
        total=500,
    )
    svc = TransactionQueryService(gateway=gateway)
    result = await svc.list_transactions(build_query("2024-01-01", "2024-01-31", action_id="A1"))
    assert [t.id for t in result.transactions] == [1, 3]
    assert result.pagination.total == 2
    assert result.pagination.totalPages == 1


@pytest.mark.asyncio
async def test_action_id_without_matches_yields_empty_result():
    gateway = StubGateway(transactions=[make_transaction(1, action_id="B2")], total=80)
    svc = TransactionQueryService(gateway=gateway)
    result = await svc.list_transactions(build_query("2024-01-01", "2024-01-31", action_id="A1"))
    assert result.transactions == []
    assert result.pagination.total == 0
    assert result.pagination.totalPages == 0


@pytest.mark.asyncio
async def test_unexpected_gateway_error_becomes_upstream_error():
    svc = TransactionQueryService(gateway=StubGateway(error=RuntimeError("boom")))
    with pytest.raises(UpstreamException) as exc:
        await svc.list_transactions(build_query("2024-01-01", "2024-01-31"))
    assert exc.value.message == "Failed to fetch transactions"
    assert exc.value.status_code == 500


@pytest.mark.asyncio
async def test_upstream_errors_propagate_unchanged():
    error = UpstreamException("Failed to fetch transaction: Transaction not found", status_code=404)
    svc = TransactionQueryService(gateway=StubGateway(error=error))
    with pytest.raises(UpstreamException) as exc:
        await svc.get_transaction("999")
    assert exc.value is error


@pytest.mark.asyncio
async def test_blank_transaction_id_is_rejected():
    svc = TransactionQueryService(gateway=StubGateway())
    with pytest.raises(ValidationException):
        await svc.get_transaction("  ")
    with pytest.raises(ValidationException):
        await svc.get_refunds("")


@pytest.mark.asyncio
async def test_get_refunds_keeps_only_owned_refunds():
    gateway = StubGateway(refunds=[
        {"id": 1, "transaction": 12345, "amount": 500},
        {"id": 2, "transaction": 67890, "amount": 700},
    ])
    svc = TransactionQueryService(gateway=gateway)
    refunds = await svc.get_refunds("12345")
    assert [r.id for r in refunds] == [1]
    assert await svc.get_refunds("abc") == []


@pytest.mark.asyncio
async def test_aclose_closes_gateway():
    gateway = StubGateway()
    await TransactionQueryService(gateway=gateway).aclose()
    assert gateway.closed
