"""
Results view: explicit state machine driving the search results page.

    Idle --search/restore--> Loading --> Succeeded | Empty | Failed
    Succeeded --change_page--> Loading --> ...

The last search (dates, action id, page) is persisted through an injected
store on every search and page change and read back by `restore()`.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

from pydantic import ValidationError

from core.logging_config import get_logger
from domain.common.exceptions import ParseException
from domain.transaction.entity import Transaction
from domain.transaction.service import PER_PAGE
from web.client import TransactionApiClient
from web.formatting import results_summary
from web.pagination import PaginationControl, build_pagination
from web.storage import SearchParams, SearchParamsStore, StoredSearch


logger = get_logger(__name__)


@dataclass(frozen=True)
class Idle:
    kind: str = "idle"


@dataclass(frozen=True)
class Loading:
    kind: str = "loading"


@dataclass(frozen=True)
class Succeeded:
    transactions: list[Transaction]
    total: int
    total_pages: int
    kind: str = "succeeded"


@dataclass(frozen=True)
class Empty:
    kind: str = "empty"


@dataclass(frozen=True)
class Failed:
    error: str
    kind: str = "failed"


ViewState = Union[Idle, Loading, Succeeded, Empty, Failed]


@dataclass
class ResultsController:
    client: TransactionApiClient
    store: SearchParamsStore
    state: ViewState = field(default_factory=Idle)
    search_params: Optional[SearchParams] = None
    current_page: int = 1
    total_pages: int = 0
    total_results: int = 0

    @property
    def is_loading(self) -> bool:
        return isinstance(self.state, Loading)

    @property
    def search_performed(self) -> bool:
        return not isinstance(self.state, Idle)

    @property
    def transactions(self) -> list[Transaction]:
        return self.state.transactions if isinstance(self.state, Succeeded) else []

    async def search(self, params: SearchParams) -> None:
        """New search: back to page 1, persisted, then queried."""
        self.search_params = params
        self.current_page = 1
        self.store.save(StoredSearch(params=params, page=1))
        await self._perform(1)

    async def change_page(self, page: int) -> bool:
        """Re-query another page; returns False when the request is a no-op."""
        if (
            self.search_params is None
            or page < 1
            or page > self.total_pages
            or page == self.current_page
        ):
            return False
        self.store.save(StoredSearch(params=self.search_params, page=page))
        self.current_page = page
        await self._perform(page)
        return True

    async def restore(self) -> bool:
        """Resume the persisted search; a corrupt slot is cleared and ignored."""
        try:
            stored = self.store.load()
        except ParseException as exc:
            logger.warning("stored_search_invalid", error=exc.message)
            self.store.clear()
            return False
        if stored is None:
            return False
        self.search_params = stored.params
        self.current_page = stored.page
        await self._perform(stored.page)
        return True

    async def _perform(self, page: int) -> None:
        params = self.search_params
        if params is None:
            logger.warning("search_without_params", page=page)
            return
        self.state = Loading()
        result = await self.client.fetch_transactions_by_date_range(
            params.start_date, params.end_date, page, params.action_id
        )
        if not result.success or not isinstance(result.data, dict):
            logger.error("transactions_fetch_failed", error=result.error, page=page)
            self.state = Failed(error=result.error or "Failed to fetch transactions")
            return
        try:
            transactions = [Transaction.model_validate(t) for t in result.data.get("transactions") or []]
            pagination = result.data.get("pagination") or {}
            self.total_pages = int(pagination.get("totalPages", 0))
            self.total_results = int(pagination.get("total", 0))
        except (ValidationError, TypeError, ValueError) as exc:
            logger.error("transactions_payload_invalid", error=str(exc), page=page)
            self.state = Failed(error="Failed to fetch transactions")
            return
        if not transactions:
            self.state = Empty()
            return
        self.state = Succeeded(
            transactions=transactions,
            total=self.total_results,
            total_pages=self.total_pages,
        )

    def pagination(self) -> Optional[PaginationControl]:
        return build_pagination(self.current_page, self.total_pages, self.is_loading)

    def summary(self) -> str:
        return results_summary(self.current_page, PER_PAGE, self.total_results)
