"""
Server-rendered pages: search form, results and transaction detail.

The pages talk to the gateway through the client query service, in-process
over ASGI unless GATEWAY_BASE_URL points elsewhere. The last search lives in a
cookie that plays the role of browser local storage.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import httpx
from fastapi import APIRouter, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from api.middleware import RequestIDMiddleware
from core.config import settings
from core.logging_config import get_logger
from web.client import TransactionApiClient
from web.detail import TransactionDetailController
from web.formatting import FILTERS
from web.results import ResultsController
from web.search_form import (
    DEFAULT_END_TIME,
    DEFAULT_START_TIME,
    SearchFormState,
    default_start_placeholder,
    max_selectable_date,
)
from web.storage import CookieStore, SearchParamsStore


logger = get_logger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parents[2] / "web" / "templates"
IN_PROCESS_BASE_URL = "http://gateway/api"

templates = Jinja2Templates(directory=str(TEMPLATE_DIR))
templates.env.filters.update(FILTERS)

router = APIRouter(tags=["Pages"], include_in_schema=False)


def build_gateway_client(request: Request) -> TransactionApiClient:
    """Client for the gateway; the request id is forwarded to keep one trace."""
    headers = {}
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        headers[RequestIDMiddleware.HEADER_NAME] = request_id
    if settings.GATEWAY_BASE_URL:
        return TransactionApiClient(settings.GATEWAY_BASE_URL, headers=headers)
    return TransactionApiClient(
        IN_PROCESS_BASE_URL,
        transport=httpx.ASGITransport(app=request.app),
        headers=headers,
    )


def _render_search(
    request: Request,
    results: ResultsController,
    form: SearchFormState,
    store: CookieStore,
    form_error: Optional[str] = None,
) -> HTMLResponse:
    context: dict[str, Any] = {
        "title": settings.PROJECT_NAME,
        "form": form,
        "form_error": form_error,
        "max_date": max_selectable_date(),
        "start_placeholder": default_start_placeholder(),
        "results": results,
        "state": results.state,
        "pagination": results.pagination(),
    }
    response = templates.TemplateResponse(request, "index.html", context)
    store.apply(response)
    return response


@router.get("/", response_class=HTMLResponse)
async def index(request: Request, page: Optional[int] = Query(default=None)):
    """Restore the last search; `?page=N` moves the restored search to page N."""
    store = CookieStore(request.cookies)
    async with build_gateway_client(request) as client:
        results = ResultsController(client=client, store=SearchParamsStore(store))
        restored = await results.restore()
        if restored and page is not None:
            await results.change_page(page)
    return _render_search(request, results, SearchFormState.from_initial(results.search_params), store)


@router.get("/search", response_class=HTMLResponse)
async def search(
    request: Request,
    start_date: str = Query(default="", alias="startDate"),
    start_time: str = Query(default=DEFAULT_START_TIME, alias="startTime"),
    end_date: str = Query(default="", alias="endDate"),
    end_time: str = Query(default=DEFAULT_END_TIME, alias="endTime"),
    action_id: str = Query(default="", alias="actionId"),
):
    form = SearchFormState(
        start_date=start_date.strip(),
        start_time=start_time.strip() or DEFAULT_START_TIME,
        end_date=end_date.strip(),
        end_time=end_time.strip() or DEFAULT_END_TIME,
        action_id=action_id.strip(),
    )
    store = CookieStore(request.cookies)
    async with build_gateway_client(request) as client:
        results = ResultsController(client=client, store=SearchParamsStore(store))
        if not form.can_submit():
            logger.info("search_rejected", reason="missing_dates")
            return _render_search(request, results, form, store, form_error="Start date and end date are required")
        await results.search(form.compose())
    return _render_search(request, results, form, store)


@router.get("/transactions/{transaction_id}", response_class=HTMLResponse)
async def transaction_detail(request: Request, transaction_id: str, refresh: bool = Query(default=False)):
    async with build_gateway_client(request) as client:
        detail = TransactionDetailController(client, transaction_id)
        if refresh:
            await detail.refresh()
        else:
            await detail.load()
    context = {
        "title": settings.PROJECT_NAME,
        "detail": detail,
        "transaction": detail.transaction,
        "refunds": detail.refunds,
    }
    return templates.TemplateResponse(
        request,
        "transaction_detail.html",
        context,
        status_code=404 if detail.not_found else 200,
    )
