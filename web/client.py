"""
Client Query Service: thin calls to the gateway endpoints.

One request per call (no retries, no caching). Failures never raise; they come
back as `Envelope(success=False, error=...)` carrying the gateway's message.
"""
from __future__ import annotations

from typing import Any, Optional

import httpx
from pydantic import ValidationError

from core.logging_config import get_logger
from core.response import Envelope, error_response
from infrastructure.external.api_clients.base import APIError, BaseAPIClient


logger = get_logger(__name__)

UNKNOWN_ERROR = "An unknown error occurred"


class TransactionApiClient(BaseAPIClient):
    """Calls `/transactions`, `/transactions/{id}` and `/transactions/{id}/refunds`."""

    USER_AGENT = "paystack-transaction-lookup-ui/1.0"

    def __init__(
        self,
        base_url: str,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> None:
        super().__init__(base_url=base_url, max_retries=0, headers=headers, transport=transport)

    async def _call(self, endpoint: str, *, failure: str, params: Optional[dict[str, Any]] = None) -> Envelope:
        try:
            response = await self.get(endpoint, params=params)
            return Envelope.model_validate(response.json())
        except APIError as exc:
            message = failure
            if exc.status_code is None:
                message = exc.message or UNKNOWN_ERROR
            elif exc.response is not None and isinstance(exc.response.data, dict):
                server_error = exc.response.data.get("error")
                if isinstance(server_error, str) and server_error:
                    message = server_error
            logger.error("gateway_request_failed", endpoint=endpoint, status_code=exc.status_code, error=message)
            return error_response(message)
        except (ValueError, ValidationError) as exc:
            logger.error("gateway_response_invalid", endpoint=endpoint, error=str(exc))
            return error_response(UNKNOWN_ERROR)

    async def fetch_transactions_by_date_range(
        self,
        start_date: str,
        end_date: str,
        page: int = 1,
        action_id: Optional[str] = None,
    ) -> Envelope:
        params: dict[str, Any] = {}
        if start_date:
            params["startDate"] = start_date
        if end_date:
            params["endDate"] = end_date
        if action_id:
            params["actionId"] = action_id
        params["page"] = str(page)
        return await self._call("transactions", failure="Failed to fetch transactions", params=params)

    async def fetch_transaction_by_id(self, transaction_id: str | int) -> Envelope:
        return await self._call(f"transactions/{transaction_id}", failure="Failed to fetch transaction")

    async def fetch_refunds_by_transaction_id(self, transaction_id: str | int) -> Envelope:
        return await self._call(f"transactions/{transaction_id}/refunds", failure="Failed to fetch refunds")
