"""
Paystack REST adapter implementing the TransactionGateway port.

Endpoints used (bearer secret key):
- GET /transaction?perPage&page&from&to  -> {status, message, data[], meta}
- GET /transaction/{id}                  -> {status, message, data}
- GET /refund                            -> {status, message, data[]}  (first page only)
"""
from __future__ import annotations

from typing import Any, Optional

import httpx
from pydantic import ValidationError

from application.dtos.transactions import PaystackMeta, TransactionPage
from application.ports.transaction_gateway import TransactionGateway
from domain.common.exceptions import ConfigurationException, UpstreamException
from domain.transaction.entity import Refund, Transaction
from infrastructure.external.api_clients.base import APIError, APIResponse, BaseAPIClient
from core.logging_config import get_logger


logger = get_logger(__name__)


class PaystackClient(BaseAPIClient, TransactionGateway):
    provider = "paystack"

    def __init__(
        self,
        *,
        secret_key: Optional[str],
        base_url: str = "https://api.paystack.co",
        timeout: float = 30.0,
        max_retries: int = 0,
        retry_delay: float = 0.5,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        debug: bool = False,
    ) -> None:
        super().__init__(
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
            retry_delay=retry_delay,
            auth_token=secret_key or None,
            transport=transport,
            debug=debug,
        )
        self._configured = bool(secret_key)

    def _require_credentials(self) -> None:
        # Checked per call so a missing key surfaces per request, not at startup
        if not self._configured:
            logger.error("paystack_secret_key_missing", message="PAYSTACK_SECRET_KEY is not set")
            raise ConfigurationException(setting="PAYSTACK_SECRET_KEY")

    async def _fetch(self, endpoint: str, *, failure: str, params: Optional[dict[str, Any]] = None) -> APIResponse:
        self._require_credentials()
        try:
            return await self.get(endpoint, params=params)
        except APIError as exc:
            logger.error(
                "paystack_request_failed",
                endpoint=endpoint,
                status_code=exc.status_code,
                error=exc.message,
            )
            if exc.status_code is None:
                # No response at all: only the generic message goes out
                raise UpstreamException(failure, status_code=500) from exc
            raise UpstreamException(f"{failure}: {exc.message}", status_code=exc.status_code) from exc

    @staticmethod
    def _payload(response: APIResponse, failure: str) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError as exc:
            raise UpstreamException(failure, status_code=500) from exc
        if not isinstance(body, dict):
            raise UpstreamException(failure, status_code=500)
        return body

    async def list_transactions(self, *, page: int, per_page: int, start: str, end: str) -> TransactionPage:  # type: ignore[override]
        failure = "Failed to fetch transactions"
        params = {"perPage": str(per_page), "page": str(page)}
        if start:
            params["from"] = start
        if end:
            params["to"] = end
        response = await self._fetch("transaction", failure=failure, params=params)
        body = self._payload(response, failure)
        try:
            page_data = TransactionPage(
                transactions=[Transaction.model_validate(item) for item in body.get("data") or []],
                meta=PaystackMeta.model_validate(body.get("meta") or {}),
            )
        except ValidationError as exc:
            logger.error("paystack_payload_invalid", endpoint="transaction", error=str(exc))
            raise UpstreamException(failure, status_code=500) from exc
        logger.info(
            "paystack_transactions_fetched",
            page=page,
            count=len(page_data.transactions),
            upstream_total=page_data.meta.total,
        )
        return page_data

    async def get_transaction(self, transaction_id: str) -> Transaction:  # type: ignore[override]
        failure = "Failed to fetch transaction"
        response = await self._fetch(f"transaction/{transaction_id}", failure=failure)
        body = self._payload(response, failure)
        try:
            return Transaction.model_validate(body.get("data"))
        except ValidationError as exc:
            logger.error("paystack_payload_invalid", endpoint="transaction/{id}", error=str(exc))
            raise UpstreamException(failure, status_code=500) from exc

    async def list_refunds(self) -> list[Refund]:  # type: ignore[override]
        failure = "Failed to fetch refunds"
        response = await self._fetch("refund", failure=failure)
        body = self._payload(response, failure)
        try:
            return [Refund.model_validate(item) for item in body.get("data") or []]
        except ValidationError as exc:
            logger.error("paystack_payload_invalid", endpoint="refund", error=str(exc))
            raise UpstreamException(failure, status_code=500) from exc

    async def aclose(self) -> None:  # type: ignore[override]
        await self.close()
