"""Transaction detail view: the transaction first, then its refunds."""
from __future__ import annotations

from typing import Optional

from pydantic import ValidationError

from core.config import settings
from core.logging_config import get_logger
from domain.transaction.entity import Refund, Transaction
from web.client import TransactionApiClient


logger = get_logger(__name__)


def dashboard_url(transaction_id: int | str, base: Optional[str] = None) -> str:
    return f"{(base or settings.paystack.dashboard_url).rstrip('/')}/#/transactions/{transaction_id}"


class TransactionDetailController:
    def __init__(self, client: TransactionApiClient, transaction_id: str) -> None:
        self.client = client
        self.transaction_id = transaction_id
        self.transaction: Optional[Transaction] = None
        self.refunds: list[Refund] = []
        self.error: Optional[str] = None
        self.loading = False
        self.refunds_loading = False
        self.refreshing = False

    @property
    def not_found(self) -> bool:
        return not self.loading and self.transaction is None

    @property
    def dashboard_link(self) -> Optional[str]:
        if self.transaction is None:
            return None
        return dashboard_url(self.transaction.id)

    async def load(self) -> None:
        self.loading = True
        try:
            await self._load_transaction()
        finally:
            self.loading = False
        if self.transaction is None:
            return
        self.refunds_loading = True
        try:
            await self._load_refunds()
        finally:
            self.refunds_loading = False

    async def refresh(self) -> None:
        self.refreshing = True
        try:
            await self.load()
        finally:
            self.refreshing = False

    async def _load_transaction(self) -> None:
        result = await self.client.fetch_transaction_by_id(self.transaction_id)
        if not result.success or not isinstance(result.data, dict):
            self.transaction = None
            self.error = result.error
            logger.warning("transaction_not_loaded", transaction_id=self.transaction_id, error=result.error)
            return
        try:
            self.transaction = Transaction.model_validate(result.data)
            self.error = None
        except ValidationError as exc:
            logger.error("transaction_payload_invalid", transaction_id=self.transaction_id, error=str(exc))
            self.transaction = None
            self.error = "Failed to fetch transaction"

    async def _load_refunds(self) -> None:
        result = await self.client.fetch_refunds_by_transaction_id(self.transaction_id)
        if not result.success or not isinstance(result.data, list):
            # Refund failures leave the detail view intact
            logger.warning("refunds_not_loaded", transaction_id=self.transaction_id, error=result.error)
            self.refunds = []
            return
        try:
            self.refunds = [Refund.model_validate(r) for r in result.data]
        except ValidationError as exc:
            logger.error("refunds_payload_invalid", transaction_id=self.transaction_id, error=str(exc))
            self.refunds = []
