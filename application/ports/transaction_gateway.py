"""
Transaction gateway port (application/ports) exposing a replaceable protocol.

Application depends on this Protocol; infrastructure implements adapters.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from application.dtos.transactions import TransactionPage
from domain.transaction.entity import Refund, Transaction


@runtime_checkable
class TransactionGateway(Protocol):
    """Read-only access to the remote transaction service.

    Implementations raise `UpstreamException` for remote failures and
    `ConfigurationException` when they cannot authenticate.
    """

    provider: str

    async def list_transactions(self, *, page: int, per_page: int, start: str, end: str) -> TransactionPage: ...

    async def get_transaction(self, transaction_id: str) -> Transaction: ...

    async def list_refunds(self) -> list[Refund]: ...

    async def aclose(self) -> None: ...
