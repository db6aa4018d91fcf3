"""
Application service orchestrating the transaction lookup use-cases.

Depends only on the TransactionGateway port; the adapter is injected from the
composition root (API dependencies), keeping dependencies one-way.
"""
from __future__ import annotations

from typing import Optional

from application.dtos.transactions import Pagination, TransactionList, TransactionQuery
from application.ports.transaction_gateway import TransactionGateway
from core.logging_config import get_logger
from domain.common.exceptions import BusinessException, UpstreamException, ValidationException
from domain.transaction.entity import Refund, Transaction
from domain.transaction.service import (
    PER_PAGE,
    filter_by_action_id,
    is_action_id_filter,
    parse_transaction_id,
    refunds_for_transaction,
    to_utc_iso,
    total_pages,
)


logger = get_logger(__name__)


def build_query(
    start_date: Optional[str],
    end_date: Optional[str],
    page: int = 1,
    action_id: Optional[str] = None,
) -> TransactionQuery:
    """Validate list-endpoint input and normalise both dates to UTC ISO."""
    missing = [n for n, v in (("startDate", start_date), ("endDate", end_date)) if not (v and v.strip())]
    if missing:
        raise ValidationException("Start date and end date are required", field=missing[0])
    converted = {}
    for name, value in (("startDate", start_date), ("endDate", end_date)):
        try:
            converted[name] = to_utc_iso(value)
        except ValueError as exc:
            raise ValidationException(f"Invalid {name}: expected an ISO-8601 date-time", field=name) from exc
    if page < 1:
        raise ValidationException("Page must be a positive integer", field="page")
    return TransactionQuery(
        start=converted["startDate"],
        end=converted["endDate"],
        page=page,
        action_id=action_id,
    )


class TransactionQueryService:
    def __init__(self, gateway: TransactionGateway) -> None:
        self.gateway = gateway

    async def list_transactions(self, query: TransactionQuery) -> TransactionList:
        logger.info(
            "transactions_query",
            start=query.start,
            end=query.end,
            page=query.page,
            action_id=query.action_id,
        )
        try:
            upstream = await self.gateway.list_transactions(
                page=query.page, per_page=PER_PAGE, start=query.start, end=query.end
            )
        except BusinessException:
            raise
        except Exception as exc:
            logger.error("transactions_query_failed", error=str(exc), exc_info=True)
            raise UpstreamException("Failed to fetch transactions") from exc

        transactions = upstream.transactions
        total = upstream.meta.total
        if is_action_id_filter(query.action_id):
            transactions = filter_by_action_id(transactions, query.action_id)
            # Upstream counts describe the unfiltered set; only the page we hold is known
            total = len(transactions)
            logger.info(
                "transactions_filtered",
                action_id=query.action_id,
                fetched=len(upstream.transactions),
                matched=total,
            )

        return TransactionList(
            transactions=transactions,
            pagination=Pagination(
                total=total,
                totalPages=total_pages(total, PER_PAGE),
                currentPage=query.page,
                perPage=PER_PAGE,
            ),
        )

    async def get_transaction(self, transaction_id: str) -> Transaction:
        if not transaction_id or not transaction_id.strip():
            raise ValidationException("Transaction ID is required", field="id")
        logger.info("transaction_lookup", transaction_id=transaction_id)
        try:
            return await self.gateway.get_transaction(transaction_id)
        except BusinessException:
            raise
        except Exception as exc:
            logger.error("transaction_lookup_failed", transaction_id=transaction_id, error=str(exc), exc_info=True)
            raise UpstreamException("Failed to fetch transaction") from exc

    async def get_refunds(self, transaction_id: str) -> list[Refund]:
        """Refunds for one transaction.

        Paystack has no per-transaction refund lookup, so the full refund list
        is fetched once and filtered here; refunds past its first page are missed.
        """
        if not transaction_id or not transaction_id.strip():
            raise ValidationException("Transaction ID is required", field="id")
        try:
            refunds = await self.gateway.list_refunds()
        except BusinessException:
            raise
        except Exception as exc:
            logger.error("refunds_lookup_failed", transaction_id=transaction_id, error=str(exc), exc_info=True)
            raise UpstreamException("Failed to fetch refunds") from exc

        matched = refunds_for_transaction(refunds, parse_transaction_id(transaction_id))
        logger.info("refunds_filtered", transaction_id=transaction_id, fetched=len(refunds), matched=len(matched))
        return matched

    async def aclose(self) -> None:
        close = getattr(self.gateway, "aclose", None)
        if callable(close):
            await close()
