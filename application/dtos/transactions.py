"""
Transaction DTOs (Pydantic v2) used at application boundaries.
"""
from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, ConfigDict

from domain.transaction.entity import Transaction


class PaystackMeta(BaseModel):
    """Paystack's own list counters; they describe the unfiltered set."""
    total: int = 0
    skipped: Optional[int] = None
    perPage: Optional[int] = None
    page: Optional[int] = None
    pageCount: Optional[int] = None

    model_config = ConfigDict(extra="allow")


class TransactionPage(BaseModel):
    """One upstream page of transactions."""
    transactions: list[Transaction]
    meta: PaystackMeta


class Pagination(BaseModel):
    total: int
    totalPages: int
    currentPage: int
    perPage: int


class TransactionList(BaseModel):
    transactions: list[Transaction]
    pagination: Pagination


class TransactionQuery(BaseModel):
    """List-endpoint input after validation; dates are UTC ISO strings."""
    start: str
    end: str
    page: int = 1
    action_id: Optional[str] = None
