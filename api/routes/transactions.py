"""
Transaction Query Gateway routes.

Thin handlers: validation and Paystack access live in the application service;
failures are rendered into the `{success: false, error}` envelope by the
global exception handlers.
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from application.services.transaction_service import TransactionQueryService, build_query
from api.dependencies import get_transaction_service
from core.response import envelope_json, success_response


router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.get("", summary="Search transactions by date range and Action ID")
async def list_transactions(
    start_date: Optional[str] = Query(default=None, alias="startDate"),
    end_date: Optional[str] = Query(default=None, alias="endDate"),
    page: int = Query(default=1, ge=1),
    action_id: Optional[str] = Query(default=None, alias="actionId"),
    service: TransactionQueryService = Depends(get_transaction_service),
):
    query = build_query(start_date, end_date, page=page, action_id=action_id)
    result = await service.list_transactions(query)
    return envelope_json(success_response(data=result))


@router.get("/{transaction_id}", summary="Fetch a single transaction")
async def get_transaction(
    transaction_id: str,
    service: TransactionQueryService = Depends(get_transaction_service),
):
    transaction = await service.get_transaction(transaction_id)
    return envelope_json(success_response(data=transaction))


@router.get("/{transaction_id}/refunds", summary="Fetch refunds of a transaction")
async def get_transaction_refunds(
    transaction_id: str,
    service: TransactionQueryService = Depends(get_transaction_service),
):
    refunds = await service.get_refunds(transaction_id)
    return envelope_json(success_response(data=refunds))
