"""
Factory for the Paystack gateway client.
"""
from __future__ import annotations

from typing import Optional

import httpx

from core.config import settings
from application.ports.transaction_gateway import TransactionGateway


def get_transaction_gateway(transport: Optional[httpx.AsyncBaseTransport] = None) -> TransactionGateway:
    """Build a gateway from the current settings (read on every call)."""
    from .client import PaystackClient

    cfg = settings.paystack
    return PaystackClient(
        secret_key=cfg.secret_key,
        base_url=cfg.base_url,
        timeout=cfg.timeout,
        max_retries=cfg.max_retries,
        retry_delay=cfg.retry_delay,
        transport=transport,
        debug=settings.DEBUG,
    )
