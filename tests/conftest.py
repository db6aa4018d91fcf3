"""Pytest bootstrap configuration.

Environment variables are set before any application module is imported, and
Paystack is replaced by an httpx.MockTransport so no test leaves the process.
"""
import os

os.environ.setdefault("PAYSTACK_SECRET_KEY", "sk_test_dummy")
os.environ.setdefault("ENVIRONMENT", "test")

from typing import Callable, Optional

import httpx
import pytest

from tests.fakes import FakePaystack


@pytest.fixture
def paystack() -> FakePaystack:
    return FakePaystack()


@pytest.fixture
def gateway_factory(paystack) -> Callable[..., object]:
    from infrastructure.external.paystack.client import PaystackClient

    def _build(secret_key: Optional[str] = "sk_test_dummy"):
        return PaystackClient(secret_key=secret_key, transport=httpx.MockTransport(paystack.handler))

    return _build


@pytest.fixture
def client(monkeypatch, gateway_factory):
    """TestClient whose gateway requests are answered by FakePaystack."""
    from fastapi.testclient import TestClient

    import api.dependencies as deps
    from main import app

    monkeypatch.setattr(deps, "get_transaction_gateway", lambda: gateway_factory())
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def unconfigured_client(monkeypatch, gateway_factory):
    """TestClient with no Paystack secret key configured."""
    from fastapi.testclient import TestClient

    import api.dependencies as deps
    from main import app

    monkeypatch.setattr(deps, "get_transaction_gateway", lambda: gateway_factory(secret_key=None))
    with TestClient(app) as test_client:
        yield test_client
