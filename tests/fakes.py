"""Paystack-shaped test data and an in-process fake of the Paystack REST API."""
from typing import Optional

import httpx


def make_transaction(tx_id: int, action_id: Optional[str] = None, **overrides) -> dict:
    """A Paystack-shaped transaction, optionally tagged with an Action ID."""
    custom_fields = []
    if action_id is not None:
        custom_fields.append({"display_name": "Action ID", "variable_name": "Action ID", "value": action_id})
    tx = {
        "id": tx_id,
        "reference": f"ref_{tx_id}",
        "amount": 150050,
        "currency": "NGN",
        "status": "success",
        "metadata": {"custom_fields": custom_fields},
        "customer": {
            "id": 1,
            "first_name": "Ada",
            "last_name": "Obi",
            "email": "ada@example.com",
            "phone": None,
            "customer_code": "CUS_1",
        },
        "created_at": "2024-01-05T09:30:00.000Z",
        "paid_at": None,
        "channel": "card",
    }
    tx.update(overrides)
    return tx


class FakePaystack:
    """Programmable stand-in for the Paystack REST API."""

    def __init__(self) -> None:
        self.transactions: list[dict] = []
        self.total: Optional[int] = None
        self.refunds: list[dict] = []
        self.failures: dict[str, tuple[int, dict]] = {}
        self.requests: list[httpx.Request] = []

    def fail(self, path: str, status_code: int, message: str = "Invalid key") -> None:
        self.failures[path] = (status_code, {"status": False, "message": message})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path in self.failures:
            status_code, body = self.failures[path]
            return httpx.Response(status_code, json=body)
        if path == "/transaction":
            total = self.total if self.total is not None else len(self.transactions)
            return httpx.Response(
                200,
                json={
                    "status": True,
                    "message": "Transactions retrieved",
                    "data": self.transactions,
                    "meta": {"total": total, "perPage": 50, "page": int(request.url.params.get("page", "1"))},
                },
            )
        if path.startswith("/transaction/"):
            tx_id = path.rsplit("/", 1)[-1]
            for tx in self.transactions:
                if str(tx["id"]) == tx_id:
                    return httpx.Response(200, json={"status": True, "message": "Transaction retrieved", "data": tx})
            return httpx.Response(404, json={"status": False, "message": "Transaction not found"})
        if path == "/refund":
            return httpx.Response(200, json={"status": True, "message": "Refunds retrieved", "data": self.refunds})
        return httpx.Response(404, json={"status": False, "message": "Not found"})

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]
