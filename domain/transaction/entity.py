"""
Transaction domain entities mirroring Paystack's JSON shapes.

Read-only projections of the remote service's state; nothing here is persisted.
Fields are declared only where the gateway or the pages read them, and they
are typed `Any` so a proxied object leaves the gateway exactly as Paystack
sent it: no coercion, and no record rejected for an unexpected shape.
"""
from __future__ import annotations

from typing import Any, Optional
from pydantic import BaseModel, ConfigDict


class _Passthrough(BaseModel):
    model_config = ConfigDict(extra="allow")


class Customer(_Passthrough):
    """Display view of `transaction.customer`; never serialized back out."""
    first_name: Any = None
    last_name: Any = None
    email: Any = None
    phone: Any = None
    customer_code: Any = None

    @property
    def full_name(self) -> str:
        return " ".join(str(p) for p in (self.first_name, self.last_name) if p)


class Transaction(_Passthrough):
    id: Any = None
    reference: Any = None
    amount: Any = None  # kobo
    status: Any = None
    # Paystack sends an object, an empty string, null, and occasionally other scalars
    metadata: Any = None
    customer: Any = None
    created_at: Any = None
    paid_at: Any = None
    channel: Any = None

    def custom_fields(self) -> list[Any]:
        """Raw `metadata.custom_fields` entries, or [] when absent or malformed."""
        if not isinstance(self.metadata, dict):
            return []
        fields = self.metadata.get("custom_fields")
        if not isinstance(fields, list):
            return []
        return fields

    @property
    def customer_profile(self) -> Customer:
        if isinstance(self.customer, dict):
            return Customer.model_validate(self.customer)
        return Customer()


class Refund(_Passthrough):
    id: Any = None
    # Owning transaction id; compared strictly, a "12345" string owns nothing
    transaction: Any = None
    status: Any = None
    amount: Any = None  # kobo
    created_at: Any = None

    def owning_transaction_id(self) -> Optional[int]:
        value = self.transaction
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return None
