"""
Paystack transaction status values and their presentation tone.
"""
from __future__ import annotations

from enum import Enum


class TransactionStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"
    FAIL = "fail"
    PENDING = "pending"
    ABANDONED = "abandoned"


# Status -> badge tone used by the UI; anything unknown renders as a warning
STATUS_TONE = {
    TransactionStatus.SUCCESS.value: "success",
    TransactionStatus.FAILED.value: "destructive",
    TransactionStatus.FAIL.value: "destructive",
}

DEFAULT_STATUS_TONE = "warning"


def status_tone(status: object) -> str:
    return STATUS_TONE.get(str(status or "").lower(), DEFAULT_STATUS_TONE)
