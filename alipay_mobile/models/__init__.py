"""
Pydantic models for operation payloads and client results.
"""
from .operations import (
    OPERATION_SCHEMAS,
    CreateOrderPayload,
    QueryOrderPayload,
    VerifyPaymentPayload,
    NotifyPayload,
)
from .results import AlipayResult, Outcome

__all__ = [
    "OPERATION_SCHEMAS",
    "CreateOrderPayload",
    "QueryOrderPayload",
    "VerifyPaymentPayload",
    "NotifyPayload",
    "AlipayResult",
    "Outcome",
]
