"""
Response Service

Classifies gateway replies and mobile SDK results into the closed Outcome
taxonomy.

Gateway codes:
- 10000 -> success ("0")
- 40006 -> permission_denied ("-2")
- anything else -> failure ("-1")

SDK resultStatus:
- 9000 -> success ("0")
- 8000, 6004 -> pending ("1")
- anything else -> failure ("-1")
"""
import logging
from typing import Any, Dict, Optional, Tuple

from ..constants import (
    GATEWAY_PERMISSION_DENIED_CODES,
    GATEWAY_SUCCESS_CODES,
    META_FIELDS,
    PAYMENT_PENDING_STATUSES,
    PAYMENT_SUCCESS_STATUSES,
    RESPONSE_MESSAGE,
    MethodType,
)
from ..models.results import AlipayResult, Outcome
from .signature_service import is_empty

logger = logging.getLogger(__name__)


# Node used by the gateway for errors raised before the method runs
ERROR_RESPONSE_KEY = "error_response"

OUTCOME_CODES: Dict[Outcome, str] = {
    Outcome.SUCCESS: "0",
    Outcome.PENDING: "1",
    Outcome.FAILURE: "-1",
    Outcome.PERMISSION_DENIED: "-2",
}


def make_result(
    outcome: Outcome,
    code: Optional[str] = None,
    message: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
    data: Optional[Dict[str, Any]] = None
) -> AlipayResult:
    """Build an AlipayResult, filling code and message from the outcome."""
    code = code if code is not None else OUTCOME_CODES[outcome]
    return AlipayResult(
        outcome=outcome,
        code=code,
        message=message if message is not None else RESPONSE_MESSAGE[code],
        metadata=metadata or {},
        data=data or {},
    )


def failure_result(message: str) -> AlipayResult:
    """Failure outcome carrying an error message."""
    return make_result(Outcome.FAILURE, message=message)


def response_key(method: MethodType) -> str:
    """Name of the node a gateway reply nests its payload under."""
    return MethodType(method).value.replace(".", "_") + "_response"


def unwrap_response(raw: Dict[str, Any], method: MethodType) -> Dict[str, Any]:
    """
    Lift the operation node out of a gateway reply.

    Replies look like {"alipay_trade_query_response": {...}, "sign": "..."};
    the sibling `sign` is kept next to the node fields. Platform-level errors
    (bad app_id, missing permissions) arrive under `error_response` instead.
    Flat mappings are returned unchanged.
    """
    node = raw.get(response_key(method))
    if not isinstance(node, dict):
        node = raw.get(ERROR_RESPONSE_KEY)
    if not isinstance(node, dict):
        return dict(raw)

    unwrapped = dict(node)
    if raw.get("sign"):
        unwrapped["sign"] = raw["sign"]
    return unwrapped


def partition_response(raw: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Split a reply into protocol metadata and business data.

    Empty values are dropped from both sides.
    """
    metadata: Dict[str, Any] = {}
    data: Dict[str, Any] = {}
    for key, value in raw.items():
        if is_empty(value):
            continue
        if key in META_FIELDS:
            metadata[key] = value
        else:
            data[key] = value
    return metadata, data


def classify_gateway_code(code: Any) -> Outcome:
    code = "" if code is None else str(code)
    if code in GATEWAY_SUCCESS_CODES:
        return Outcome.SUCCESS
    if code in GATEWAY_PERMISSION_DENIED_CODES:
        return Outcome.PERMISSION_DENIED
    return Outcome.FAILURE


def interpret(raw: Dict[str, Any]) -> AlipayResult:
    """
    Interpret a (flat) gateway reply.

    Args:
        raw: Reply fields

    Returns:
        AlipayResult with metadata/data partitioned and the outcome
        classified from the protocol code
    """
    metadata, data = partition_response(raw or {})
    outcome = classify_gateway_code(metadata.get("code"))

    if outcome != Outcome.SUCCESS:
        logger.info(
            f"Gateway returned {metadata.get('code')}: "
            f"{metadata.get('sub_code') or metadata.get('msg')}"
        )

    return make_result(outcome, metadata=metadata, data=data)


def interpret_payment_status(status: Any) -> Outcome:
    """Classify a mobile SDK resultStatus."""
    status = "" if status is None else str(status)
    if status in PAYMENT_SUCCESS_STATUSES:
        return Outcome.SUCCESS
    if status in PAYMENT_PENDING_STATUSES:
        return Outcome.PENDING
    return Outcome.FAILURE
