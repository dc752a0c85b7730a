"""
Gateway constants: endpoints, supported operations and outcome messages.
"""
from enum import Enum
from typing import Dict


ALIPAY_GATEWAY = "https://openapi.alipay.com/gateway.do"
ALIPAY_DEV_GATEWAY = "https://openapi.alipaydev.com/gateway.do"


class MethodType(str, Enum):
    """Operations supported by the client."""
    CREATE_ORDER = "alipay.trade.app.pay"
    QUERY_ORDER = "alipay.trade.query"
    # Local-only operations, never sent to the gateway
    VERIFY_PAYMENT = "alipay.trade.app.pay.verify"
    NOTIFY_RESPONSE = "alipay.trade.notify"


# Protocol status fields separated from business data in gateway replies
META_FIELDS = ("code", "msg", "sub_code", "sub_msg", "sign")

GATEWAY_SUCCESS_CODES = ("10000",)
GATEWAY_PERMISSION_DENIED_CODES = ("40006",)

# resultStatus values reported by the mobile SDK
PAYMENT_SUCCESS_STATUSES = ("9000",)
PAYMENT_PENDING_STATUSES = ("8000", "6004")

# Signature fields excluded when verifying asynchronous notifications
NOTIFY_EXCLUDED_KEYS = ("sign", "sign_type")

RESPONSE_MESSAGE: Dict[str, str] = {
    "0": "Success",
    "1": "Payment is being processed, check the order status later",
    "-1": "Request failed",
    "-2": "Permission denied or signature verification failed",
}
