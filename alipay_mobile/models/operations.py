"""
Business Payload Schemas

One pydantic model per supported operation. The validated model dump becomes
the operation's business payload (`biz_content` for gateway calls).

Field names follow the gateway's published API exactly, since they are
serialized into the signed request verbatim.
"""
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional, Type, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from ..constants import MethodType


# ============================================================================
# Create Order (alipay.trade.app.pay)
# ============================================================================

class CreateOrderPayload(BaseModel):
    """
    App payment order.

    Additional gateway fields (extend_params, goods_detail, ...) pass through
    untouched.
    """
    subject: str = Field(min_length=1, max_length=256)
    out_trade_no: str = Field(min_length=1, max_length=64)
    total_amount: str
    body: Optional[str] = Field(None, max_length=128)
    timeout_express: Optional[str] = None
    time_expire: Optional[str] = None
    seller_id: Optional[str] = None
    goods_type: Optional[str] = None
    passback_params: Optional[str] = None
    store_id: Optional[str] = None
    product_code: str = "QUICK_MSECURITY_PAY"

    model_config = {
        "extra": "allow"
    }

    @field_validator("total_amount", mode="before")
    @classmethod
    def normalize_amount(cls, v):
        """Accept numbers or decimal strings in yuan; never rounds."""
        if isinstance(v, bool):
            raise ValueError("total_amount must be a number")
        try:
            amount = Decimal(str(v))
        except (InvalidOperation, ValueError):
            raise ValueError(f"total_amount is not a number: {v!r}")
        if not amount.is_finite():
            raise ValueError(f"total_amount is not a number: {v!r}")
        if amount.as_tuple().exponent < -2:
            raise ValueError("total_amount must have at most two decimal places")
        if not Decimal("0.01") <= amount <= Decimal("100000000"):
            raise ValueError("total_amount must be between 0.01 and 100000000")
        return str(amount.quantize(Decimal("0.01")))


# ============================================================================
# Query Order (alipay.trade.query)
# ============================================================================

class QueryOrderPayload(BaseModel):
    """Order lookup by merchant order id and/or gateway trade number."""
    out_trade_no: Optional[str] = None
    trade_no: Optional[str] = None

    model_config = {
        "extra": "forbid"
    }

    @model_validator(mode="after")
    def require_one_identifier(self):
        if not self.out_trade_no and not self.trade_no:
            raise ValueError("out_trade_no and trade_no can not both be omitted")
        return self


# ============================================================================
# Verify Payment (mobile SDK result, local only)
# ============================================================================

class VerifyPaymentPayload(BaseModel):
    """
    Result handed back by the mobile SDK after the payment sheet closes.

    `result` is the signed gateway reply as a JSON string (or already parsed).
    """
    resultStatus: str = Field(min_length=1)
    result: Optional[Union[str, Dict[str, Any]]] = None
    memo: Optional[str] = None

    model_config = {
        "extra": "allow"
    }

    @field_validator("resultStatus", mode="before")
    @classmethod
    def status_as_string(cls, v):
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


# ============================================================================
# Asynchronous Notification (inbound)
# ============================================================================

class NotifyPayload(BaseModel):
    """
    Gateway-initiated payment notification.

    Only the fields every notification carries are required; the rest of the
    notification (trade_status, total_amount, buyer_id, ...) passes through.
    """
    notify_time: str
    notify_type: str
    notify_id: str
    app_id: str
    sign_type: str
    sign: str
    trade_no: str
    out_trade_no: str

    model_config = {
        "extra": "allow"
    }


OPERATION_SCHEMAS: Dict[MethodType, Type[BaseModel]] = {
    MethodType.CREATE_ORDER: CreateOrderPayload,
    MethodType.QUERY_ORDER: QueryOrderPayload,
    MethodType.VERIFY_PAYMENT: VerifyPaymentPayload,
    MethodType.NOTIFY_RESPONSE: NotifyPayload,
}
