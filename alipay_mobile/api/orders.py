"""
Orders API Endpoints

Exposes order-string creation, order query and mobile SDK result
verification to the app backend.

All endpoints return the client's AlipayResult as-is; gateway failures are
reported through `outcome`/`code`, not HTTP status codes.
"""
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from typing import Any, Dict, Optional, Union
import logging

from ..client import AlipayClient
from ..models.results import AlipayResult
from .deps import get_alipay_client

logger = logging.getLogger(__name__)

router = APIRouter()


class CreateOrderRequest(BaseModel):
    """Order fields forwarded to the create-order operation."""
    subject: str
    out_trade_no: str
    total_amount: Union[str, float, int]
    body: Optional[str] = None
    timeout_express: Optional[str] = None
    passback_params: Optional[str] = None

    model_config = {
        "extra": "allow",
        "json_schema_extra": {
            "example": {
                "subject": "Monthly plan",
                "out_trade_no": "order_20241019_0001",
                "total_amount": "9.90",
                "timeout_express": "30m"
            }
        }
    }


class VerifyPaymentRequest(BaseModel):
    """Result object returned by the mobile SDK."""
    resultStatus: str = Field(description="SDK status, e.g. 9000 / 8000 / 6001")
    result: Optional[Union[str, Dict[str, Any]]] = None
    memo: Optional[str] = None


@router.post("/orders")
async def create_order_endpoint(
    request: CreateOrderRequest,
    client: AlipayClient = Depends(get_alipay_client)
) -> AlipayResult:
    """
    Create a signed order string for the mobile SDK.

    Example:
        POST /api/alipay/orders
        {"subject": "Monthly plan", "out_trade_no": "order_1", "total_amount": "9.90"}
    """
    logger.info(f"Creating order string for {request.out_trade_no}")
    return client.create_order(request.model_dump(exclude_none=True))


@router.get("/orders/query")
async def query_order_endpoint(
    out_trade_no: Optional[str] = Query(None, description="Merchant order id"),
    trade_no: Optional[str] = Query(None, description="Gateway trade number"),
    client: AlipayClient = Depends(get_alipay_client)
) -> AlipayResult:
    """
    Query order status from the gateway.

    Example:
        GET /api/alipay/orders/query?out_trade_no=order_1
    """
    return await client.query_order(out_trade_no, trade_no)


@router.post("/payments/verify")
async def verify_payment_endpoint(
    request: VerifyPaymentRequest,
    client: AlipayClient = Depends(get_alipay_client)
) -> AlipayResult:
    """
    Classify the payment result reported by the mobile SDK.

    Example:
        POST /api/alipay/payments/verify
        {"resultStatus": "9000", "result": "{...}"}
    """
    return client.verify_payment(request.model_dump(exclude_none=True))
