"""
Asynchronous Notification Endpoint

The gateway POSTs payment notifications as form-encoded bodies and keeps
retrying until it receives the plain-text reply `success`.
"""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from urllib.parse import parse_qsl
import logging

from ..client import AlipayClient
from .deps import get_alipay_client

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/notify", response_class=PlainTextResponse)
async def notify_endpoint(
    request: Request,
    client: AlipayClient = Depends(get_alipay_client)
) -> PlainTextResponse:
    """
    Verify an inbound payment notification.

    Returns:
        "success" when the signature verifies, "failure" otherwise
    """
    # Undecodable bytes cannot carry a valid signature; they fail verification
    body = (await request.body()).decode("utf-8", errors="replace")
    params = dict(parse_qsl(body, keep_blank_values=True))

    result = client.make_notify_response(params)

    if not result.is_success:
        logger.warning(
            f"Rejected notification notify_id={params.get('notify_id')}: "
            f"{result.code} {result.message}"
        )
        return PlainTextResponse("failure")

    logger.info(
        f"Accepted notification for out_trade_no={params.get('out_trade_no')} "
        f"trade_status={params.get('trade_status')}"
    )
    return PlainTextResponse("success")
