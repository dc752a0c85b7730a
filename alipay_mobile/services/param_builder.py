"""
Param Builder

Assembles the signed parameter set for a gateway operation:

    envelope (app identity, method, timestamp, protocol options)
    + biz_content (compact JSON of the validated business payload)
    + sign (computed last)

biz_content is attached before signing because the serialized payload string
is itself one of the signed fields.
"""
import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from pydantic import ValidationError

from ..config import Settings
from ..constants import MethodType
from ..exceptions import InvalidParamsError
from ..models.operations import OPERATION_SCHEMAS
from .signature_service import make_sign

logger = logging.getLogger(__name__)

# Gateway timestamps are China Standard Time
GATEWAY_TZ = timezone(timedelta(hours=8))
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _describe_validation_error(error: ValidationError) -> str:
    """Turn the first pydantic error into a message naming the field."""
    first = error.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ()))

    if first.get("type") == "missing":
        return f"Missing required field: {field}"
    if first.get("type") == "extra_forbidden":
        return f"Unexpected field: {field}"

    message = first.get("msg", "invalid value")
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return f"Invalid {field}: {message}" if field else message


def build_envelope(
    method: MethodType,
    settings: Settings,
    now: Optional[datetime] = None
) -> Dict[str, Any]:
    """
    Operation-invariant protocol fields.

    Args:
        method: Target operation
        settings: Client configuration
        now: Request time (defaults to the current time)

    Returns:
        Envelope parameter set
    """
    timestamp = (now or datetime.now(GATEWAY_TZ)).astimezone(GATEWAY_TZ)

    envelope = {
        "app_id": settings.app_id,
        "method": MethodType(method).value,
        "format": settings.format,
        "charset": settings.charset,
        "sign_type": settings.sign_type,
        "timestamp": timestamp.strftime(TIMESTAMP_FORMAT),
        "version": settings.version,
    }
    if settings.notify_url:
        envelope["notify_url"] = settings.notify_url
    if settings.app_auth_token:
        envelope["app_auth_token"] = settings.app_auth_token

    return envelope


def build_payload(method: MethodType, options: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Validate operation options against the operation schema.

    Args:
        method: Target operation
        options: Caller-supplied business fields

    Returns:
        Validated business payload (None values dropped)

    Raises:
        InvalidParamsError: Unknown operation, missing required field or
            invalid value
    """
    try:
        schema = OPERATION_SCHEMAS[MethodType(method)]
    except (KeyError, ValueError):
        raise InvalidParamsError(f"Unsupported method: {method}", details={"method": str(method)})

    try:
        payload = schema(**(options or {}))
    except ValidationError as e:
        message = _describe_validation_error(e)
        raise InvalidParamsError(message, details={"method": schema.__name__})
    except TypeError as e:
        raise InvalidParamsError(f"Invalid parameters: {e}")

    return payload.model_dump(exclude_none=True)


def serialize_biz_content(payload: Dict[str, Any]) -> str:
    """Compact JSON form of a business payload."""
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def build_params(
    method: MethodType,
    settings: Settings,
    options: Optional[Dict[str, Any]],
    now: Optional[datetime] = None
) -> Dict[str, Any]:
    """
    Envelope plus serialized business payload, ready to be signed.
    """
    payload = build_payload(method, options)
    params = build_envelope(method, settings, now=now)
    params["biz_content"] = serialize_biz_content(payload)
    return params


def sign_params(params: Dict[str, Any], private_key: str) -> Dict[str, Any]:
    """
    Return a copy of `params` with `sign` attached.

    Any change to the other fields after this point invalidates the signature.
    """
    signed = dict(params)
    signed.pop("sign", None)
    signed["sign"] = make_sign(private_key, signed)
    logger.debug(f"Signed {signed.get('method')} request")
    return signed
