"""
Alipay Client

Facade over the signing, param building and response services. One method per
supported operation; every method returns an AlipayResult and never raises.

Per call:
    build envelope + payload -> sign -> transmit | serialize -> interpret

The key pair, settings and transport are fixed at construction and only read
afterwards, so one client can serve concurrent calls.
"""
import json
import logging
from typing import Any, Dict, Optional

from .config import Settings, settings as default_settings
from .constants import NOTIFY_EXCLUDED_KEYS, MethodType
from .exceptions import InvalidParamsError, KeyLoadError, TransportError
from .models.results import AlipayResult, Outcome
from .services.key_service import load_key_pair
from .services.param_builder import build_params, build_payload, sign_params
from .services.response_service import (
    failure_result,
    interpret,
    interpret_payment_status,
    make_result,
    partition_response,
    unwrap_response,
)
from .services.signature_service import encode_component, make_query_str, verify_sign
from .services.transport import HttpxTransport, Transport

logger = logging.getLogger(__name__)


class AlipayClient:
    """
    Client for the Alipay mobile payment gateway.

    Args:
        app_private_key: Application private key (PEM body or full PEM)
        alipay_public_key: Gateway public key (PEM body or full PEM)
        settings: Client configuration (defaults to environment settings)
        transport: Gateway transport (defaults to HttpxTransport)

    Raises:
        KeyLoadError: If either key is missing
    """

    def __init__(
        self,
        app_private_key: Optional[str],
        alipay_public_key: Optional[str],
        settings: Optional[Settings] = None,
        transport: Optional[Transport] = None
    ):
        if not app_private_key or not alipay_public_key:
            raise KeyLoadError("Invalid app private key or alipay public key")

        self._private_key, self._public_key = load_key_pair(app_private_key, alipay_public_key)
        self.settings = settings or default_settings
        self.transport = transport or HttpxTransport(timeout=self.settings.request_timeout)

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        transport: Optional[Transport] = None
    ) -> "AlipayClient":
        """Build a client whose keys come from settings (inline text or files)."""
        settings = settings or default_settings
        private_key, public_key = load_key_pair(
            settings.app_private_key,
            settings.alipay_public_key,
            private_key_file=settings.app_private_key_file,
            public_key_file=settings.alipay_public_key_file,
        )
        return cls(private_key, public_key, settings=settings, transport=transport)

    def __repr__(self):
        return f"<{self.__class__.__name__}(app_id={self.settings.app_id!r}, gateway={self.settings.gateway!r})>"

    def build_params(self, method: MethodType, options: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Signed parameter set for a gateway operation."""
        params = build_params(method, self.settings, options)
        return sign_params(params, self._private_key)

    # ========================================================================
    # Operations
    # ========================================================================

    def create_order(self, params: Dict[str, Any]) -> AlipayResult:
        """
        Build the signed order string the mobile SDK uses to start a payment.

        No network call is made; the order string is returned in
        `data["order_string"]`.
        """
        try:
            signed = self.build_params(MethodType.CREATE_ORDER, params)
            order_string = make_query_str(signed) + "&sign=" + encode_component(signed["sign"])

            logger.info(f"Created order string for out_trade_no={(params or {}).get('out_trade_no')}")
            return make_result(Outcome.SUCCESS, data={"order_string": order_string})

        except Exception as e:
            logger.warning(f"create_order failed: {e}")
            return failure_result(str(e))

    async def query_order(
        self,
        out_trade_no: Optional[str] = None,
        trade_no: Optional[str] = None
    ) -> AlipayResult:
        """
        Query order status from the gateway.

        At least one of `out_trade_no` (merchant order id) and `trade_no`
        (gateway trade number) is required.
        """
        try:
            if not out_trade_no and not trade_no:
                raise InvalidParamsError("out_trade_no and trade_no can not both be omitted")

            options = {}
            if out_trade_no:
                options["out_trade_no"] = out_trade_no
            if trade_no:
                options["trade_no"] = trade_no

            signed = self.build_params(MethodType.QUERY_ORDER, options)

            logger.info(f"Querying order {out_trade_no or trade_no}")
            response = await self.transport.request(
                self.settings.gateway,
                data=signed,
                response_format="json",
                data_as_query_string=True,
            )

            raw = response.get("data")
            if not isinstance(raw, dict):
                raise TransportError("Unexpected gateway reply")

            return interpret(unwrap_response(raw, MethodType.QUERY_ORDER))

        except Exception as e:
            logger.warning(f"query_order failed: {e}")
            return failure_result(str(e))

    def verify_payment(self, params: Dict[str, Any]) -> AlipayResult:
        """
        Classify the result the mobile SDK returned. No network call is made.

        On resultStatus 9000 the SDK's `result` reply is parsed and returned
        split into metadata and data.
        """
        try:
            payload = build_payload(MethodType.VERIFY_PAYMENT, params)
            outcome = interpret_payment_status(payload["resultStatus"])

            if outcome != Outcome.SUCCESS:
                return make_result(outcome)

            result = payload.get("result") or {}
            if isinstance(result, str):
                result = json.loads(result)

            metadata, data = partition_response(unwrap_response(result, MethodType.CREATE_ORDER))
            return make_result(outcome, metadata=metadata, data=data)

        except Exception as e:
            logger.warning(f"verify_payment failed: {e}")
            return failure_result(str(e))

    def make_notify_response(self, params: Dict[str, Any]) -> AlipayResult:
        """
        Verify an asynchronous payment notification.

        The notification's own `sign` is checked against every other field
        except `sign` and `sign_type`. `data` always echoes the notification.
        """
        try:
            build_payload(MethodType.NOTIFY_RESPONSE, params)

            valid = verify_sign(self._public_key, params, NOTIFY_EXCLUDED_KEYS, params)
            if not valid:
                logger.warning(f"Notification signature mismatch for notify_id={params.get('notify_id')}")
                return make_result(Outcome.FAILURE, code="-2", data=dict(params))

            return make_result(Outcome.SUCCESS, data=dict(params))

        except Exception as e:
            logger.warning(f"make_notify_response failed: {e}")
            return failure_result(str(e))
