import json
from datetime import datetime, timezone

import pytest

from alipay_mobile.constants import MethodType
from alipay_mobile.exceptions import InvalidParamsError
from alipay_mobile.services.param_builder import (
    build_envelope,
    build_params,
    build_payload,
    sign_params,
)
from alipay_mobile.services.signature_service import verify_sign


ORDER = {"subject": "Monthly plan", "out_trade_no": "order_1", "total_amount": "9.9"}


def test_envelope_fields(settings):
    now = datetime(2024, 10, 19, 4, 0, 0, tzinfo=timezone.utc)

    envelope = build_envelope(MethodType.QUERY_ORDER, settings, now=now)

    assert envelope == {
        "app_id": "2021000000000001",
        "method": "alipay.trade.query",
        "format": "JSON",
        "charset": "utf-8",
        "sign_type": "RSA2",
        "timestamp": "2024-10-19 12:00:00",
        "version": "1.0",
        "notify_url": "https://merchant.example.com/api/alipay/notify",
    }


def test_envelope_omits_unset_optional_fields(settings):
    settings.notify_url = None

    envelope = build_envelope(MethodType.CREATE_ORDER, settings)

    assert "notify_url" not in envelope
    assert "app_auth_token" not in envelope


def test_create_order_payload_defaults_and_amount():
    payload = build_payload(MethodType.CREATE_ORDER, dict(ORDER, total_amount=9.9))

    assert payload == {
        "subject": "Monthly plan",
        "out_trade_no": "order_1",
        "total_amount": "9.90",
        "product_code": "QUICK_MSECURITY_PAY",
    }


def test_create_order_passes_extra_gateway_fields():
    payload = build_payload(MethodType.CREATE_ORDER, dict(ORDER, extend_params={"sys_service_provider_id": "2088"}))

    assert payload["extend_params"] == {"sys_service_provider_id": "2088"}


def test_missing_required_field_is_named():
    with pytest.raises(InvalidParamsError, match="Missing required field: out_trade_no"):
        build_payload(MethodType.CREATE_ORDER, {"subject": "Monthly plan", "total_amount": "1"})


@pytest.mark.parametrize("amount", ["0", "abc", "100000000.01", "NaN", "sNaN", "Infinity"])
def test_invalid_amount_rejected(amount):
    with pytest.raises(InvalidParamsError, match="total_amount"):
        build_payload(MethodType.CREATE_ORDER, dict(ORDER, total_amount=amount))


def test_amount_with_sub_cent_precision_is_not_rounded():
    with pytest.raises(InvalidParamsError, match="total_amount must have at most two decimal places"):
        build_payload(MethodType.CREATE_ORDER, dict(ORDER, total_amount="9.995"))


def test_query_requires_an_identifier():
    with pytest.raises(InvalidParamsError, match="can not both be omitted"):
        build_payload(MethodType.QUERY_ORDER, {})


def test_query_rejects_unknown_fields():
    with pytest.raises(InvalidParamsError, match="Unexpected field: buyer_id"):
        build_payload(MethodType.QUERY_ORDER, {"trade_no": "T1", "buyer_id": "2088"})


def test_verify_payment_accepts_numeric_status():
    assert build_payload(MethodType.VERIFY_PAYMENT, {"resultStatus": 8000}) == {"resultStatus": "8000"}


def test_unknown_method_rejected():
    with pytest.raises(InvalidParamsError, match="Unsupported method"):
        build_payload("alipay.trade.refund", {"trade_no": "T1"})


def test_build_params_attaches_compact_biz_content(settings):
    params = build_params(MethodType.CREATE_ORDER, settings, ORDER)

    assert params["method"] == "alipay.trade.app.pay"
    assert params["biz_content"] == (
        '{"subject":"Monthly plan","out_trade_no":"order_1",'
        '"total_amount":"9.90","product_code":"QUICK_MSECURITY_PAY"}'
    )
    assert json.loads(params["biz_content"])["out_trade_no"] == "order_1"
    assert "sign" not in params


def test_sign_params_signs_biz_content(settings, app_keys):
    private_pem, public_pem = app_keys
    params = build_params(MethodType.CREATE_ORDER, settings, ORDER)

    signed = sign_params(params, private_pem)

    assert "sign" not in params
    assert verify_sign(public_pem, signed, ["sign"], signed) is True

    signed["biz_content"] = signed["biz_content"].replace("9.90", "0.01")
    assert verify_sign(public_pem, signed, ["sign"], signed) is False
