"""Pytest fixtures: RSA key pairs, settings, a recording transport and a client."""

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from alipay_mobile.client import AlipayClient
from alipay_mobile.config import Settings
from alipay_mobile.services.signature_service import make_sign


def _generate_key_pair():
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode("utf-8")
    public_pem = key.public_key().public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("utf-8")
    return private_pem, public_pem


def _pem_body(pem: str) -> str:
    """Bare base64 body, as exported by the gateway console."""
    return "".join(line for line in pem.strip().splitlines() if not line.startswith("-----"))


@pytest.fixture
def key_body():
    """Strip PEM header and footer lines, leaving the bare key body."""
    return _pem_body


@pytest.fixture(scope="session")
def app_keys():
    """Application key pair as full PEM (private key is PKCS#8)."""
    return _generate_key_pair()


@pytest.fixture(scope="session")
def gateway_keys():
    """Gateway key pair as full PEM."""
    return _generate_key_pair()


@pytest.fixture
def settings():
    return Settings(
        app_id="2021000000000001",
        environment="sandbox",
        notify_url="https://merchant.example.com/api/alipay/notify",
    )


class RecordingTransport:
    """Transport stub returning a canned reply and recording every call."""

    def __init__(self, reply=None, error=None):
        self.reply = reply if reply is not None else {"data": {}}
        self.error = error
        self.calls = []

    async def request(self, url, *, data, response_format="json", data_as_query_string=True):
        self.calls.append({
            "url": url,
            "data": data,
            "response_format": response_format,
            "data_as_query_string": data_as_query_string,
        })
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def client(app_keys, gateway_keys, settings, transport):
    """Client configured with bare key bodies, the way keys are usually distributed."""
    app_private, _ = app_keys
    _, gateway_public = gateway_keys
    return AlipayClient(
        _pem_body(app_private),
        _pem_body(gateway_public),
        settings=settings,
        transport=transport,
    )


@pytest.fixture
def signed_notification(gateway_keys):
    """A payment notification signed with the gateway private key."""
    gateway_private, _ = gateway_keys
    notification = {
        "notify_time": "2024-10-19 12:30:14",
        "notify_type": "trade_status_sync",
        "notify_id": "ac05099524730693a8b330c5ecf72da9786",
        "app_id": "2021000000000001",
        "charset": "utf-8",
        "version": "1.0",
        "trade_no": "2024101922001400000000000001",
        "out_trade_no": "order_20241019_0001",
        "trade_status": "TRADE_SUCCESS",
        "total_amount": "9.90",
        "buyer_id": "2088102122524333",
        "subject": "Monthly plan",
    }
    notification["sign"] = make_sign(gateway_private, notification)
    notification["sign_type"] = "RSA2"
    return notification
