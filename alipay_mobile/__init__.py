"""
Alipay Mobile - client-side adapter for the Alipay app payment gateway.

Canonicalizes and signs request parameters (RSA2), builds order strings for
the mobile SDK, queries orders and verifies asynchronous notifications.

Files in this package:
- client.py: AlipayClient facade, one method per operation
- services/signature_service.py: canonicalization, signing, verification
- services/param_builder.py: envelope and business payload assembly
- services/response_service.py: outcome classification
- services/key_service.py: PEM normalization and key loading
- services/transport.py: async HTTP transport
- main.py: FastAPI application exposing the client
"""
from .client import AlipayClient
from .constants import MethodType
from .exceptions import (
    AlipayError,
    InvalidParamsError,
    KeyLoadError,
    SigningError,
    TransportError,
    VerificationError,
)
from .models.results import AlipayResult, Outcome

__version__ = "0.1.0"
__all__ = [
    "AlipayClient",
    "AlipayResult",
    "Outcome",
    "MethodType",
    "AlipayError",
    "InvalidParamsError",
    "KeyLoadError",
    "SigningError",
    "VerificationError",
    "TransportError",
]
