"""
Alipay Client Exception Hierarchy

Error codes use the alipay: prefix so API consumers can tell gateway adapter
failures apart from other application errors.

Only construction-time key errors escape the client facade; everything else is
converted into a structured AlipayResult at the facade boundary.
"""
from typing import Optional, Dict, Any


class AlipayError(Exception):
    """
    Base exception for all Alipay adapter errors.

    Carries a stable error code, a human-readable message and optional
    details for the API error response.
    """

    def __init__(
        self,
        error_code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.error_code = error_code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to API error response format."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


class InvalidParamsError(AlipayError):
    """
    Operation parameters failed schema validation.

    Examples:
    - Required business field missing (subject, out_trade_no, ...)
    - Both out_trade_no and trade_no omitted on order query
    - Unknown operation method
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("alipay:params:invalid", message, details)


class KeyLoadError(AlipayError):
    """
    Key material could not be located.

    Raised while constructing the client; the client cannot exist without
    both the application private key and the gateway public key.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("alipay:key:load_failed", message, details)


class SigningError(AlipayError):
    """
    Request signing failed.

    Example:
    - Private key PEM is malformed or not an RSA key
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("alipay:sign:failed", message, details)


class VerificationError(AlipayError):
    """
    Signature verification could not be attempted.

    Examples:
    - Signature is missing or not valid base64
    - Public key PEM is malformed

    A signature that simply does not match is NOT an error; verification
    returns False for it.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("alipay:verify:failed", message, details)


class TransportError(AlipayError):
    """
    Gateway request failed at the HTTP layer.

    Examples:
    - Connection refused or timed out
    - Gateway returned a non-2xx status
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("alipay:transport:failed", message, details)
