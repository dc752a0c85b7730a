"""
Signature Service for Alipay Gateway Requests

Implements parameter canonicalization and SHA256withRSA (RSA2) signing and
verification.

Canonical form:
- Empty values (None, "", empty containers) are dropped
- The `sign` key is never part of the signed string
- Keys sorted ascending, joined as key=value with &
- Values are taken verbatim, never URL-encoded
"""
import base64
import binascii
import json
import logging
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Tuple
from urllib.parse import quote

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from ..exceptions import SigningError, VerificationError

logger = logging.getLogger(__name__)

# Characters left alone by JavaScript's encodeURIComponent, which the mobile
# SDK uses to decode the order string
_URI_COMPONENT_SAFE = "-_.!~*'()"


def is_empty(value: Any) -> bool:
    """Values that never take part in a signed string."""
    if value is None:
        return True
    if isinstance(value, (str, dict, list, tuple)) and len(value) == 0:
        return True
    return False


def render_value(value: Any) -> str:
    """String form of a parameter value as it appears in the signed string."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return str(value)


def canonical_pairs(
    params: Dict[str, Any],
    excluded_keys: Iterable[str] = ("sign",)
) -> List[Tuple[str, str]]:
    """
    Filtered, rendered and sorted key/value pairs of a parameter set.

    Both the signed string and the transmitted query string are built from
    this list, so they always agree on keys, values and order.

    Args:
        params: Parameter mapping
        excluded_keys: Keys left out in addition to `sign`

    Returns:
        List of (key, value) tuples sorted by key
    """
    excluded = set(excluded_keys) | {"sign"}
    pairs = [
        (key, render_value(value))
        for key, value in params.items()
        if key not in excluded and not is_empty(value)
    ]
    return sorted(pairs, key=lambda pair: pair[0])


def make_sign_str(
    params: Dict[str, Any],
    excluded_keys: Iterable[str] = ("sign",)
) -> str:
    """Canonical string that gets signed."""
    return "&".join(f"{key}={value}" for key, value in canonical_pairs(params, excluded_keys))


def encode_component(value: str) -> str:
    """Percent-encode a value the way encodeURIComponent does."""
    return quote(value, safe=_URI_COMPONENT_SAFE)


def make_query_str(
    params: Dict[str, Any],
    excluded_keys: Iterable[str] = ("sign",)
) -> str:
    """URL-encoded variant of the canonical string, for transmission only."""
    return "&".join(
        f"{key}={encode_component(value)}"
        for key, value in canonical_pairs(params, excluded_keys)
    )


# ============================================================================
# Key Parsing
# ============================================================================

def _pem_body(pem: str) -> bytes:
    """Base64 body of a PEM document, header and footer lines removed."""
    lines = [
        line.strip()
        for line in pem.strip().splitlines()
        if line.strip() and not line.strip().startswith("-----")
    ]
    return base64.b64decode("".join(lines), validate=True)


@lru_cache(maxsize=32)
def load_private_key(pem: str) -> rsa.RSAPrivateKey:
    """
    Parse an RSA private key.

    The gateway console hands out PKCS#8 bodies which are usually wrapped in
    an `RSA PRIVATE KEY` (PKCS#1) envelope, so a header mismatch falls back
    to loading the decoded body as DER, which accepts either encoding.

    Raises:
        SigningError: If the key cannot be parsed or is not RSA
    """
    try:
        try:
            key = serialization.load_pem_private_key(pem.encode("utf-8"), password=None)
        except ValueError:
            key = serialization.load_der_private_key(_pem_body(pem), password=None)
    except (ValueError, TypeError, binascii.Error, UnsupportedAlgorithm) as e:
        raise SigningError(f"Invalid private key: {e}")

    if not isinstance(key, rsa.RSAPrivateKey):
        raise SigningError("Private key is not an RSA key")
    return key


@lru_cache(maxsize=32)
def load_public_key(pem: str) -> rsa.RSAPublicKey:
    """
    Parse an RSA public key (SubjectPublicKeyInfo or PKCS#1).

    Raises:
        VerificationError: If the key cannot be parsed or is not RSA
    """
    try:
        try:
            key = serialization.load_pem_public_key(pem.encode("utf-8"))
        except ValueError:
            key = serialization.load_der_public_key(_pem_body(pem))
    except (ValueError, TypeError, binascii.Error, UnsupportedAlgorithm) as e:
        raise VerificationError(f"Invalid public key: {e}")

    if not isinstance(key, rsa.RSAPublicKey):
        raise VerificationError("Public key is not an RSA key")
    return key


# ============================================================================
# Sign / Verify
# ============================================================================

def make_sign(private_key: str, params: Dict[str, Any]) -> str:
    """
    Sign a parameter set with SHA256withRSA.

    Args:
        private_key: Application private key as PEM text
        params: Parameters to sign (any existing `sign` is ignored)

    Returns:
        Base64-encoded signature

    Raises:
        SigningError: If the private key is malformed
    """
    key = load_private_key(private_key)
    sign_str = make_sign_str(params)

    signature = key.sign(
        sign_str.encode("utf-8"),
        padding.PKCS1v15(),
        hashes.SHA256()
    )
    return base64.b64encode(signature).decode("utf-8")


def verify_sign(
    public_key: str,
    signed: Dict[str, Any],
    excluded_keys: Iterable[str],
    source: Dict[str, Any]
) -> bool:
    """
    Verify a SHA256withRSA signature.

    Args:
        public_key: Gateway public key as PEM text
        signed: Mapping holding the signature under `sign`
        excluded_keys: Keys of `source` that were not part of the signed string
        source: Fields the signature was computed over

    Returns:
        True if the signature matches, False otherwise

    Raises:
        VerificationError: If the signature is missing or not base64, or the
            public key is malformed
    """
    signature = signed.get("sign")
    if not signature or not isinstance(signature, str):
        raise VerificationError("Missing signature")

    try:
        signature_bytes = base64.b64decode(signature, validate=True)
    except (binascii.Error, ValueError) as e:
        raise VerificationError(f"Signature is not valid base64: {e}")

    key = load_public_key(public_key)
    sign_str = make_sign_str(source, excluded_keys)

    try:
        key.verify(
            signature_bytes,
            sign_str.encode("utf-8"),
            padding.PKCS1v15(),
            hashes.SHA256()
        )
    except InvalidSignature:
        logger.debug("Signature mismatch")
        return False
    return True
