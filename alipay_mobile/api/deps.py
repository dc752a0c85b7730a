"""
Shared API dependencies.
"""
from functools import lru_cache

from ..client import AlipayClient
from ..config import settings


@lru_cache(maxsize=1)
def get_alipay_client() -> AlipayClient:
    """
    Process-wide client built from settings.

    Raises KeyLoadError on first use when keys are not configured; tests
    replace this dependency through app.dependency_overrides.
    """
    return AlipayClient.from_settings(settings)
