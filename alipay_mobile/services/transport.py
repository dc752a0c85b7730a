"""
Gateway Transport

The client only depends on the `Transport` shape:

    await transport.request(url, data=..., response_format="json",
                            data_as_query_string=True) -> {"data": ...}

Retry, TLS and timeout policy belong to the transport implementation.
"""
import logging
from typing import Any, Dict, Literal, Optional, Protocol

import httpx

from ..exceptions import TransportError

logger = logging.getLogger(__name__)


class Transport(Protocol):
    async def request(
        self,
        url: str,
        *,
        data: Dict[str, Any],
        response_format: Literal["json", "text"] = "json",
        data_as_query_string: bool = True
    ) -> Dict[str, Any]:
        """
        Send parameters to the gateway.

        Returns:
            {"data": parsed JSON body (or text body)}
        """
        ...


class HttpxTransport:
    """Transport backed by httpx.AsyncClient."""

    def __init__(self, timeout: float = 15.0, client: Optional[httpx.AsyncClient] = None):
        self.timeout = timeout
        self._client = client

    async def _send(
        self,
        client: httpx.AsyncClient,
        url: str,
        data: Dict[str, Any],
        data_as_query_string: bool
    ) -> httpx.Response:
        if data_as_query_string:
            return await client.get(url, params=data)
        return await client.post(url, data=data)

    async def request(
        self,
        url: str,
        *,
        data: Dict[str, Any],
        response_format: Literal["json", "text"] = "json",
        data_as_query_string: bool = True
    ) -> Dict[str, Any]:
        try:
            if self._client is not None:
                response = await self._send(self._client, url, data, data_as_query_string)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await self._send(client, url, data, data_as_query_string)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"Gateway returned HTTP {e.response.status_code}",
                details={"status_code": e.response.status_code}
            )
        except httpx.RequestError as e:
            raise TransportError(f"Gateway request failed: {e}")

        logger.debug(f"Gateway replied HTTP {response.status_code}")

        if response_format == "text":
            return {"data": response.text}

        try:
            return {"data": response.json() if response.content else {}}
        except ValueError as e:
            raise TransportError(f"Gateway reply is not JSON: {e}")
