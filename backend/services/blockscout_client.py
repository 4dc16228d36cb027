"""
Blockscout explorer client

Thin async wrapper over the three explorer endpoints the verifier uses:
- REST:   POST /api/v2/smart-contracts/{address}/verification/via/flattened-code
- Legacy: GET  /api?module=contract&action=verify&...
- Status: GET  /api/v2/smart-contracts/{address}

Methods return the raw httpx.Response; interpreting status codes is the
caller's job. Every call is bounded by the configured timeout as a whole.
Failures to send propagate as one of REQUEST_ERRORS: httpx transport
errors, a total-deadline overrun (raised as httpx.TimeoutException) and
httpx.InvalidURL for requests that cannot be built, such as a legacy
verify whose query string exceeds the URL length limit.
"""

import asyncio
import logging
from typing import Dict, Optional

import httpx

from infrastructure.config import ExplorerConfig, get_config
from .verification_models import VerificationRequest

logger = logging.getLogger(__name__)

# httpx.InvalidURL is not an httpx.HTTPError
REQUEST_ERRORS = (httpx.HTTPError, httpx.InvalidURL)


class BlockscoutClient:
    """
    Usage:
        client = BlockscoutClient()
        response = await client.verify_flattened(request)
        await client.close()
    """

    def __init__(
        self,
        settings: Optional[ExplorerConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_config().explorer
        self.base_url = self.settings.base_url.rstrip("/")
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

        self._stats = {
            "requests": 0,
            "transport_errors": 0,
        }

    async def _get_client(self) -> httpx.AsyncClient:
        """Lazily create a pooled client so the service can be built synchronously."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.settings.request_timeout,
                transport=self._transport,
                limits=httpx.Limits(
                    max_keepalive_connections=10,
                    max_connections=20,
                    keepalive_expiry=30.0
                ),
                headers={
                    "User-Agent": self.settings.user_agent,
                    "Accept": "application/json",
                }
            )
        return self._client

    async def close(self):
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        self._stats["requests"] += 1
        client = await self._get_client()
        timeout = self.settings.request_timeout
        try:
            try:
                response = await asyncio.wait_for(client.request(method, url, **kwargs), timeout)
            except asyncio.TimeoutError:
                raise httpx.TimeoutException(f"No response from explorer within {timeout}s")
        except REQUEST_ERRORS as e:
            self._stats["transport_errors"] += 1
            logger.warning(f"{method} {url.split('?')[0]} failed: {type(e).__name__}: {e}")
            raise
        logger.info(f"📡 {method} {url.split('?')[0]} -> {response.status_code}")
        return response

    # =====================================================
    # Endpoints
    # =====================================================

    def address_url(self, address: str) -> str:
        return self.settings.address_url(address)

    async def verify_flattened(self, request: VerificationRequest) -> httpx.Response:
        url = f"{self.base_url}/api/v2/smart-contracts/{request.address}/verification/via/flattened-code"
        return await self._send("POST", url, json=request.to_json_body())

    async def verify_legacy(self, request: VerificationRequest) -> httpx.Response:
        return await self._send("GET", f"{self.base_url}/api", params=request.to_query_params())

    async def get_smart_contract(self, address: str) -> httpx.Response:
        return await self._send("GET", f"{self.base_url}/api/v2/smart-contracts/{address}")

    def get_stats(self) -> Dict:
        return dict(self._stats)
