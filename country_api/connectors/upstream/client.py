"""Country API - Upstream HTTP Client.

Thin async wrapper over httpx with a fixed per-call timeout. Any failure
(network, timeout, non-2xx, undecodable body) becomes ``UpstreamUnavailable``.
There is deliberately no retry: the first failure aborts the caller.
"""

from typing import Any, Optional

import httpx

from country_api.config import settings
from country_api.core.errors import UpstreamUnavailable
from country_api.core.logging import get_logger

logger = get_logger("upstream.client")


class UpstreamClient:
    """Async JSON GET client for one named upstream."""

    def __init__(
        self,
        source: str,
        url: str,
        timeout: float | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.source = source
        self.url = url
        self.timeout = timeout if timeout is not None else settings.upstream_timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def get_json(self) -> Any:
        """GET the configured URL and decode the JSON body."""
        client = await self._get_client()
        try:
            resp = await client.get(self.url)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"{self.source} answered {e.response.status_code}",
                extra={"source": self.source, "status_code": e.response.status_code},
            )
            raise UpstreamUnavailable(
                self.source, f"HTTP {e.response.status_code}"
            ) from e
        except httpx.TimeoutException as e:
            logger.error(
                f"{self.source} timed out after {self.timeout}s",
                extra={"source": self.source},
            )
            raise UpstreamUnavailable(self.source, "timeout") from e
        except httpx.RequestError as e:
            logger.error(f"{self.source} request failed: {e}", extra={"source": self.source})
            raise UpstreamUnavailable(self.source, str(e)) from e
        except ValueError as e:
            logger.error(f"{self.source} returned invalid JSON", extra={"source": self.source})
            raise UpstreamUnavailable(self.source, "invalid JSON") from e
