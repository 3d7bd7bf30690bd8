from __future__ import annotations

"""Upstream quote API client.

One GET per call, no retries. The deadline wraps the whole request in
``asyncio.wait_for`` so expiry cancels the in-flight request task and the
connection is dropped, rather than leaving the call running unobserved.

The ``httpx.AsyncClient`` is process-wide (built by the app factory, closed
at shutdown) so requests share its keep-alive pool and TLS context.
"""
import asyncio
import logging

import httpx

from cotacao.core.errors import UpstreamError

logger = logging.getLogger("cotacao.upstream")


def build_http_client(timeout: float) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout),
        limits=httpx.Limits(max_connections=25, max_keepalive_connections=5),
    )


class UpstreamClient:
    def __init__(self, url: str, client: httpx.AsyncClient):
        self.url = url
        self._client = client

    async def fetch(self, deadline: float) -> bytes:
        """Return the raw upstream body, or raise UpstreamError.

        ``deadline`` is in seconds. ``UpstreamError.timed_out`` tells a
        deadline expiry apart from any other transport failure.
        """
        try:
            return await asyncio.wait_for(self._get(), timeout=deadline)
        except asyncio.TimeoutError as e:
            raise UpstreamError(
                f"upstream deadline of {deadline * 1000:.0f}ms exceeded", timed_out=True
            ) from e
        except httpx.TimeoutException as e:
            raise UpstreamError(f"upstream request timed out: {e}", timed_out=True) from e
        except httpx.HTTPError as e:
            raise UpstreamError(f"upstream request failed: {e}") from e
        except RuntimeError as e:
            # raised by httpx once the shared client has been closed
            raise UpstreamError(f"upstream client unavailable: {e}") from e

    async def _get(self) -> bytes:
        response = await self._client.get(self.url)
        body = await response.aread()
        if response.status_code >= 400:
            logger.warning(
                "upstream answered HTTP %s",
                response.status_code,
                extra={"stage": "upstream", "status_code": response.status_code},
            )
        return body
