# -*- coding: utf-8 -*-

# Relay Gateway
# Copyright (C) 2025 Jwadow
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.

"""
HTTP client for the upstream chat completions API.

Wraps a shared httpx.AsyncClient and retries transient failures
(timeouts, network errors, 408/429/5xx) with exponential backoff.
Non-transient responses (e.g. 400) are returned as-is for the caller
to relay.
"""

import asyncio
from typing import Any, Dict, Optional

import httpx
from loguru import logger

from relay.config import (
    BASE_RETRY_DELAY,
    MAX_RETRIES,
    UPSTREAM_API_KEY,
    UPSTREAM_BASE_URL,
    UPSTREAM_TIMEOUT,
    get_upstream_chat_url,
)

TRANSIENT_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})


class UpstreamHttpClient:
    """
    Upstream client with retry logic.

    Example:
        >>> client = UpstreamHttpClient()
        >>> response = await client.post_chat_completions(payload.to_request_body())
        >>> await client.close()
    """

    def __init__(
        self,
        base_url: str = UPSTREAM_BASE_URL,
        api_key: str = UPSTREAM_API_KEY,
        timeout: float = UPSTREAM_TIMEOUT,
        max_retries: int = MAX_RETRIES,
        base_retry_delay: float = BASE_RETRY_DELAY,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: Upstream base URL
            api_key: Bearer token (empty = no Authorization header)
            timeout: Per-request timeout in seconds
            max_retries: Total attempts for transient failures (at least 1)
            base_retry_delay: Backoff base, delay * (2 ** attempt)
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        self.chat_url = get_upstream_chat_url(base_url)
        self.api_key = api_key
        self.max_retries = max(1, max_retries)
        self.base_retry_delay = base_retry_delay
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def _backoff(self, attempt: int) -> None:
        delay = self.base_retry_delay * (2 ** attempt)
        if delay > 0:
            await asyncio.sleep(delay)

    async def post_chat_completions(
        self, body: Dict[str, Any], stream: bool = False
    ) -> httpx.Response:
        """
        POST the payload to the upstream chat completions endpoint.

        Args:
            body: Upstream request body (UpstreamPayload.to_request_body())
            stream: When True the response body is not read; the caller must
                iterate it and call aclose()

        Returns:
            Last upstream response (may be an error status)

        Raises:
            httpx.HTTPError: Network failure on the last attempt
        """
        for attempt in range(self.max_retries):
            is_last = attempt == self.max_retries - 1
            request = self._client.build_request(
                "POST", self.chat_url, json=body, headers=self._headers()
            )
            try:
                response = await self._client.send(request, stream=stream)
            except (httpx.TimeoutException, httpx.NetworkError) as e:
                if is_last:
                    logger.error(
                        "Upstream request failed after {} attempt(s): {}", self.max_retries, e
                    )
                    raise
                logger.warning(
                    "Upstream request error (attempt {}/{}): {}", attempt + 1, self.max_retries, e
                )
                await self._backoff(attempt)
                continue

            if response.status_code in TRANSIENT_STATUS_CODES and not is_last:
                logger.warning(
                    "Upstream returned {} (attempt {}/{}), retrying",
                    response.status_code, attempt + 1, self.max_retries,
                )
                await response.aclose()
                await self._backoff(attempt)
                continue

            return response

        # max_retries >= 1, the loop always returns or raises
        raise RuntimeError("Upstream request loop exited unexpectedly")

    async def close(self) -> None:
        """Closes the underlying httpx client."""
        await self._client.aclose()


async def read_response_error_text(response: httpx.Response) -> str:
    """Reads an upstream error body as text, "Unknown error" when it cannot be read."""
    try:
        return (await response.aread()).decode("utf-8", errors="replace")
    except (httpx.HTTPError, RuntimeError, ValueError):
        return "Unknown error"
