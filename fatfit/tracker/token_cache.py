"""Client-credentials bearer token cache for the FatSecret platform.

One instance per credential pair. The token and its expiry are private;
callers only see get_token(). Refresh is lazy: an exchange happens on the
first call and on the first call after expiry, never in the background.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable

import httpx

from fatfit.errors import ConfigurationError, ProviderError

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


def response_details(resp: httpx.Response):
    try:
        return resp.json()
    except ValueError:
        return resp.text


class TokenCache:
    def __init__(
        self,
        client_id: str | None,
        client_secret: str | None,
        token_url: str,
        *,
        scope: str | None = None,
        margin_s: int = 60,
        timeout: float = 30.0,
        clock: Callable[[], int] = _now_ms,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._token_url = token_url
        self._scope = scope
        self._margin_ms = margin_s * 1000
        self._timeout = timeout
        self._clock = clock
        self._transport = transport
        self._lock = asyncio.Lock()
        self._value: str | None = None
        self._expires_at_ms = 0

    async def get_token(self) -> str:
        """Return a valid bearer token, exchanging credentials when none is cached.

        Raises ConfigurationError when credentials are missing and
        ProviderError when the exchange fails (cache left untouched).
        """
        if not self._client_id or not self._client_secret:
            logger.error("FatSecret client id or secret is not configured")
            raise ConfigurationError("FatSecret API credentials are missing")

        async with self._lock:
            if self._value is not None and self._clock() < self._expires_at_ms:
                return self._value

            token, expires_in = await self._exchange()
            self._value = token
            self._expires_at_ms = self._clock() + expires_in * 1000 - self._margin_ms
            logger.info("Fetched FatSecret token, valid for %ss", expires_in)
            return token

    def invalidate(self, rejected: str | None = None) -> None:
        """Drop the cached token.

        With `rejected`, only drop it if that is still the cached value, so a
        late 401 on an old token does not discard a newer one.
        """
        if rejected is not None and rejected != self._value:
            logger.debug("Rejected FatSecret token already replaced, keeping cache")
            return
        self._value = None
        self._expires_at_ms = 0

    async def _exchange(self) -> tuple[str, int]:
        data = {"grant_type": "client_credentials"}
        if self._scope:
            data["scope"] = self._scope

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.post(
                    self._token_url,
                    data=data,
                    auth=(self._client_id, self._client_secret),
                )
        except httpx.HTTPError as exc:
            logger.error("Error fetching FatSecret token: %s", exc)
            raise ProviderError("FatSecret token request failed", details=str(exc)) from exc

        if resp.is_error:
            details = response_details(resp)
            logger.error("FatSecret token error: %s - %s", resp.status_code, details)
            raise ProviderError("FatSecret token request failed", resp.status_code, details)

        try:
            body = resp.json()
            return str(body["access_token"]), int(body["expires_in"])
        except (ValueError, KeyError, TypeError) as exc:
            logger.error("Malformed FatSecret token response: %s", resp.text)
            raise ProviderError(
                "Malformed FatSecret token response", resp.status_code, resp.text
            ) from exc
