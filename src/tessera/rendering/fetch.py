"""Remote fetcher for directive expansion."""

from __future__ import annotations

import asyncio

import requests

from tessera._errors import RemoteFetchError


class RemoteFetcher:
    """Async ``url -> body`` capability backed by a ``requests.Session``.

    The blocking request runs in a worker thread so a slow fetch only stalls
    the page that needs it, not the rest of the batch.

    Args:
        timeout: Seconds before a request is abandoned.
        session: Optional pre-configured session (tests inject a mock).

    """

    def __init__(
        self,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self._timeout = timeout
        self._session = session or requests.Session()

    async def __call__(self, url: str) -> str:
        return await asyncio.to_thread(self._get, url)

    def _get(self, url: str) -> str:
        try:
            response = self._session.get(url, timeout=self._timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            msg = f"Failed to fetch {url}: {exc}"
            raise RemoteFetchError(msg, path=url) from exc
        return response.text

    def close(self) -> None:
        self._session.close()
