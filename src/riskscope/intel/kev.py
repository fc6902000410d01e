"""CISA Known Exploited Vulnerabilities (KEV) catalog client."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable

import httpx

logger = logging.getLogger(__name__)

KEV_URL = "https://www.cisa.gov/sites/default/files/feeds/known_exploited_vulnerabilities.json"
KEV_TTL_SECONDS = 24 * 60 * 60


class KevCatalog:
    """The KEV id set, fetched at most once per TTL.

    Concurrent callers during a refresh await the same in-flight request.
    A failed refresh keeps serving the previous set (empty if none).
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        ttl: float = KEV_TTL_SECONDS,
        timeout: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client
        self.ttl = ttl
        self._timeout = timeout
        self._clock = clock
        self._ids: frozenset[str] = frozenset()
        self._fetched_at: float | None = None
        self._pending: asyncio.Future[frozenset[str]] | None = None
        self.requests = 0

    def is_fresh(self) -> bool:
        return self._fetched_at is not None and self._clock() - self._fetched_at < self.ttl

    async def identifiers(self) -> frozenset[str]:
        if self.is_fresh():
            return self._ids

        if self._pending is None:
            self._pending = asyncio.ensure_future(self._refresh())
        pending = self._pending
        try:
            return await asyncio.shield(pending)
        finally:
            if pending.done() and self._pending is pending:
                self._pending = None

    async def contains(self, cve_id: str) -> bool:
        return cve_id in await self.identifiers()

    async def _refresh(self) -> frozenset[str]:
        try:
            self.requests += 1
            resp = await self._client.get(KEV_URL, timeout=self._timeout)
            resp.raise_for_status()
            data = resp.json()
            self._ids = frozenset(v["cveID"] for v in data.get("vulnerabilities", []))
            self._fetched_at = self._clock()
            logger.info("Loaded %d KEV entries", len(self._ids))
        except (httpx.HTTPError, KeyError, ValueError, TypeError) as exc:
            logger.warning("CISA KEV fetch failed: %s", exc)
        return self._ids
