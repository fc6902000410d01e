"""FIRST.org EPSS (Exploit Prediction Scoring System) API client."""

from __future__ import annotations

import asyncio
import logging

import httpx
from pydantic import BaseModel

from riskscope.intel.limiter import RateLimiter

logger = logging.getLogger(__name__)

EPSS_API = "https://api.first.org/data/v1/epss"

# CVEs per request; keeps the comma-joined query under URL length limits
EPSS_BATCH_SIZE = 30


class EpssRecord(BaseModel):
    epss: float
    percentile: float | None = None


class EpssClient:
    def __init__(
        self,
        client: httpx.AsyncClient,
        limiter: RateLimiter | None = None,
        batch_size: int = EPSS_BATCH_SIZE,
        timeout: float = 30.0,
    ) -> None:
        self._client = client
        self._limiter = limiter or RateLimiter(max_concurrent=5, min_interval=0.1)
        self.batch_size = batch_size
        self._timeout = timeout
        self.requests = 0

    async def fetch_bulk(self, cve_ids: list[str]) -> dict[str, EpssRecord]:
        """EPSS data for ``cve_ids``; ids in a failed chunk are simply absent."""
        ids = list(dict.fromkeys(cve_ids))
        if not ids:
            return {}

        chunks = await asyncio.gather(*(self._fetch_chunk(batch) for batch in _chunks(ids, self.batch_size)))
        results: dict[str, EpssRecord] = {}
        for chunk in chunks:
            results.update(chunk)
        return results

    async def _fetch_chunk(self, cve_ids: list[str]) -> dict[str, EpssRecord]:
        try:
            async with self._limiter:
                self.requests += 1
                resp = await self._client.get(
                    EPSS_API,
                    params={"cve": ",".join(cve_ids)},
                    timeout=self._timeout,
                )
                resp.raise_for_status()
                data = resp.json()

            wanted = set(cve_ids)
            records: dict[str, EpssRecord] = {}
            for entry in data.get("data", []):
                cve_id = entry.get("cve")
                if cve_id in wanted:
                    records[cve_id] = EpssRecord(
                        epss=float(entry.get("epss", 0)),
                        percentile=float(entry.get("percentile", 0)),
                    )
            return records
        except (httpx.HTTPError, KeyError, ValueError, TypeError) as exc:
            logger.warning("EPSS lookup failed for %d CVE(s): %s", len(cve_ids), exc)
            return {}


def _chunks(lst: list, n: int):
    for i in range(0, len(lst), n):
        yield lst[i : i + n]
