"""NIST NVD per-CVE detail lookup (CVSS, description, references)."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

import httpx
from pydantic import BaseModel, Field, field_validator

from riskscope.intel.limiter import RateLimiter

logger = logging.getLogger(__name__)

NVD_API = "https://services.nvd.nist.gov/rest/json/cves/2.0"


class NvdRecord(BaseModel):
    cvss: float | None = None
    cvss_vector: str | None = None
    description: str | None = None
    references: list[str] = Field(default_factory=list)
    last_modified: datetime | None = None

    @field_validator("last_modified")
    @classmethod
    def _utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


def nvd_limiter(api_key: str | None) -> RateLimiter:
    """NVD allows 5 requests / 30 s anonymously and 50 / 30 s with a key."""
    if api_key:
        return RateLimiter(max_concurrent=2, reservoir=50, refill_interval=30.0, min_interval=0.6)
    return RateLimiter(max_concurrent=1, reservoir=5, refill_interval=30.0, min_interval=6.0)


class NvdClient:
    def __init__(
        self,
        client: httpx.AsyncClient,
        limiter: RateLimiter | None = None,
        api_key: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._client = client
        self._limiter = limiter or nvd_limiter(api_key)
        self._api_key = api_key
        self._timeout = timeout
        self.requests = 0

    async def fetch(self, cve_id: str) -> NvdRecord | None:
        """Return the NVD record, or None when the lookup fails."""
        headers = {"apiKey": self._api_key} if self._api_key else {}
        try:
            async with self._limiter:
                self.requests += 1
                resp = await self._client.get(
                    NVD_API,
                    params={"cveId": cve_id},
                    headers=headers,
                    timeout=self._timeout,
                )
                resp.raise_for_status()
                data = resp.json()
            return _parse(data)
        except (httpx.HTTPError, KeyError, ValueError, TypeError) as exc:
            logger.warning("NVD lookup failed for %s: %s", cve_id, exc)
            return None


def _parse(data: dict) -> NvdRecord:
    vulns = data.get("vulnerabilities") or []
    if not vulns:
        return NvdRecord()
    cve = vulns[0]["cve"]

    cvss = None
    vector = None
    metrics = cve.get("metrics", {})
    for key in ("cvssMetricV31", "cvssMetricV30", "cvssMetricV2"):
        entries = metrics.get(key) or []
        if entries:
            cvss_data = entries[0]["cvssData"]
            cvss = float(cvss_data["baseScore"])
            vector = cvss_data.get("vectorString")
            break

    description = next(
        (d["value"] for d in cve.get("descriptions", []) if d.get("lang") == "en"),
        None,
    )
    references = [r["url"] for r in cve.get("references", []) if r.get("url")]

    return NvdRecord(
        cvss=cvss,
        cvss_vector=vector,
        description=description or None,
        references=references,
        last_modified=cve.get("lastModified"),
    )
