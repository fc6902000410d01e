"""Third-party vulnerability intelligence: NVD, EPSS and CISA KEV."""

from __future__ import annotations

import httpx

from riskscope.config import EnrichmentSettings
from riskscope.intel.cache import EnrichmentCache
from riskscope.intel.enricher import Enricher
from riskscope.intel.epss import EpssClient
from riskscope.intel.kev import KevCatalog
from riskscope.intel.nvd import NvdClient

__all__ = ["Enricher", "EnrichmentCache", "build_enricher"]


def build_enricher(
    client: httpx.AsyncClient,
    settings: EnrichmentSettings | None = None,
    cache: EnrichmentCache | None = None,
) -> Enricher:
    """Wire up the fetchers, sharing one HTTP client."""
    settings = settings or EnrichmentSettings()
    return Enricher(
        cache=cache
        or EnrichmentCache(
            ttl=settings.cache_ttl_hours * 3600,
            max_size=settings.cache_max_size,
        ),
        nvd=NvdClient(client, api_key=settings.nvd_api_key, timeout=settings.nvd_timeout),
        epss=EpssClient(client, batch_size=settings.epss_batch_size, timeout=settings.epss_timeout),
        kev=KevCatalog(client, ttl=settings.kev_ttl_hours * 3600, timeout=settings.kev_timeout),
        batch_size=settings.batch_size,
    )
