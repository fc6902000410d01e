"""Enrich vulnerability findings with NVD, EPSS and CISA KEV data."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from riskscope.intel.cache import CachedEntry, EnrichmentCache
from riskscope.intel.epss import EpssClient, EpssRecord
from riskscope.intel.kev import KevCatalog
from riskscope.intel.nvd import NvdClient, NvdRecord
from riskscope.models import Finding, Severity, VulnerabilityFinding

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]

# Scanner descriptions shorter than this are treated as placeholders
MIN_DESCRIPTION_LENGTH = 20


class Enricher:
    """Resolve cache misses through the fetchers and merge results in order."""

    def __init__(
        self,
        cache: EnrichmentCache,
        nvd: NvdClient,
        epss: EpssClient,
        kev: KevCatalog,
        batch_size: int = 10,
    ) -> None:
        self.cache = cache
        self.nvd = nvd
        self.epss = epss
        self.kev = kev
        self.batch_size = batch_size

    async def enrich_vulnerabilities(
        self,
        findings: list[Finding],
        on_progress: ProgressCallback | None = None,
    ) -> list[Finding]:
        """Return ``findings`` with vulnerability data merged in.

        Same length and order as the input. Non-CVE findings are returned
        untouched; a failed lookup leaves the finding as it was.
        """
        results: list[Finding] = list(findings)
        targets = [
            i for i, f in enumerate(findings) if isinstance(f, VulnerabilityFinding) and f.is_cve
        ]
        total = len(targets)
        _notify(on_progress, 0, total)
        if not targets:
            return results

        hits: dict[int, CachedEntry] = {}
        misses: list[int] = []
        for i in targets:
            entry = self.cache.get(findings[i].id)
            if entry is not None:
                hits[i] = entry
            else:
                misses.append(i)
        logger.info("Enrichment cache: %d hit(s), %d miss(es)", len(hits), len(misses))

        # Hits cached without EPSS data (an earlier EPSS failure) ask again
        epss_wanted = [findings[i].id for i in misses]
        epss_wanted += [findings[i].id for i, entry in hits.items() if entry.exploit is None]

        kev_ids = await self.kev.identifiers()
        epss_data = await self.epss.fetch_bulk(epss_wanted)

        for i, entry in hits.items():
            exploit = entry.exploit
            if exploit is None:
                exploit = epss_data.get(findings[i].id)
                if exploit is not None:
                    self.cache.set(findings[i].id, reputation=entry.reputation, exploit=exploit)
            results[i] = _merge(findings[i], entry.reputation, exploit, kev_ids)

        done = len(hits)
        if hits:
            _notify(on_progress, done, total)

        for start in range(0, len(misses), self.batch_size):
            batch = misses[start : start + self.batch_size]
            merged = await asyncio.gather(
                *(self._resolve(findings[i], epss_data.get(findings[i].id), kev_ids) for i in batch)
            )
            for i, finding in zip(batch, merged):
                results[i] = finding
            done += len(batch)
            _notify(on_progress, done, total)

        return results

    async def _resolve(
        self,
        finding: VulnerabilityFinding,
        exploit: EpssRecord | None,
        kev_ids: frozenset[str],
    ) -> VulnerabilityFinding:
        if _has_scanner_details(finding):
            reputation = None
            fetched = True
        else:
            reputation = await self.nvd.fetch(finding.id)
            fetched = reputation is not None

        if fetched:
            self.cache.set(finding.id, reputation=reputation, exploit=exploit)
        return _merge(finding, reputation, exploit, kev_ids)


def _has_scanner_details(finding: VulnerabilityFinding) -> bool:
    return bool(finding.cvss) and len(finding.description) > MIN_DESCRIPTION_LENGTH


def _merge(
    finding: VulnerabilityFinding,
    reputation: NvdRecord | None,
    exploit: EpssRecord | None,
    kev_ids: frozenset[str],
) -> VulnerabilityFinding:
    update: dict = {"known_exploited": finding.known_exploited or finding.id in kev_ids}

    if reputation is not None:
        if reputation.cvss is not None:
            update["cvss"] = reputation.cvss
            update["severity"] = Severity.from_cvss(reputation.cvss)
        if reputation.cvss_vector:
            update["cvss_vector"] = reputation.cvss_vector
        if reputation.description and len(finding.description) <= MIN_DESCRIPTION_LENGTH:
            update["description"] = reputation.description
        if reputation.references:
            update["references"] = list(dict.fromkeys([*finding.references, *reputation.references]))
        if reputation.last_modified is not None:
            update["last_modified"] = reputation.last_modified

    if exploit is not None:
        update["epss"] = exploit.epss
        update["epss_percentile"] = exploit.percentile

    return finding.model_copy(update=update)


def _notify(callback: ProgressCallback | None, current: int, total: int) -> None:
    if callback is not None:
        callback(current, total)
