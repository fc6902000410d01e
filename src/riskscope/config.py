"""TOML configuration loader."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field

from riskscope.models import ApplicationContext

DEFAULT_CONFIG_PATHS = [
    Path("riskscope.toml"),
    Path.home() / ".config" / "riskscope" / "config.toml",
    Path("/etc/riskscope/config.toml"),
]


class EnrichmentSettings(BaseModel):
    """Settings for the NVD / EPSS / KEV lookups."""

    nvd_api_key: str | None = Field(default=None, description="Falls back to $NVD_API_KEY")
    cache_ttl_hours: float = Field(default=4.0, gt=0)
    cache_max_size: int = Field(default=10_000, gt=0)
    kev_ttl_hours: float = Field(default=24.0, gt=0)
    epss_batch_size: int = Field(default=30, gt=0)
    batch_size: int = Field(default=10, gt=0, description="Concurrent NVD lookups per batch")
    nvd_timeout: float = 30.0
    epss_timeout: float = 30.0
    kev_timeout: float = 30.0


class ScanConfig(BaseModel):
    """Configuration for a scoring run."""

    enrich: bool = Field(default=False, description="Enrich vulnerabilities from NVD/EPSS/KEV")
    format: str = Field(default="terminal", description="Output format")
    output: str | None = Field(default=None, description="Output file path")
    log_level: str = Field(default="WARNING")

    context: ApplicationContext | None = None
    enrichment: EnrichmentSettings = Field(default_factory=EnrichmentSettings)


def load_config(config_path: Path | None = None) -> ScanConfig:
    """Load config from TOML file, falling back to defaults."""
    cfg = None
    if config_path and config_path.exists():
        cfg = _parse_toml(config_path)
    else:
        for path in DEFAULT_CONFIG_PATHS:
            if path.exists():
                cfg = _parse_toml(path)
                break

    cfg = cfg or ScanConfig()
    if not cfg.enrichment.nvd_api_key:
        cfg.enrichment.nvd_api_key = os.environ.get("NVD_API_KEY") or None
    return cfg


def _parse_toml(path: Path) -> ScanConfig:
    data = tomllib.loads(path.read_text())
    scan_data = data.get("scan", {})
    return ScanConfig(
        **scan_data,
        context=data.get("context"),
        enrichment=data.get("enrichment", {}),
    )
