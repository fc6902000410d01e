"""Tests for TOML configuration loading."""

from riskscope.config import ScanConfig, load_config

TOML = """
[scan]
enrich = true
format = "json"
log_level = "INFO"

[context]
name = "payments-api"
criticality = 5
network_exposure = "public"

[context.data]
pci = true

[enrichment]
cache_ttl_hours = 2
epss_batch_size = 50
"""


def test_load_from_file(tmp_path, monkeypatch):
    monkeypatch.delenv("NVD_API_KEY", raising=False)
    path = tmp_path / "riskscope.toml"
    path.write_text(TOML)

    cfg = load_config(path)
    assert cfg.enrich is True
    assert cfg.format == "json"
    assert cfg.log_level == "INFO"
    assert cfg.context.name == "payments-api"
    assert cfg.context.data.pci is True
    assert cfg.context.to_environmental().data_sensitivity == "restricted"
    assert cfg.enrichment.cache_ttl_hours == 2
    assert cfg.enrichment.epss_batch_size == 50
    assert cfg.enrichment.kev_ttl_hours == 24
    assert cfg.enrichment.nvd_api_key is None


def test_defaults_without_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("riskscope.config.DEFAULT_CONFIG_PATHS", [tmp_path / "missing.toml"])
    monkeypatch.delenv("NVD_API_KEY", raising=False)

    cfg = load_config()
    assert cfg == ScanConfig()
    assert cfg.context is None
    assert cfg.enrichment.cache_max_size == 10_000


def test_nvd_api_key_from_environment(tmp_path, monkeypatch):
    monkeypatch.setattr("riskscope.config.DEFAULT_CONFIG_PATHS", [])
    monkeypatch.setenv("NVD_API_KEY", "env-key")
    assert load_config().enrichment.nvd_api_key == "env-key"


def test_file_api_key_wins(tmp_path, monkeypatch):
    monkeypatch.setenv("NVD_API_KEY", "env-key")
    path = tmp_path / "riskscope.toml"
    path.write_text('[enrichment]\nnvd_api_key = "file-key"\n')
    assert load_config(path).enrichment.nvd_api_key == "file-key"
