"""Tests for loading normalised finding documents."""

import json
import logging

import pytest

from riskscope.errors import MalformedFindingError
from riskscope.ingest import load_findings, parse_finding, parse_findings
from riskscope.models import CertificateFinding, CredentialFinding, Severity, VulnerabilityFinding

RAW = [
    {"id": "CVE-2021-44228", "category": "vulnerability", "cvss": 10.0, "severity": "CRITICAL"},
    {"id": "aws-key-1", "category": "credential", "secret_type": "aws", "verified": True},
    {"id": "cert-1", "category": "certificate", "expires_at": "2025-07-01T00:00:00Z"},
]


def test_parse_list_into_variants():
    findings = parse_findings(RAW)
    assert isinstance(findings[0], VulnerabilityFinding)
    assert isinstance(findings[1], CredentialFinding)
    assert isinstance(findings[2], CertificateFinding)
    assert findings[0].severity == Severity.CRITICAL


def test_parse_wrapped_document():
    assert len(parse_findings({"findings": RAW})) == 3
    assert parse_findings({}) == []


def test_missing_category_reports_index():
    with pytest.raises(MalformedFindingError) as exc_info:
        parse_findings([RAW[0], {"id": "x"}])
    assert exc_info.value.index == 1
    assert "category" in str(exc_info.value)


def test_missing_id():
    with pytest.raises(MalformedFindingError, match="missing id"):
        parse_finding({"category": "license"})
    with pytest.raises(MalformedFindingError):
        parse_finding({"category": "license", "id": ""})


def test_unknown_category():
    with pytest.raises(MalformedFindingError, match="unknown category"):
        parse_finding({"id": "x", "category": "firewall"})


def test_unhashable_category():
    with pytest.raises(MalformedFindingError, match="unknown category") as exc_info:
        parse_findings([{"id": "x", "category": ["vulnerability"]}])
    assert exc_info.value.index == 0
    with pytest.raises(MalformedFindingError):
        parse_finding({"id": "x", "category": {"name": "license"}})


def test_invalid_field_value_uses_default(caplog):
    with caplog.at_level(logging.WARNING, logger="riskscope.ingest"):
        finding = parse_finding({"id": "CVE-1", "category": "vulnerability", "cvss": 42, "epss": 0.3}, 0)
    assert finding.cvss is None
    assert finding.epss == 0.3
    assert "cvss" in caplog.text


def test_one_bad_field_keeps_the_document():
    findings = parse_findings([
        {"id": "CVE-2024-1", "category": "vulnerability", "cvss": 9.8},
        {"id": "CVE-2024-2", "category": "vulnerability", "cvss": "N/A", "epss": 7},
        {"id": "cert-1", "category": "certificate", "key_size": "big", "domain": "shop.example"},
        {"id": "aws-1", "category": "credential", "verified": "perhaps", "secret_type": "aws"},
    ])
    assert [f.id for f in findings] == ["CVE-2024-1", "CVE-2024-2", "cert-1", "aws-1"]
    assert findings[0].cvss == 9.8
    assert findings[1].cvss is None
    assert findings[1].epss is None
    assert findings[2].key_size is None
    assert findings[2].domain == "shop.example"
    assert findings[3].verified is None
    assert findings[3].secret_type == "aws"


def test_wrongly_typed_id_is_rejected():
    with pytest.raises(MalformedFindingError, match="id"):
        parse_finding({"id": 5, "category": "license"})


def test_non_object_entry():
    with pytest.raises(MalformedFindingError):
        parse_findings(["CVE-1"])
    with pytest.raises(MalformedFindingError):
        parse_findings("not a list")


def test_load_findings(tmp_path):
    path = tmp_path / "findings.json"
    path.write_text(json.dumps({"findings": RAW}))
    assert [f.id for f in load_findings(path)] == ["CVE-2021-44228", "aws-key-1", "cert-1"]


def test_load_invalid_json(tmp_path):
    path = tmp_path / "findings.json"
    path.write_text("{not json")
    with pytest.raises(MalformedFindingError, match="invalid JSON"):
        load_findings(path)
