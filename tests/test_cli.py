"""Tests for the Typer CLI."""

import json

import pytest
from typer.testing import CliRunner

from riskscope import __version__
from riskscope.cli import app

runner = CliRunner()

FINDINGS = {
    "findings": [
        {
            "id": "secret-1",
            "category": "credential",
            "secret_type": "generic",
            "verified": False,
            "location": "tests/fixtures/settings.py",
            "detected_at": "2025-05-31T00:00:00Z",
        },
        {
            "id": "CVE-2021-44228",
            "category": "vulnerability",
            "title": "Log4Shell",
            "cvss": 10.0,
            "known_exploited": True,
            "detected_at": "2025-05-31T00:00:00Z",
        },
    ]
}


@pytest.fixture
def workspace(tmp_path):
    (tmp_path / "findings.json").write_text(json.dumps(FINDINGS))
    (tmp_path / "riskscope.toml").write_text('[context]\nname = "shop"\ncriticality = 3\n')
    return tmp_path


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_score_json_report(workspace):
    out = workspace / "report.json"
    result = runner.invoke(
        app,
        [
            "score",
            str(workspace / "findings.json"),
            "--config", str(workspace / "riskscope.toml"),
            "--format", "json",
            "--output", str(out),
            "--now", "2025-06-01T00:00:00",
        ],
    )
    assert result.exit_code == 0, result.output

    data = json.loads(out.read_text())
    assert data["application"] == "shop"
    assert [f["id"] for f in data["findings"]] == ["CVE-2021-44228", "secret-1"]
    assert data["findings"][0]["risk_score"]["final"] == 100.0
    assert data["findings"][1]["risk_score"]["final"] == 24.5
    assert data["findings"][1]["sla"]["status"] == "overdue"
    assert data["summary"]["known_exploited"] == 1
    assert data["risk"]["highest_score"] == 100.0
    assert data["risk"]["legacy_overall"] == round(data["risk"]["overall"] / 10, 1)
    assert data["sla"]["overdue"] == 1


def test_score_markdown_report(workspace):
    out = workspace / "report.md"
    result = runner.invoke(
        app,
        ["score", str(workspace / "findings.json"), "-c", str(workspace / "riskscope.toml"), "-f", "markdown", "-o", str(out)],
    )
    assert result.exit_code == 0, result.output
    text = out.read_text()
    assert text.startswith("# Risk Report")
    assert "CVE-2021-44228" in text
    assert "**KEV**" in text


def test_score_terminal_report(workspace):
    result = runner.invoke(app, ["score", str(workspace / "findings.json"), "-c", str(workspace / "riskscope.toml")])
    assert result.exit_code == 0, result.output
    assert "Risk Summary" in result.output


def test_malformed_findings_exit_code(workspace):
    bad = workspace / "bad.json"
    bad.write_text(json.dumps([{"id": "no-category"}]))
    result = runner.invoke(app, ["score", str(bad), "-c", str(workspace / "riskscope.toml")])
    assert result.exit_code == 2


def test_missing_file_exit_code(workspace):
    result = runner.invoke(app, ["score", str(workspace / "nope.json"), "-c", str(workspace / "riskscope.toml")])
    assert result.exit_code == 2


def test_config_command_masks_api_key(workspace):
    cfg = workspace / "riskscope.toml"
    cfg.write_text('[enrichment]\nnvd_api_key = "very-secret"\n')
    result = runner.invoke(app, ["config", "-c", str(cfg)])
    assert result.exit_code == 0, result.output
    assert "very-secret" not in result.output
    assert "cache_ttl_hours" in result.output
