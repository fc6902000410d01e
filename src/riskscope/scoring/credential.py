"""Leaked credential scoring: type severity x validity x context x git history."""

from __future__ import annotations

from riskscope.models import Category, CredentialFinding
from riskscope.scoring.base import BaseCalculator, clamp
from riskscope.scoring.tables import (
    SECRET_CONTEXT,
    SECRET_GIT_HISTORY,
    SECRET_TYPE_SEVERITY,
    SECRET_VALIDITY,
)

# Ordered: first keyword hit wins
SECRET_TYPE_KEYWORDS = [
    ("private_key", ("private_key", "privatekey", "rsa", "ssh", "pem", "pgp")),
    ("aws", ("aws", "amazon")),
    ("azure", ("azure",)),
    ("gcp", ("gcp", "google")),
    ("db_password", ("db_", "database", "postgres", "mysql", "mongo", "redis")),
    ("oauth", ("oauth",)),
    ("api_key", ("api_key", "apikey", "api-key")),
    ("token", ("token", "jwt", "bearer")),
    ("password", ("password", "passwd", "pwd")),
]

TEST_INDICATORS = (
    "test", "spec", "mock", "__tests__", "fixtures", "example", "sample", "demo",
)
CONFIG_INDICATORS = (
    ".env", "config", "settings", "credentials", ".json", ".yaml", ".yml", ".toml",
)


def normalize_secret_type(secret_type: str | None) -> str:
    key = (secret_type or "").strip().lower().replace("-", "_").replace(" ", "_")
    if key in SECRET_TYPE_SEVERITY:
        return key
    for name, keywords in SECRET_TYPE_KEYWORDS:
        if any(k in key for k in keywords):
            return name
    return "generic"


def validity_status(finding: CredentialFinding) -> str:
    if finding.revoked:
        return "revoked"
    if finding.verified:
        return "verified"
    return "unverified"


def infer_context(finding: CredentialFinding) -> str:
    """Explicit context if valid, else guessed from location and file path."""
    if finding.context and finding.context in SECRET_CONTEXT:
        return finding.context

    combined = f"{finding.location} {finding.file_path or ''}".lower()
    if any(i in combined for i in TEST_INDICATORS):
        return "test_dev"
    if any(i in combined for i in CONFIG_INDICATORS):
        return "config_file"
    return "production"


class CredentialCalculator(BaseCalculator[CredentialFinding]):
    category = Category.CREDENTIAL

    def base_score(self, finding: CredentialFinding) -> float:
        factors = self._factors(finding)
        return clamp(
            factors["type_severity"]
            * factors["validity_multiplier"]
            * factors["context_multiplier"]
            * factors["git_history_multiplier"]
        )

    def type_factors(self, finding: CredentialFinding) -> dict[str, float]:
        factors = self._factors(finding)
        factors["verified"] = 1.0 if finding.verified else 0.0
        factors["in_git_history"] = 1.0 if finding.in_git_history else 0.0
        factors["entropy"] = finding.entropy or 0.0
        return factors

    def _factors(self, finding: CredentialFinding) -> dict[str, float]:
        return {
            "type_severity": float(SECRET_TYPE_SEVERITY[normalize_secret_type(finding.secret_type)]),
            "validity_multiplier": SECRET_VALIDITY[validity_status(finding)],
            "context_multiplier": SECRET_CONTEXT[infer_context(finding)],
            "git_history_multiplier": SECRET_GIT_HISTORY if finding.in_git_history else 1.0,
        }
