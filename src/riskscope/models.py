"""Unified data models for findings, scores and scan results."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, field_validator


def _as_utc(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class Severity(StrEnum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def default_score(self) -> float:
        """Score assumed for a finding that carries no structured score."""
        return {
            Severity.CRITICAL: 95.0,
            Severity.HIGH: 75.0,
            Severity.MEDIUM: 50.0,
            Severity.LOW: 25.0,
        }[self]

    @classmethod
    def from_score(cls, score: float) -> Severity:
        if score >= 90:
            return cls.CRITICAL
        if score >= 70:
            return cls.HIGH
        if score >= 40:
            return cls.MEDIUM
        return cls.LOW

    @classmethod
    def from_cvss(cls, cvss: float) -> Severity:
        if cvss >= 9.0:
            return cls.CRITICAL
        if cvss >= 7.0:
            return cls.HIGH
        if cvss >= 4.0:
            return cls.MEDIUM
        return cls.LOW


# Scanner vocabularies that do not map one-to-one onto our four buckets.
SEVERITY_ALIASES = {
    "crit": Severity.CRITICAL,
    "blocker": Severity.CRITICAL,
    "error": Severity.HIGH,
    "moderate": Severity.MEDIUM,
    "warning": Severity.MEDIUM,
    "info": Severity.LOW,
    "informational": Severity.LOW,
    "negligible": Severity.LOW,
    "unknown": Severity.LOW,
}


class Category(StrEnum):
    VULNERABILITY = "vulnerability"
    CREDENTIAL = "credential"
    CERTIFICATE = "certificate"
    MISCONFIGURATION = "misconfiguration"
    LICENSE = "license"
    STATIC_ANALYSIS = "static_analysis"


class SLAStatus(StrEnum):
    OVERDUE = "overdue"
    DUE_SOON = "due_soon"
    ON_TRACK = "on_track"


# ---------------------------------------------------------------------------
# Scores
# ---------------------------------------------------------------------------


class ScoreBreakdown(BaseModel):
    asset_criticality_factor: float = 1.0
    data_sensitivity_factor: float = 1.0
    network_exposure_factor: float = 1.0
    type_factors: dict[str, float] = Field(default_factory=dict)


class RiskScore(BaseModel):
    """Result of the base scoring contract for one finding."""

    final: float | None = Field(default=None, ge=0.0, le=100.0)
    base_score: float = Field(default=0.0, ge=0.0, le=100.0)
    environmental_multiplier: float = 1.0
    override_multiplier: float = 1.0
    breakdown: ScoreBreakdown = Field(default_factory=ScoreBreakdown)

    # Legacy 0-10 equivalents for older consumers
    concert: float | None = Field(default=None, ge=0.0, le=10.0)
    comprehensive: float | None = Field(default=None, ge=0.0, le=10.0)


class SLARecord(BaseModel):
    deadline: datetime
    status: SLAStatus
    days_remaining: int


# ---------------------------------------------------------------------------
# Findings
# ---------------------------------------------------------------------------


class FindingBase(BaseModel):
    """Fields shared by every finding category."""

    id: str = Field(min_length=1, description="Stable identifier (CVE-ID, rule hit id, ...)")
    title: str = ""
    description: str = ""
    severity: Severity = Severity.MEDIUM
    location: str = Field(default="", description="File path, resource or URL")
    detected_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    source: str = Field(default="", description="Tool that produced this finding")

    # Populated by the scoring contract and the SLA engine
    risk_score: RiskScore | None = None
    sla: SLARecord | None = None

    @field_validator("severity", mode="before")
    @classmethod
    def _normalize_severity(cls, value: object) -> object:
        if value is None:
            return Severity.MEDIUM
        if isinstance(value, str) and not isinstance(value, Severity):
            key = value.strip().lower()
            if key in Severity._value2member_map_:
                return key
            return SEVERITY_ALIASES.get(key, Severity.MEDIUM)
        return value

    @field_validator("detected_at")
    @classmethod
    def _detected_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @property
    def effective_score(self) -> float:
        """Final score, else legacy score scaled up, else the severity default."""
        if self.risk_score is not None:
            if self.risk_score.final is not None:
                return self.risk_score.final
            if self.risk_score.concert is not None:
                return self.risk_score.concert * 10
        return self.severity.default_score


class VulnerabilityFinding(FindingBase):
    category: Literal["vulnerability"] = "vulnerability"
    cvss: float | None = Field(default=None, ge=0.0, le=10.0)
    cvss_vector: str | None = None
    epss: float | None = Field(default=None, ge=0.0, le=1.0, description="Exploit probability")
    epss_percentile: float | None = Field(default=None, ge=0.0, le=1.0)
    known_exploited: bool = False
    component: str = ""
    version: str = ""
    fixed_version: str | None = None
    references: list[str] = Field(default_factory=list)
    last_modified: datetime | None = None

    @field_validator("last_modified")
    @classmethod
    def _modified_utc(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)

    @property
    def is_cve(self) -> bool:
        return self.id.startswith("CVE-")


class CredentialFinding(FindingBase):
    category: Literal["credential"] = "credential"
    secret_type: str = "generic"
    verified: bool | None = None
    revoked: bool = False
    in_git_history: bool = False
    context: str | None = Field(
        default=None,
        description="production, config_file, default_branch or test_dev; inferred when absent",
    )
    file_path: str | None = None
    detector: str = ""
    entropy: float | None = None


class CertificateFinding(FindingBase):
    category: Literal["certificate"] = "certificate"
    domain: str = ""
    issuer: str = ""
    expires_at: datetime | None = None
    days_until_expiry: int | None = None
    expired: bool = False
    algorithm: str = ""
    key_size: int | None = None
    self_signed: bool = False
    weak_algorithm: bool = False
    cert_type: str = "other"

    @field_validator("expires_at")
    @classmethod
    def _expires_utc(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)

    def days_left(self, now: datetime | None = None) -> int | None:
        """Days until expiry as of ``now``; negative once expired."""
        if self.expires_at is not None:
            now = now or datetime.now(UTC)
            return (self.expires_at - now).days
        return self.days_until_expiry

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expired:
            return True
        days = self.days_left(now)
        return days is not None and days < 0


class MisconfigurationFinding(FindingBase):
    category: Literal["misconfiguration"] = "misconfiguration"
    resource_type: str = ""
    resource_name: str | None = None
    check_id: str = ""
    check_name: str = ""
    framework: str | None = None
    publicly_accessible: bool | None = None


class LicenseFinding(FindingBase):
    category: Literal["license"] = "license"
    license_id: str = ""
    license_type: str = ""
    package_name: str = ""
    package_version: str = ""
    copyleft: bool = False
    unknown: bool = False
    modified: bool = False


class StaticAnalysisFinding(FindingBase):
    category: Literal["static_analysis"] = "static_analysis"
    rule_id: str = ""
    rule_name: str = ""
    issue_type: str | None = None
    cwe: list[str] = Field(default_factory=list)
    confidence: str | None = None
    file_path: str | None = None
    line_number: int | None = None
    tool_type: Literal["sast", "dast"] | None = None
    severity_level: str | None = Field(
        default=None,
        description="Tool-native severity label, e.g. 'Blocker' or 'High (Medium)'",
    )


Finding = Annotated[
    Union[
        VulnerabilityFinding,
        CredentialFinding,
        CertificateFinding,
        MisconfigurationFinding,
        LicenseFinding,
        StaticAnalysisFinding,
    ],
    Field(discriminator="category"),
]


# ---------------------------------------------------------------------------
# Context and overrides
# ---------------------------------------------------------------------------


class EnvironmentalContext(BaseModel):
    """Ordinal environment factors; any missing factor is neutral."""

    asset_criticality: int | None = Field(default=None, description="Tier 1-5")
    data_sensitivity: str | None = Field(
        default=None, description="public, internal, confidential or restricted"
    )
    network_exposure: str | None = Field(
        default=None,
        description="air-gapped, segmented, internal, dmz or internet-facing",
    )


class ConcertContext(BaseModel):
    """Inputs of the bounded environmental factor (all optional)."""

    application_criticality: int | None = None
    data_sensitivity: int | None = None
    public_access_points: int = 0
    private_access_points: int = 0


class DataFlags(BaseModel):
    pii: bool = False
    phi: bool = False
    pci: bool = False
    trade_secrets: bool = False


class ApplicationContext(BaseModel):
    """Organizational context for one application."""

    name: str = ""
    industry: str = ""
    purpose: str = ""
    criticality: int = Field(default=3, description="Business criticality tier 1-5")
    data: DataFlags = Field(default_factory=DataFlags)
    network_exposure: Literal["internal", "dmz", "public"] = "internal"
    public_endpoints: int = 0
    private_endpoints: int = 0
    distribution: str | None = Field(
        default=None, description="saas, commercial, internal or open_source"
    )

    @property
    def tier(self) -> int:
        return max(1, min(5, self.criticality))

    def to_environmental(self) -> EnvironmentalContext:
        if self.data.pci or self.data.phi:
            sensitivity = "restricted"
        elif self.data.pii or self.data.trade_secrets:
            sensitivity = "confidential"
        else:
            sensitivity = "internal"

        exposure = {"public": "internet-facing", "dmz": "dmz"}.get(self.network_exposure, "internal")
        return EnvironmentalContext(
            asset_criticality=self.tier,
            data_sensitivity=sensitivity,
            network_exposure=exposure,
        )

    def to_concert(self) -> ConcertContext:
        if self.data.pci or self.data.phi:
            sensitivity = 5
        elif self.data.pii:
            sensitivity = 4
        elif self.data.trade_secrets:
            sensitivity = 3
        else:
            sensitivity = 2
        return ConcertContext(
            application_criticality=self.tier,
            data_sensitivity=sensitivity,
            public_access_points=self.public_endpoints,
            private_access_points=self.private_endpoints,
        )


class ScoreOverride(BaseModel):
    """Manual score adjustment, ignored once expired."""

    multiplier: float | None = Field(default=None, ge=0.0)
    reason: str
    applied_by: str | None = None
    applied_at: datetime | None = None
    expires_at: datetime | None = None

    @field_validator("applied_at", "expires_at")
    @classmethod
    def _utc(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)

    def effective_multiplier(self, now: datetime | None = None) -> float:
        if self.multiplier is None:
            return 1.0
        if self.expires_at is not None and self.expires_at < (now or datetime.now(UTC)):
            return 1.0
        return self.multiplier


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------


class BucketStats(BaseModel):
    count: int = 0
    avg_score: float = 0.0
    max_score: float = 0.0


class ApplicationRiskBreakdown(BaseModel):
    by_category: dict[Category, BucketStats] = Field(
        default_factory=lambda: {c: BucketStats() for c in Category}
    )
    by_severity: dict[Severity, BucketStats] = Field(
        default_factory=lambda: {s: BucketStats() for s in Severity}
    )
    total: int = 0
    critical_count: int = 0
    high_count: int = 0
    medium_count: int = 0
    low_count: int = 0


class ApplicationRiskScore(BaseModel):
    """Aggregate over one application's findings; recomputed per request."""

    overall: float = 0.0
    highest_score: float = 0.0
    avg_top5_critical: float = 0.0
    avg_top10_high: float = 0.0
    volume_contribution: float = 0.0
    breakdown: ApplicationRiskBreakdown = Field(default_factory=ApplicationRiskBreakdown)

    @property
    def legacy_overall(self) -> float:
        """Overall score on the legacy 0-10 scale."""
        return round(self.overall / 10, 1)


class SLASummary(BaseModel):
    overdue: int = 0
    due_soon: int = 0
    on_track: int = 0
    compliance_rate: int = 100


class ScanSummary(BaseModel):
    """Counts by score bucket and category."""

    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    total: int = 0
    known_exploited: int = 0
    by_category: dict[str, int] = Field(default_factory=dict)

    @classmethod
    def from_findings(cls, findings: list[Finding]) -> ScanSummary:
        counts: dict[str, int] = {}
        by_category: dict[str, int] = {}
        kev = 0
        for f in findings:
            bucket = Severity.from_score(f.effective_score)
            counts[bucket.value] = counts.get(bucket.value, 0) + 1
            by_category[f.category] = by_category.get(f.category, 0) + 1
            if isinstance(f, VulnerabilityFinding) and f.known_exploited:
                kev += 1
        return cls(
            critical=counts.get("critical", 0),
            high=counts.get("high", 0),
            medium=counts.get("medium", 0),
            low=counts.get("low", 0),
            total=len(findings),
            known_exploited=kev,
            by_category=by_category,
        )


class ScanResult(BaseModel):
    """Complete result of scoring one application's finding set."""

    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    application: str = ""
    findings: list[Finding] = Field(default_factory=list)
    summary: ScanSummary = Field(default_factory=ScanSummary)
    risk: ApplicationRiskScore = Field(default_factory=ApplicationRiskScore)
    bayesian_risk: float = 0.0
    sla: SLASummary = Field(default_factory=SLASummary)

    def sorted_findings(self) -> list[Finding]:
        """Return findings sorted by score descending."""
        return sorted(self.findings, key=lambda f: f.effective_score, reverse=True)
