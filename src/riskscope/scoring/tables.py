"""Scoring constants for the 0-100 scale and the bounded 0-10 formulas."""

from __future__ import annotations

# Vulnerability: (cvss * 2.5) + (epss * 35); known-exploited scores 100
VULN_CVSS_MULTIPLIER = 2.5
VULN_EPSS_MULTIPLIER = 35.0
VULN_KEV_SCORE = 100.0
VULN_KEV_BONUS = 40.0
VULN_DEFAULT_CVSS = 5.0

# Bounded formula: fallback severities when CVSS is missing
NEW_CVE_THRESHOLD_DAYS = 60
NEW_CVE_DEFAULT_SEVERITY = 10.0
OLD_CVE_DEFAULT_SEVERITY = 5.0

# (lower bound inclusive, upper bound exclusive, factor); equilibrium at 0.1
EPSS_EXPLOITABILITY_RANGES = [
    (0.0, 0.001, 0.5),
    (0.001, 0.01, 0.6),
    (0.01, 0.05, 0.7),
    (0.05, 0.1, 0.8),
    (0.1, 0.15, 1.0),
    (0.15, 0.3, 1.1),
    (0.3, 0.6, 1.15),
    (0.6, 0.9, 1.2),
]
EPSS_FACTOR_MIN = 0.5
EPSS_FACTOR_MAX = 1.25

APP_CRITICALITY_FACTOR = {1: 0.25, 2: 0.5, 3: 0.75, 4: 1.0, 5: 1.25}
DATA_SENSITIVITY_FACTOR = {1: 0.25, 2: 0.5, 3: 0.75, 4: 1.0, 5: 1.25}
PUBLIC_ACCESS_POINTS = {n: round(1.0 + 0.25 * (n - 1) / 15, 3) for n in range(1, 17)}
PRIVATE_ACCESS_POINTS = {1: 0.25, 2: 0.5, 3: 0.75, 4: 1.0}

# SAST: 5-tier scale
SAST_SEVERITY = {
    "blocker": 10.0,
    "high": 7.5,
    "medium": 5.0,
    "low": 2.5,
    "info": 1.0,
}

# DAST: severity x confidence; bare labels mean medium confidence
DAST_SEVERITY = {
    "critical (high)": 10.0,
    "critical (medium)": 9.0,
    "critical (low)": 8.0,
    "high (high)": 8.55,
    "high (medium)": 6.84,
    "high (low)": 5.13,
    "medium (high)": 4.75,
    "medium (medium)": 3.80,
    "medium (low)": 2.85,
    "low (high)": 0.95,
    "low (medium)": 0.76,
    "low (low)": 0.57,
    "info (high)": 0.63,
    "info (medium)": 0.50,
    "info (low)": 0.38,
    "critical": 9.0,
    "high": 6.84,
    "medium": 3.80,
    "low": 0.76,
    "info": 0.50,
}

# Credential: type severity x validity x context x git history
SECRET_TYPE_SEVERITY = {
    "aws": 95,
    "azure": 95,
    "gcp": 95,
    "private_key": 95,
    "db_password": 90,
    "api_key": 85,
    "password": 85,
    "oauth": 80,
    "token": 80,
    "generic": 70,
}
SECRET_VALIDITY = {
    "verified": 1.0,
    "unverified": 0.7,
    "revoked": 0.3,
}
SECRET_CONTEXT = {
    "production": 1.2,
    "default_branch": 1.15,
    "config_file": 1.1,
    "test_dev": 0.5,
}
SECRET_GIT_HISTORY = 1.3

# Certificate: max(0, 100 - days / 1.8) x algorithm x cert type
CERT_DAYS_DIVISOR = 1.8
CERT_UNKNOWN_DAYS = 180
CERT_ALGORITHM_MODIFIER = {
    "md5": 1.3,
    "sha1": 1.2,
    "weak_rsa": 1.2,
    "standard": 1.0,
}
CERT_TYPE_MULTIPLIER = {
    "customer_facing": 1.3,
    "code_signing": 1.1,
    "internal": 1.0,
    "client": 1.0,
    "other": 1.0,
    "dev_test": 0.7,
}
CERT_TYPE_ALIASES = {
    "ssl": "customer_facing",
    "tls": "customer_facing",
    "public": "customer_facing",
    "code-signing": "code_signing",
    "codesigning": "code_signing",
    "dev": "dev_test",
    "test": "dev_test",
    "dev-test": "dev_test",
}
CERT_SELF_SIGNED_PENALTY = 1.15

# Misconfiguration: scanner severity x exposure x data
MISCONFIG_SEVERITY_SCORE = {
    "critical": 95,
    "high": 80,
    "medium": 55,
    "low": 25,
}
MISCONFIG_EXPOSURE = {
    "internet_facing": 1.5,
    "dmz": 1.2,
    "internal": 1.0,
    "segmented": 0.7,
}
MISCONFIG_DATA = {
    "pii_phi_financial": 1.4,
    "pii": 1.3,
    "sensitive_business": 1.2,
    "non_sensitive": 1.0,
}

# License: risk tier x distribution x modification
LICENSE_RISK_TIER = {
    "AGPL-3.0": 90,
    "AGPL-3.0-ONLY": 90,
    "AGPL-3.0-OR-LATER": 90,
    "GPL-3.0": 75,
    "GPL-3.0-ONLY": 75,
    "GPL-3.0-OR-LATER": 75,
    "GPL-2.0": 75,
    "GPL-2.0-ONLY": 75,
    "GPL-2.0-OR-LATER": 75,
    "LGPL-3.0": 50,
    "LGPL-2.1": 50,
    "LGPL-2.0": 50,
    "MPL-2.0": 50,
    "MPL-1.1": 50,
    "UNKNOWN": 70,
    "UNLICENSED": 70,
    "EPL-1.0": 40,
    "EPL-2.0": 40,
    "CPL-1.0": 40,
    "CDDL-1.0": 40,
    "MIT": 10,
    "APACHE-2.0": 10,
    "BSD-2-CLAUSE": 10,
    "BSD-3-CLAUSE": 10,
    "ISC": 10,
    "UNLICENSE": 10,
    "0BSD": 10,
    "CC0-1.0": 10,
    "WTFPL": 10,
    "ZLIB": 10,
}
LICENSE_STRONG_COPYLEFT = 75
LICENSE_DEFAULT_TIER = 50
LICENSE_DISTRIBUTION = {
    "saas": 1.3,
    "commercial": 1.2,
    "proprietary": 1.2,
    "internal": 0.8,
    "open_source": 0.5,
}
LICENSE_MODIFIED = 1.2

# Static analysis: weakness severity x confidence x reachability
CWE_SEVERITY = {
    "sql_injection": 90,
    "command_injection": 90,
    "code_injection": 90,
    "xss": 85,
    "insecure_deserialization": 85,
    "hardcoded_secret": 85,
    "broken_auth": 80,
    "xxe": 80,
    "path_traversal": 75,
    "ssrf": 75,
    "idor": 70,
    "weak_cryptography": 60,
    "security_misconfiguration": 60,
    "open_redirect": 55,
    "insecure_randomness": 50,
    "information_disclosure": 45,
    "code_smell": 20,
    "other": 50,
}
CWE_ISSUE_TYPE = {
    "CWE-89": "sql_injection",
    "CWE-79": "xss",
    "CWE-78": "command_injection",
    "CWE-22": "path_traversal",
    "CWE-94": "code_injection",
    "CWE-502": "insecure_deserialization",
    "CWE-287": "broken_auth",
    "CWE-798": "hardcoded_secret",
    "CWE-327": "weak_cryptography",
    "CWE-328": "weak_cryptography",
    "CWE-330": "insecure_randomness",
    "CWE-601": "open_redirect",
    "CWE-200": "information_disclosure",
    "CWE-16": "security_misconfiguration",
    "CWE-611": "xxe",
    "CWE-918": "ssrf",
    "CWE-639": "idor",
}
CODE_SEVERITY_FALLBACK = {
    "critical": 90,
    "high": 75,
    "medium": 50,
    "low": 25,
}
CONFIDENCE_FACTOR = {
    "high": 1.0,
    "medium": 0.8,
    "low": 0.5,
}
REACHABILITY_FACTOR = {
    "public_endpoint": 1.3,
    "authenticated": 1.1,
    "internal": 0.9,
    "dead_code": 0.3,
}

# Environmental multiplier = cbrt(asset x data x network)
ASSET_CRITICALITY = {5: 1.5, 4: 1.25, 3: 1.0, 2: 0.8, 1: 0.6}
DATA_SENSITIVITY = {
    "restricted": 1.4,
    "confidential": 1.2,
    "internal": 1.0,
    "public": 0.7,
}
NETWORK_EXPOSURE = {
    "internet-facing": 1.5,
    "internet_facing": 1.5,
    "public": 1.5,
    "dmz": 1.2,
    "internal": 1.0,
    "segmented": 0.8,
    "air-gapped": 0.6,
    "airgapped": 0.6,
}

# Aggregate: highest x 0.4 + top-5 critical x 0.3 + top-10 high x 0.2 + log10(n + 1) x 2
AGGREGATE_HIGHEST_WEIGHT = 0.4
AGGREGATE_CRITICAL_WEIGHT = 0.3
AGGREGATE_HIGH_WEIGHT = 0.2
AGGREGATE_VOLUME_WEIGHT = 2.0
AGGREGATE_TOP_CRITICAL = 5
AGGREGATE_TOP_HIGH = 10
BAYESIAN_TOP_N = 20

CRITICAL_THRESHOLD = 90
HIGH_THRESHOLD = 70

# SLA hours by score bucket and organizational tier
SLA_HOURS = {
    "critical": {5: 24, 4: 48, 3: 168, 2: 336, 1: 336},
    "high": {5: 168, 4: 336, 3: 720, 2: 720, 1: 1440},
    "medium": {5: 720, 4: 1080, 3: 1440, 2: 2160, 1: 2160},
    "low": {5: 1440, 4: 2160, 3: 2160, 2: 2160, 1: 2160},
}
SLA_CREDENTIAL_HOURS = 0
SLA_CERTIFICATE_HOURS = {
    "expired": 24,
    "within_7_days": 24,
    "within_30_days": 168,
    "within_90_days": 720,
    "default": 720,
}
SLA_LICENSE_HOURS = {"high": 1440, "default": 2160}
SLA_DUE_SOON_DAYS = 7
SLA_HIGH_DUE_SOON_DAYS = 14
