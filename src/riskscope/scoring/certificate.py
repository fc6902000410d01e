"""Certificate scoring: max(0, 100 - days / 1.8) x algorithm x cert type.

Days until expiry -> expiry score (before modifiers):

    expired  100
    7 days    96
    30 days   83
    90 days   50
    180+       0
"""

from __future__ import annotations

from riskscope.models import Category, CertificateFinding
from riskscope.scoring.base import BaseCalculator, clamp
from riskscope.scoring.tables import (
    CERT_ALGORITHM_MODIFIER,
    CERT_DAYS_DIVISOR,
    CERT_SELF_SIGNED_PENALTY,
    CERT_TYPE_ALIASES,
    CERT_TYPE_MULTIPLIER,
    CERT_UNKNOWN_DAYS,
)


def algorithm_modifier(finding: CertificateFinding) -> float:
    if finding.weak_algorithm:
        return CERT_ALGORITHM_MODIFIER["sha1"]

    algorithm = finding.algorithm.lower()
    if "md5" in algorithm:
        return CERT_ALGORITHM_MODIFIER["md5"]
    if "sha1" in algorithm or "sha-1" in algorithm:
        return CERT_ALGORITHM_MODIFIER["sha1"]
    key_size = finding.key_size or 2048
    if "rsa" in algorithm and key_size < 2048:
        return CERT_ALGORITHM_MODIFIER["weak_rsa"]
    return CERT_ALGORITHM_MODIFIER["standard"]


def normalize_cert_type(cert_type: str | None) -> str:
    key = (cert_type or "other").strip().lower()
    key = CERT_TYPE_ALIASES.get(key, key)
    return key if key in CERT_TYPE_MULTIPLIER else "internal"


def cert_type_multiplier(finding: CertificateFinding) -> float:
    cert_type = normalize_cert_type(finding.cert_type)
    multiplier = CERT_TYPE_MULTIPLIER[cert_type]
    if finding.self_signed and cert_type == "customer_facing":
        multiplier *= CERT_SELF_SIGNED_PENALTY
    return multiplier


class CertificateCalculator(BaseCalculator[CertificateFinding]):
    category = Category.CERTIFICATE

    def expiry_score(self, finding: CertificateFinding) -> float:
        if finding.is_expired(self.now):
            return 100.0
        days = finding.days_left(self.now)
        if days is None:
            days = CERT_UNKNOWN_DAYS
        return max(0.0, 100.0 - days / CERT_DAYS_DIVISOR)

    def base_score(self, finding: CertificateFinding) -> float:
        return clamp(
            self.expiry_score(finding)
            * algorithm_modifier(finding)
            * cert_type_multiplier(finding)
        )

    def type_factors(self, finding: CertificateFinding) -> dict[str, float]:
        days = finding.days_left(self.now)
        return {
            "days_until_expiry": float(days if days is not None else CERT_UNKNOWN_DAYS),
            "expiry_score": self.expiry_score(finding),
            "algorithm_modifier": algorithm_modifier(finding),
            "cert_type_multiplier": cert_type_multiplier(finding),
            "expired": 1.0 if finding.is_expired(self.now) else 0.0,
            "self_signed": 1.0 if finding.self_signed else 0.0,
            "key_size": float(finding.key_size or 0),
        }
