"""Dashboard aggregates derived from a collection of records.

Pure functions, recomputed on every read. The fleet risk level here is a
different signal from the detector-reported ``metadata.risk_level`` of a
single document and is kept under a separate name.
"""

from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from docshield.documents.models import DocumentRecord, DocumentStatus, PiiKind, RiskLevel

HIGH_RISK_RATIO = 0.7
MEDIUM_RISK_RATIO = 0.3

HIGH_VOLUME_FINDINGS = 50
MODERATE_VOLUME_FINDINGS = 20

PROCESSED_STATUSES = frozenset({DocumentStatus.ANALYZED, DocumentStatus.REDACTED})

KIND_LABELS: dict[PiiKind, str] = {
    PiiKind.NAME: "Names",
    PiiKind.EMAIL: "Email Addresses",
    PiiKind.PHONE: "Phone Numbers",
    PiiKind.SSN: "SSN/IDs",
    PiiKind.ADDRESS: "Addresses",
    PiiKind.CREDIT_CARD: "Credit Cards",
    PiiKind.DATE_OF_BIRTH: "Birth Dates",
    PiiKind.MEDICAL_ID: "Medical IDs",
    PiiKind.LICENSE_NUMBER: "License Numbers",
    PiiKind.OTHER: "Other PII",
}


class Recommendation(str, Enum):
    HIGH_VOLUME = "High volume of PII detected. Consider implementing stricter access controls."
    MODERATE = "Moderate PII exposure. Review redaction policies."
    MANAGEABLE = "PII levels are manageable. Continue monitoring."


@dataclass(frozen=True)
class DashboardStats:
    total: int
    processed: int
    pii_detected: int
    fleet_risk_level: RiskLevel


@dataclass(frozen=True)
class KindTally:
    kind: PiiKind
    count: int
    percentage: float

    @property
    def label(self) -> str:
        return KIND_LABELS[self.kind]


def fleet_risk_level(total: int, pii_detected: int) -> RiskLevel:
    """'high' above 70% of documents carrying PII, 'medium' above 30%, else 'low'."""
    if total <= 0:
        return RiskLevel.LOW
    ratio = pii_detected / total
    if ratio > HIGH_RISK_RATIO:
        return RiskLevel.HIGH
    if ratio > MEDIUM_RISK_RATIO:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def compute_stats(records: Sequence[DocumentRecord]) -> DashboardStats:
    processed = sum(1 for r in records if r.status in PROCESSED_STATUSES)
    pii_detected = sum(1 for r in records if r.has_pii)
    return DashboardStats(
        total=len(records),
        processed=processed,
        pii_detected=pii_detected,
        fleet_risk_level=fleet_risk_level(len(records), pii_detected),
    )


def tally_by_kind(records: Iterable[DocumentRecord]) -> list[KindTally]:
    """Count findings per kind, most frequent first; ties keep first-seen order."""
    counts: Counter[PiiKind] = Counter()
    for record in records:
        counts.update(finding.kind for finding in record.findings)
    total = sum(counts.values())
    ordered = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [
        KindTally(kind=kind, count=count, percentage=count / total * 100)
        for kind, count in ordered
    ]


def total_findings(records: Iterable[DocumentRecord]) -> int:
    return sum(len(record.findings) for record in records)


def recommendation(finding_count: int) -> Recommendation:
    if finding_count > HIGH_VOLUME_FINDINGS:
        return Recommendation.HIGH_VOLUME
    if finding_count > MODERATE_VOLUME_FINDINGS:
        return Recommendation.MODERATE
    return Recommendation.MANAGEABLE
