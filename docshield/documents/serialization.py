"""Converts document values to and from JSON-serializable structures."""

from datetime import datetime
from typing import Any

from docshield.documents.models import (
    METADATA_BY_STATUS,
    AnalyzedMetadata,
    DocumentMetadata,
    DocumentStatus,
    ExportedMetadata,
    PendingMetadata,
    PiiFinding,
    PiiKind,
    RedactedMetadata,
    RiskLevel,
)


def finding_to_dict(finding: PiiFinding) -> dict[str, Any]:
    return {
        "type": finding.kind.value,
        "value": finding.value,
        "confidence": finding.confidence,
        "location": finding.location,
        "redacted": finding.is_redacted,
    }


def finding_from_dict(raw: dict[str, Any]) -> PiiFinding:
    return PiiFinding(
        kind=PiiKind(raw["type"]),
        value=raw["value"],
        confidence=float(raw["confidence"]),
        location=raw.get("location"),
        is_redacted=bool(raw.get("redacted", False)),
    )


def findings_to_list(findings: tuple[PiiFinding, ...]) -> list[dict[str, Any]]:
    return [finding_to_dict(f) for f in findings]


def findings_from_list(raw: list[dict[str, Any]] | None) -> tuple[PiiFinding, ...]:
    return tuple(finding_from_dict(item) for item in raw or [])


def metadata_to_dict(metadata: DocumentMetadata) -> dict[str, Any]:
    """Flatten a metadata variant into a JSONB-ready dict."""
    if isinstance(metadata, PendingMetadata):
        return {}
    payload: dict[str, Any] = {
        "extracted_text": metadata.extracted_text,
        "analysis_summary": metadata.analysis_summary,
        "risk_level": metadata.risk_level.value,
        "processed_at": metadata.processed_at.isoformat(),
    }
    if isinstance(metadata, RedactedMetadata):
        payload.update(
            redacted_text=metadata.redacted_text,
            redaction_summary=metadata.redaction_summary,
            redacted_items=findings_to_list(metadata.redacted_items),
            redaction_date=metadata.redaction_date.isoformat(),
        )
    if isinstance(metadata, ExportedMetadata):
        payload["exported_at"] = metadata.exported_at.isoformat()
    return payload


def metadata_from_dict(status: DocumentStatus, raw: dict[str, Any] | None) -> DocumentMetadata:
    """Rebuild the metadata variant that belongs to ``status``."""
    variant = METADATA_BY_STATUS[status]
    if variant is PendingMetadata:
        return PendingMetadata()
    raw = raw or {}
    values: dict[str, Any] = {
        "extracted_text": raw.get("extracted_text") or "",
        "analysis_summary": raw.get("analysis_summary") or "",
        "risk_level": RiskLevel(raw.get("risk_level", RiskLevel.LOW.value)),
        "processed_at": datetime.fromisoformat(raw["processed_at"]),
    }
    if variant is AnalyzedMetadata:
        return AnalyzedMetadata(**values)
    values.update(
        redacted_text=raw.get("redacted_text") or "",
        redaction_summary=raw.get("redaction_summary") or "",
        redacted_items=findings_from_list(raw.get("redacted_items")),
        redaction_date=datetime.fromisoformat(raw["redaction_date"]),
    )
    if variant is RedactedMetadata:
        return RedactedMetadata(**values)
    return ExportedMetadata(**values, exported_at=datetime.fromisoformat(raw["exported_at"]))
