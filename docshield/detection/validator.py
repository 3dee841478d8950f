"""Validates a parsed detection payload and builds the domain result."""

from typing import Any

from docshield.detection.exceptions import DetectionValidationError
from docshield.detection.models import DetectionResult
from docshield.documents.models import PiiFinding, PiiKind, RiskLevel

_MAX_FINDINGS = 500
_VALID_KINDS = frozenset(kind.value for kind in PiiKind)
_VALID_RISK_LEVELS = frozenset(level.value for level in RiskLevel)


def validate_and_build(data: dict[str, Any]) -> DetectionResult:
    """Raises DetectionValidationError on any violation."""
    for key in ("detected_pii", "risk_level"):
        if key not in data:
            raise DetectionValidationError(f"Missing required top-level field: {key}")
    findings = _build_findings(data["detected_pii"])
    risk_level = _build_risk_level(data["risk_level"])
    summary = data.get("summary") or ""
    if not isinstance(summary, str):
        raise DetectionValidationError("'summary' must be a string")
    return DetectionResult(risk_level=risk_level, findings=findings, summary=summary)


def _build_risk_level(raw: Any) -> RiskLevel:
    if raw not in _VALID_RISK_LEVELS:
        raise DetectionValidationError(
            f"'risk_level' must be one of {sorted(_VALID_RISK_LEVELS)}, got {raw!r}"
        )
    return RiskLevel(raw)


def _build_findings(raw: Any) -> tuple[PiiFinding, ...]:
    if not isinstance(raw, list):
        raise DetectionValidationError("'detected_pii' must be a list")
    if len(raw) > _MAX_FINDINGS:
        raise DetectionValidationError(f"Too many findings: {len(raw)} (max {_MAX_FINDINGS})")
    return tuple(_build_finding(item, i) for i, item in enumerate(raw))


def _build_finding(raw: Any, index: int) -> PiiFinding:
    if not isinstance(raw, dict):
        raise DetectionValidationError(f"Finding at index {index} must be an object")
    kind = raw.get("type")
    if kind not in _VALID_KINDS:
        raise DetectionValidationError(
            f"Finding at index {index}: 'type' must be one of {sorted(_VALID_KINDS)}, got {kind!r}"
        )
    value = raw.get("value")
    if not value or not isinstance(value, str):
        raise DetectionValidationError(
            f"Finding at index {index}: 'value' must be a non-empty string"
        )
    confidence = raw.get("confidence")
    if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
        raise DetectionValidationError(f"Finding at index {index}: 'confidence' must be a number")
    if not 0.0 <= confidence <= 1.0:
        raise DetectionValidationError(
            f"Finding at index {index}: 'confidence' must be within [0, 1], got {confidence}"
        )
    location = raw.get("location")
    if location is not None and not isinstance(location, str):
        raise DetectionValidationError(
            f"Finding at index {index}: 'location' must be a string or null"
        )
    return PiiFinding(
        kind=PiiKind(kind),
        value=value,
        confidence=float(confidence),
        location=location or None,
    )
