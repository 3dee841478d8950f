from dataclasses import dataclass, field

from docshield.documents.models import PiiFinding, RiskLevel


@dataclass(frozen=True)
class DetectionResult:
    """Output of the detection collaborator."""

    risk_level: RiskLevel
    findings: tuple[PiiFinding, ...] = field(default_factory=tuple)
    summary: str = ""
