from dataclasses import dataclass


@dataclass(frozen=True)
class RewriteResult:
    """Output of the text-rewriting collaborator."""

    redacted_text: str
    redaction_summary: str = ""


@dataclass(frozen=True)
class RedactedExport:
    """Downloadable redacted artifact."""

    filename: str
    content: str
