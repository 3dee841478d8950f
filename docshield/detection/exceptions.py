from docshield.documents.exceptions import CollaboratorError


class DetectionError(CollaboratorError):
    """Raised when PII detection fails."""


class DetectionValidationError(DetectionError):
    """Raised when the detection payload fails domain validation."""
