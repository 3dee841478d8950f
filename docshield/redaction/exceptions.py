from docshield.documents.exceptions import CollaboratorError


class RewriteError(CollaboratorError):
    """Raised when the redaction rewrite fails or returns a malformed payload."""
