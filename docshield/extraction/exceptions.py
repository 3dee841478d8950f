from docshield.documents.exceptions import CollaboratorError


class TextExtractionError(CollaboratorError):
    """Raised when text cannot be extracted from a stored file."""
