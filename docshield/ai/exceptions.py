from docshield.documents.exceptions import CollaboratorError, TransportError


class AIResponseError(CollaboratorError):
    """Raised when an AI provider returns an empty or non-JSON response."""


class AINetworkError(CollaboratorError, TransportError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""


class PromptLoadError(CollaboratorError):
    """Raised when a bundled prompt template or schema cannot be read."""
