class DocShieldError(Exception):
    """Base exception for all document workflow errors."""


class TransportError(DocShieldError):
    """Raised when moving bytes to or from a collaborator fails (storage, network)."""


class CollaboratorError(DocShieldError):
    """Raised when an external collaborator fails or returns a malformed payload."""


class InvalidSelectionError(DocShieldError):
    """Raised for an out-of-range finding index or an empty redaction selection."""


class InvalidTransitionError(DocShieldError):
    """Raised when the current lifecycle state does not allow the requested action."""


class DocumentNotFoundError(DocShieldError):
    """Raised when a document cannot be found in the record store."""


class IdentityError(DocShieldError):
    """Raised when no authenticated user is available."""
