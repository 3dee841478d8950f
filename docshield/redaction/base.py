from abc import ABC, abstractmethod
from collections.abc import Sequence

from docshield.documents.models import PiiFinding
from docshield.redaction.models import RewriteResult


class BaseRewriter(ABC):
    """Contract for the redaction text-rewriting collaborator."""

    @abstractmethod
    def rewrite(self, text: str, targets: Sequence[PiiFinding]) -> RewriteResult:
        """Replace every occurrence of each target's value with a placeholder.

        Raises:
            RewriteError: on any failure, including malformed output.
        """
