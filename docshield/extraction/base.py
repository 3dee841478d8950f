from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ExtractionResult:
    extracted_text: str


class BaseTextExtractor(ABC):
    """Contract for the text-extraction collaborator."""

    @abstractmethod
    def extract(self, uri: str, mime_type: str) -> ExtractionResult:
        """Turn the stored file behind ``uri`` into plain text.

        ``mime_type`` is the type declared at upload and decides how the
        content is parsed. Empty text is a valid result, not an error.

        Raises:
            TransportError: if the file cannot be read.
            TextExtractionError: if the content cannot be parsed.
        """
