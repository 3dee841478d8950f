from abc import ABC, abstractmethod

from docshield.detection.models import DetectionResult


class BaseDetector(ABC):
    """Contract for the PII detection collaborator."""

    @abstractmethod
    def detect(self, text: str) -> DetectionResult:
        """Find PII in ``text`` and classify the document's risk.

        Raises:
            DetectionError: on any failure, including malformed output.
        """
