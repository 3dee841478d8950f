from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class StoredFile:
    """Reference to uploaded bytes held by a storage backend."""

    uri: str
    size_bytes: int


class BaseFileStorage(ABC):
    """Contract for the file storage collaborator."""

    @abstractmethod
    def upload(self, content: bytes, filename: str) -> StoredFile:
        """Store raw bytes and return a reference URI.

        Raises:
            TransportError: on any storage failure.
        """

    @abstractmethod
    def load(self, uri: str) -> bytes:
        """Read back bytes previously stored under ``uri``.

        Raises:
            TransportError: if the reference cannot be read.
        """
