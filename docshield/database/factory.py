from docshield.config.settings import Settings
from docshield.database.base import BaseDocumentStore
from docshield.database.connection import init_pool
from docshield.database.repositories.document_repository import DocumentRepository
from docshield.database.repositories.in_memory_document_repository import (
    InMemoryDocumentRepository,
)


class DocumentStoreFactory:
    """Creates the configured record store."""

    STORES: tuple[str, ...] = ("postgres", "memory")

    @classmethod
    def create(cls, settings: Settings) -> BaseDocumentStore:
        kind = settings.record_store.lower()
        if kind == "memory":
            return InMemoryDocumentRepository()
        if kind == "postgres":
            init_pool(settings)
            repository = DocumentRepository()
            repository.ensure_schema()
            return repository
        raise ValueError(f"Unknown record store '{kind}'. Choose from: {list(cls.STORES)}")
