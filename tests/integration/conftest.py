import os
from collections.abc import Generator
from pathlib import Path
from typing import Any

import psycopg
import pytest

from docshield.config.settings import Settings
from docshield.database.connection import close_pool, get_connection, init_pool
from docshield.database.repositories.document_repository import DocumentRepository


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "docshield_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        DocumentRepository().ensure_schema()
    except Exception as e:
        close_pool()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run.")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def repository(integration_pool: None) -> Generator[DocumentRepository, None, None]:
    """Repository whose test owner's rows are removed afterwards."""
    yield DocumentRepository()
    with get_connection() as conn:
        conn.execute("DELETE FROM documents WHERE owner = %s", ("integration@example.com",))
        conn.commit()


@pytest.fixture
def files_root(tmp_path: Path) -> Path:
    return tmp_path / "uploads"
