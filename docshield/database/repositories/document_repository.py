from collections.abc import Mapping
from dataclasses import replace
from enum import Enum
from typing import Any

import psycopg
from psycopg import errors, sql
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from docshield.database.base import BaseDocumentStore, check_query, parse_sort_key
from docshield.database.connection import get_connection
from docshield.documents.exceptions import DocumentNotFoundError
from docshield.documents.models import (
    DocumentChanges,
    DocumentRecord,
    DocumentStatus,
    NewDocument,
)
from docshield.documents.serialization import (
    findings_from_list,
    findings_to_list,
    metadata_from_dict,
    metadata_to_dict,
)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS documents (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    name TEXT NOT NULL,
    file_kind TEXT NOT NULL,
    source_uri TEXT NOT NULL,
    owner TEXT NOT NULL,
    status TEXT NOT NULL,
    findings JSONB NOT NULL DEFAULT '[]'::jsonb,
    metadata JSONB NOT NULL DEFAULT '{}'::jsonb,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
CREATE INDEX IF NOT EXISTS documents_owner_created_idx ON documents (owner, created_at DESC);
"""

_COLUMNS = (
    "id, name, file_kind, source_uri, owner, status, findings, metadata, "
    "created_at, updated_at"
)


def _row_to_record(row: dict[str, Any]) -> DocumentRecord:
    status = DocumentStatus(row["status"])
    return DocumentRecord(
        id=str(row["id"]),
        name=row["name"],
        file_kind=row["file_kind"],
        source_uri=row["source_uri"],
        owner=row["owner"],
        status=status,
        metadata=metadata_from_dict(status, row["metadata"]),
        findings=findings_from_list(row["findings"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _plain(value: object) -> object:
    return value.value if isinstance(value, Enum) else value


def _fetch_by_id(
    cur: psycopg.Cursor[dict[str, Any]], document_id: str, for_update: bool = False
) -> dict[str, Any] | None:
    """Ids that are not UUIDs cannot exist in the table and read as missing."""
    query = f"SELECT {_COLUMNS} FROM documents WHERE id = %s"
    if for_update:
        query += " FOR UPDATE"
    try:
        cur.execute(query, (document_id,))
    except errors.InvalidTextRepresentation as exc:
        raise DocumentNotFoundError(f"Document {document_id} not found") from exc
    return cur.fetchone()


class DocumentRepository(BaseDocumentStore):
    """Database operations for the documents table."""

    def ensure_schema(self) -> None:
        with get_connection() as conn:
            conn.execute(SCHEMA_SQL)
            conn.commit()

    def create(self, new: NewDocument) -> DocumentRecord:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    INSERT INTO documents (name, file_kind, source_uri, owner, status)
                    VALUES (%s, %s, %s, %s, %s)
                    RETURNING {_COLUMNS}
                    """,
                    (new.name, new.file_kind, new.source_uri, new.owner, new.status.value),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise RuntimeError("INSERT INTO documents returned no row")
        return _row_to_record(row)

    def update(self, document_id: str, changes: DocumentChanges) -> DocumentRecord:
        """Apply changes under a row lock so the lifecycle check sees the committed state.

        Raises:
            DocumentNotFoundError: if no document with this id exists.
            InvalidTransitionError: if the change violates the lifecycle.
        """
        with get_connection() as conn:
            try:
                with conn.cursor(row_factory=dict_row) as cur:
                    row = _fetch_by_id(cur, document_id, for_update=True)
                    if row is None:
                        raise DocumentNotFoundError(f"Document {document_id} not found")

                    updated = _row_to_record(row).evolve(changes)
                    cur.execute(
                        """
                        UPDATE documents
                        SET status = %s, findings = %s, metadata = %s, updated_at = NOW()
                        WHERE id = %s
                        RETURNING updated_at
                        """,
                        (
                            updated.status.value,
                            Jsonb(findings_to_list(updated.findings)),
                            Jsonb(metadata_to_dict(updated.metadata)),
                            document_id,
                        ),
                    )
                    stamp = cur.fetchone()
            except Exception:
                conn.rollback()
                raise
            conn.commit()

        if stamp is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return replace(updated, updated_at=stamp["updated_at"])

    def find_by_id(self, document_id: str) -> DocumentRecord:
        """Raises DocumentNotFoundError if no document with this id exists."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                row = _fetch_by_id(cur, document_id)

        if row is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return _row_to_record(row)

    def filter(
        self,
        query: Mapping[str, object],
        sort_key: str = "-created_at",
        limit: int | None = None,
    ) -> list[DocumentRecord]:
        check_query(query)
        column, descending = parse_sort_key(sort_key)

        statement = sql.SQL("SELECT {columns} FROM documents").format(
            columns=sql.SQL(_COLUMNS)
        )
        params: list[object] = []
        if query:
            conditions = [
                sql.SQL("{} = %s").format(sql.Identifier(key)) for key in sorted(query)
            ]
            params.extend(_plain(query[key]) for key in sorted(query))
            statement += sql.SQL(" WHERE ") + sql.SQL(" AND ").join(conditions)
        statement += sql.SQL(" ORDER BY {} {}").format(
            sql.Identifier(column),
            sql.SQL("DESC" if descending else "ASC"),
        )
        if limit is not None:
            statement += sql.SQL(" LIMIT %s")
            params.append(limit)

        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(statement, params)
                rows = cur.fetchall()

        return [_row_to_record(row) for row in rows]

