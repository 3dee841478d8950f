import argparse
from pathlib import Path

import pytest

from docshield.config.settings import Settings
from docshield.database.repositories.in_memory_document_repository import (
    InMemoryDocumentRepository,
)
from docshield.documents.models import DocumentRecord, DocumentStatus
from docshield.main import cmd_dashboard, cmd_documents, cmd_export, cmd_redact, cmd_show, main


@pytest.fixture()
def cli_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    monkeypatch.setenv("RECORD_STORE", "memory")
    monkeypatch.setenv("AI_PROVIDER", "example")
    monkeypatch.setenv("CURRENT_USER_EMAIL", "analyst@example.com")
    monkeypatch.setenv("STORAGE_ROOT", str(tmp_path / "uploads"))
    monkeypatch.setenv("EXPORT_ROOT", str(tmp_path / "exports"))
    return tmp_path


def _settings(tmp_path: Path) -> Settings:
    return Settings(
        record_store="memory",
        ai_provider="example",
        current_user_email="analyst@example.com",
        export_root=tmp_path / "exports",
    )


class TestMain:
    def test_process_text_file(self, cli_env: Path, capsys: pytest.CaptureFixture[str]) -> None:
        source = cli_env / "memo.txt"
        source.write_text("Nothing sensitive here.")

        assert main(["process", str(source)]) == 0

        out = capsys.readouterr().out
        assert "[100%] complete" in out
        assert "memo.txt" in out
        assert "analyzed" in out
        assert "[INFO]" not in out

    def test_missing_document_reports_error(
        self, cli_env: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert main(["show", "missing"]) == 1
        assert "error: Document missing not found" in capsys.readouterr().err

    def test_missing_identity_reports_error(
        self, cli_env: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setenv("CURRENT_USER_EMAIL", "")
        assert main(["dashboard"]) == 1
        assert "No authenticated user" in capsys.readouterr().err

    def test_unknown_command_exits(self, cli_env: Path) -> None:
        with pytest.raises(SystemExit):
            main(["shred"])


class TestHandlers:
    def test_redact_then_show_and_export(
        self,
        analyzed_record: DocumentRecord,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        store = InMemoryDocumentRepository()
        store.put(analyzed_record)
        settings = _settings(tmp_path)

        cmd_redact(argparse.Namespace(document_id="doc-1", indices=[0]), settings, store)
        assert store.find_by_id("doc-1").status is DocumentStatus.REDACTED
        assert "[REDACTED]" in capsys.readouterr().out

        cmd_show(argparse.Namespace(document_id="doc-1", redacted=False), settings, store)
        assert "John Smith, john@x.com" in capsys.readouterr().out

        cmd_export(argparse.Namespace(document_id="doc-1", out=None), settings, store)
        exported = tmp_path / "exports" / "doc-1" / "intake_REDACTED.txt"
        assert str(exported) in capsys.readouterr().out
        assert exported.read_text(encoding="utf-8") == "[REDACTED]"
        assert store.find_by_id("doc-1").status is DocumentStatus.EXPORTED

    def test_redact_ignores_repeated_indices(
        self,
        analyzed_record: DocumentRecord,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        store = InMemoryDocumentRepository()
        store.put(analyzed_record)

        cmd_redact(
            argparse.Namespace(document_id="doc-1", indices=[0, 0, 1, 0]),
            _settings(tmp_path),
            store,
        )

        record = store.find_by_id("doc-1")
        assert [f.is_redacted for f in record.findings] == [True, True]
        capsys.readouterr()

    def test_documents_filters(
        self,
        analyzed_record: DocumentRecord,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        store = InMemoryDocumentRepository()
        store.put(analyzed_record)
        args = argparse.Namespace(search="INTAKE", status="analyzed", risk="medium", kind=None)

        cmd_documents(args, _settings(tmp_path), store)

        assert "doc-1" in capsys.readouterr().out

    def test_dashboard(
        self,
        analyzed_record: DocumentRecord,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        store = InMemoryDocumentRepository()
        store.put(analyzed_record)

        cmd_dashboard(argparse.Namespace(), _settings(tmp_path), store)

        out = capsys.readouterr().out
        assert "Total documents: 1" in out
        assert "Risk level:      HIGH" in out
        assert "Email Addresses" in out
        assert "manageable" in out
