"""Command-line entry point.

Usage:
    docshield process statement.pdf
    docshield documents --status analyzed --risk high
    docshield redact <document-id> 0 2
    docshield show <document-id> --redacted
    docshield export <document-id> --out ./exports
    docshield dashboard
"""

import argparse
import mimetypes
import sys
from pathlib import Path

from docshield.config.settings import Settings
from docshield.database.base import BaseDocumentStore
from docshield.database.connection import close_pool
from docshield.database.factory import DocumentStoreFactory
from docshield.documents.exceptions import DocShieldError
from docshield.documents.models import DocumentRecord, DocumentStatus, RiskLevel
from docshield.identity.static_identity import StaticIdentityProvider
from docshield.logging.logger import Log
from docshield.pipeline.context import SourceFile
from docshield.pipeline.processor import build_processor
from docshield.pipeline.state import PipelineState
from docshield.projection.dashboard import (
    compute_stats,
    recommendation,
    tally_by_kind,
    total_findings,
)
from docshield.projection.filters import DocumentFilter, filter_documents
from docshield.redaction.applier import build_applier
from docshield.redaction.exporter import RedactedExporter
from docshield.redaction.session import RedactionSession, TextView, display_text


def _owner(settings: Settings) -> str:
    return StaticIdentityProvider(settings.current_user_email).current_user().email


def _summary_line(record: DocumentRecord) -> str:
    risk = record.risk_level.value if record.risk_level else "-"
    pii = f"{len(record.findings)} PII detected" if record.has_pii else "no PII"
    return f"{record.id}  {record.name}  [{record.file_kind}]  {record.status.value}  risk={risk}  {pii}"


def _print_progress(state: PipelineState) -> None:
    print(f"[{state.progress:3d}%] {state.phase.value}")


def cmd_process(args: argparse.Namespace, settings: Settings, store: BaseDocumentStore) -> int:
    path = Path(args.file)
    mime_type = args.mime_type or mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    source = SourceFile(name=path.name, content=path.read_bytes(), mime_type=mime_type)

    processor = build_processor(settings, store)
    processor.subscribe(_print_progress)
    record = processor.process(source)

    print(_summary_line(record))
    for index, finding in enumerate(record.findings):
        print(
            f"  {index:3d}  {finding.kind.value:<15} {finding.value}  "
            f"({round(finding.confidence * 100)}%)"
        )
    return 0


def cmd_documents(args: argparse.Namespace, settings: Settings, store: BaseDocumentStore) -> int:
    records = store.filter({"owner": _owner(settings)}, "-created_at")
    criteria = DocumentFilter(
        search=args.search,
        status=DocumentStatus(args.status) if args.status else None,
        risk_level=RiskLevel(args.risk) if args.risk else None,
        file_kind=args.kind,
    )
    for record in filter_documents(records, criteria):
        print(_summary_line(record))
    return 0


def cmd_redact(args: argparse.Namespace, settings: Settings, store: BaseDocumentStore) -> int:
    session = RedactionSession(build_applier(settings, store), store.find_by_id(args.document_id))
    for index in dict.fromkeys(args.indices):
        session.toggle(index)
    record = session.apply()
    print(_summary_line(record))
    print(session.text())
    return 0


def cmd_show(args: argparse.Namespace, settings: Settings, store: BaseDocumentStore) -> int:
    _ = settings
    record = store.find_by_id(args.document_id)
    view = TextView.REDACTED if args.redacted else TextView.ORIGINAL
    print(display_text(record, view))
    return 0


def cmd_export(args: argparse.Namespace, settings: Settings, store: BaseDocumentStore) -> int:
    exporter = RedactedExporter(store, Path(args.out) if args.out else settings.export_root)
    _record, path = exporter.export(store.find_by_id(args.document_id))
    print(path)
    return 0


def cmd_dashboard(args: argparse.Namespace, settings: Settings, store: BaseDocumentStore) -> int:
    _ = args
    records = store.filter(
        {"owner": _owner(settings)}, "-created_at", settings.dashboard_recent_limit
    )
    stats = compute_stats(records)
    print(f"Total documents: {stats.total}")
    print(f"Processed:       {stats.processed}")
    print(f"PII detected:    {stats.pii_detected}")
    print(f"Risk level:      {stats.fleet_risk_level.value.upper()}")

    finding_count = total_findings(records)
    if finding_count:
        print(f"\n{finding_count} sensitive items detected across {stats.pii_detected} documents")
        for tally in tally_by_kind(records):
            print(f"  {tally.label:<16} {tally.count:4d}  {tally.percentage:5.1f}%")
        print(f"\n{recommendation(finding_count).value}")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="docshield", description="Document PII review")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("process", help="Upload and analyze a file")
    p.add_argument("file")
    p.add_argument("--mime-type", default=None)
    p.set_defaults(handler=cmd_process)

    p = sub.add_parser("documents", help="List documents")
    p.add_argument("--search", default=None)
    p.add_argument("--status", choices=[s.value for s in DocumentStatus], default=None)
    p.add_argument("--risk", choices=[r.value for r in RiskLevel], default=None)
    p.add_argument("--kind", default=None)
    p.set_defaults(handler=cmd_documents)

    p = sub.add_parser("redact", help="Redact selected findings")
    p.add_argument("document_id")
    p.add_argument("indices", nargs="+", type=int)
    p.set_defaults(handler=cmd_redact)

    p = sub.add_parser("show", help="Print document text")
    p.add_argument("document_id")
    p.add_argument("--redacted", action="store_true")
    p.set_defaults(handler=cmd_show)

    p = sub.add_parser("export", help="Export redacted text")
    p.add_argument("document_id")
    p.add_argument("--out", default=None)
    p.set_defaults(handler=cmd_export)

    p = sub.add_parser("dashboard", help="Show dashboard aggregates")
    p.set_defaults(handler=cmd_dashboard)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point: parse args -> configure -> build store -> dispatch."""
    args = _build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)

    try:
        store = DocumentStoreFactory.create(settings)
        return int(args.handler(args, settings, store))
    except DocShieldError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        close_pool()


if __name__ == "__main__":
    sys.exit(main())
