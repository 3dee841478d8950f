import uuid
from datetime import datetime, timezone
from pathlib import Path
from urllib.parse import unquote, urlparse

from docshield.documents.exceptions import TransportError
from docshield.logging.logger import Log
from docshield.storage.base import BaseFileStorage, StoredFile


def stored_file_path(root: Path, uploaded_at: datetime, file_id: str, suffix: str) -> Path:
    """Build path to a stored upload: {root}/{yyyy}/{mm}/{file_id}{suffix}"""
    return root / f"{uploaded_at:%Y}" / f"{uploaded_at:%m}" / f"{file_id}{suffix}"


class LocalFileStorage(BaseFileStorage):
    """Stores uploads under a local root directory and hands out file:// URIs."""

    def __init__(self, root: Path) -> None:
        self._root = root.resolve()

    def upload(self, content: bytes, filename: str) -> StoredFile:
        if not content:
            raise TransportError(f"Refusing to store empty upload '{filename}'")
        path = stored_file_path(
            self._root,
            datetime.now(timezone.utc),
            uuid.uuid4().hex,
            Path(filename).suffix.lower(),
        )
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        except OSError as exc:
            raise TransportError(f"Failed to store '{filename}': {exc}") from exc
        Log.info(f"Stored {len(content)} bytes for '{filename}' at {path}")
        return StoredFile(uri=path.as_uri(), size_bytes=len(content))

    def load(self, uri: str) -> bytes:
        path = self._resolve_path(uri)
        try:
            return path.read_bytes()
        except OSError as exc:
            raise TransportError(f"Failed to read {uri}: {exc}") from exc

    def _resolve_path(self, uri: str) -> Path:
        parsed = urlparse(uri)
        if parsed.scheme != "file":
            raise TransportError(f"Unsupported storage URI scheme '{parsed.scheme}' in {uri}")
        path = Path(unquote(parsed.path)).resolve()
        if not path.is_relative_to(self._root):
            raise TransportError(f"{uri} is outside the storage root")
        return path
