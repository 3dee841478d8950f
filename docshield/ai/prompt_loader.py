import json
from pathlib import Path

from docshield.ai.exceptions import PromptLoadError

PROMPT_DIR = Path(__file__).parent / "prompts"


def load_prompt_template(name: str, path: Path | None = None) -> str:
    """Load a prompt template.

    Args:
        name: Bundled template stem, e.g. ``"detection"`` for detection_prompt.txt.
        path: Explicit file overriding the bundled template.

    Raises:
        PromptLoadError: if the file cannot be read.
    """
    if path is None:
        path = PROMPT_DIR / f"{name}_prompt.txt"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise PromptLoadError(f"Failed to load prompt template: {exc}") from exc


def load_json_schema(name: str, path: Path | None = None) -> dict[str, object]:
    """Load and parse a response JSON schema (``{name}_schema.json`` by default).

    Raises:
        PromptLoadError: if the file cannot be read or is not a JSON object.
    """
    if path is None:
        path = PROMPT_DIR / f"{name}_schema.json"
    try:
        schema = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise PromptLoadError(f"Failed to load JSON schema: {exc}") from exc
    if not isinstance(schema, dict):
        raise PromptLoadError(f"JSON schema in {path} must be an object")
    return schema
