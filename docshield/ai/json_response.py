import json
from typing import Any

from docshield.ai.exceptions import AIResponseError


def parse_json_object(raw: str) -> dict[str, Any]:
    """Parse a provider response, tolerating a surrounding ``` fence."""
    cleaned = raw.strip()
    if cleaned.startswith("```"):
        lines = cleaned.splitlines()
        if lines and lines[0].startswith("```"):
            lines = lines[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        cleaned = "\n".join(lines)

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise AIResponseError(f"Invalid JSON response: {exc}") from exc

    if not isinstance(parsed, dict):
        raise AIResponseError("JSON response must be an object")
    return parsed
