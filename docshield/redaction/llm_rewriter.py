"""AI-backed redaction rewriter."""

import json
from collections.abc import Sequence
from pathlib import Path

from docshield.ai.client_base import BaseChatClient
from docshield.ai.exceptions import AIResponseError, PromptLoadError
from docshield.ai.json_response import parse_json_object
from docshield.ai.prompt_loader import load_json_schema, load_prompt_template
from docshield.documents.models import PiiFinding
from docshield.logging.logger import Log
from docshield.redaction.base import BaseRewriter
from docshield.redaction.exceptions import RewriteError
from docshield.redaction.models import RewriteResult


def format_redaction_items(targets: Sequence[PiiFinding]) -> str:
    return "\n".join(f'- {target.kind.value}: "{target.value}"' for target in targets)


class LLMRewriter(BaseRewriter):
    """Asks a chat model for the text with each target replaced by a placeholder."""

    SCHEMA_NAME = "redaction_rewrite"

    def __init__(
        self,
        *,
        client: BaseChatClient,
        model: str,
        temperature: float = 0.0,
        prompt_template_path: Path | None = None,
        json_schema_path: Path | None = None,
        system_prompt: str = "You redact documents without altering any other text.",
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(0.2, temperature))
        self._system_prompt = system_prompt
        try:
            self._prompt_template = load_prompt_template("redaction", prompt_template_path)
            self._json_schema = load_json_schema("redaction", json_schema_path)
        except PromptLoadError as exc:
            raise RewriteError(str(exc)) from exc

    def rewrite(self, text: str, targets: Sequence[PiiFinding]) -> RewriteResult:
        prompt = self._prompt_template.format(
            document_text=text,
            redaction_items=format_redaction_items(targets),
            json_schema=json.dumps(self._json_schema, indent=2),
        )
        Log.debug(f"Redaction prompt:\n{prompt}")

        raw_response = self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
            json_schema=self._json_schema,
            schema_name=self.SCHEMA_NAME,
        )
        Log.debug(f"Redaction raw response:\n{raw_response}")

        try:
            parsed = parse_json_object(raw_response)
        except AIResponseError as exc:
            raise RewriteError(str(exc)) from exc

        redacted_text = parsed.get("redacted_text")
        if not isinstance(redacted_text, str):
            raise RewriteError("'redacted_text' must be a string")
        summary = parsed.get("redaction_summary") or ""
        if not isinstance(summary, str):
            raise RewriteError("'redaction_summary' must be a string")

        Log.info(f"Rewrite complete: {len(targets)} items, {len(redacted_text)} chars")
        return RewriteResult(redacted_text=redacted_text, redaction_summary=summary)
