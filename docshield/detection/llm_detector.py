"""AI-backed PII detector."""

import json
from pathlib import Path

from docshield.ai.client_base import BaseChatClient
from docshield.ai.exceptions import AIResponseError, PromptLoadError
from docshield.ai.json_response import parse_json_object
from docshield.ai.prompt_loader import load_json_schema, load_prompt_template
from docshield.detection.base import BaseDetector
from docshield.detection.exceptions import DetectionError
from docshield.detection.models import DetectionResult
from docshield.detection.validator import validate_and_build
from docshield.logging.logger import Log


class LLMDetector(BaseDetector):
    """Asks a chat model to list PII findings and a document risk level."""

    SCHEMA_NAME = "pii_detection"

    def __init__(
        self,
        *,
        client: BaseChatClient,
        model: str,
        temperature: float = 0.0,
        prompt_template_path: Path | None = None,
        json_schema_path: Path | None = None,
        system_prompt: str = "You are a meticulous data-protection analyst.",
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(0.2, temperature))
        self._system_prompt = system_prompt
        try:
            self._prompt_template = load_prompt_template("detection", prompt_template_path)
            self._json_schema = load_json_schema("detection", json_schema_path)
        except PromptLoadError as exc:
            raise DetectionError(str(exc)) from exc

    def detect(self, text: str) -> DetectionResult:
        prompt = self._prompt_template.format(
            document_text=text,
            json_schema=json.dumps(self._json_schema, indent=2),
        )
        Log.debug(f"Detection prompt:\n{prompt}")

        raw_response = self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
            json_schema=self._json_schema,
            schema_name=self.SCHEMA_NAME,
        )
        Log.debug(f"Detection raw response:\n{raw_response}")

        try:
            parsed = parse_json_object(raw_response)
        except AIResponseError as exc:
            raise DetectionError(str(exc)) from exc
        result = validate_and_build(parsed)

        Log.info(
            f"Detection complete: {len(result.findings)} findings, risk {result.risk_level.value}"
        )
        return result
