"""Offline chat client.

Returns fixed, schema-valid payloads keyed by schema name. No network calls.
Useful for local development and demos without provider credentials.
"""

import json
from typing import ClassVar

from docshield.ai.client_base import BaseChatClient
from docshield.ai.exceptions import AIResponseError


class ExampleClientAdapter(BaseChatClient):
    DEFAULT_RESPONSES: ClassVar[dict[str, dict[str, object]]] = {
        "pii_detection": {
            "detected_pii": [],
            "risk_level": "low",
            "summary": "No sensitive information detected (example provider).",
        },
        "redaction_rewrite": {
            "redacted_text": "[REDACTED]",
            "redaction_summary": "Example provider replaced the whole text.",
        },
    }

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        json_schema: dict[str, object],
        schema_name: str,
    ) -> str:
        _ = model, temperature, system_prompt, user_prompt, json_schema
        try:
            return json.dumps(self.DEFAULT_RESPONSES[schema_name])
        except KeyError:
            raise AIResponseError(f"Example provider has no response for '{schema_name}'") from None
