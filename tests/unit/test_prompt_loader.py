"""Tests for prompt template and JSON schema loading."""

from pathlib import Path

import pytest

from docshield.ai.exceptions import PromptLoadError
from docshield.ai.prompt_loader import load_json_schema, load_prompt_template


class TestLoadPromptTemplate:
    def test_loads_detection_template(self) -> None:
        template = load_prompt_template("detection")
        assert "{document_text}" in template
        assert "{json_schema}" in template

    def test_loads_redaction_template(self) -> None:
        template = load_prompt_template("redaction")
        assert "{redaction_items}" in template

    def test_loads_custom_template(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom.txt"
        custom.write_text("Hello {document_text}")
        assert load_prompt_template("detection", custom) == "Hello {document_text}"

    def test_missing_file_raises_error(self) -> None:
        with pytest.raises(PromptLoadError, match="Failed to load prompt"):
            load_prompt_template("detection", Path("/nonexistent/file.txt"))


class TestLoadJsonSchema:
    def test_loads_default_schemas(self) -> None:
        assert "detected_pii" in load_json_schema("detection")["properties"]
        assert "redacted_text" in load_json_schema("redaction")["properties"]

    def test_loads_custom_schema(self, tmp_path: Path) -> None:
        custom = tmp_path / "schema.json"
        custom.write_text('{"type": "object"}')
        assert load_json_schema("detection", custom) == {"type": "object"}

    def test_non_object_schema_raises_error(self, tmp_path: Path) -> None:
        custom = tmp_path / "schema.json"
        custom.write_text("[1, 2]")
        with pytest.raises(PromptLoadError, match="must be an object"):
            load_json_schema("detection", custom)

    def test_missing_file_raises_error(self) -> None:
        with pytest.raises(PromptLoadError, match="Failed to load JSON schema"):
            load_json_schema("detection", Path("/nonexistent/schema.json"))
