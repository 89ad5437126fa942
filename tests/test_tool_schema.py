"""Unit tests for the JSON-Schema tool definition."""

from __future__ import annotations

from cli_bridge.adapters.tool_schema import to_json_schema, to_tool_definition
from cli_bridge.application.help_parser import parse
from cli_bridge.domain.capability import CliArgument, CliOption, CliToolMetadata, OptionType


def _metadata(*options, argument=None, description=""):
    return CliToolMetadata(
        tool_name="ask-tool", command="tool", description=description, options=tuple(options), argument=argument
    )


class TestToJsonSchema:
    def test_types(self):
        schema = to_json_schema(_metadata(
            CliOption(name="n", flag="-n", type=OptionType.NUMBER, description="N"),
            CliOption(name="v", flag="-v", type=OptionType.BOOLEAN, description="V"),
            CliOption(name="f", flag="--f", type=OptionType.FILE, description="F"),
            CliOption(name="s", flag="--s", type=OptionType.STRING, description="S"),
        ))
        props = schema["properties"]
        assert props["n"]["type"] == "number"
        assert props["v"]["type"] == "boolean"
        assert props["f"] == {"type": "string", "description": "F", "format": "path"}
        assert props["s"] == {"type": "string", "description": "S"}
        assert "required" not in schema

    def test_choices_default_deprecated(self, gemini_help):
        props = to_json_schema(parse("gemini", gemini_help))["properties"]
        assert props["approval-mode"]["enum"] == ["default", "auto_edit", "yolo"]
        assert props["debug"]["default"] is False
        assert props["prompt"]["deprecated"] is True

    def test_required_argument(self):
        arg = CliArgument(name="prompt", description="Prompt", required=True)
        schema = to_json_schema(_metadata(argument=arg))
        assert schema["required"] == ["prompt"]
        assert schema["properties"]["prompt"]["minLength"] == 1

    def test_optional_argument(self, claude_help):
        schema = to_json_schema(parse("claude", claude_help))
        assert schema["properties"]["prompt"] == {"type": "string", "description": "Your prompt"}
        assert "required" not in schema


class TestToolDefinition:
    def test_description_fallback(self):
        definition = to_tool_definition(_metadata())
        assert definition["name"] == "ask-tool"
        assert "tool" in definition["description"]
        assert definition["inputSchema"] == {"type": "object", "properties": {}}

    def test_parsed_description(self, opencode_help):
        definition = to_tool_definition(parse("opencode", opencode_help))
        assert definition["description"] == "run opencode with a message"
