"""Protocol schema adapter – expose a capability model as a JSON-Schema object."""

from __future__ import annotations

from typing import Any

from cli_bridge.domain.capability import CliArgument, CliOption, CliToolMetadata, OptionType

_JSON_TYPES = {
    OptionType.STRING: "string",
    OptionType.FILE: "string",
    OptionType.NUMBER: "number",
    OptionType.BOOLEAN: "boolean",
}


def _option_schema(option: CliOption) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": _JSON_TYPES[option.type], "description": option.description}
    if option.type is OptionType.FILE:
        schema["format"] = "path"
    if option.choices and option.type in (OptionType.STRING, OptionType.FILE):
        schema["enum"] = [str(c) for c in option.choices]
    if option.default_value is not None:
        schema["default"] = option.default_value
    if option.deprecated:
        schema["deprecated"] = True
    return schema


def _argument_schema(argument: CliArgument) -> dict[str, Any]:
    schema: dict[str, Any] = {
        "type": "number" if argument.type is OptionType.NUMBER else "string",
        "description": argument.description,
    }
    if argument.required and schema["type"] == "string":
        schema["minLength"] = 1
    return schema


def to_json_schema(metadata: CliToolMetadata) -> dict[str, Any]:
    """Build the ``inputSchema`` a calling protocol advertises for this tool."""
    properties: dict[str, Any] = {}
    required: list[str] = []

    for option in metadata.options:
        properties[option.name] = _option_schema(option)
        if option.required:
            required.append(option.name)

    if metadata.argument is not None:
        properties[metadata.argument.name] = _argument_schema(metadata.argument)
        if metadata.argument.required:
            required.append(metadata.argument.name)

    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


def to_tool_definition(metadata: CliToolMetadata) -> dict[str, Any]:
    return {
        "name": metadata.tool_name,
        "description": metadata.description or f"Execute '{metadata.command}' to get an AI response.",
        "inputSchema": to_json_schema(metadata),
    }
