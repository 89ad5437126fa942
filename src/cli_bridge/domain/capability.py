"""Domain entities – the capability model shared by the help parser and the invocation builder."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Union

Scalar = Union[str, int, float, bool]


class OptionType(str, Enum):
    """Kind of value an option accepts."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    FILE = "file"


class ToolType(str, Enum):
    SIMPLE = "simple"
    WITH_SUBCOMMANDS = "with-subcommands"


@dataclass(frozen=True)
class CliOption:
    """A single command-line option (flag).

    ``name`` is the key callers use in an invocation request; ``flag`` is the
    literal token placed on the command line (``--model``).
    """

    name: str
    flag: str
    type: OptionType
    description: str
    required: bool = False
    default_value: Scalar | None = None
    choices: tuple[str, ...] | None = None
    deprecated: bool = False

    @property
    def takes_value(self) -> bool:
        return self.type is not OptionType.BOOLEAN

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "name": self.name,
            "flag": self.flag,
            "type": self.type.value,
            "description": self.description,
        }
        if self.required:
            d["required"] = True
        if self.default_value is not None:
            d["default_value"] = self.default_value
        if self.choices:
            d["choices"] = list(self.choices)
        if self.deprecated:
            d["deprecated"] = True
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "CliOption":
        choices = d.get("choices")
        return cls(
            name=d["name"],
            flag=d["flag"],
            type=OptionType(d.get("type", "string")),
            description=d.get("description", ""),
            required=bool(d.get("required", False)),
            default_value=d.get("default_value"),
            choices=tuple(choices) if choices else None,
            deprecated=bool(d.get("deprecated", False)),
        )


@dataclass(frozen=True)
class CliArgument:
    """The positional argument of a tool (for AI assistants, usually the prompt)."""

    name: str
    description: str
    type: OptionType = OptionType.STRING
    required: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "type": self.type.value,
            "required": self.required,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "CliArgument":
        return cls(
            name=d["name"],
            description=d.get("description", ""),
            type=OptionType(d.get("type", "string")),
            required=bool(d.get("required", False)),
        )


@dataclass(frozen=True)
class SubcommandDefinition:
    """A subcommand such as ``run`` in ``ollama run``."""

    name: str
    description: str
    has_arguments: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "has_arguments": self.has_arguments,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "SubcommandDefinition":
        return cls(
            name=d["name"],
            description=d.get("description", ""),
            has_arguments=bool(d.get("has_arguments", True)),
        )


@dataclass(frozen=True)
class CliToolMetadata:
    """Everything known about a CLI tool's invocation surface.

    Built once per discovered tool and never mutated; overlays and session
    augmentation return new instances.
    """

    tool_name: str
    command: str
    description: str
    tool_type: ToolType = ToolType.SIMPLE
    options: tuple[CliOption, ...] = field(default_factory=tuple)
    argument: CliArgument | None = None
    subcommands: tuple[SubcommandDefinition, ...] | None = None

    def find_option(self, name: str) -> CliOption | None:
        for opt in self.options:
            if opt.name == name:
                return opt
        return None

    def with_overrides(self, **changes: Any) -> "CliToolMetadata":
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "tool_name": self.tool_name,
            "command": self.command,
            "description": self.description,
            "tool_type": self.tool_type.value,
            "options": [o.to_dict() for o in self.options],
        }
        if self.argument is not None:
            d["argument"] = self.argument.to_dict()
        if self.subcommands:
            d["subcommands"] = [s.to_dict() for s in self.subcommands]
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "CliToolMetadata":
        argument = d.get("argument")
        subcommands = d.get("subcommands")
        return cls(
            tool_name=d["tool_name"],
            command=d["command"],
            description=d.get("description", ""),
            tool_type=ToolType(d.get("tool_type", "simple")),
            options=tuple(CliOption.from_dict(o) for o in d.get("options", [])),
            argument=CliArgument.from_dict(argument) if argument else None,
            subcommands=tuple(SubcommandDefinition.from_dict(s) for s in subcommands) if subcommands else None,
        )
