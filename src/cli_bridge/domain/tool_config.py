"""Domain entities – per-tool configuration overlay loaded from ``ai-tools.json``."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from cli_bridge.domain.capability import Scalar
from cli_bridge.domain.errors import ConfigError
from cli_bridge.domain.value_objects import ToolName

PARSER_STRATEGIES = ("gnu", "go")
DEFAULT_VERSION = "1.0"


def _pick(d: dict[str, Any], *keys: str) -> Any:
    """Return the first present key; config files use both camelCase and snake_case."""
    for k in keys:
        if k in d:
            return d[k]
    return None


@dataclass
class ToolConfig:
    """Static overrides for one CLI tool."""

    command: str
    enabled: bool = True
    parser_strategy: str | None = None
    alias: str | None = None
    description: str | None = None
    default_args: dict[str, Scalar] = field(default_factory=dict)
    system_prompt: str | None = None
    env: dict[str, str] = field(default_factory=dict)
    timeout: float | None = None

    @property
    def tool_name(self) -> str:
        if self.alias:
            return self.alias
        return str(ToolName.from_command(self.command))

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"command": self.command, "enabled": self.enabled}
        if self.parser_strategy:
            d["parserStrategy"] = self.parser_strategy
        if self.alias:
            d["alias"] = self.alias
        if self.description:
            d["description"] = self.description
        if self.default_args:
            d["defaultArgs"] = dict(self.default_args)
        if self.system_prompt:
            d["systemPrompt"] = self.system_prompt
        if self.env:
            d["env"] = dict(self.env)
        if self.timeout is not None:
            d["timeout"] = self.timeout
        return d

    @classmethod
    def from_dict(cls, d: Any) -> "ToolConfig":
        if not isinstance(d, dict):
            raise ConfigError(f"Tool entry must be an object, got {type(d).__name__}")
        command = d.get("command")
        if not isinstance(command, str) or not command.strip():
            raise ConfigError("Tool entry is missing 'command'")

        strategy = _pick(d, "parserStrategy", "parser_strategy")
        if strategy is not None and strategy not in PARSER_STRATEGIES:
            raise ConfigError(
                f"{command}: parserStrategy must be one of {', '.join(PARSER_STRATEGIES)}, got {strategy!r}"
            )

        default_args = _pick(d, "defaultArgs", "default_args") or {}
        if not isinstance(default_args, dict):
            raise ConfigError(f"{command}: defaultArgs must be an object")
        for key, value in default_args.items():
            if not isinstance(value, (str, int, float, bool)):
                raise ConfigError(f"{command}: defaultArgs.{key} must be a string, number or boolean")

        env = d.get("env") or {}
        if not isinstance(env, dict) or not all(isinstance(v, str) for v in env.values()):
            raise ConfigError(f"{command}: env must map names to strings")

        timeout = d.get("timeout")
        if timeout is not None and (isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0):
            raise ConfigError(f"{command}: timeout must be a positive number of seconds")

        alias = d.get("alias")
        if alias is not None:
            try:
                ToolName(alias)
            except ValueError as exc:
                raise ConfigError(f"{command}: {exc}") from exc

        return cls(
            command=command.strip(),
            enabled=bool(d.get("enabled", True)),
            parser_strategy=strategy,
            alias=alias,
            description=d.get("description"),
            default_args=dict(default_args),
            system_prompt=_pick(d, "systemPrompt", "system_prompt"),
            env=dict(env),
            timeout=float(timeout) if timeout is not None else None,
        )


@dataclass
class ToolsConfig:
    """Top-level configuration file."""

    tools: list[ToolConfig] = field(default_factory=list)
    version: str = DEFAULT_VERSION

    def enabled_tools(self) -> list[ToolConfig]:
        return [t for t in self.tools if t.enabled]

    def find(self, command: str) -> ToolConfig | None:
        for t in self.tools:
            if t.command == command or t.tool_name == command:
                return t
        return None

    def to_dict(self) -> dict[str, Any]:
        return {"version": self.version, "tools": [t.to_dict() for t in self.tools]}

    @classmethod
    def from_dict(cls, d: Any) -> "ToolsConfig":
        if not isinstance(d, dict):
            raise ConfigError("Configuration root must be an object")
        tools = d.get("tools")
        if not isinstance(tools, list):
            raise ConfigError("Configuration is missing a 'tools' array")
        return cls(
            tools=[ToolConfig.from_dict(t) for t in tools],
            version=str(d.get("version", DEFAULT_VERSION)),
        )
