"""In-memory registry of discovered tools, passed around explicitly."""

from __future__ import annotations

from dataclasses import dataclass

from cli_bridge.domain.capability import CliToolMetadata
from cli_bridge.domain.tool_config import ToolConfig


@dataclass(frozen=True)
class RegisteredTool:
    """A parsed tool together with the configuration it was registered with."""

    metadata: CliToolMetadata
    config: ToolConfig
    help_text: str = ""

    @property
    def name(self) -> str:
        return self.metadata.tool_name


class ToolRegistry:
    """Tools keyed by tool name; re-registering a name replaces the entry."""

    def __init__(self) -> None:
        self._tools: dict[str, RegisteredTool] = {}

    def add(self, tool: RegisteredTool) -> None:
        self._tools[tool.name] = tool

    def get(self, name: str) -> RegisteredTool | None:
        tool = self._tools.get(name)
        if tool is not None:
            return tool
        for candidate in self._tools.values():
            if candidate.metadata.command == name:
                return candidate
        return None

    def remove(self, name: str) -> bool:
        return self._tools.pop(name, None) is not None

    def names(self) -> list[str]:
        return sorted(self._tools)

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools
