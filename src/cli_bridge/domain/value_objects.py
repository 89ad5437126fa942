"""Domain value objects – small immutable types with validation."""

from __future__ import annotations

import re
from dataclasses import dataclass

_TOOL_NAME_RE = re.compile(r"[A-Za-z0-9][A-Za-z0-9_.-]{0,63}")


@dataclass(frozen=True)
class ToolName:
    """Identifier under which a CLI tool is exposed (``ask-<command>`` unless aliased)."""

    value: str

    def __post_init__(self) -> None:
        if not _TOOL_NAME_RE.fullmatch(self.value):
            raise ValueError(f"Invalid tool name: {self.value!r}")

    @classmethod
    def from_command(cls, command: str) -> "ToolName":
        base = command.rsplit("/", 1)[-1]
        return cls(value=f"ask-{base}")

    def __str__(self) -> str:
        return self.value
