"""Application ports – abstract interfaces that infrastructure must implement.

These are the boundaries of the application layer. Domain and application code
depend only on these abstractions, never on concrete infrastructure.
"""

from __future__ import annotations

import abc
from typing import Any


# ---------------------------------------------------------------------------
# Help text
# ---------------------------------------------------------------------------
class HelpFetcher(abc.ABC):
    """Port: obtain the raw help text of a command."""

    @abc.abstractmethod
    def fetch(self, command: str) -> str:
        """Try the primary then the fallback help flag; raise HelpFetchError if both fail."""
        ...


# ---------------------------------------------------------------------------
# Process execution
# ---------------------------------------------------------------------------
class CommandRunner(abc.ABC):
    """Port: run an executable with an argument vector."""

    @abc.abstractmethod
    def run(
        self,
        command: str,
        argv: list[str],
        *,
        timeout: float,
        env: dict[str, str] | None = None,
    ) -> str:
        """Return trimmed stdout or raise CommandExecutionError with captured stderr."""
        ...

    @abc.abstractmethod
    def is_available(self, command: str) -> bool:
        ...


# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
class Logger(abc.ABC):
    """Port: structured logging with secret redaction."""

    @abc.abstractmethod
    def info(self, msg: str, **kw: Any) -> None:
        ...

    @abc.abstractmethod
    def warn(self, msg: str, **kw: Any) -> None:
        ...

    @abc.abstractmethod
    def error(self, msg: str, **kw: Any) -> None:
        ...

    @abc.abstractmethod
    def debug(self, msg: str, **kw: Any) -> None:
        ...
