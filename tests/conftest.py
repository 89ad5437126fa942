"""Shared test fixtures and conftest for CLI Bridge tests."""

from __future__ import annotations

import textwrap
from typing import Any

import pytest

from cli_bridge.application.ports import CommandRunner, HelpFetcher, Logger
from cli_bridge.domain.errors import HelpFetchError


# ---------------------------------------------------------------------------
# Recorded help output
# ---------------------------------------------------------------------------
GEMINI_HELP = textwrap.dedent("""\
    Usage: gemini [options] [command]

    Gemini CLI - Launch an interactive CLI, use -p/--prompt for non-interactive mode

    Commands:
      gemini [query..]             Launch Gemini CLI  [default]
      gemini mcp                   Manage MCP servers

    Positionals:
      query  Positional prompt. Defaults to one-shot.

    Options:
      -m, --model          Model  [string]
      -p, --prompt         Prompt. Appended to input on stdin (if any).  [deprecated: Use the positional prompt instead.] [string]
      -s, --sandbox        Run in sandbox?  [boolean]
      -d, --debug          Run in debug mode?  [boolean] [default: false]
          --approval-mode  Set the approval mode  [string] [choices: "default", "auto_edit", "yolo"]
      -r, --resume         Resume a previous session. Use "latest" for most recent.  [string]
""")

OPENCODE_HELP = textwrap.dedent("""\
    Usage: opencode run [message..]

    run opencode with a message

    Positionals:
      message  message to send  [array] [default: []]

    Options:
      -h, --help        show help  [boolean]
          --print-logs  print logs to stderr  [boolean]
      -c, --continue    continue the last session  [boolean]
      -s, --session     session id to continue  [string]
      -m, --model       model to use in the format of provider/model  [string]
          --format      format: default (formatted) or json (raw JSON events)  [string] [choices: "default", "json"] [default: "default"]
""")

CLAUDE_HELP = textwrap.dedent("""\
    Usage: claude [options] [command] [prompt]

    Claude Code - starts an interactive session by default, use -p/--print for non-interactive output

    Arguments:
      prompt                     Your prompt

    Options:
      -d, --debug [filter]       Enable debug mode with optional category filtering
      -p, --print                Print response and exit (useful for pipes).
      --output-format <format>   Output format: "text" (default) or "json" (choices: "text", "json", "stream-json")
      -c, --continue             Continue the most recent conversation
      -r, --resume [sessionId]   Resume a conversation
      --model <model>            Model for the current session.

    Commands:
      config                     Manage configuration
      mcp                        Configure and manage MCP servers
""")

GO_HELP = (
    "Usage of mytool:\n"
    "  -count int\n"
    "    \tnumber of items (default 1)\n"
    "  -name string\n"
    "    \tname to greet (default \"world\")\n"
    "  -v\tverbose output\n"
)

DOCKER_HELP = textwrap.dedent("""\
    Usage:  docker [OPTIONS] COMMAND

    A self-sufficient runtime for containers

    Commands:
      docker build [OPTIONS] PATH   Build an image from a Dockerfile
      run                           Create and run a new container
      ---
      .json                         Output format extension
      <>                            Placeholder
      Options:                      Repeated header
""")


@pytest.fixture
def gemini_help():
    return GEMINI_HELP


@pytest.fixture
def opencode_help():
    return OPENCODE_HELP


@pytest.fixture
def claude_help():
    return CLAUDE_HELP


@pytest.fixture
def go_help():
    return GO_HELP


@pytest.fixture
def docker_help():
    return DOCKER_HELP


# ---------------------------------------------------------------------------
# Test doubles for the application ports
# ---------------------------------------------------------------------------
class FakeHelpFetcher(HelpFetcher):
    """Serve canned help text keyed by command."""

    def __init__(self, texts: dict[str, str] | None = None):
        self._texts = texts or {}
        self.calls: list[str] = []

    def fetch(self, command: str) -> str:
        self.calls.append(command)
        if command not in self._texts:
            raise HelpFetchError(f"Failed to fetch help output for '{command}'")
        return self._texts[command]


class FakeRunner(CommandRunner):
    """Record invocations and replay a fixed stdout."""

    def __init__(self, output: str = "", available: set[str] | None = None):
        self._output = output
        self._available = available
        self.calls: list[dict[str, Any]] = []

    def run(self, command, argv, *, timeout, env=None) -> str:
        self.calls.append({"command": command, "argv": list(argv), "timeout": timeout, "env": env})
        return self._output

    def is_available(self, command: str) -> bool:
        return self._available is None or command in self._available


class RecordingLogger(Logger):
    """Collect log records as (level, message) tuples."""

    def __init__(self):
        self.records: list[tuple[str, str]] = []

    def info(self, msg, **kw):
        self.records.append(("info", msg))

    def warn(self, msg, **kw):
        self.records.append(("warn", msg))

    def error(self, msg, **kw):
        self.records.append(("error", msg))

    def debug(self, msg, **kw):
        self.records.append(("debug", msg))

    def messages(self, level: str) -> list[str]:
        return [m for lvl, m in self.records if lvl == level]


@pytest.fixture
def logger():
    return RecordingLogger()
