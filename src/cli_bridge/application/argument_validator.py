"""Argument screening applied to an invocation vector before it is executed.

Commands are spawned without a shell, so shell metacharacters inside a prompt
are harmless; they are only rejected for the command name itself. What is
always rejected: oversized arguments, NUL bytes, ``@file`` references that
climb out of the working directory and malformed session ids.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from cli_bridge.domain.errors import SecurityError

SHELL_SPECIAL_CHARS = (";", "|", "&", "$", "`", "(", ")", "{", "}", "<", ">")
PATH_TRAVERSAL_PATTERNS = ("../", "..\\")
SESSION_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")


@dataclass(frozen=True)
class ValidationConfig:
    max_argument_length: int = 10_000
    max_prompt_length: int = 100_000
    max_session_id_length: int = 256
    shell_special_chars: tuple[str, ...] = SHELL_SPECIAL_CHARS
    path_traversal_patterns: tuple[str, ...] = PATH_TRAVERSAL_PATTERNS


@dataclass
class ValidationContext:
    prompt: str | None = None
    session_id: str | None = None
    session_flags: set[str] = field(default_factory=set)


class ArgumentValidator:
    """Reject argument vectors that could not have come from a well-behaved caller."""

    def __init__(self, config: ValidationConfig | None = None) -> None:
        self._config = config or ValidationConfig()

    def validate_command(self, command: str) -> None:
        self._check_common(command, self._config.max_argument_length)
        for ch in self._config.shell_special_chars:
            if ch in command:
                raise SecurityError(f"Command injection detected: {ch!r} in {command!r}", "command_injection")
        if any(c.isspace() for c in command):
            raise SecurityError(f"Invalid characters detected in command {command!r}", "invalid_characters")

    def validate_session_id(self, session_id: str) -> None:
        if len(session_id) > self._config.max_session_id_length:
            raise SecurityError(
                f"Argument too long: {len(session_id)} characters (max {self._config.max_session_id_length})",
                "argument_too_long",
            )
        if not SESSION_ID_RE.match(session_id):
            raise SecurityError(
                f"Invalid session ID format: {session_id}. Only alphanumeric, -, _ allowed",
                "invalid_session_id",
            )

    def validate_at_syntax(self, arg: str) -> None:
        """``@path`` pulls a file into the prompt for some assistants; keep it inside cwd."""
        for token in arg.split():
            if not token.startswith("@"):
                continue
            ref = token[1:]
            if ref.startswith("/") or ref == ".." or any(p in ref for p in self._config.path_traversal_patterns):
                raise SecurityError(f"Path traversal detected in @ syntax: {token}", "at_syntax_traversal")

    def validate(self, argv: list[str], context: ValidationContext | None = None) -> None:
        context = context or ValidationContext()
        if context.session_id:
            self.validate_session_id(context.session_id)

        for i, arg in enumerate(argv):
            is_prompt = context.prompt is not None and arg == context.prompt
            limit = self._config.max_prompt_length if is_prompt else self._config.max_argument_length
            self._check_common(arg, limit)
            if is_prompt:
                self.validate_at_syntax(arg)
            elif i > 0 and argv[i - 1] in context.session_flags:
                self.validate_session_id(arg)

    def _check_common(self, arg: str, limit: int) -> None:
        if len(arg) > limit:
            raise SecurityError(f"Argument too long: {len(arg)} characters (max {limit})", "argument_too_long")
        if "\0" in arg:
            raise SecurityError("Null byte detected in argument", "null_byte")
