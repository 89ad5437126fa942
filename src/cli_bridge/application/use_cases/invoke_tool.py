"""Use-case: InvokeTool – build the argument vector for a registered tool and run it."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from cli_bridge.application.argument_validator import ArgumentValidator, ValidationContext
from cli_bridge.application.invocation_builder import (
    PROMPT_KEY,
    ToolQuirks,
    build,
    merge_defaults,
    quirks_for,
    stringify,
)
from cli_bridge.application.output_extractor import extract
from cli_bridge.application.ports import CommandRunner, Logger
from cli_bridge.application.session import SESSION_ID_KEY, find_session_flags
from cli_bridge.application.tool_registry import RegisteredTool

DEFAULT_TIMEOUT = 600.0
_LOG_PROMPT_CHARS = 200


@dataclass
class InvokeRequest:
    args: dict[str, Any] = field(default_factory=dict)
    timeout: float | None = None


@dataclass
class InvokeResponse:
    tool_name: str
    command: str
    argv: list[str]
    output: str
    structured: bool = False


class InvokeTool:
    """Turn named arguments into a command line, screen it, run it and tidy the output."""

    def __init__(
        self,
        runner: CommandRunner,
        logger: Logger,
        validator: ArgumentValidator | None = None,
        quirks: Mapping[str, ToolQuirks] | None = None,
        default_timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._runner = runner
        self._log = logger
        self._validator = validator or ArgumentValidator()
        self._quirks = quirks
        self._default_timeout = default_timeout

    @staticmethod
    def _prompt_key(tool: RegisteredTool, args: Mapping[str, Any]) -> str:
        argument = tool.metadata.argument
        if argument is not None and args.get(argument.name) not in (None, ""):
            return argument.name
        return PROMPT_KEY

    def prepare(self, tool: RegisteredTool, args: Mapping[str, Any]) -> tuple[list[str], dict[str, Any]]:
        """Return the argument vector and the effective (defaults-merged) arguments."""
        metadata, config = tool.metadata, tool.config
        effective = merge_defaults(args, config.default_args)

        key = self._prompt_key(tool, effective)
        if config.system_prompt and effective.get(key):
            effective[key] = f"{config.system_prompt}\n\n{effective[key]}"

        argv = build(metadata, effective, quirks_for(metadata.command, self._quirks))
        return argv, effective

    def execute(self, tool: RegisteredTool, request: InvokeRequest) -> InvokeResponse:
        metadata, config = tool.metadata, tool.config
        argv, effective = self.prepare(tool, request.args)

        prompt = effective.get(self._prompt_key(tool, effective))
        session_id = effective.get(SESSION_ID_KEY)
        flags = find_session_flags(metadata)
        self._validator.validate_command(metadata.command)
        self._validator.validate(
            argv,
            ValidationContext(
                prompt=stringify(prompt) if prompt is not None else None,
                session_id=stringify(session_id) if session_id else None,
                session_flags={o.flag for o in (flags.session, flags.resume) if o is not None},
            ),
        )

        timeout = request.timeout or config.timeout or self._default_timeout
        if prompt is not None:
            self._log.debug(f"Prompt for {metadata.tool_name}: {stringify(prompt)[:_LOG_PROMPT_CHARS]}")
        self._log.debug(f"Executing command: {metadata.command} {' '.join(argv)}", timeout=timeout)

        raw = self._runner.run(metadata.command, argv, timeout=timeout, env=config.env or None)

        quirks = quirks_for(metadata.command, self._quirks)
        structured = quirks.wants_structured(effective)
        output = extract(raw, structured)
        self._log.info(f"{metadata.tool_name} finished", chars=len(output), structured=structured)

        return InvokeResponse(
            tool_name=metadata.tool_name,
            command=metadata.command,
            argv=argv,
            output=output,
            structured=structured,
        )
