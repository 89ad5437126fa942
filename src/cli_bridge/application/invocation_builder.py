"""Invocation builder – maps named arguments onto an ordered argument vector.

The builder is a pure function of the capability model, the caller's
arguments and an injected table of per-tool quirks. It never touches the
filesystem or spawns processes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from cli_bridge.application.session import LATEST_SESSION, SESSION_ID_KEY, find_session_flags
from cli_bridge.domain.capability import CliToolMetadata
from cli_bridge.domain.errors import MissingRequiredArgument

PROMPT_KEY = "prompt"


@dataclass(frozen=True)
class ToolQuirks:
    """Conventions a specific CLI needs that its help text doesn't reveal."""

    leading_subcommand: str | None = None
    # Send the prompt as a positional even if a --prompt option exists.
    positional_prompt: bool = False
    # (argument, value) that makes the tool emit line-delimited JSON events.
    event_stream_arg: tuple[str, Any] | None = None

    def wants_structured(self, args: Mapping[str, Any]) -> bool:
        if self.event_stream_arg is None:
            return False
        key, value = self.event_stream_arg
        return args.get(key) == value


DEFAULT_QUIRKS: dict[str, ToolQuirks] = {
    "opencode": ToolQuirks(
        leading_subcommand="run",
        positional_prompt=True,
        event_stream_arg=("format", "json"),
    ),
}

NO_QUIRKS = ToolQuirks()


def quirks_for(command: str, table: Mapping[str, ToolQuirks] | None = None) -> ToolQuirks:
    table = DEFAULT_QUIRKS if table is None else table
    base = command.rsplit("/", 1)[-1]
    return table.get(command) or table.get(base) or NO_QUIRKS


def stringify(value: Any) -> str:
    """Render a scalar the way the target CLI expects to read it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def merge_defaults(args: Mapping[str, Any], default_args: Mapping[str, Any] | None) -> dict[str, Any]:
    """Configured defaults first, caller values win on collision."""
    merged = dict(default_args or {})
    merged.update({k: v for k, v in args.items() if v is not None})
    return merged


def build(
    metadata: CliToolMetadata,
    args: Mapping[str, Any],
    quirks: ToolQuirks | None = None,
    default_args: Mapping[str, Any] | None = None,
) -> list[str]:
    """Produce the argument vector (without the executable) for one call.

    Raises :class:`MissingRequiredArgument` when the tool's positional is
    required and neither *args* nor *default_args* provide it. Unknown keys
    are ignored.
    """
    quirks = quirks if quirks is not None else quirks_for(metadata.command)
    request = merge_defaults(args, default_args)
    argv: list[str] = []

    if quirks.leading_subcommand:
        argv.append(quirks.leading_subcommand)

    # Session continuation: continue > session > resume.
    session_id = request.get(SESSION_ID_KEY)
    if session_id not in (None, ""):
        flags = find_session_flags(metadata)
        if flags.continue_ is not None and session_id == LATEST_SESSION:
            argv.append(flags.continue_.flag)
        elif flags.session is not None:
            argv.extend([flags.session.flag, stringify(session_id)])
        elif flags.resume is not None:
            argv.extend([flags.resume.flag, stringify(session_id)])

    # Prompt placement: a dedicated --prompt option or a bare positional.
    prompt_keys = {PROMPT_KEY}
    positional_value = None
    if metadata.argument is not None:
        prompt_keys.add(metadata.argument.name)
        positional_value = request.get(metadata.argument.name)
    if positional_value in (None, ""):
        positional_value = request.get(PROMPT_KEY)

    trailing: list[str] = []
    if positional_value not in (None, ""):
        prompt_option = metadata.find_option(PROMPT_KEY)
        if prompt_option is not None and not quirks.positional_prompt:
            argv.extend([prompt_option.flag, stringify(positional_value)])
        else:
            trailing.append(stringify(positional_value))
    elif metadata.argument is not None and metadata.argument.required:
        raise MissingRequiredArgument(metadata.argument.name)

    consumed = prompt_keys | {SESSION_ID_KEY}
    for key, value in request.items():
        if key in consumed or value is None:
            continue
        option = metadata.find_option(key)
        if option is None:
            continue
        if not option.takes_value:
            if value is True:
                argv.append(option.flag)
            continue
        argv.extend([option.flag, stringify(value)])

    return argv + trailing
