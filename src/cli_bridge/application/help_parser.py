"""Help-text parser – turns free-form ``--help`` output into a CliToolMetadata.

The parser is a single pass line scanner. Section headers switch the current
section; every other line is interpreted according to that section. Lines
that don't fit the expected shape are dropped, since help text is noisy and a
partial model is more useful than none.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Pattern

from cli_bridge.application.type_inference import analyze, clean_description
from cli_bridge.domain.capability import (
    CliArgument,
    CliOption,
    CliToolMetadata,
    OptionType,
    SubcommandDefinition,
    ToolType,
)
from cli_bridge.domain.value_objects import ToolName

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------
# Value type words printed after the flag by Go's flag package and cobra.
VALUE_TYPE_HINTS = {
    "int": OptionType.NUMBER,
    "int32": OptionType.NUMBER,
    "int64": OptionType.NUMBER,
    "uint": OptionType.NUMBER,
    "uint32": OptionType.NUMBER,
    "uint64": OptionType.NUMBER,
    "float": OptionType.NUMBER,
    "float32": OptionType.NUMBER,
    "float64": OptionType.NUMBER,
    "string": OptionType.STRING,
    "strings": OptionType.STRING,
    "stringArray": OptionType.STRING,
    "stringSlice": OptionType.STRING,
    "list": OptionType.STRING,
    "duration": OptionType.STRING,
    "value": OptionType.STRING,
}
_TYPE_WORDS = "|".join(sorted(VALUE_TYPE_HINTS, key=len, reverse=True))

# -m, --model <x>   Model to use  [string]
# -d, --debug [filter]   Enable debug mode
#     --config string    Location of client config files
# A bare metavar or type word only counts when two spaces (or a tab) follow it,
# so "--name value of the thing" keeps "value" in its description.
GNU_OPTION_RE = re.compile(
    r"^\s*(?:(?P<short>-[A-Za-z0-9]),\s+)?"
    r"(?P<flag>--[A-Za-z0-9][A-Za-z0-9-]*)"
    r"(?:"
    r"[= ](?P<value><[^>]+>|\[(?!(?:boolean|string|number|array)\]|choices:|default:|deprecated:)[^\]]+\])\s+"
    rf"|[= ](?P<metavar>[A-Z][A-Z0-9_-]*|(?:{_TYPE_WORDS}))(?:\s{{2,}}|\t)\s*"
    r"|\s+"
    r")"
    r"(?P<rest>.*)$"
)

# -count int    number of items (default 1)
# Go separates the type word with a space and the usage with a tab.
GO_OPTION_RE = re.compile(
    r"^\s*(?P<flag>-(?!-)[A-Za-z][A-Za-z0-9_.-]*)"
    r"(?: (?P<value>[a-z][a-z0-9]*))?"
    r"(?:\s{2,}|\t+|\s*$)(?P<rest>.*)$"
)

DEFAULT_POSITIONAL_RE = re.compile(r"^\s{2}([a-zA-Z0-9-]+)\s+(.*)$")

COMMANDS_HEADER_RE = re.compile(r"^(?:Commands|Available Commands):$")
POSITIONALS_HEADER_RE = re.compile(r"^(?:Positionals|Arguments):$")
OPTIONS_HEADER_RE = re.compile(r"^(?:Options|Flags|Global Flags):$")
GO_OPTIONS_HEADER_RE = re.compile(r"^(?:Options|Flags|Global Flags|Usage of \S+):$")
DIVIDER_RE = re.compile(r"^---+$")

_NESTED_HEADER_RE = re.compile(r"^(?:Commands|Options|Arguments|Positionals|Flags):")
_USAGE_SHAPE_RE = re.compile(r"^\w+\s+\[.*?\]\s*$")
_EXTENSION_RE = re.compile(r"^\.[a-z]+$")
_BRACKETS_ONLY_RE = re.compile(r"^[<>\[\]]+$")
_PAREN_META_RE = re.compile(r"\((choices|default):?\s+([^)]*)\)")


# ---------------------------------------------------------------------------
# Strategy
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class ParserStrategy:
    """How option and positional lines look for a family of CLIs.

    ``option_pattern`` either defines the named groups ``flag`` and ``rest``
    (optionally ``short``, ``value`` and ``metavar``) or uses plain numbered
    groups laid out as short, long, description. ``positional_pattern``
    captures the argument name and its description as groups 1 and 2.
    """

    name: str
    option_pattern: Pattern[str]
    positional_pattern: Pattern[str] = DEFAULT_POSITIONAL_RE
    options_header: Pattern[str] = OPTIONS_HEADER_RE
    # Go's flag package prints the description on the line after the flag.
    description_on_next_line: bool = False

    def __post_init__(self) -> None:
        named = self.option_pattern.groupindex
        if not ({"flag", "rest"} <= named.keys() or (not named and self.option_pattern.groups >= 3)):
            raise ValueError(
                f"Option pattern {self.option_pattern.pattern!r} needs named groups 'flag' and 'rest' "
                "or three numbered groups (short, long, description)"
            )
        if self.positional_pattern.groups < 2:
            raise ValueError(
                f"Positional pattern {self.positional_pattern.pattern!r} needs two groups (name, description)"
            )

    def option_name(self, flag: str) -> str:
        return flag.lstrip("-")

    @classmethod
    def custom(
        cls,
        option_pattern: str | Pattern[str] | None = None,
        positional_pattern: str | Pattern[str] | None = None,
    ) -> "ParserStrategy":
        return cls(
            name="custom",
            option_pattern=re.compile(option_pattern) if option_pattern else GNU_OPTION_RE,
            positional_pattern=re.compile(positional_pattern) if positional_pattern else DEFAULT_POSITIONAL_RE,
        )


GNU = ParserStrategy(name="gnu", option_pattern=GNU_OPTION_RE)
GO = ParserStrategy(
    name="go",
    option_pattern=GO_OPTION_RE,
    options_header=GO_OPTIONS_HEADER_RE,
    description_on_next_line=True,
)

STRATEGIES: dict[str, ParserStrategy] = {"gnu": GNU, "go": GO}


def strategy_for(name: str | None) -> ParserStrategy:
    if not name:
        return GNU
    try:
        return STRATEGIES[name]
    except KeyError:
        raise ValueError(f"Unknown parser strategy: {name!r}") from None


# ---------------------------------------------------------------------------
# Scanner
# ---------------------------------------------------------------------------
@dataclass
class _ScanState:
    section: str = "description"
    description: list[str] = field(default_factory=list)
    positionals: list[CliArgument] = field(default_factory=list)
    options: dict[str, CliOption] = field(default_factory=dict)
    subcommands: list[SubcommandDefinition] = field(default_factory=list)
    has_subcommands: bool = False
    pending: tuple[str, str | None] | None = None


def parse(command: str, help_text: str, strategy: ParserStrategy | None = None) -> CliToolMetadata:
    """Parse *help_text* of *command* into a capability model.

    Never raises for string input; unrecognizable text yields a model with
    no options, no argument and ``ToolType.SIMPLE``.
    """
    strategy = strategy or GNU
    state = _ScanState()

    for line in (help_text or "").splitlines():
        if COMMANDS_HEADER_RE.match(line):
            state.section = "commands"
            state.has_subcommands = True
            continue
        if POSITIONALS_HEADER_RE.match(line):
            state.section = "positionals"
            continue
        if strategy.options_header.match(line):
            state.section = "options"
            continue

        if not line.strip() or DIVIDER_RE.match(line):
            continue

        if state.section == "description":
            if not line.startswith((" ", "\t")):
                state.description.append(line.strip())
        elif state.section == "positionals":
            positional = _parse_positional(line, strategy)
            if positional is not None:
                state.positionals.append(positional)
        elif state.section == "options":
            _scan_option_line(line, strategy, state)
        else:
            subcommand = _parse_subcommand(line, command)
            if subcommand is not None:
                state.subcommands.append(subcommand)

    description = " ".join(d for d in state.description if not d.startswith("Usage:"))
    description = " ".join(description.split())

    return CliToolMetadata(
        tool_name=_tool_name(command),
        command=command,
        description=description,
        tool_type=ToolType.WITH_SUBCOMMANDS if state.has_subcommands else ToolType.SIMPLE,
        options=tuple(state.options.values()),
        argument=state.positionals[0] if state.positionals else None,
        subcommands=tuple(state.subcommands) or None,
    )


def _tool_name(command: str) -> str:
    try:
        return str(ToolName.from_command(command))
    except ValueError:
        return f"ask-{command}"


# ---------------------------------------------------------------------------
# Line parsers
# ---------------------------------------------------------------------------
def _parse_positional(line: str, strategy: ParserStrategy) -> CliArgument | None:
    match = strategy.positional_pattern.match(line)
    if not match:
        return None
    name, description = match.group(1), clean_description(match.group(2) or "")
    if not name or not description:
        return None
    return CliArgument(name=name, description=description, type=OptionType.STRING, required=False)


def _scan_option_line(line: str, strategy: ParserStrategy, state: _ScanState) -> None:
    match = strategy.option_pattern.match(line)

    if state.pending is not None:
        flag, value = state.pending
        state.pending = None
        if match is None:
            _add_option(flag, line.strip(), value, strategy, state)
            return

    if match is None:
        return

    flag, value, rest = _option_fields(match)
    if not flag:
        return

    if not rest:
        if strategy.description_on_next_line:
            state.pending = (flag, value)
        return

    _add_option(flag, rest, value, strategy, state)


def _option_fields(match: re.Match[str]) -> tuple[str | None, str | None, str]:
    groups = match.groupdict()
    if "flag" in groups:
        return groups["flag"], groups.get("value") or groups.get("metavar"), (groups.get("rest") or "").strip()
    # Numbered groups: short, long, ..., description.
    numbered = match.groups()
    return numbered[1] or numbered[0], None, (numbered[-1] or "").strip()


def _add_option(flag: str, text: str, value: str | None, strategy: ParserStrategy, state: _ScanState) -> None:
    text = _PAREN_META_RE.sub(lambda m: _paren_to_bracket(m, text), text)
    type_hint = VALUE_TYPE_HINTS.get(value) if value else None

    hints = analyze(flag, text, type_hint)
    if not hints.description:
        return

    name = strategy.option_name(flag)
    # Later definitions overwrite earlier ones with the same name.
    state.options[name] = CliOption(
        name=name,
        flag=flag,
        type=hints.type,
        description=hints.description,
        default_value=hints.default_value,
        choices=hints.choices,
        deprecated=hints.deprecated,
    )


def _paren_to_bracket(match: re.Match[str], text: str) -> str:
    # "(default 1)" -> "[default: 1]" unless the bracket form is already there.
    kind, body = match.group(1), match.group(2).strip()
    if f"[{kind}:" in text:
        return match.group(0)
    return f"[{kind}: {body}]"


def _parse_subcommand(line: str, command: str) -> SubcommandDefinition | None:
    trimmed = line.strip()
    if not trimmed or trimmed.startswith("---") or _NESTED_HEADER_RE.match(trimmed):
        return None
    if _USAGE_SHAPE_RE.match(trimmed):
        return None

    parts = re.split(r"\s{2,}", trimmed)
    if len(parts) < 2:
        return None
    command_part, description = parts[0].strip(), parts[1].strip()
    if not command_part or not description:
        return None

    base = command.rsplit("/", 1)[-1]
    # "docker build [OPTIONS] PATH" -> "build": skip the base command and metavars.
    words = [
        w for w in command_part.split()
        if w != base and not w.startswith(("<", "[")) and not (w.isupper() and len(w) > 1)
    ]
    if not words:
        return None
    name = words[-1]

    if name.startswith("-") or _EXTENSION_RE.match(name) or _BRACKETS_ONLY_RE.match(name):
        return None
    return SubcommandDefinition(name=name, description=description, has_arguments=True)
