"""Type, default and choices inference for a single option line.

Help text annotates options in two ways: explicit bracketed metadata
(``[boolean]``, ``[choices: "a", "b"]``, ``[default: x]``, ``[deprecated: ...]``)
as printed by yargs/commander, or nothing at all, in which case the type is
guessed from the flag name and description.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from cli_bridge.domain.capability import OptionType, Scalar

TYPE_TOKEN_RE = re.compile(r"\[(boolean|string|number|array)\]")
CHOICES_RE = re.compile(r"\[choices:\s*([^\]]+)\]")
DEFAULT_RE = re.compile(r"\[default:\s*((?:\[[^\]]*\]|[^\]\[])+)\]")
DEPRECATED_RE = re.compile(r"\[deprecated:[^\]]*\]?")

_TYPE_TOKENS = {
    "boolean": OptionType.BOOLEAN,
    "number": OptionType.NUMBER,
    "array": OptionType.STRING,  # passed as one comma-separated value
    "string": OptionType.STRING,
}

_BOOLEAN_LEAD_RE = re.compile(r"^(?:enable|disable|show|hide|print|verbose|quiet|debug|trace)")
_BOOLEAN_VERB_RE = re.compile(r"^(?:is|are|has|have)")
_NUMBER_FLAG_RE = re.compile(r"port|count|num|timeout|limit")
_FILE_FLAG_RE = re.compile(r"file|path|dir|directory|config|output|input")
_FILE_DESC_RE = re.compile(r"file|path|directory|folder")
_FILE_EXT_RE = re.compile(r"\.(?:json|yaml|yml|txt|md|toml|conf|cfg)$")


@dataclass(frozen=True)
class OptionHints:
    """Result of inspecting the trailing text of one option line."""

    description: str
    type: OptionType
    default_value: Scalar | None = None
    choices: tuple[str, ...] | None = None
    deprecated: bool = False


@dataclass(frozen=True)
class _Clue:
    """Text an inference rule may look at."""

    flag: str
    description: str
    raw: str


# Evaluated in order, first match wins.
TYPE_RULES: tuple[tuple[Callable[[_Clue], bool], OptionType], ...] = (
    (
        lambda c: bool(
            _BOOLEAN_LEAD_RE.match(c.description.lower())
            or _BOOLEAN_VERB_RE.match(c.description.lower())
            or c.description.strip().endswith("?")
        ),
        OptionType.BOOLEAN,
    ),
    (
        lambda c: bool(re.search(r"\d", c.flag) or _NUMBER_FLAG_RE.search(c.flag.lower())),
        OptionType.NUMBER,
    ),
    (
        lambda c: bool(
            _FILE_FLAG_RE.search(c.flag.lower())
            or _FILE_DESC_RE.search(c.description.lower())
            or _FILE_EXT_RE.search(c.raw.strip())
        ),
        OptionType.FILE,
    ),
)


def infer_type(flag: str, description: str, raw: str | None = None) -> OptionType:
    """Guess an option's type from its flag and description when no hint is given."""
    clue = _Clue(flag=flag, description=description, raw=description if raw is None else raw)
    for predicate, option_type in TYPE_RULES:
        if predicate(clue):
            return option_type
    return OptionType.STRING


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def parse_default(value: str, option_type: OptionType) -> Scalar:
    """Coerce a ``[default: X]`` literal to the option's resolved type."""
    text = _unquote(value.strip())
    if option_type is OptionType.BOOLEAN:
        return text == "true"
    if option_type is OptionType.NUMBER:
        try:
            number = float(text)
        except ValueError:
            return text
        if number != number or number in (float("inf"), float("-inf")):
            return text
        return int(number) if number.is_integer() and "." not in text else number
    return text


def parse_choices(value: str) -> tuple[str, ...]:
    choices = (c.strip().replace('"', "").replace("'", "") for c in value.split(","))
    return tuple(c for c in choices if c)


def clean_description(text: str) -> str:
    stripped = TYPE_TOKEN_RE.sub("", text)
    stripped = CHOICES_RE.sub("", stripped)
    stripped = DEFAULT_RE.sub("", stripped)
    stripped = DEPRECATED_RE.sub("", stripped)
    return " ".join(stripped.split())


def analyze(flag: str, text: str, type_hint: OptionType | None = None) -> OptionHints:
    """Extract type, default, choices and deprecation from an option's trailing text.

    Each bracketed token is looked up independently in the original *text*, so
    their relative order does not matter. *type_hint* comes from the parser
    strategy (e.g. Go's ``-n int``) and is used when no bracketed type exists.
    """
    description = clean_description(text)

    type_match = TYPE_TOKEN_RE.search(text)
    if type_match:
        option_type = _TYPE_TOKENS[type_match.group(1)]
    elif type_hint is not None:
        option_type = type_hint
    else:
        option_type = infer_type(flag, description, text)

    choices = None
    choices_match = CHOICES_RE.search(text)
    if choices_match:
        choices = parse_choices(choices_match.group(1)) or None

    default_value = None
    default_match = DEFAULT_RE.search(text)
    if default_match:
        default_value = parse_default(default_match.group(1), option_type)

    return OptionHints(
        description=description,
        type=option_type,
        default_value=default_value,
        choices=choices,
        deprecated=bool(DEPRECATED_RE.search(text)),
    )
