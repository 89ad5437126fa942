"""CLI adapter – parses arguments, dispatches to use cases, formats output."""

from __future__ import annotations

import argparse
import json
import sys
import textwrap
from dataclasses import replace
from typing import Any

from cli_bridge.adapters.command_spec import COMMAND_SPEC
from cli_bridge.adapters import presenters


# ---------------------------------------------------------------------------
# Help text
# ---------------------------------------------------------------------------
HELP_TEXT = textwrap.dedent("""\
    CLI Bridge – expose command-line AI assistants as typed tools.
    Reads a tool's --help output, infers its options, and builds safe command lines.

    Usage:
      cli-bridge <command> [options]

    Commands:
      help [cmd]      Show help (or help for a specific command)
      spec            Output machine-readable command spec (JSON)
      doctor          Validate ai-tools.json and tool availability
      list            List configured tools
      inspect         Show the capability model parsed from a tool's help
      schema          Print the tool definition with its JSON input schema
      build           Preview the argument vector for a call (dry run)
      ask             Run a tool with a prompt and print the response

    Examples:
      cli-bridge doctor
      cli-bridge inspect gemini
      cli-bridge inspect mytool --help-file mytool-help.txt --strategy go
      cli-bridge schema qwen
      cli-bridge build gemini "hello" --set model=gemini-2.5-flash --set debug=true
      cli-bridge ask opencode "explain this repo" --set format=json
      cli-bridge ask gemini "and the second question?" --session latest

    Configuration (.env or environment):
      CLI_BRIDGE_CONFIG        path to ai-tools.json (default: search working directory)
      CLI_BRIDGE_TIMEOUT       seconds a tool may run (default: 600)
      CLI_BRIDGE_HELP_TIMEOUT  seconds for each of --help / -h (default: 10)
      CLI_BRIDGE_VERBOSE       true to print debug logs

    For detailed help:  cli-bridge help <command>
""")

COMMAND_HELP: dict[str, str] = {
    "help": "Usage: cli-bridge help [<command>]\n\nShow general help or help for a specific command.",
    "spec": "Usage: cli-bridge spec\n\nOutputs the full machine-readable command spec as JSON.\nUseful for agent onboarding.",
    "doctor": (
        "Usage: cli-bridge doctor [--json]\n\n"
        "Runs diagnostic checks:\n"
        "  - ai-tools.json is present and valid\n"
        "  - Every enabled tool is found in PATH"
    ),
    "list": (
        "Usage: cli-bridge list [--json]\n\n"
        "List tools configured in ai-tools.json.\n"
        "  --json   Output as JSON"
    ),
    "inspect": (
        "Usage: cli-bridge inspect <command> [--help-file FILE] [--strategy gnu|go] [--json]\n\n"
        "Run '<command> --help' (or read FILE) and show the parsed capability model.\n"
        "  --help-file  Parse this file instead of running the command\n"
        "  --strategy   Option line style: gnu (default) or go\n"
        "  --json       Output as JSON"
    ),
    "schema": (
        "Usage: cli-bridge schema <command> [--help-file FILE] [--strategy gnu|go]\n\n"
        "Print the tool definition (name, description, inputSchema) as JSON."
    ),
    "build": (
        'Usage: cli-bridge build <command> ["<prompt>"] [--set key=value]... [--session ID] [--json]\n\n'
        "Show the argument vector that 'ask' would execute.\n"
        "  --set        Named argument; repeat for several (values are typed from the help text)\n"
        "  --session    Session id to resume, or 'latest'\n"
        "  --help-file  Parse this file instead of running the command\n"
        "  --json       Output as JSON"
    ),
    "ask": (
        'Usage: cli-bridge ask <command> "<prompt>" [--set key=value]... [--session ID] [--timeout S] [--json]\n\n'
        "Run the tool and print its response.\n"
        "  --set       Named argument; repeat for several\n"
        "  --session   Session id to resume, or 'latest'\n"
        "  --timeout   Seconds before the tool is killed (default: CLI_BRIDGE_TIMEOUT)\n"
        "  --json      Output as JSON"
    ),
}


# ---------------------------------------------------------------------------
# Build container (lazy import to avoid circular deps)
# ---------------------------------------------------------------------------
def _build_container() -> dict:
    """Build the dependency container from config."""
    from cli_bridge.application.tool_registry import ToolRegistry
    from cli_bridge.domain.errors import ConfigError
    from cli_bridge.infrastructure.config import config_flag, config_float, load_config, load_tools_config
    from cli_bridge.infrastructure.logger import ConsoleLogger
    from cli_bridge.infrastructure.subprocess_runner import SubprocessHelpFetcher, SubprocessRunner

    config = load_config()
    logger = ConsoleLogger(verbose=config_flag(config, "CLI_BRIDGE_VERBOSE"))
    runner = SubprocessRunner(logger=logger)
    fetcher = SubprocessHelpFetcher(timeout=config_float(config, "CLI_BRIDGE_HELP_TIMEOUT", 10.0), logger=logger)

    tools_config = None
    config_path = None
    config_error = None
    try:
        tools_config, config_path = load_tools_config(config.get("CLI_BRIDGE_CONFIG"))
    except ConfigError as exc:
        config_error = str(exc)
        config_path = config.get("CLI_BRIDGE_CONFIG")

    return {
        "config": config,
        "logger": logger,
        "runner": runner,
        "fetcher": fetcher,
        "registry": ToolRegistry(),
        "tools_config": tools_config,
        "config_path": config_path,
        "config_error": config_error,
        "timeout": config_float(config, "CLI_BRIDGE_TIMEOUT", 600.0),
    }


def _require_tools_config(c: dict) -> None:
    if c["config_error"]:
        from cli_bridge.domain.errors import ConfigError

        raise ConfigError(c["config_error"])


def _register(c: dict, args: argparse.Namespace):
    """Parse the requested tool, honoring ai-tools.json overrides when present."""
    from cli_bridge.application.use_cases.register_tool import RegisterRequest, RegisterTool
    from cli_bridge.domain.tool_config import ToolConfig

    _require_tools_config(c)
    tool_config = c["tools_config"].find(args.command) if c["tools_config"] else None
    if tool_config is None:
        tool_config = ToolConfig(command=args.command)
    strategy = getattr(args, "strategy", None)
    if strategy:
        tool_config = replace(tool_config, parser_strategy=strategy)

    help_text = None
    help_file = getattr(args, "help_file", None)
    if help_file:
        with open(help_file, "r", encoding="utf-8", errors="replace") as f:
            help_text = f.read()

    uc = RegisterTool(fetcher=c["fetcher"], runner=c["runner"], logger=c["logger"], registry=c["registry"])
    tool = uc.execute(RegisterRequest(config=tool_config, help_text=help_text))
    if tool is None:
        print(f"ERROR: Command not found in PATH: {tool_config.command}", file=sys.stderr)
        sys.exit(1)
    return tool


# ---------------------------------------------------------------------------
# --set key=value parsing
# ---------------------------------------------------------------------------
def _coerce(raw: str, option_type: str | None) -> Any:
    if option_type == "boolean":
        return raw.strip().lower() in ("true", "1", "yes", "on")
    if option_type == "number":
        try:
            number = float(raw)
        except ValueError:
            raise ValueError(f"Expected a number, got {raw!r}") from None
        return int(number) if number.is_integer() and "." not in raw else number
    return raw


def _parse_assignments(pairs: list[str] | None, metadata) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for pair in pairs or []:
        key, sep, raw = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValueError(f"--set expects key=value, got {pair!r}")
        option = metadata.find_option(key)
        values[key] = _coerce(raw, option.type.value if option else None)
    return values


def _request_args(args: argparse.Namespace, metadata) -> dict[str, Any]:
    from cli_bridge.application.session import SESSION_ID_KEY

    values = _parse_assignments(getattr(args, "set", None), metadata)
    prompt = getattr(args, "prompt", None)
    if prompt is not None:
        values["prompt"] = prompt
    if getattr(args, "session", None):
        values[SESSION_ID_KEY] = args.session
    return values


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------
def cmd_help(args: argparse.Namespace) -> None:
    if args.command:
        text = COMMAND_HELP.get(args.command)
        if text:
            print(text)
        else:
            print(f"Unknown command: {args.command}")
            print(HELP_TEXT)
    else:
        print(HELP_TEXT)


def cmd_spec(_args: argparse.Namespace) -> None:
    print(json.dumps(COMMAND_SPEC, indent=2))


def cmd_doctor(args: argparse.Namespace) -> None:
    c = _build_container()
    from cli_bridge.application.use_cases.doctor_checks import DoctorChecks

    uc = DoctorChecks(
        tools_config=c["tools_config"],
        config_path=c["config_path"],
        runner=c["runner"],
        logger=c["logger"],
        config_error=c["config_error"],
    )
    resp = uc.execute()
    presenters.present_doctor(resp, as_json=getattr(args, "json", False))


def cmd_list(args: argparse.Namespace) -> None:
    c = _build_container()
    _require_tools_config(c)
    presenters.present_list(c["tools_config"], c["config_path"], as_json=args.json)


def cmd_inspect(args: argparse.Namespace) -> None:
    c = _build_container()
    tool = _register(c, args)
    presenters.present_metadata(tool.metadata, as_json=args.json)


def cmd_schema(args: argparse.Namespace) -> None:
    c = _build_container()
    tool = _register(c, args)
    presenters.present_schema(tool.metadata)


def cmd_build(args: argparse.Namespace) -> None:
    c = _build_container()
    from cli_bridge.application.use_cases.invoke_tool import InvokeTool

    tool = _register(c, args)
    uc = InvokeTool(runner=c["runner"], logger=c["logger"], default_timeout=c["timeout"])
    argv, _ = uc.prepare(tool, _request_args(args, tool.metadata))
    presenters.present_build(tool, argv, as_json=args.json)


def cmd_ask(args: argparse.Namespace) -> None:
    c = _build_container()
    from cli_bridge.application.use_cases.invoke_tool import InvokeRequest, InvokeTool

    tool = _register(c, args)
    uc = InvokeTool(runner=c["runner"], logger=c["logger"], default_timeout=c["timeout"])
    resp = uc.execute(tool, InvokeRequest(args=_request_args(args, tool.metadata), timeout=args.timeout))
    presenters.present_invoke(resp, as_json=args.json)


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------
def _add_tool_source_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("command", type=str)
    p.add_argument("--help-file", dest="help_file", type=str, default=None)
    p.add_argument("--strategy", type=str, default=None, choices=["gnu", "go"])


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cli-bridge",
        description="CLI Bridge",
        add_help=False,
    )
    sub = parser.add_subparsers(dest="subcommand")

    # help
    p_help = sub.add_parser("help", add_help=False)
    p_help.add_argument("command", nargs="?", default=None)
    p_help.set_defaults(func=cmd_help)

    # spec
    p_spec = sub.add_parser("spec", add_help=False)
    p_spec.set_defaults(func=cmd_spec)

    # doctor
    p_doctor = sub.add_parser("doctor", add_help=False)
    p_doctor.add_argument("--json", action="store_true", default=False)
    p_doctor.set_defaults(func=cmd_doctor)

    # list
    p_list = sub.add_parser("list", add_help=False)
    p_list.add_argument("--json", action="store_true", default=False)
    p_list.set_defaults(func=cmd_list)

    # inspect
    p_inspect = sub.add_parser("inspect", add_help=False)
    _add_tool_source_args(p_inspect)
    p_inspect.add_argument("--json", action="store_true", default=False)
    p_inspect.set_defaults(func=cmd_inspect)

    # schema
    p_schema = sub.add_parser("schema", add_help=False)
    _add_tool_source_args(p_schema)
    p_schema.set_defaults(func=cmd_schema)

    # build
    p_build = sub.add_parser("build", add_help=False)
    _add_tool_source_args(p_build)
    p_build.add_argument("prompt", nargs="?", default=None)
    p_build.add_argument("--set", action="append", default=None, metavar="KEY=VALUE")
    p_build.add_argument("--session", type=str, default=None)
    p_build.add_argument("--json", action="store_true", default=False)
    p_build.set_defaults(func=cmd_build)

    # ask
    p_ask = sub.add_parser("ask", add_help=False)
    _add_tool_source_args(p_ask)
    p_ask.add_argument("prompt", type=str)
    p_ask.add_argument("--set", action="append", default=None, metavar="KEY=VALUE")
    p_ask.add_argument("--session", type=str, default=None)
    p_ask.add_argument("--timeout", type=float, default=None)
    p_ask.add_argument("--json", action="store_true", default=False)
    p_ask.set_defaults(func=cmd_ask)

    return parser


def run_cli(argv: list[str] | None = None) -> None:
    """Parse args and dispatch to the appropriate command handler."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.subcommand:
        print(HELP_TEXT)
        return

    if hasattr(args, "func"):
        try:
            args.func(args)
        except Exception as exc:
            from cli_bridge.infrastructure.config import redact_secrets
            print(f"ERROR: {redact_secrets(str(exc))}", file=sys.stderr)
            sys.exit(1)
    else:
        print(HELP_TEXT)
