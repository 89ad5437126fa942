"""Presenters – format use-case responses for terminal or JSON output."""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.table import Table

from cli_bridge.adapters.tool_schema import to_tool_definition
from cli_bridge.application.tool_registry import RegisteredTool
from cli_bridge.application.use_cases.doctor_checks import DoctorResponse
from cli_bridge.application.use_cases.invoke_tool import InvokeResponse
from cli_bridge.domain.capability import CliToolMetadata
from cli_bridge.domain.tool_config import ToolsConfig

console = Console()


def _json_out(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str, ensure_ascii=False))


# ---------------------------------------------------------------------------
# Doctor
# ---------------------------------------------------------------------------
def present_doctor(resp: DoctorResponse, *, as_json: bool = False) -> None:
    if as_json:
        _json_out({"checks": [{"name": c.name, "passed": c.passed, "message": c.message} for c in resp.checks]})
        return

    table = Table(title="Doctor Checks", show_lines=True)
    table.add_column("Check", style="bold")
    table.add_column("Status")
    table.add_column("Details")
    for c in resp.checks:
        status = "[green]PASS[/green]" if c.passed else "[red]FAIL[/red]"
        table.add_row(c.name, status, c.message)
    console.print(table)
    if resp.all_passed:
        console.print("\n[bold green]All checks passed![/bold green]")
    else:
        console.print("\n[bold red]Some checks failed. See above.[/bold red]")


# ---------------------------------------------------------------------------
# List
# ---------------------------------------------------------------------------
def present_list(config: ToolsConfig | None, path: str | None, *, as_json: bool = False) -> None:
    tools = config.tools if config else []
    if as_json:
        _json_out({"config_path": path, "tools": [dict(t.to_dict(), tool_name=t.tool_name) for t in tools]})
        return

    if not tools:
        console.print("[dim]No tools configured. Create ai-tools.json or set CLI_BRIDGE_CONFIG.[/dim]")
        return

    console.print(f"\n[bold]Configured tools[/bold] ({path})\n")
    table = Table(show_lines=True)
    table.add_column("Tool", style="cyan")
    table.add_column("Command")
    table.add_column("Enabled")
    table.add_column("Defaults", style="dim")
    for t in tools:
        defaults = ", ".join(f"{k}={v}" for k, v in t.default_args.items())
        table.add_row(t.tool_name, t.command, "yes" if t.enabled else "no", defaults)
    console.print(table)


# ---------------------------------------------------------------------------
# Inspect
# ---------------------------------------------------------------------------
def present_metadata(metadata: CliToolMetadata, *, as_json: bool = False) -> None:
    if as_json:
        _json_out(metadata.to_dict())
        return

    console.print(f"\n[bold]{metadata.tool_name}[/bold]  ({metadata.command}, {metadata.tool_type.value})")
    if metadata.description:
        console.print(f"  {metadata.description}")

    if metadata.argument is not None:
        arg = metadata.argument
        req = "required" if arg.required else "optional"
        console.print(f"\n[bold]Positional:[/bold] {arg.name} ({arg.type.value}, {req}) – {arg.description}")

    if metadata.options:
        table = Table(title="Options", show_lines=True)
        table.add_column("Name", style="cyan")
        table.add_column("Flag")
        table.add_column("Type")
        table.add_column("Default", style="dim")
        table.add_column("Choices", style="dim")
        table.add_column("Description")
        for o in metadata.options:
            desc = o.description if not o.deprecated else f"[yellow](deprecated)[/yellow] {o.description}"
            table.add_row(
                o.name,
                o.flag,
                o.type.value,
                "" if o.default_value is None else str(o.default_value),
                ", ".join(o.choices or ()),
                desc,
            )
        console.print(table)
    else:
        console.print("\n[dim]No options recognized.[/dim]")

    if metadata.subcommands:
        console.print("\n[bold]Subcommands:[/bold]")
        for sc in metadata.subcommands:
            console.print(f"  [cyan]{sc.name}[/cyan]  {sc.description}")


def present_schema(metadata: CliToolMetadata) -> None:
    _json_out(to_tool_definition(metadata))


# ---------------------------------------------------------------------------
# Build / Ask
# ---------------------------------------------------------------------------
def present_build(tool: RegisteredTool, argv: list[str], *, as_json: bool = False) -> None:
    if as_json:
        _json_out({"tool_name": tool.name, "command": tool.metadata.command, "argv": argv})
        return
    # One token per line keeps multi-word prompts unambiguous.
    print(tool.metadata.command)
    for token in argv:
        print(f"  {token}")


def present_invoke(resp: InvokeResponse, *, as_json: bool = False) -> None:
    if as_json:
        _json_out({
            "tool_name": resp.tool_name,
            "command": resp.command,
            "argv": resp.argv,
            "structured": resp.structured,
            "output": resp.output,
        })
        return
    print(resp.output)
