"""Use-case: RegisterTool – discover a CLI tool's capabilities from its help text."""

from __future__ import annotations

from dataclasses import dataclass, replace

from cli_bridge.application.help_parser import parse, strategy_for
from cli_bridge.application.ports import CommandRunner, HelpFetcher, Logger
from cli_bridge.application.session import with_session_option
from cli_bridge.application.tool_registry import RegisteredTool, ToolRegistry
from cli_bridge.domain.capability import CliToolMetadata
from cli_bridge.domain.tool_config import ToolConfig


@dataclass
class RegisterRequest:
    config: ToolConfig
    # Parse this text instead of running the command (offline inspection).
    help_text: str | None = None


def apply_config_overrides(metadata: CliToolMetadata, config: ToolConfig) -> CliToolMetadata:
    """Overlay alias, description and default arguments onto a parsed model."""
    changes: dict = {}
    if config.alias:
        changes["tool_name"] = config.alias
    if config.description:
        changes["description"] = config.description
    if config.default_args:
        changes["options"] = tuple(
            replace(opt, default_value=config.default_args[opt.name])
            if opt.name in config.default_args
            else opt
            for opt in metadata.options
        )
    if not changes:
        return metadata
    return metadata.with_overrides(**changes)


class RegisterTool:
    """Fetch help, parse it, apply the configuration overlay and add session support."""

    def __init__(
        self,
        fetcher: HelpFetcher,
        runner: CommandRunner,
        logger: Logger,
        registry: ToolRegistry | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._runner = runner
        self._log = logger
        self._registry = registry

    def execute(self, request: RegisterRequest) -> RegisteredTool | None:
        config = request.config
        help_text = request.help_text

        if help_text is None:
            if not self._runner.is_available(config.command):
                self._log.warn(f"Command not found in PATH: {config.command}")
                return None
            help_text = self._fetcher.fetch(config.command)

        metadata = parse(config.command, help_text, strategy_for(config.parser_strategy))
        if not metadata.options and metadata.argument is None:
            self._log.debug(f"No options or positionals recognized for {config.command}")

        metadata = with_session_option(apply_config_overrides(metadata, config))
        tool = RegisteredTool(metadata=metadata, config=config, help_text=help_text)

        self._log.info(
            f"Registered {metadata.tool_name}",
            command=config.command,
            options=len(metadata.options),
            subcommands=len(metadata.subcommands or ()),
        )
        if self._registry is not None:
            self._registry.add(tool)
        return tool
