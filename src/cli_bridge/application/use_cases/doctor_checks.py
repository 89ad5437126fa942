"""Use-case: DoctorChecks – validate configuration and tool availability."""

from __future__ import annotations

from dataclasses import dataclass, field

from cli_bridge.application.ports import CommandRunner, Logger
from cli_bridge.domain.tool_config import ToolsConfig


@dataclass
class CheckResult:
    name: str
    passed: bool
    message: str


@dataclass
class DoctorResponse:
    checks: list[CheckResult] = field(default_factory=list)

    @property
    def all_passed(self) -> bool:
        return all(c.passed for c in self.checks)


class DoctorChecks:
    """Run diagnostic checks on the configured tools."""

    def __init__(
        self,
        tools_config: ToolsConfig | None,
        config_path: str | None,
        runner: CommandRunner,
        logger: Logger,
        config_error: str | None = None,
    ) -> None:
        self._tools = tools_config
        self._path = config_path
        self._runner = runner
        self._log = logger
        self._config_error = config_error

    def execute(self) -> DoctorResponse:
        checks: list[CheckResult] = [self._check_config()]
        if self._tools is not None:
            for tool in self._tools.tools:
                checks.append(self._check_tool(tool.command, tool.tool_name, tool.enabled))
        return DoctorResponse(checks=checks)

    def _check_config(self) -> CheckResult:
        if self._config_error:
            return CheckResult(name="config", passed=False, message=self._config_error)
        if self._tools is None:
            return CheckResult(
                name="config",
                passed=False,
                message="No ai-tools.json found (set CLI_BRIDGE_CONFIG or create one in the working directory)",
            )
        enabled = len(self._tools.enabled_tools())
        return CheckResult(
            name="config",
            passed=True,
            message=f"{self._path}: {len(self._tools.tools)} tools, {enabled} enabled",
        )

    def _check_tool(self, command: str, tool_name: str, enabled: bool) -> CheckResult:
        if not enabled:
            return CheckResult(name=tool_name, passed=True, message=f"{command}: disabled")
        try:
            available = self._runner.is_available(command)
        except Exception as e:
            self._log.warn(f"Availability check failed for {command}: {e}")
            return CheckResult(name=tool_name, passed=False, message=f"{command}: check failed: {e}")
        if available:
            return CheckResult(name=tool_name, passed=True, message=f"{command}: found in PATH")
        return CheckResult(name=tool_name, passed=False, message=f"{command}: not found in PATH")
