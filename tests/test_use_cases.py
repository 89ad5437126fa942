"""Unit tests for the register, invoke and doctor use cases with fake ports."""

from __future__ import annotations

import json

import pytest

from cli_bridge.application.tool_registry import ToolRegistry
from cli_bridge.application.use_cases.doctor_checks import DoctorChecks
from cli_bridge.application.use_cases.invoke_tool import InvokeRequest, InvokeTool
from cli_bridge.application.use_cases.register_tool import (
    RegisterRequest,
    RegisterTool,
    apply_config_overrides,
)
from cli_bridge.domain.errors import MissingRequiredArgument, SecurityError
from cli_bridge.domain.tool_config import ToolConfig, ToolsConfig

from conftest import CLAUDE_HELP, GEMINI_HELP, OPENCODE_HELP, FakeHelpFetcher, FakeRunner


@pytest.fixture
def fetcher():
    return FakeHelpFetcher({"gemini": GEMINI_HELP, "opencode": OPENCODE_HELP, "claude": CLAUDE_HELP})


def _register(fetcher, logger, config, runner=None, registry=None, help_text=None):
    uc = RegisterTool(fetcher=fetcher, runner=runner or FakeRunner(), logger=logger, registry=registry)
    return uc.execute(RegisterRequest(config=config, help_text=help_text))


# ---------------------------------------------------------------------------
# RegisterTool
# ---------------------------------------------------------------------------
class TestRegisterTool:
    def test_registers_parsed_tool(self, fetcher, logger):
        registry = ToolRegistry()
        tool = _register(fetcher, logger, ToolConfig(command="gemini"), registry=registry)
        assert tool.name == "ask-gemini"
        assert tool.metadata.find_option("model") is not None
        assert tool.help_text == GEMINI_HELP
        assert "ask-gemini" in registry
        assert fetcher.calls == ["gemini"]
        assert any("ask-gemini" in m for m in logger.messages("info"))

    def test_session_option_synthesized(self, fetcher, logger):
        tool = _register(fetcher, logger, ToolConfig(command="claude"))
        assert tool.metadata.find_option("sessionId").flag == "--resume"

    def test_missing_command_returns_none(self, fetcher, logger):
        runner = FakeRunner(available=set())
        assert _register(fetcher, logger, ToolConfig(command="gemini"), runner=runner) is None
        assert fetcher.calls == []
        assert logger.messages("warn")

    def test_help_text_supplied(self, fetcher, logger):
        runner = FakeRunner(available=set())
        tool = _register(fetcher, logger, ToolConfig(command="x"), runner=runner, help_text="Options:\n  --a  A\n")
        assert [o.name for o in tool.metadata.options] == ["a"]
        assert fetcher.calls == []

    def test_config_overrides(self, fetcher, logger):
        config = ToolConfig(
            command="gemini",
            alias="ask-g",
            description="Google's assistant",
            default_args={"model": "gemini-2.5-flash"},
        )
        metadata = _register(fetcher, logger, config).metadata
        assert metadata.tool_name == "ask-g"
        assert metadata.description == "Google's assistant"
        assert metadata.find_option("model").default_value == "gemini-2.5-flash"

    def test_parser_strategy_from_config(self, fetcher, logger):
        from conftest import GO_HELP

        config = ToolConfig(command="mytool", parser_strategy="go")
        tool = _register(fetcher, logger, config, help_text=GO_HELP)
        assert [o.name for o in tool.metadata.options] == ["count", "name", "v"]

    def test_overrides_without_changes_return_same_model(self, fetcher, logger):
        tool = _register(fetcher, logger, ToolConfig(command="gemini"))
        assert apply_config_overrides(tool.metadata, ToolConfig(command="gemini")) is tool.metadata


class TestToolRegistry:
    def test_lookup(self, fetcher, logger):
        registry = ToolRegistry()
        _register(fetcher, logger, ToolConfig(command="gemini"), registry=registry)
        _register(fetcher, logger, ToolConfig(command="claude"), registry=registry)
        assert registry.names() == ["ask-claude", "ask-gemini"]
        assert len(registry) == 2
        assert registry.get("gemini").name == "ask-gemini"
        assert registry.get("nope") is None
        assert registry.remove("ask-gemini") is True
        assert registry.remove("ask-gemini") is False
        assert "ask-gemini" not in registry


# ---------------------------------------------------------------------------
# InvokeTool
# ---------------------------------------------------------------------------
class TestInvokeTool:
    def test_runs_built_vector(self, fetcher, logger):
        tool = _register(fetcher, logger, ToolConfig(command="claude"))
        runner = FakeRunner(output="4")
        resp = InvokeTool(runner=runner, logger=logger).execute(tool, InvokeRequest(args={"prompt": "2+2?", "print": True}))
        assert resp.output == "4"
        assert resp.structured is False
        assert runner.calls == [{"command": "claude", "argv": ["--print", "2+2?"], "timeout": 600.0, "env": None}]

    def test_structured_output_extracted(self, fetcher, logger):
        events = "\n".join(json.dumps({"type": "text", "part": {"text": t}}) for t in ("Hello", "there"))
        tool = _register(fetcher, logger, ToolConfig(command="opencode"))
        runner = FakeRunner(output=events)
        resp = InvokeTool(runner=runner, logger=logger).execute(
            tool, InvokeRequest(args={"prompt": "hi", "format": "json"})
        )
        assert resp.argv == ["run", "--format", "json", "hi"]
        assert resp.structured is True
        assert resp.output == "Hello\nthere"

    def test_defaults_and_system_prompt(self, fetcher, logger):
        config = ToolConfig(command="gemini", default_args={"model": "flash"}, system_prompt="Be brief.")
        tool = _register(fetcher, logger, config)
        argv, effective = InvokeTool(runner=FakeRunner(), logger=logger).prepare(tool, {"prompt": "hi"})
        assert argv == ["--prompt", "Be brief.\n\nhi", "--model", "flash"]
        assert effective["model"] == "flash"

    def test_timeout_and_env_from_config(self, fetcher, logger):
        config = ToolConfig(command="claude", timeout=5.0, env={"NO_COLOR": "1"})
        tool = _register(fetcher, logger, config)
        runner = FakeRunner()
        InvokeTool(runner=runner, logger=logger).execute(tool, InvokeRequest(args={"prompt": "x"}))
        assert runner.calls[0]["timeout"] == 5.0
        assert runner.calls[0]["env"] == {"NO_COLOR": "1"}

    def test_request_timeout_wins(self, fetcher, logger):
        tool = _register(fetcher, logger, ToolConfig(command="claude", timeout=5.0))
        runner = FakeRunner()
        InvokeTool(runner=runner, logger=logger).execute(tool, InvokeRequest(args={"prompt": "x"}, timeout=1.5))
        assert runner.calls[0]["timeout"] == 1.5

    def test_invalid_session_id_rejected_before_run(self, fetcher, logger):
        tool = _register(fetcher, logger, ToolConfig(command="claude"))
        runner = FakeRunner()
        with pytest.raises(SecurityError):
            InvokeTool(runner=runner, logger=logger).execute(
                tool, InvokeRequest(args={"prompt": "x", "sessionId": "../etc"})
            )
        assert runner.calls == []

    def test_unsafe_command_rejected(self, fetcher, logger):
        tool = _register(fetcher, logger, ToolConfig(command="evil;rm"), help_text="Options:\n  --a  A\n")
        runner = FakeRunner()
        with pytest.raises(SecurityError):
            InvokeTool(runner=runner, logger=logger).execute(tool, InvokeRequest(args={"prompt": "x"}))
        assert runner.calls == []

    def test_missing_required_argument(self, fetcher, logger):
        from dataclasses import replace

        tool = _register(fetcher, logger, ToolConfig(command="claude"))
        required = replace(tool.metadata.argument, required=True)
        tool = replace(tool, metadata=tool.metadata.with_overrides(argument=required))
        with pytest.raises(MissingRequiredArgument):
            InvokeTool(runner=FakeRunner(), logger=logger).execute(tool, InvokeRequest(args={}))


# ---------------------------------------------------------------------------
# DoctorChecks
# ---------------------------------------------------------------------------
class TestDoctorChecks:
    def _config(self):
        return ToolsConfig.from_dict({"tools": [
            {"command": "gemini"},
            {"command": "claude"},
            {"command": "mytool", "enabled": False},
        ]})

    def test_reports_each_tool(self, logger):
        runner = FakeRunner(available={"gemini"})
        resp = DoctorChecks(self._config(), "ai-tools.json", runner, logger).execute()
        by_name = {c.name: c for c in resp.checks}
        assert by_name["config"].passed
        assert by_name["ask-gemini"].passed
        assert not by_name["ask-claude"].passed
        assert by_name["ask-mytool"].passed
        assert not resp.all_passed

    def test_missing_config(self, logger):
        resp = DoctorChecks(None, None, FakeRunner(), logger).execute()
        assert len(resp.checks) == 1
        assert not resp.all_passed

    def test_config_error(self, logger):
        resp = DoctorChecks(None, "ai-tools.json", FakeRunner(), logger, config_error="bad json").execute()
        assert resp.checks[0].message == "bad json"
        assert not resp.all_passed
