"""Tests for the subprocess-backed runner and help fetcher, using the running interpreter."""

from __future__ import annotations

import sys

import pytest

from cli_bridge.domain.errors import CommandExecutionError, CommandTimeoutError, HelpFetchError
from cli_bridge.infrastructure.subprocess_runner import SubprocessHelpFetcher, SubprocessRunner

PY = sys.executable


class TestSubprocessRunner:
    def test_stdout_trimmed(self):
        assert SubprocessRunner().run(PY, ["-c", "print('  hello  ')"], timeout=30) == "hello"

    def test_argv_passed_verbatim(self):
        out = SubprocessRunner().run(PY, ["-c", "import sys; print(sys.argv[1])", "a; b | $(c)"], timeout=30)
        assert out == "a; b | $(c)"

    def test_stdin_closed(self):
        out = SubprocessRunner().run(PY, ["-c", "import sys; print(repr(sys.stdin.read()))"], timeout=30)
        assert out == "''"

    def test_env_overlay(self):
        out = SubprocessRunner().run(
            PY, ["-c", "import os; print(os.environ['CLI_BRIDGE_TEST'])"], timeout=30, env={"CLI_BRIDGE_TEST": "yes"}
        )
        assert out == "yes"

    def test_non_zero_exit(self, logger):
        with pytest.raises(CommandExecutionError) as exc:
            SubprocessRunner(logger=logger).run(
                PY, ["-c", "import sys; sys.stderr.write('boom'); sys.exit(3)"], timeout=30
            )
        assert exc.value.exit_code == 3
        assert exc.value.stderr == "boom"
        assert logger.messages("error")

    def test_timeout(self):
        with pytest.raises(CommandTimeoutError):
            SubprocessRunner().run(PY, ["-c", "import time; time.sleep(5)"], timeout=0.2)

    def test_not_found(self):
        with pytest.raises(CommandExecutionError) as exc:
            SubprocessRunner().run("definitely-not-installed-xyz", [], timeout=5)
        assert exc.value.exit_code == 127

    def test_is_available(self):
        runner = SubprocessRunner()
        assert runner.is_available(PY)
        assert not runner.is_available("definitely-not-installed-xyz")


class TestSubprocessHelpFetcher:
    def test_fetches_help(self):
        text = SubprocessHelpFetcher(timeout=30).fetch(PY)
        assert "-c" in text

    def test_missing_command(self):
        with pytest.raises(HelpFetchError) as exc:
            SubprocessHelpFetcher(timeout=5).fetch("definitely-not-installed-xyz")
        assert "--help" in str(exc.value)
        assert "-h" in str(exc.value)
