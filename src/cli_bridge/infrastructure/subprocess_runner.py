"""Infrastructure: subprocess-backed help fetcher and command runner."""

from __future__ import annotations

import os
import shutil
import subprocess

from cli_bridge.application.ports import CommandRunner, HelpFetcher, Logger
from cli_bridge.domain.errors import CommandExecutionError, CommandTimeoutError, HelpFetchError

HELP_FLAGS = ("--help", "-h")


def _looks_like_help(text: str) -> bool:
    # Short error messages such as "unknown option --help" are not help text.
    return len(text) > 50 and "-" in text


class SubprocessRunner(CommandRunner):
    """Run commands directly (no shell) with stdin closed."""

    def __init__(self, logger: Logger | None = None) -> None:
        self._log = logger

    def run(
        self,
        command: str,
        argv: list[str],
        *,
        timeout: float,
        env: dict[str, str] | None = None,
    ) -> str:
        full_env = {**os.environ, **env} if env else None
        try:
            result = subprocess.run(
                [command, *argv],
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=timeout,
                env=full_env,
            )
        except subprocess.TimeoutExpired:
            if self._log:
                self._log.error(f"Command timeout after {timeout}s, killed: {command}")
            raise CommandTimeoutError(f"Command execution timeout ({timeout}s): {command}")
        except FileNotFoundError:
            raise CommandExecutionError(f"Command not found: {command}", exit_code=127)
        except PermissionError:
            raise CommandExecutionError(f"Command not executable: {command}", exit_code=126)

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            message = stderr or f"Command exited with code {result.returncode}"
            if self._log:
                self._log.error(f"Command failed with code {result.returncode}: {message}")
            raise CommandExecutionError(message, exit_code=result.returncode, stderr=stderr)

        return (result.stdout or "").strip()

    def is_available(self, command: str) -> bool:
        return shutil.which(command) is not None


class SubprocessHelpFetcher(HelpFetcher):
    """Fetch help text with ``--help``, falling back to ``-h``.

    Many CLIs print help to stderr or exit non-zero after printing it, so any
    non-empty output counts.
    """

    def __init__(self, timeout: float = 10.0, logger: Logger | None = None) -> None:
        self._timeout = timeout
        self._log = logger

    def fetch(self, command: str) -> str:
        errors: list[str] = []
        for flag in HELP_FLAGS:
            try:
                result = subprocess.run(
                    [command, flag],
                    stdin=subprocess.DEVNULL,
                    capture_output=True,
                    text=True,
                    encoding="utf-8",
                    errors="replace",
                    timeout=self._timeout,
                )
            except subprocess.TimeoutExpired:
                errors.append(f"{flag}: timed out after {self._timeout}s")
                continue
            except (FileNotFoundError, PermissionError) as exc:
                errors.append(f"{flag}: {exc}")
                continue

            output = result.stdout if result.stdout.strip() else result.stderr
            if output.strip() and (result.returncode == 0 or _looks_like_help(output)):
                if self._log:
                    self._log.debug(f"Fetched help for {command} via {flag}", chars=len(output))
                return output
            errors.append(f"{flag}: no usable output (exit {result.returncode})")

        raise HelpFetchError(f"Failed to fetch help output for '{command}': {'; '.join(errors)}")
