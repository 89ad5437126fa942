"""Domain errors raised by the core and its collaborators."""

from __future__ import annotations


class MissingRequiredArgument(ValueError):
    """The tool declares a required positional argument and no value was supplied."""

    def __init__(self, argument_name: str) -> None:
        super().__init__(f"Missing required argument: {argument_name}")
        self.argument_name = argument_name


class SecurityError(ValueError):
    """An argument failed validation before reaching the process."""

    def __init__(self, message: str, violation_type: str = "generic") -> None:
        super().__init__(message)
        self.violation_type = violation_type


class ConfigError(ValueError):
    """Tool configuration file is missing fields or has the wrong shape."""


class HelpFetchError(RuntimeError):
    """Neither the primary nor the fallback help flag produced output."""


class CommandExecutionError(RuntimeError):
    """The external command exited unsuccessfully."""

    def __init__(self, message: str, *, exit_code: int | None = None, stderr: str = "") -> None:
        super().__init__(message)
        self.exit_code = exit_code
        self.stderr = stderr


class CommandTimeoutError(CommandExecutionError):
    """The external command did not finish within its timeout."""
