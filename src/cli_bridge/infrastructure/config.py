"""Configuration loader – reads .env, environment variables and the tool config file."""

from __future__ import annotations

import json
import os
import re
from pathlib import Path

from dotenv import load_dotenv

from cli_bridge.domain.errors import ConfigError
from cli_bridge.domain.tool_config import ToolsConfig

CONFIG_FILE_NAMES = ("ai-tools.json", ".qwencoderc.json", "qwencode.config.json")
DEFAULT_CONFIG_FILENAME = CONFIG_FILE_NAMES[0]

# Patterns that should NEVER be printed/logged
_SECRET_PATTERNS = [
    re.compile(r"(sk-[A-Za-z0-9_-]{20,})"),
    re.compile(r"(AIzaSy[A-Za-z0-9_-]{20,})"),
    re.compile(r"(OPENAI_API_KEY\s*=\s*)\S+"),
    re.compile(r"(ANTHROPIC_API_KEY\s*=\s*)\S+"),
    re.compile(r"(GEMINI_API_KEY\s*=\s*)\S+"),
    re.compile(r"(DASHSCOPE_API_KEY\s*=\s*)\S+"),
    re.compile(r"(key[\"']?\s*[:=]\s*[\"']?)[A-Za-z0-9_-]{16,}"),
]


def redact_secrets(text: str) -> str:
    """Mask anything that looks like a secret in *text*."""
    result = text
    for pat in _SECRET_PATTERNS:
        result = pat.sub(lambda m: m.group(0)[:6] + "***REDACTED***", result)
    return result


def load_config(env_path: str | None = None) -> dict[str, str | None]:
    """Load configuration from .env file and environment variables.

    Returns a dict of the config keys this toolkit cares about.
    """
    if env_path:
        load_dotenv(env_path)
    else:
        # Walk up to find .env
        cwd = Path.cwd()
        for d in [cwd, *cwd.parents]:
            candidate = d / ".env"
            if candidate.exists():
                load_dotenv(candidate)
                break

    return {
        # Path to ai-tools.json (default: search the working directory)
        "CLI_BRIDGE_CONFIG": os.environ.get("CLI_BRIDGE_CONFIG"),
        # Seconds a tool invocation may run
        "CLI_BRIDGE_TIMEOUT": os.environ.get("CLI_BRIDGE_TIMEOUT", "600"),
        # Seconds each of --help / -h may run
        "CLI_BRIDGE_HELP_TIMEOUT": os.environ.get("CLI_BRIDGE_HELP_TIMEOUT", "10"),
        "CLI_BRIDGE_VERBOSE": os.environ.get("CLI_BRIDGE_VERBOSE", "false"),
    }


def config_float(config: dict[str, str | None], key: str, default: float) -> float:
    raw = config.get(key)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{key} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ConfigError(f"{key} must be positive, got {raw!r}")
    return value


def config_flag(config: dict[str, str | None], key: str) -> bool:
    return (config.get(key) or "").strip().lower() in ("1", "true", "yes", "on")


def find_tools_config(search_dir: str | None = None) -> str | None:
    """Return the first existing config file name in *search_dir* (default: cwd)."""
    base = Path(search_dir) if search_dir else Path.cwd()
    for name in CONFIG_FILE_NAMES:
        candidate = base / name
        if candidate.is_file():
            return str(candidate)
    return None


def load_tools_config(path: str | None = None, search_dir: str | None = None) -> tuple[ToolsConfig | None, str | None]:
    """Load and validate the tool configuration file.

    Returns ``(config, path)``; both are ``None`` when no file exists. Raises
    ConfigError for unreadable JSON or an invalid shape.
    """
    resolved = path or find_tools_config(search_dir)
    if resolved is None:
        return None, None
    if not os.path.isfile(resolved):
        raise ConfigError(f"Config file not found: {resolved}")
    try:
        with open(resolved, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{resolved}: invalid JSON: {exc}") from exc
    return ToolsConfig.from_dict(data), resolved
