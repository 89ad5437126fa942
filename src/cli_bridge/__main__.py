"""Entry point for the CLI Bridge.

Usage:
    python -m cli_bridge <command> [args...]
    cli-bridge <command> [args...]          (after pip install -e .)
"""

from cli_bridge.adapters.cli import run_cli


def main() -> None:
    run_cli()


if __name__ == "__main__":
    main()
