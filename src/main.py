"""Entry point for the connectivity harness."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from src.checks import CatalogError, EndpointCheck, default_checks, load_checks, run
from src.checks.summary import render_checks, render_failures, render_json, render_text
from src.config import ConfigError, Settings, load_settings

console = Console()
err_console = Console(stderr=True)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )


def build_checks(settings: Settings) -> list[EndpointCheck]:
    """Checks from the configured YAML file, or the built-in set."""
    if settings.checks_file:
        return load_checks(
            Path(settings.checks_file),
            api_url=settings.api_url,
            frontend_url=settings.frontend_url,
        )
    return default_checks(settings.api_url, settings.frontend_url)


def run_checks(settings: Settings, fmt: str) -> int:
    """Run every check once and print the report. Returns the exit code."""
    checks = build_checks(settings)

    if fmt == "text":
        console.print(
            Panel(
                f"frontend={settings.frontend_url}  api={settings.api_url}",
                title="Connectivity checks",
                style="bold blue",
            )
        )

    report = run(checks, timeout_ms=settings.check_timeout_ms)

    if fmt == "json":
        render_json(report, console)
    else:
        render_text(report, console)
    render_failures(report, err_console)
    return report.exit_code


def list_checks(settings: Settings) -> int:
    render_checks(build_checks(settings), console)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Frontend / backend connectivity checks")
    sub = parser.add_subparsers(dest="command")

    def add_common_flags(p: argparse.ArgumentParser) -> None:
        p.add_argument("--api-url", help="Backend base URL (default: $API_URL)")
        p.add_argument("--frontend-url", help="Frontend base URL (default: $FRONTEND_URL)")
        p.add_argument("--checks-file", help="YAML file replacing the built-in checks")

    run_parser = sub.add_parser("run", help="Run all checks (default)")
    add_common_flags(run_parser)
    run_parser.add_argument("--timeout-ms", type=int, help="Per-check timeout in milliseconds")
    run_parser.add_argument("--format", default="text", choices=["text", "json"])

    list_parser = sub.add_parser("list", help="Show declared checks without running them")
    add_common_flags(list_parser)

    argv = sys.argv[1:] if argv is None else argv
    if not argv or argv[0].startswith("-"):
        argv = ["run", *argv]
    args = parser.parse_args(argv)

    try:
        settings = load_settings(
            api_url=args.api_url,
            frontend_url=args.frontend_url,
            checks_file=args.checks_file,
            check_timeout_ms=getattr(args, "timeout_ms", None),
        )
        _configure_logging(settings.log_level)

        if args.command == "list":
            return list_checks(settings)
        return run_checks(settings, args.format)
    except (ConfigError, CatalogError) as e:
        err_console.print(f"[bold red]Configuration error:[/bold red] {escape(str(e))}", highlight=False)
        return 2


if __name__ == "__main__":
    sys.exit(main())
