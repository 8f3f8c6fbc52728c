"""Console rendering of a Report."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

from .models import EndpointCheck, Outcome, Report

_STYLES = {
    Outcome.PASS: "bold green",
    Outcome.FAIL: "bold red",
    Outcome.SKIP: "bold yellow",
}


def render_text(report: Report, console: Console) -> None:
    """One line per check under its group heading, then an overall line."""
    current_group: str | None = None
    for r in report.results:
        if r.check.group != current_group:
            current_group = r.check.group
            if current_group:
                console.print(f"\n[bold]{escape(current_group)}[/bold]")
        label = r.outcome.value.upper()
        console.print(
            f"  [{_STYLES[r.outcome]}]{label}[/{_STYLES[r.outcome]}] "
            f"{escape(r.name)}  [dim]{escape(r.detail)}[/dim]",
            highlight=False,
        )

    counts = report.counts()
    verdict = "[bold green]PASSED[/bold green]" if report.ok else "[bold red]FAILED[/bold red]"
    console.print(
        f"\n{len(report)} checks: {counts['pass']} passed, {counts['fail']} failed, "
        f"{counts['skip']} skipped | {verdict}",
        highlight=False,
    )


def render_failures(report: Report, console: Console) -> None:
    """List the failing checks as the cause of a non-zero exit."""
    if report.ok:
        return
    console.print("[bold red]Failed checks:[/bold red]")
    for r in report.failed:
        console.print(f"  - {escape(r.name)} ({escape(r.check.url)}): {escape(r.detail)}", highlight=False)


def render_json(report: Report, console: Console) -> None:
    console.print_json(data=report.to_dict())


def render_checks(checks: list[EndpointCheck], console: Console) -> None:
    for c in checks:
        tolerate = ",".join(str(s) for s in sorted(c.tolerate_statuses)) or "-"
        fields = ", ".join(f"{a.field_path}={a.expected!r}" for a in c.body_assertions) or "-"
        console.print(
            f"{escape(c.name)}  {c.method} {escape(c.url)}  expect={c.expected_status} "
            f"tolerate={tolerate} body={escape(fields)}",
            highlight=False,
        )
