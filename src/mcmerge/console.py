"""Progress lines, summaries and reports for the command line."""

import sys

import typer

from mcmerge.runner import PairResult, RunReport
from mcmerge.serialization import to_dict, to_json


def is_terminal() -> bool:
    """Checks if stderr is a TTY."""
    return sys.stderr.isatty()


def format_progress(result: PairResult) -> str:
    """Formats a result the way the merge is announced: `a & b > out`."""
    return f"{' & '.join(result.sources)} > {result.output}"


def print_progress(result: PairResult) -> None:
    suffix = " (same file, skipped)" if result.skipped else ""
    print(format_progress(result) + suffix, file=sys.stderr)
    if result.error is not None:
        typer.secho(f"Error: {result.error}", err=True, fg=typer.colors.RED)


def report_to_json(report: RunReport) -> str:
    """Machine-readable run report: every pair plus overall totals."""
    data = to_dict(report)
    data["ok"] = report.ok
    data["totals"] = to_dict(report.totals())
    return to_json(data).decode("utf-8")


def _summary_line(report: RunReport) -> str:
    totals = report.totals()
    merged = sum(1 for r in report.results if r.action == "merge" and r.ok)
    copied = sum(1 for r in report.results if r.action == "copy" and r.ok and not r.skipped)
    return (
        f"Merged {merged} file(s), copied {copied}; "
        + f"{totals.total} entries written, {totals.duplicates} duplicate(s) dropped, "
        + f"{len(report.failures)} failure(s)."
    )


def display_summary(report: RunReport) -> None:
    """Displays the run summary on stderr (a table on a TTY)."""
    if not is_terminal():
        print(_summary_line(report), file=sys.stderr)
        return

    from rich.console import Console
    from rich.table import Table

    table = Table(title="History Merge", show_header=True, header_style="bold", box=None, padding=(0, 1))
    table.add_column("Output", overflow="fold")
    table.add_column("Action")
    table.add_column("Entries", justify="right")
    table.add_column("Duplicates", justify="right")
    table.add_column("Status")

    for result in report.results:
        if result.error is not None:
            status = "[red]failed[/red]"
        elif result.skipped:
            status = "[dim]skipped[/dim]"
        else:
            status = "[green]ok[/green]"
        entries = str(result.stats.total) if result.stats else ""
        duplicates = str(result.stats.duplicates) if result.stats else ""
        table.add_row(result.output, result.action, entries, duplicates, status)

    console = Console(stderr=True)
    console.print(table)
    console.print(f"[dim]{_summary_line(report)}[/dim]")


def print_failure(result: PairResult) -> None:
    """Quiet-mode callback: only failed pairs are reported."""
    if result.error is not None:
        print_progress(result)
