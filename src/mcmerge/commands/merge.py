from pathlib import Path

import typer

from mcmerge.config import default_parallel, parse_worker_count
from mcmerge.console import display_summary, print_failure, print_progress, report_to_json
from mcmerge.exceptions import InvalidInputError
from mcmerge.merge import STDOUT_PATH
from mcmerge.runner import run_plan
from mcmerge.store import plan_merge


def merge(
    store_a: Path,
    store_b: Path,
    output: Path | None,
    inplace: bool,
    parallel: int | None,
    json_output: bool,
    quiet: bool,
) -> None:
    if inplace and output is not None:
        raise InvalidInputError("Too many arguments: --inplace merges into the first store, drop OUTPUT.")
    if not inplace and output is None:
        raise InvalidInputError("Missing arguments: give an OUTPUT path or use --inplace.")
    if json_output and output is not None and str(output) == STDOUT_PATH:
        raise InvalidInputError("--json cannot be combined with writing the merge to stdout.")

    workers = default_parallel() if parallel is None else parse_worker_count(parallel)
    plan = plan_merge(store_a, store_b, output)
    report = run_plan(plan, workers, print_failure if quiet else print_progress)

    if json_output:
        print(report_to_json(report))
    elif not quiet:
        display_summary(report)

    if not report.ok:
        raise typer.Exit(code=1)
