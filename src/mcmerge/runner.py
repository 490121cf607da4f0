from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Literal

from msgspec import Struct, field

from mcmerge.exceptions import McMergeError, StoreError
from mcmerge.fs import copy_history_file
from mcmerge.merge import MergeStats, merge_files
from mcmerge.store import CopyTask, MergeTask, StoreKind, StorePlan


class PairResult(Struct):
    action: Literal["merge", "copy"]
    sources: list[str]
    output: str
    stats: MergeStats | None = None
    skipped: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class RunReport(Struct):
    kind: StoreKind
    output: str
    inplace: bool
    results: list[PairResult] = field(default_factory=list)

    @property
    def failures(self) -> list[PairResult]:
        return [r for r in self.results if not r.ok]

    @property
    def ok(self) -> bool:
        return not self.failures

    def totals(self) -> MergeStats:
        totals = MergeStats()
        for result in self.results:
            if result.stats is not None:
                totals.from_a += result.stats.from_a
                totals.from_b += result.stats.from_b
                totals.duplicates += result.stats.duplicates
        return totals


ResultCallback = Callable[[PairResult], None]


def run_merge_task(task: MergeTask) -> PairResult:
    """
    Merges one file pair, turning expected failures into a failed result.

    A history format error or I/O error only fails this pair; other pairs of
    the same store are unaffected.
    """
    result = PairResult(action="merge", sources=[str(task.path_a), str(task.path_b)], output=str(task.path_out))
    try:
        result.stats = merge_files(task.path_a, task.path_b, task.path_out)
    except McMergeError as e:
        result.error = e.message
    except OSError as e:
        result.error = f"{e.filename or task.path_out}: {e.strerror or e}"
    return result


def run_copy_task(task: CopyTask) -> PairResult:
    result = PairResult(action="copy", sources=[str(task.source)], output=str(task.dest))
    try:
        result.skipped = not copy_history_file(task.source, task.dest)
    except OSError as e:
        result.error = f"{e.filename or task.dest}: {e.strerror or e}"
    return result


def run_plan(plan: StorePlan, parallel: int = 0, on_result: ResultCallback | None = None) -> RunReport:
    """
    Executes a StorePlan.

    Copies run first, one after another. Merges run sequentially when `parallel`
    is 0 or 1, otherwise on a pool of `parallel` worker threads; this returns
    only once every merge has finished. Results are reported in plan order.
    """
    report = RunReport(kind=plan.kind, output=str(plan.output), inplace=plan.inplace)

    def _record(result: PairResult) -> PairResult:
        if on_result is not None:
            on_result(result)
        return result

    if plan.kind is StoreKind.DIRECTORY and not plan.output.is_dir():
        try:
            plan.output.mkdir(parents=True)
        except OSError as e:
            raise StoreError(f"Could not create output directory '{plan.output}': {e.strerror or e}") from e

    for copy_task in plan.copies:
        report.results.append(_record(run_copy_task(copy_task)))

    if parallel <= 1 or len(plan.merges) <= 1:
        for merge_task in plan.merges:
            report.results.append(_record(run_merge_task(merge_task)))
        return report

    merge_results: list[PairResult | None] = [None] * len(plan.merges)
    with ThreadPoolExecutor(max_workers=min(parallel, len(plan.merges))) as executor:
        futures = {executor.submit(run_merge_task, task): pos for pos, task in enumerate(plan.merges)}
        for future in as_completed(futures):
            merge_results[futures[future]] = _record(future.result())

    report.results.extend(r for r in merge_results if r is not None)
    return report
