from enum import Enum
from pathlib import Path

from msgspec import Struct, field

from mcmerge.exceptions import StoreError
from mcmerge.fs import is_same_file, is_temp_name
from mcmerge.merge import STDOUT_PATH


class StoreKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


class MergeTask(Struct, frozen=True):
    path_a: Path
    path_b: Path
    path_out: Path


class CopyTask(Struct, frozen=True):
    source: Path
    dest: Path


class StorePlan(Struct):
    """
    Everything needed to merge two stores.

    merges: file pairs present in both stores
    copies: files present in only one store, copied through unchanged
    """

    kind: StoreKind
    output: Path
    inplace: bool = False
    merges: list[MergeTask] = field(default_factory=list)
    copies: list[CopyTask] = field(default_factory=list)


def detect_store_kind(path: Path) -> StoreKind:
    if path.is_dir():
        return StoreKind.DIRECTORY
    if path.is_file():
        return StoreKind.FILE
    if not path.exists():
        raise StoreError(f"No such file or directory: {path}")
    raise StoreError(f"Not a regular file or directory: {path}")


def list_history_files(directory: Path) -> list[str]:
    """
    Lists the names of the regular files directly inside `directory`.

    Subdirectories are skipped, not recursed into, and so are temp files left
    behind by an interrupted run.
    """
    return sorted(
        entry.name for entry in directory.iterdir() if entry.is_file() and not is_temp_name(entry.name)
    )


def _overlaps(output: Path, *inputs: Path) -> bool:
    return any(output == path or is_same_file(output, path) for path in inputs)


def plan_merge(store_a: Path, store_b: Path, output: Path | None = None) -> StorePlan:
    """
    Pairs up the files of two stores.

    With `output=None` the merge happens in place and `store_a` is the output.
    Otherwise `output` must differ from both inputs; for directory stores an
    existing `output` must be a directory (a missing one is created when the
    plan runs). File stores may use "-" to write the merge to stdout.
    """
    kind = detect_store_kind(store_a)
    if detect_store_kind(store_b) != kind:
        raise StoreError(f"Both stores must be files or both directories: {store_a}, {store_b}")

    inplace = output is None
    if output is None:
        output = store_a
    elif _overlaps(output, store_a, store_b):
        raise StoreError(f"Output {kind.value} is an input {kind.value}: {output}")

    plan = StorePlan(kind=kind, output=output, inplace=inplace)

    if kind is StoreKind.FILE:
        if output.is_dir():
            raise StoreError(f"Output has to be a file: {output}")
        plan.merges.append(MergeTask(store_a, store_b, output))
        return plan

    if str(output) == STDOUT_PATH:
        raise StoreError("Directory stores cannot be merged to stdout")
    if output.exists() and not output.is_dir():
        raise StoreError(f"Output has to be a directory: {output}")

    names_a = set(list_history_files(store_a))
    names_b = set(list_history_files(store_b))

    for name in sorted(names_a | names_b):
        if name in names_a and name in names_b:
            plan.merges.append(MergeTask(store_a / name, store_b / name, output / name))
        elif name in names_b:
            plan.copies.append(CopyTask(store_b / name, output / name))
        elif not inplace:
            plan.copies.append(CopyTask(store_a / name, output / name))

    return plan
