# pyright: standard
from pathlib import Path

import pytest

from mcmerge.exceptions import StoreError
from mcmerge.store import CopyTask, MergeTask, StoreKind, detect_store_kind, list_history_files, plan_merge
from tests.helpers import make_record, ts, write_history


def test_detect_store_kind(tmp_path: Path) -> None:
    path = write_history(tmp_path / "file", [make_record(ts(1))])

    assert detect_store_kind(path) is StoreKind.FILE
    assert detect_store_kind(tmp_path) is StoreKind.DIRECTORY
    with pytest.raises(StoreError, match="No such file or directory"):
        _ = detect_store_kind(tmp_path / "missing")


def test_list_history_files_skips_subdirectories(history_dirs: tuple[Path, Path]) -> None:
    dir_a, _ = history_dirs

    assert list_history_files(dir_a) == ["both.example.org", "only-a.example.org"]


def test_list_history_files_skips_leftover_temp_files(history_dirs: tuple[Path, Path]) -> None:
    # GIVEN a temp file left behind by an interrupted merge
    dir_a, _ = history_dirs
    _ = (dir_a / ".both.example.org.tmpk2j4x9").write_text("partial", encoding="utf-8")

    # THEN it is not treated as a history file
    assert list_history_files(dir_a) == ["both.example.org", "only-a.example.org"]


def test_plan_for_file_stores(tmp_path: Path) -> None:
    # GIVEN two history files
    path_a = write_history(tmp_path / "a", [make_record(ts(1))])
    path_b = write_history(tmp_path / "b", [make_record(ts(2))])

    # WHEN planning a merge into a new file
    plan = plan_merge(path_a, path_b, tmp_path / "out")

    # THEN there is a single merge and nothing to copy
    assert plan.kind is StoreKind.FILE
    assert plan.merges == [MergeTask(path_a, path_b, tmp_path / "out")]
    assert plan.copies == []


def test_plan_for_directory_stores(history_dirs: tuple[Path, Path], tmp_path: Path) -> None:
    # GIVEN two history directories and a separate output directory
    dir_a, dir_b = history_dirs
    out = tmp_path / "merged"

    # WHEN planning the merge
    plan = plan_merge(dir_a, dir_b, out)

    # THEN shared files are merged and one-sided files are copied from their side
    assert plan.kind is StoreKind.DIRECTORY
    assert not plan.inplace
    assert plan.merges == [
        MergeTask(dir_a / "both.example.org", dir_b / "both.example.org", out / "both.example.org"),
    ]
    assert plan.copies == [
        CopyTask(dir_a / "only-a.example.org", out / "only-a.example.org"),
        CopyTask(dir_b / "only-b.example.org", out / "only-b.example.org"),
    ]


def test_plan_inplace_skips_files_already_in_first_store(history_dirs: tuple[Path, Path]) -> None:
    # GIVEN two history directories
    dir_a, dir_b = history_dirs

    # WHEN planning an in-place merge
    plan = plan_merge(dir_a, dir_b)

    # THEN the first directory is the output and only the second side's extras are copied
    assert plan.inplace
    assert plan.output == dir_a
    assert plan.merges == [
        MergeTask(dir_a / "both.example.org", dir_b / "both.example.org", dir_a / "both.example.org"),
    ]
    assert plan.copies == [CopyTask(dir_b / "only-b.example.org", dir_a / "only-b.example.org")]


def test_plan_rejects_mixed_store_kinds(history_dirs: tuple[Path, Path], tmp_path: Path) -> None:
    dir_a, dir_b = history_dirs

    with pytest.raises(StoreError, match="Both stores must be files or both directories"):
        _ = plan_merge(dir_a, dir_b / "only-b.example.org", tmp_path / "out")


def test_plan_rejects_output_that_is_an_input(history_dirs: tuple[Path, Path]) -> None:
    dir_a, dir_b = history_dirs

    with pytest.raises(StoreError, match="is an input"):
        _ = plan_merge(dir_a, dir_b, dir_b)
    with pytest.raises(StoreError, match="is an input"):
        _ = plan_merge(dir_a / "both.example.org", dir_b / "both.example.org", dir_a / "both.example.org")


def test_plan_rejects_file_as_directory_output(history_dirs: tuple[Path, Path], tmp_path: Path) -> None:
    dir_a, dir_b = history_dirs
    existing_file = write_history(tmp_path / "not-a-dir", [])

    with pytest.raises(StoreError, match="Output has to be a directory"):
        _ = plan_merge(dir_a, dir_b, existing_file)
    with pytest.raises(StoreError, match="stdout"):
        _ = plan_merge(dir_a, dir_b, Path("-"))
