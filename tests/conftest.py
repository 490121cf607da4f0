# pyright: standard
from pathlib import Path

import pytest

from tests.helpers import make_record, ts, write_history


@pytest.fixture
def history_dirs(tmp_path: Path) -> tuple[Path, Path]:
    """
    Two history directories:
      - both.example.org exists in both with one shared and one distinct entry each
      - only-a.example.org exists only in the first
      - only-b.example.org exists only in the second
      - a nested directory in the first, which is ignored
    """
    dir_a = tmp_path / "histo_a"
    dir_b = tmp_path / "histo_b"

    shared = make_record(ts(10), "shared message", kind="MS")
    write_history(dir_a / "both.example.org", [make_record(ts(1), "from a"), shared])
    write_history(dir_b / "both.example.org", [shared, make_record(ts(20), "from b")])
    write_history(dir_a / "only-a.example.org", [make_record(ts(5), "a only")])
    write_history(dir_b / "only-b.example.org", [make_record(ts(6), "b only")])
    write_history(dir_a / "nested" / "ignored.example.org", [make_record(ts(7), "nested")])

    return dir_a, dir_b
