import io
import sys
from collections.abc import Iterator, Sequence
from pathlib import Path

from msgspec import Struct

from mcmerge.codec import ENCODING, ENCODING_ERRORS, NEWLINE, load_history, write_records
from mcmerge.exceptions import UnsortedHistoryError
from mcmerge.fs import atomic_output
from mcmerge.models import HistoryRecord
from mcmerge.sorter import sort_records

STDOUT_PATH = "-"


class MergeStats(Struct):
    """Counts collected while merging one pair of histories."""

    from_a: int = 0
    from_b: int = 0
    duplicates: int = 0

    @property
    def total(self) -> int:
        return self.from_a + self.from_b


def _check_order(records: Sequence[HistoryRecord], index: int, side: str) -> None:
    if index and records[index].timestamp < records[index - 1].timestamp:
        raise UnsortedHistoryError(
            f"{side} history is not in chronological order at entry {index}: "
            + f"{records[index].timestamp} follows {records[index - 1].timestamp}"
        )


def merge_records(
    a: Sequence[HistoryRecord],
    b: Sequence[HistoryRecord],
    stats: MergeStats | None = None,
) -> Iterator[HistoryRecord]:
    """
    Merges two chronologically sorted histories into one.

    On equal timestamps `a` wins: its entry is emitted first and only its cursor
    advances, unless the entry from `b` is identical, in which case the `b` copy
    is dropped. Both inputs must be sorted (see sort_records); a decreasing
    timestamp in either raises UnsortedHistoryError.
    """
    if stats is None:
        stats = MergeStats()

    i = j = 0
    while i < len(a) and j < len(b):
        _check_order(a, i, "first")
        _check_order(b, j, "second")
        rec_a = a[i]
        rec_b = b[j]

        if rec_a.timestamp > rec_b.timestamp:
            j += 1
            stats.from_b += 1
            yield rec_b
            continue

        if rec_a.timestamp == rec_b.timestamp and rec_a.is_duplicate_of(rec_b):
            j += 1
            stats.duplicates += 1

        i += 1
        stats.from_a += 1
        yield rec_a

    for k in range(i, len(a)):
        _check_order(a, k, "first")
        stats.from_a += 1
        yield a[k]

    for k in range(j, len(b)):
        _check_order(b, k, "second")
        stats.from_b += 1
        yield b[k]


def read_sorted_history(path: str | Path) -> list[HistoryRecord]:
    return sort_records(load_history(path))


def merge_files(path_a: str | Path, path_b: str | Path, path_out: str | Path) -> MergeStats:
    """
    Merges two history files into `path_out` ("-" for stdout).

    Both inputs are read completely before any output is written, and the output
    is replaced atomically, so `path_out` may be `path_a` (in-place merge). If
    either input fails to decode, no output file is created or changed.
    """
    history_a = read_sorted_history(path_a)
    history_b = read_sorted_history(path_b)
    stats = MergeStats()

    if str(path_out) == STDOUT_PATH:
        sys.stdout.flush()
        stream = io.TextIOWrapper(sys.stdout.buffer, encoding=ENCODING, errors=ENCODING_ERRORS, newline=NEWLINE)
        try:
            _ = write_records(merge_records(history_a, history_b, stats), stream)
            stream.flush()
        finally:
            _ = stream.detach()
        return stats

    with atomic_output(Path(path_out)) as out:
        _ = write_records(merge_records(history_a, history_b, stats), out)
    return stats


def merge_file_inplace(path_a: str | Path, path_b: str | Path) -> MergeStats:
    """Merges `path_b` into `path_a`, replacing `path_a`."""
    return merge_files(path_a, path_b, path_a)
