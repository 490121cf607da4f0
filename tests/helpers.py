# pyright: standard
from collections.abc import Sequence
from pathlib import Path

from mcmerge.codec import format_record
from mcmerge.models import HistoryRecord


def ts(second: int, minute: int = 0) -> str:
    """Timestamp on 2020-01-01 in mcabber's history format."""
    return f"20200101T00:{minute:02d}:{second:02d}Z"


def make_record(timestamp: str, text: str = "hello", kind: str = "MR") -> HistoryRecord:
    """Builds a record from a (possibly multi-line) message text."""
    lines = text.split("\n")
    if len(lines) > 1 and lines[-1] == "":
        lines.pop()
    body = tuple(line + "\n" for line in lines)
    return HistoryRecord(kind=kind, timestamp=timestamp, continuation_count=len(body) - 1, body_lines=body)


def message_text(record: HistoryRecord) -> str:
    return "".join(record.body_lines)


def history_text(records: Sequence[HistoryRecord]) -> str:
    return "".join(format_record(r) for r in records)


def write_history(path: Path, records: Sequence[HistoryRecord]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    _ = path.write_text(history_text(records), encoding="utf-8", newline="\n")
    return path


def read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")
