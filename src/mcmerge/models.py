# pyright: standard
from __future__ import annotations

from msgspec import Struct

# Header layout: "MR 20100901T13:39:14Z 002 first line"
KIND_WIDTH = 2
TIMESTAMP_WIDTH = 18
COUNT_WIDTH = 3

TIMESTAMP_OFFSET = KIND_WIDTH + 1
COUNT_OFFSET = TIMESTAMP_OFFSET + TIMESTAMP_WIDTH + 1
BODY_OFFSET = COUNT_OFFSET + COUNT_WIDTH

MAX_CONTINUATION_COUNT = 10**COUNT_WIDTH - 1

LINE_TERMINATOR = "\n"


class HistoryRecord(Struct, frozen=True):
    """
    One mcabber history entry.

    body_lines holds the first message line (trimmed at decode time) followed by
    `continuation_count` raw lines, each ending in exactly one terminator.
    Struct equality compares every field, which is the duplicate criterion used
    by the merge engine.
    """

    kind: str
    timestamp: str
    continuation_count: int
    body_lines: tuple[str, ...]

    def __post_init__(self) -> None:
        if not 0 <= self.continuation_count <= MAX_CONTINUATION_COUNT:
            raise ValueError(
                f"HistoryRecord.continuation_count must be within 0..{MAX_CONTINUATION_COUNT}, "
                + f"got {self.continuation_count}."
            )
        if len(self.body_lines) != self.continuation_count + 1:
            raise ValueError(
                f"HistoryRecord declares {self.continuation_count} continuation lines "
                + f"but carries {len(self.body_lines)} body lines."
            )

    @property
    def header(self) -> str:
        return f"{self.kind} {self.timestamp} {self.continuation_count:0{COUNT_WIDTH}d} "

    def is_duplicate_of(self, other: HistoryRecord) -> bool:
        return self == other
