from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import IO, Final, final

from mcmerge.exceptions import MalformedHeaderError, TruncatedRecordError
from mcmerge.models import (
    BODY_OFFSET,
    COUNT_OFFSET,
    COUNT_WIDTH,
    KIND_WIDTH,
    LINE_TERMINATOR,
    TIMESTAMP_OFFSET,
    TIMESTAMP_WIDTH,
    HistoryRecord,
)

# History files are read and written with "\n"-only line splitting and no newline
# translation; undecodable bytes survive the round trip via surrogateescape.
ENCODING: Final = "utf-8"
ENCODING_ERRORS: Final = "surrogateescape"
NEWLINE: Final = "\n"

# Only ASCII whitespace is trimmed from the first message line; other Unicode
# spaces are message content.
TRIM_CHARS: Final = " \t\n\r\f\v"


def open_history(path: str | Path, mode: str = "r") -> IO[str]:
    return open(path, mode, encoding=ENCODING, errors=ENCODING_ERRORS, newline=NEWLINE)


def _has_whitespace(text: str) -> bool:
    return any(c.isspace() for c in text)


def _terminate(line: str) -> str:
    if line.endswith(LINE_TERMINATOR):
        return line
    return line + LINE_TERMINATOR


@final
class RecordReader:
    """
    Decodes HistoryRecords from a text stream positioned at a record boundary.

    Header fields are sliced at fixed offsets; body text may contain any number
    of spaces without desynchronizing the parse.
    """

    stream: IO[str]
    source: str
    line_number: int

    def __init__(self, stream: IO[str], source: str | Path = "<stream>") -> None:
        self.stream = stream
        self.source = str(source)
        self.line_number = 0

    def __iter__(self) -> Iterator[HistoryRecord]:
        while (record := self.read()) is not None:
            yield record

    def read(self) -> HistoryRecord | None:
        """
        Reads the next record, or returns None at a clean end of stream.

        Raises:
            MalformedHeaderError: if the header line cannot be split into its fields.
            TruncatedRecordError: if the stream ends before all declared lines are read.
        """
        line = self.stream.readline()
        if not line:
            return None
        self.line_number += 1
        header_line = self.line_number

        kind, timestamp, count = self._parse_header(line)
        body = [line[BODY_OFFSET:].strip(TRIM_CHARS) + LINE_TERMINATOR]

        for _ in range(count):
            follow = self.stream.readline()
            if not follow:
                raise TruncatedRecordError(
                    f"record declares {count} continuation lines but only {len(body) - 1} remain",
                    self.source,
                    header_line,
                )
            self.line_number += 1
            body.append(_terminate(follow))

        return HistoryRecord(kind=kind, timestamp=timestamp, continuation_count=count, body_lines=tuple(body))

    def _parse_header(self, line: str) -> tuple[str, str, int]:
        header = line.rstrip(LINE_TERMINATOR)
        if len(header) < BODY_OFFSET:
            raise self._malformed(f"header too short: {header!r}")

        kind = header[:KIND_WIDTH]
        if len(kind) != KIND_WIDTH or _has_whitespace(kind):
            raise self._malformed(f"invalid entry kind {kind!r}")

        if header[KIND_WIDTH] != " " or header[COUNT_OFFSET - 1] != " ":
            raise self._malformed("header fields are not separated by single spaces")

        timestamp = header[TIMESTAMP_OFFSET : TIMESTAMP_OFFSET + TIMESTAMP_WIDTH]
        if _has_whitespace(timestamp):
            raise self._malformed(f"invalid timestamp {timestamp!r}")

        count_field = header[COUNT_OFFSET : COUNT_OFFSET + COUNT_WIDTH]
        if not (count_field.isascii() and count_field.isdigit()):
            raise self._malformed(f"invalid continuation count {count_field!r}")

        return kind, timestamp, int(count_field)

    def _malformed(self, reason: str) -> MalformedHeaderError:
        return MalformedHeaderError(reason, self.source, self.line_number)


def read_record(stream: IO[str]) -> HistoryRecord | None:
    """Reads a single record from stream; None at end of stream."""
    return RecordReader(stream).read()


def load_history(path: str | Path) -> list[HistoryRecord]:
    """
    Decodes every record of a history file, in file order.

    Raises:
        HistoryFormatError: on the first malformed or truncated record.
        OSError: if the file cannot be opened or read.
    """
    with open_history(path) as f:
        return list(RecordReader(f, source=path))


def format_record(record: HistoryRecord) -> str:
    return record.header + "".join(record.body_lines)


def write_record(record: HistoryRecord, stream: IO[str]) -> None:
    _ = stream.write(record.header)
    for line in record.body_lines:
        _ = stream.write(line)


def write_records(records: Iterable[HistoryRecord], stream: IO[str]) -> int:
    """Writes records as they are produced; returns how many were written."""
    written = 0
    for record in records:
        write_record(record, stream)
        written += 1
    return written
