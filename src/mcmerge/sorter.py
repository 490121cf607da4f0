from collections.abc import Iterable, Sequence
from operator import attrgetter

from mcmerge.models import HistoryRecord

_by_timestamp = attrgetter("timestamp")


def sort_records(records: Iterable[HistoryRecord]) -> list[HistoryRecord]:
    """
    Orders records by timestamp.

    mcabber occasionally writes entries slightly out of order, so every input is
    sorted before merging. The sort is stable: entries sharing a timestamp keep
    their file order, which the duplicate rule of the merge relies on.
    """
    return sorted(records, key=_by_timestamp)


def first_out_of_order(records: Sequence[HistoryRecord]) -> int | None:
    """Returns the index of the first record older than its predecessor, if any."""
    for i in range(1, len(records)):
        if records[i].timestamp < records[i - 1].timestamp:
            return i
    return None


def is_chronological(records: Sequence[HistoryRecord]) -> bool:
    return first_out_of_order(records) is None
