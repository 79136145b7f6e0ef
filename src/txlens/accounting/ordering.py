"""Chronological ordering shared by the LP and lending trackers."""

from functools import cmp_to_key

from txlens.domain.models import PositionEvent


def compare_events(a: PositionEvent, b: PositionEvent) -> int:
    """Timestamp when both events have one, then block number, log index, event index."""
    if a.timestamp is not None and b.timestamp is not None and a.timestamp != b.timestamp:
        return a.timestamp - b.timestamp
    if a.block_number != b.block_number:
        return a.block_number - b.block_number
    if a.log_index != b.log_index:
        return a.log_index - b.log_index
    return a.event_index - b.event_index


def sort_events(events: list[PositionEvent]) -> list[PositionEvent]:
    return sorted(events, key=cmp_to_key(compare_events))
