from support import USDC

from txlens.accounting.ordering import compare_events, sort_events
from txlens.domain.enums import RebalanceActionType
from txlens.domain.models import PositionEvent


def _event(timestamp, block, log_index, event_index=0, tx="0x01") -> PositionEvent:
    return PositionEvent(
        tx_hash=tx,
        timestamp=timestamp,
        block_number=block,
        event_index=event_index,
        log_index=log_index,
        type=RebalanceActionType.SUPPLY,
        token0=USDC,
        token0_amount=1,
    )


class TestCompareEvents:
    def test_timestamp_wins_over_block(self):
        assert compare_events(_event(10, 200, 0), _event(20, 100, 0)) < 0

    def test_block_used_when_timestamp_missing(self):
        assert compare_events(_event(None, 200, 0), _event(5, 100, 0)) > 0

    def test_equal_timestamps_fall_back_to_log_index(self):
        assert compare_events(_event(10, 100, 3), _event(10, 100, 1)) > 0

    def test_event_index_is_last_tiebreak(self):
        assert compare_events(_event(10, 100, 1, event_index=0), _event(10, 100, 1, event_index=1)) < 0
        assert compare_events(_event(10, 100, 1), _event(10, 100, 1)) == 0


class TestSortEvents:
    def test_sorts_chronologically(self):
        events = [_event(30, 3, 0, tx="c"), _event(10, 1, 5, tx="a2"), _event(10, 1, 2, tx="a1"), _event(20, 2, 0, tx="b")]
        assert [e.tx_hash for e in sort_events(events)] == ["a1", "a2", "b", "c"]

    def test_input_list_untouched(self):
        events = [_event(2, 2, 0, tx="late"), _event(1, 1, 0, tx="early")]
        sort_events(events)
        assert events[0].tx_hash == "late"
