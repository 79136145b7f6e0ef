"""FIFO supply/withdraw cycle matching: pure functions.

Oldest open supply is consumed first. Cycle records are immutable; partial consumption is
tracked on the OpenSupply lot, never on the supply event.
"""

from collections import deque

from txlens.domain.enums import RebalanceActionType
from txlens.domain.models import LendingCycle, OpenSupply, PositionEvent


def _duration(supply: PositionEvent, withdraw: PositionEvent) -> int | None:
    if supply.timestamp is None or withdraw.timestamp is None:
        return None
    return withdraw.timestamp - supply.timestamp


def fifo_match_cycles(events: list[PositionEvent]) -> tuple[list[LendingCycle], list[OpenSupply], int]:
    """Match withdraws against open supplies for a single (protocol, token).

    Args:
        events: Chronologically sorted SUPPLY/WITHDRAW events, amounts in token0_amount.

    Returns:
        (cycles, remaining_open_supplies, unmatched_withdrawn)

    A withdraw larger than everything queued adds the surplus to the last cycle it created.
    If it created none (queue already empty) the surplus is returned as unmatched_withdrawn.
    """
    supply_queue: deque[OpenSupply] = deque()
    cycles: list[LendingCycle] = []
    unmatched = 0

    for event in events:
        if event.type == RebalanceActionType.SUPPLY:
            supply_queue.append(OpenSupply(supply_event=event, remaining=event.token0_amount))
        elif event.type == RebalanceActionType.WITHDRAW:
            withdraw_remaining = event.token0_amount
            created = 0
            while withdraw_remaining > 0 and supply_queue:
                front = supply_queue[0]
                matched = min(front.remaining, withdraw_remaining)
                cycles.append(LendingCycle(
                    supply_event=front.supply_event,
                    withdraw_events=[event],
                    supply_amount=matched,
                    withdrawn_amount=matched,
                    holding_duration_seconds=_duration(front.supply_event, event),
                ))
                created += 1
                front.remaining -= matched
                withdraw_remaining -= matched
                if front.remaining <= 0:
                    supply_queue.popleft()

            if withdraw_remaining > 0:
                if created:
                    last = cycles[-1]
                    cycles[-1] = last.model_copy(
                        update={"withdrawn_amount": last.withdrawn_amount + withdraw_remaining}
                    )
                else:
                    unmatched += withdraw_remaining

    cycles = [
        c.model_copy(update={"profit": max(0, c.withdrawn_amount - c.supply_amount)})
        for c in cycles
    ]
    open_supplies = [lot for lot in supply_queue if lot.remaining > 0]
    return cycles, open_supplies, unmatched
