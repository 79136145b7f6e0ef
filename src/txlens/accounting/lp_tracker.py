"""LP position tracking by Uniswap V3 NFT id across many transactions.

Pure fold over decoded actions: no I/O, deterministic for a given input list.
"""

import logging
from collections.abc import Iterable

from txlens.accounting.correlation import infer_position_ids
from txlens.accounting.ordering import sort_events
from txlens.domain.enums import Protocol, RebalanceActionType
from txlens.domain.enums.action_type import LP_BURN_TYPES, LP_EXIT_TYPES, LP_MINT_TYPES
from txlens.domain.models import (
    PLACEHOLDER_TOKENS,
    UNKNOWN_TOKEN0,
    UNKNOWN_TOKEN1,
    ParsedTransaction,
    PositionEvent,
    PositionTracking,
    PositionTrackingSummary,
    RebalanceAction,
)
from txlens.parser.utils.tokens import lookup_token

logger = logging.getLogger(__name__)

TransactionInput = ParsedTransaction | tuple[str, ParsedTransaction]


def iter_transactions(transactions: Iterable[TransactionInput]) -> Iterable[tuple[str, ParsedTransaction]]:
    """Accept ParsedTransaction objects or (tx_hash, ParsedTransaction) pairs."""
    for item in transactions:
        if isinstance(item, ParsedTransaction):
            yield item.transaction_hash, item
        else:
            tx_hash, parsed = item
            yield tx_hash, parsed


def _leg(action: RebalanceAction, i: int) -> tuple[str, int, str | None]:
    if len(action.tokens) > i:
        t = action.tokens[i]
        return t.token, t.raw_amount, t.symbol
    return (UNKNOWN_TOKEN0, UNKNOWN_TOKEN1)[i], 0, None


def _to_event(tx_hash: str, parsed: ParsedTransaction, action: RebalanceAction, mirrors: bool) -> PositionEvent:
    token0, amount0, symbol0 = _leg(action, 0)
    token1, amount1, symbol1 = _leg(action, 1)
    return PositionEvent(
        tx_hash=tx_hash,
        timestamp=parsed.timestamp,
        block_number=parsed.block_number,
        event_index=action.event_index,
        log_index=action.log_index,
        type=action.type,
        token0=token0,
        token1=token1,
        token0_amount=amount0,
        token1_amount=amount1,
        token0_symbol=symbol0,
        token1_symbol=symbol1,
        mirrors_pool_event=mirrors,
    )


def _first_real_token(events: list[PositionEvent], attr: str, placeholder: str) -> str:
    for event in events:
        token = getattr(event, attr)
        if token and token not in PLACEHOLDER_TOKENS:
            return token
    return placeholder


def _first_symbol(events: list[PositionEvent], attr: str) -> str | None:
    return next((getattr(e, attr) for e in events if getattr(e, attr)), None)


def _build_position(position_id: str, events: list[PositionEvent], chain_id: str) -> PositionTracking:
    events = sort_events(events)
    token0 = _first_real_token(events, "token0", UNKNOWN_TOKEN0)
    token1 = _first_real_token(events, "token1", UNKNOWN_TOKEN1)
    meta0 = lookup_token(chain_id, token0)
    meta1 = lookup_token(chain_id, token1)

    position = PositionTracking(
        position_id=position_id,
        token0=token0,
        token1=token1,
        token0_symbol=meta0.symbol if meta0 else _first_symbol(events, "token0_symbol"),
        token1_symbol=meta1.symbol if meta1 else _first_symbol(events, "token1_symbol"),
        events=events,
    )

    # Pending principal of the last burn, netted out of the next collect
    pending_burn0 = pending_burn1 = 0

    for event in events:
        if event.type in LP_MINT_TYPES and position.first_mint_timestamp is None:
            position.first_mint_timestamp = event.timestamp
        if event.type in LP_EXIT_TYPES and event.timestamp is not None:
            if position.last_exit_timestamp is None or event.timestamp > position.last_exit_timestamp:
                position.last_exit_timestamp = event.timestamp

        if event.mirrors_pool_event:
            continue

        if event.type in LP_MINT_TYPES:
            position.mint_token0_amount += event.token0_amount
            position.mint_token1_amount += event.token1_amount
            position.net_lp_token0_change += event.token0_amount
            position.net_lp_token1_change += event.token1_amount
        elif event.type in LP_BURN_TYPES:
            # Principal leaves the pool only at collect time
            position.net_lp_token0_change -= event.token0_amount
            position.net_lp_token1_change -= event.token1_amount
            pending_burn0, pending_burn1 = event.token0_amount, event.token1_amount
        elif event.type == RebalanceActionType.POOL_COLLECT:
            position.withdraw_token0_amount += event.token0_amount
            position.withdraw_token1_amount += event.token1_amount
            if pending_burn0 > 0 or pending_burn1 > 0:
                position.fees_token0_amount += event.token0_amount - pending_burn0
                position.fees_token1_amount += event.token1_amount - pending_burn1
                pending_burn0 = pending_burn1 = 0
            else:
                position.fees_token0_amount += event.token0_amount
                position.fees_token1_amount += event.token1_amount

    if position.first_mint_timestamp is not None and position.last_exit_timestamp is not None:
        position.holding_duration_seconds = position.last_exit_timestamp - position.first_mint_timestamp

    return position


def track_position_flows(
    transactions: Iterable[TransactionInput],
    chain_id: str = "8453",
) -> PositionTrackingSummary:
    """Group Uniswap V3 actions by NFT id and aggregate minted, withdrawn, fee and net totals.

    Pool mint/burn/collect actions take their id from correlation within their transaction.
    A position manager action that a pool mint/burn was matched to stays on the timeline
    with mirrors_pool_event=True but is not counted twice.
    """
    events_by_id: dict[str, list[PositionEvent]] = {}

    for tx_hash, parsed in iter_transactions(transactions):
        correlated = infer_position_ids(parsed.actions)
        mirrored = {c.counterpart_index for c in correlated if c.counterpart_index is not None}

        for i, item in enumerate(correlated):
            if item.action.protocol != Protocol.UNISWAP_V3 or not item.position_id:
                continue
            event = _to_event(tx_hash, parsed, item.action, mirrors=i in mirrored)
            events_by_id.setdefault(item.position_id, []).append(event)

    positions = {
        position_id: _build_position(position_id, events, str(chain_id))
        for position_id, events in events_by_id.items()
    }
    logger.debug("Tracked %d LP positions", len(positions))
    return PositionTrackingSummary(positions=positions)
