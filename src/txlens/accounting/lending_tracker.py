"""Lending position tracking keyed by protocol + token, with FIFO supply/withdraw cycles."""

import logging
from collections.abc import Iterable

from txlens.accounting.fifo import fifo_match_cycles
from txlens.accounting.lp_tracker import TransactionInput, iter_transactions
from txlens.accounting.ordering import sort_events
from txlens.domain.enums import Protocol, RebalanceActionType
from txlens.domain.models import (
    LendingPositionSummary,
    LendingPositionTracking,
    PositionEvent,
)
from txlens.parser.utils.tokens import format_units, lookup_token

logger = logging.getLogger(__name__)

LENDING_PROTOCOLS = frozenset({Protocol.AAVE, Protocol.EULER, Protocol.VENUS})
TRACKED_TYPES = frozenset({RebalanceActionType.SUPPLY, RebalanceActionType.WITHDRAW})


def position_key(protocol: Protocol, token: str) -> str:
    return f"{protocol.value}_{token}"


def _with_running_balance(events: list[PositionEvent], decimals: int | None) -> list[PositionEvent]:
    balance = 0
    result = []
    for event in events:
        if event.type == RebalanceActionType.SUPPLY:
            balance += event.token0_amount
        elif event.type == RebalanceActionType.WITHDRAW:
            balance -= event.token0_amount
        result.append(event.model_copy(update={
            "running_balance": balance,
            "formatted_running_balance": format_units(balance, decimals) if decimals is not None else None,
        }))
    return result


def _finalize(position: LendingPositionTracking, chain_id: str) -> None:
    meta = lookup_token(chain_id, position.token)
    if meta is not None:
        position.token_symbol = meta.symbol

    events = _with_running_balance(sort_events(position.events), meta.decimals if meta else None)
    position.events = events

    for event in events:
        if event.type == RebalanceActionType.SUPPLY:
            position.total_supplied += event.token0_amount
            if event.timestamp is not None and position.first_supply_timestamp is None:
                position.first_supply_timestamp = event.timestamp
        else:
            position.total_withdrawn += event.token0_amount
            if event.timestamp is not None and (
                position.last_withdraw_timestamp is None or event.timestamp > position.last_withdraw_timestamp
            ):
                position.last_withdraw_timestamp = event.timestamp

    position.total_interest_earned = position.total_withdrawn - position.total_supplied
    if position.first_supply_timestamp is not None and position.last_withdraw_timestamp is not None:
        position.holding_duration_seconds = position.last_withdraw_timestamp - position.first_supply_timestamp

    cycles, _open, unmatched = fifo_match_cycles(events)
    position.cycles = cycles
    position.unmatched_withdrawn = unmatched
    if unmatched:
        logger.info(
            "%s: %d withdrawn with no open supply to match", position_key(position.protocol, position.token), unmatched
        )


def track_lending_positions(
    transactions: Iterable[TransactionInput],
    chain_id: str = "8453",
) -> LendingPositionSummary:
    """Group SUPPLY/WITHDRAW actions of lending protocols by (protocol, token) and match cycles FIFO."""
    positions: dict[str, LendingPositionTracking] = {}

    for tx_hash, parsed in iter_transactions(transactions):
        for action in parsed.actions:
            if action.protocol not in LENDING_PROTOCOLS or action.type not in TRACKED_TYPES:
                continue
            if not action.tokens:
                continue

            leg = action.tokens[0]
            key = position_key(action.protocol, leg.token)
            position = positions.get(key)
            if position is None:
                position = LendingPositionTracking(
                    token=leg.token,
                    token_symbol=leg.symbol,
                    protocol=action.protocol,
                    vault_address=action.contract_address if action.protocol == Protocol.EULER else None,
                )
                positions[key] = position

            position.events.append(PositionEvent(
                tx_hash=tx_hash,
                timestamp=parsed.timestamp,
                block_number=parsed.block_number,
                event_index=action.event_index,
                log_index=action.log_index,
                type=action.type,
                token0=leg.token,
                token0_amount=leg.raw_amount,
                token0_symbol=leg.symbol,
            ))

    for position in positions.values():
        _finalize(position, str(chain_id))

    logger.debug("Tracked %d lending positions", len(positions))
    return LendingPositionSummary(positions=positions)
