"""Plain-text rendering of parsed transactions and position summaries."""

import json
from datetime import datetime, timezone

from txlens.domain.models import (
    LendingPositionSummary,
    LendingPositionTracking,
    ParsedTransaction,
    PositionEvent,
    PositionTracking,
    PositionTrackingSummary,
)
from txlens.parser.utils.tokens import format_units, lookup_token

RULE_WIDTH = 80
# Balances within this many raw units of zero are treated as a closed position
NEAR_ZERO_THRESHOLD = 10**15


def format_duration(seconds: int) -> str:
    """format_duration(93784) -> "1d 2h 3m 4s". Zero-valued units are omitted."""
    days, rem = divmod(seconds, 86400)
    hours, rem = divmod(rem, 3600)
    minutes, secs = divmod(rem, 60)

    parts = []
    if days > 0:
        parts.append(f"{days}d")
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if secs > 0 or not parts:
        parts.append(f"{secs}s")
    return " ".join(parts)


def _iso(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat()


def _when(event: PositionEvent) -> str:
    return _iso(event.timestamp) if event.timestamp is not None else f"Block {event.block_number}"


def _short_address(address: str) -> str:
    if not address.startswith("0x") or len(address) < 12:
        return address
    return f"{address[:6]}...{address[-4:]}"


def _amount(raw: int, chain_id: str, token: str) -> str:
    meta = lookup_token(chain_id, token)
    return format_units(raw, meta.decimals) if meta else str(raw)


def _signed(raw: int, chain_id: str, token: str) -> str:
    return ("+" if raw >= 0 else "") + _amount(raw, chain_id, token)


def is_near_zero(balance: int) -> bool:
    return -NEAR_ZERO_THRESHOLD <= balance <= NEAR_ZERO_THRESHOLD


def format_parsed_transaction(parsed: ParsedTransaction) -> str:
    lines = [
        f"Transaction: {parsed.transaction_hash}",
        f"Block: {parsed.block_number}",
    ]
    if parsed.timestamp is not None:
        lines.append(f"Timestamp: {_iso(parsed.timestamp)}")
    lines.append(f"\nRebalance Actions ({len(parsed.actions)}):")
    lines.append("---")

    for i, action in enumerate(parsed.actions, start=1):
        header = f"\n[{i}] {action.type.value} via {action.protocol.value} (log {action.log_index})"
        if action.position_id:
            header += f" position #{action.position_id}"
        lines.append(header)
        for j, token in enumerate(action.tokens, start=1):
            amount = token.amount_formatted or token.amount
            label = token.symbol or _short_address(token.token)
            lines.append(f"  Token {j}: {amount} {label}")
            if not token.symbol:
                lines.append(f"    Address: {token.token}")
        if action.metadata:
            lines.append(f"  Metadata: {json.dumps(action.metadata, indent=2, default=str)}")

    return "\n".join(lines)


def _format_lp_position(position: PositionTracking, chain_id: str) -> list[str]:
    sym0 = position.token0_symbol or "Token0"
    sym1 = position.token1_symbol or "Token1"
    lines = [
        f"\nTokenId: {position.position_id}",
        f"Tokens: {position.token0_symbol or position.token0} / {position.token1_symbol or position.token1}",
        f"Total Events: {len(position.events)}",
        "",
    ]

    if position.events:
        lines.append("  Event Timeline:")
        for event in position.events:
            suffix = " (mirrors pool event)" if event.mirrors_pool_event else ""
            lines.append(f"    {_when(event)}")
            lines.append(f"       {event.type.value}{suffix}")
            lines.append(f"       Tx: {event.tx_hash}")
            lines.append(
                f"       {sym0}: {_amount(event.token0_amount, chain_id, position.token0)}, "
                f"{sym1}: {_amount(event.token1_amount, chain_id, position.token1)}"
            )
        lines.append("")

    if position.holding_duration_seconds is not None:
        lines.append("  Holding Duration:")
        lines.append(f"    {format_duration(position.holding_duration_seconds)}")
        lines.append(f"    From: {_iso(position.first_mint_timestamp)}")
        lines.append(f"    To: {_iso(position.last_exit_timestamp)}")
        lines.append("")

    for title, amount0, amount1 in (
        ("Total Minted (Inflows)", position.mint_token0_amount, position.mint_token1_amount),
        ("Total Withdrawn (Outflows)", position.withdraw_token0_amount, position.withdraw_token1_amount),
        ("Total Fees Collected", position.fees_token0_amount, position.fees_token1_amount),
    ):
        lines.append(f"  {title}:")
        lines.append(f"    {sym0}: {_amount(amount0, chain_id, position.token0)}")
        lines.append(f"    {sym1}: {_amount(amount1, chain_id, position.token1)}")
        lines.append("")

    lines.append("  Net LP Position Change (excluding fees):")
    lines.append(f"    {sym0}: {_signed(position.net_lp_token0_change, chain_id, position.token0)}")
    lines.append(f"    {sym1}: {_signed(position.net_lp_token1_change, chain_id, position.token1)}")
    lines.append("-" * RULE_WIDTH)
    return lines


def format_position_tracking(summary: PositionTrackingSummary, chain_id: str = "8453") -> str:
    if not summary.positions:
        return "No position tracking data available (no tokenId found in actions)"

    lines = [f"\nPosition Tracking Summary ({len(summary.positions)} positions):", "=" * RULE_WIDTH]
    for position in summary.positions.values():
        lines.extend(_format_lp_position(position, str(chain_id)))
    return "\n".join(lines)


def _format_lending_position(position: LendingPositionTracking, chain_id: str) -> list[str]:
    symbol = position.token_symbol or "Token"
    token = position.token
    lines = [
        f"\nProtocol: {position.protocol.value}",
        f"Token: {position.token_symbol or token}",
    ]
    if position.vault_address:
        lines.append(f"Vault Address: {position.vault_address}")
    lines.append(f"Total Events: {len(position.events)}")
    lines.append("")

    if position.events:
        lines.append("  Event Timeline:")
        for event in position.events:
            lines.append(f"    {_when(event)}")
            lines.append(f"       {event.type.value}")
            lines.append(f"       Tx: {event.tx_hash}")
            lines.append(f"       Amount: {symbol}: {_amount(event.token0_amount, chain_id, token)}")
            if event.running_balance is not None:
                balance = event.formatted_running_balance or str(event.running_balance)
                flag = " (Near Zero)" if is_near_zero(event.running_balance) else ""
                lines.append(f"       Balance after: {balance} {symbol}{flag}")
        lines.append("")

    if position.holding_duration_seconds is not None:
        lines.append("  Holding Duration:")
        lines.append(f"    {format_duration(position.holding_duration_seconds)}")
        lines.append(f"    From: {_iso(position.first_supply_timestamp)}")
        lines.append(f"    To: {_iso(position.last_withdraw_timestamp)}")
        lines.append("")

    lines.append("  Total Supplied:")
    lines.append(f"    {symbol}: {_amount(position.total_supplied, chain_id, token)}")
    lines.append("  Total Withdrawn:")
    lines.append(f"    {symbol}: {_amount(position.total_withdrawn, chain_id, token)}")
    lines.append("  Interest Earned:")
    lines.append(f"    {symbol}: {_signed(position.total_interest_earned, chain_id, token)}")
    if position.unmatched_withdrawn:
        lines.append("  Withdrawn Without Matching Supply:")
        lines.append(f"    {symbol}: {_amount(position.unmatched_withdrawn, chain_id, token)}")

    remaining = position.total_supplied - position.total_withdrawn
    lines.append("  Current Balance (Remaining in Position):")
    if is_near_zero(remaining):
        status = " (Near Zero - Position Closed)"
    elif remaining > 0:
        status = " (Still Active)"
    else:
        status = ""
    lines.append(f"    {symbol}: {_amount(remaining, chain_id, token)}{status}")
    lines.append("")

    if position.cycles:
        lines.append(f"  Supply-Withdraw Cycles ({len(position.cycles)} cycles):")
        for i, cycle in enumerate(position.cycles, start=1):
            lines.append(f"    Cycle #{i}:")
            lines.append(f"      Supply: {_amount(cycle.supply_amount, chain_id, token)} {symbol}")
            lines.append(f"         at {_when(cycle.supply_event)}")
            lines.append(f"         Tx: {cycle.supply_event.tx_hash}")
            for withdraw in cycle.withdraw_events:
                lines.append(f"      Withdraw: {_amount(cycle.withdrawn_amount, chain_id, token)} {symbol}")
                lines.append(f"         at {_when(withdraw)}")
                lines.append(f"         Tx: {withdraw.tx_hash}")
            lines.append(f"      Profit: {_signed(cycle.profit, chain_id, token)} {symbol}")
            if cycle.holding_duration_seconds is not None:
                lines.append(f"      Duration: {format_duration(cycle.holding_duration_seconds)}")
            lines.append("")

    lines.append("-" * RULE_WIDTH)
    return lines


def format_lending_positions(summary: LendingPositionSummary, chain_id: str = "8453") -> str:
    if not summary.positions:
        return "No lending positions found"

    lines = [f"\nLending Position Summary ({len(summary.positions)} positions):", "=" * RULE_WIDTH]
    for position in summary.positions.values():
        lines.extend(_format_lending_position(position, str(chain_id)))
    return "\n".join(lines)
