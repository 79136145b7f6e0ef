"""Position tracking types: LP positions keyed by NFT id, lending positions keyed by protocol+token."""

from pydantic import BaseModel, ConfigDict

from txlens.domain.enums import Protocol, RebalanceActionType


class PositionEvent(BaseModel):
    """One action that touched a tracked position."""

    model_config = ConfigDict(frozen=True)

    tx_hash: str
    timestamp: int | None = None
    block_number: int
    event_index: int
    log_index: int
    type: RebalanceActionType
    token0: str
    token1: str = ""  # empty for lending events
    token0_amount: int
    token1_amount: int = 0
    token0_symbol: str | None = None
    token1_symbol: str | None = None
    # LP: position manager action that repeats a correlated pool mint/burn
    mirrors_pool_event: bool = False
    # Lending: balance after this event
    running_balance: int | None = None
    formatted_running_balance: str | None = None


class PositionTracking(BaseModel):
    position_id: str
    token0: str
    token1: str
    token0_symbol: str | None = None
    token1_symbol: str | None = None

    events: list[PositionEvent] = []

    first_mint_timestamp: int | None = None
    last_exit_timestamp: int | None = None
    holding_duration_seconds: int | None = None

    # POOL_MINT / ADD_LIQUIDITY inputs
    mint_token0_amount: int = 0
    mint_token1_amount: int = 0
    # POOL_COLLECT outputs (principal + fees)
    withdraw_token0_amount: int = 0
    withdraw_token1_amount: int = 0
    fees_token0_amount: int = 0
    fees_token1_amount: int = 0
    # Minted minus burned, excluding fees
    net_lp_token0_change: int = 0
    net_lp_token1_change: int = 0


class PositionTrackingSummary(BaseModel):
    positions: dict[str, PositionTracking] = {}


class LendingCycle(BaseModel):
    """A supply matched FIFO against one withdraw."""

    model_config = ConfigDict(frozen=True)

    supply_event: PositionEvent
    withdraw_events: list[PositionEvent]
    supply_amount: int
    withdrawn_amount: int
    profit: int = 0
    holding_duration_seconds: int | None = None


class LendingPositionTracking(BaseModel):
    token: str
    token_symbol: str | None = None
    protocol: Protocol
    vault_address: str | None = None  # Euler vault

    events: list[PositionEvent] = []
    cycles: list[LendingCycle] = []

    first_supply_timestamp: int | None = None
    last_withdraw_timestamp: int | None = None
    holding_duration_seconds: int | None = None

    total_supplied: int = 0
    total_withdrawn: int = 0
    total_interest_earned: int = 0  # withdrawn - supplied, may be negative
    unmatched_withdrawn: int = 0  # withdrawn with no open supply to match


class LendingPositionSummary(BaseModel):
    positions: dict[str, LendingPositionTracking] = {}


class OpenSupply(BaseModel):
    """A supply still (partly) in the FIFO queue. The supply event itself is never modified."""

    supply_event: PositionEvent
    remaining: int
