from txlens.domain.models.chain import BlockHeader, RawLog, TransactionReceipt
from txlens.domain.models.position import (
    LendingCycle,
    LendingPositionSummary,
    LendingPositionTracking,
    OpenSupply,
    PositionEvent,
    PositionTracking,
    PositionTrackingSummary,
)
from txlens.domain.models.transaction import (
    PLACEHOLDER_TOKENS,
    UNKNOWN_TOKEN0,
    UNKNOWN_TOKEN1,
    ParsedTransaction,
    RebalanceAction,
    TokenAmount,
)

__all__ = [
    "PLACEHOLDER_TOKENS",
    "UNKNOWN_TOKEN0",
    "UNKNOWN_TOKEN1",
    "BlockHeader",
    "LendingCycle",
    "LendingPositionSummary",
    "LendingPositionTracking",
    "OpenSupply",
    "ParsedTransaction",
    "PositionEvent",
    "PositionTracking",
    "PositionTrackingSummary",
    "RawLog",
    "RebalanceAction",
    "TokenAmount",
    "TransactionReceipt",
]
