"""Decoded transaction types produced by the parser."""

from typing import Any

from pydantic import BaseModel, ConfigDict

from txlens.domain.enums import Protocol, RebalanceActionType
from txlens.domain.models.chain import RawLog

UNKNOWN_TOKEN0 = "UNKNOWN_TOKEN0"
UNKNOWN_TOKEN1 = "UNKNOWN_TOKEN1"
PLACEHOLDER_TOKENS = frozenset({UNKNOWN_TOKEN0, UNKNOWN_TOKEN1})


class TokenAmount(BaseModel):
    """A token flow. amount is the raw integer in smallest units, kept as a decimal string."""

    model_config = ConfigDict(frozen=True)

    token: str  # lowercase address or UNKNOWN_TOKEN0/1 placeholder
    amount: str
    symbol: str | None = None
    decimals: int | None = None
    amount_formatted: str | None = None

    @property
    def raw_amount(self) -> int:
        return int(self.amount)

    @property
    def is_placeholder(self) -> bool:
        return self.token in PLACEHOLDER_TOKENS


class RebalanceAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: RebalanceActionType
    protocol: Protocol
    tokens: list[TokenAmount]
    metadata: dict[str, Any] = {}
    event_index: int = 0  # index among successfully decoded actions, set by the parser
    log_index: int  # position of the source log in the receipt
    position_id: str | None = None  # NFT tokenId for position manager actions
    contract_address: str | None = None  # emitting contract


class ParsedTransaction(BaseModel):
    model_config = ConfigDict(frozen=True)

    transaction_hash: str
    block_number: int
    timestamp: int | None = None
    actions: list[RebalanceAction] = []
    raw_logs: list[RawLog] | None = None  # diagnostics only
