"""Raw chain data as returned by a ChainDataSource."""

from pydantic import BaseModel, ConfigDict


class RawLog(BaseModel):
    """One event log from a transaction receipt."""

    model_config = ConfigDict(frozen=True)

    address: str  # emitting contract, lowercase
    topics: list[str]  # hex strings, topics[0] = event hash
    data: str = "0x"
    log_index: int  # position within the receipt's log list
    block_log_index: int | None = None  # node-reported index within the block


class TransactionReceipt(BaseModel):
    model_config = ConfigDict(frozen=True)

    transaction_hash: str
    block_number: int
    status: int | None = None
    logs: list[RawLog] = []


class BlockHeader(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: int
    timestamp: int
