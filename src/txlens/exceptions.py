"""Error hierarchy for txlens.

Parse-fatal errors (missing chain config, missing receipt/block) propagate to the caller.
DecodeError and ContractCallError are caught per log by the decoder.
"""


class TxLensError(Exception):
    """Base class for all txlens errors."""


class ConfigurationError(TxLensError):
    pass


class UnsupportedChainError(ConfigurationError):
    def __init__(self, chain_id: str) -> None:
        super().__init__(f"No RPC URL configured for chain {chain_id}")
        self.chain_id = chain_id


class ExternalServiceError(TxLensError):
    """Transport or node failure that is worth retrying."""


class ContractCallError(TxLensError):
    """Read-only contract call reverted or returned undecodable data."""


class TransactionNotFoundError(TxLensError):
    def __init__(self, tx_hash: str) -> None:
        super().__init__(f"Transaction {tx_hash} not found")
        self.tx_hash = tx_hash


class BlockNotFoundError(TxLensError):
    def __init__(self, block_number: int) -> None:
        super().__init__(f"Block {block_number} not found")
        self.block_number = block_number


class DecodeError(TxLensError):
    """A recognised event log could not be decoded against its descriptor."""
