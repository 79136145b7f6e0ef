"""Abstract chain data source consumed by the transaction parser."""

from abc import ABC, abstractmethod

from txlens.domain.models import BlockHeader, TransactionReceipt


class ChainDataSource(ABC):
    """Read-only access to one chain: receipts, block headers and eth_call."""

    @abstractmethod
    async def get_receipt(self, tx_hash: str) -> TransactionReceipt | None:
        """Return the receipt with logs in emission order, or None if unknown."""

    @abstractmethod
    async def get_block(self, block_number: int) -> BlockHeader | None:
        """Return the block header, or None if unknown."""

    @abstractmethod
    async def call(self, address: str, data: str) -> str:
        """Execute a read-only call and return the hex-encoded result.

        Raises ContractCallError when the call reverts.
        """
