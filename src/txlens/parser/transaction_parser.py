"""TransactionParser: receipt + block -> ParsedTransaction with ordered, enriched actions."""

import asyncio
import logging
from collections.abc import Callable

from txlens.domain.models import ParsedTransaction, RawLog, RebalanceAction
from txlens.exceptions import BlockNotFoundError, TransactionNotFoundError
from txlens.infra.blockchain.base import ChainDataSource
from txlens.infra.blockchain.evm.contract_reader import ContractReader
from txlens.parser.decoder import ActionDecoder
from txlens.parser.registry import EventRegistry
from txlens.parser.utils.tokens import TokenResolver
from txlens.parser.utils.types import EventDescriptor

logger = logging.getLogger(__name__)


class TransactionParser:
    """Drives the ActionDecoder over every receipt log in order.

    data_source_factory maps a chain id to a ChainDataSource and raises
    UnsupportedChainError for chains without an RPC endpoint.
    """

    def __init__(
        self,
        registry: EventRegistry,
        data_source_factory: Callable[[str], ChainDataSource],
        token_resolver: TokenResolver,
        action_decoder: ActionDecoder | None = None,
    ) -> None:
        self._registry = registry
        self._data_source_factory = data_source_factory
        self._tokens = token_resolver
        self._decoder = action_decoder or ActionDecoder()

    async def parse_transaction(
        self,
        tx_hash: str,
        chain_id: str,
        include_raw_logs: bool = True,
    ) -> ParsedTransaction:
        chain_id = str(chain_id)
        source = self._data_source_factory(chain_id)
        logger.info("Parsing transaction %s on chain %s", tx_hash, chain_id)

        receipt = await source.get_receipt(tx_hash)
        if receipt is None:
            raise TransactionNotFoundError(tx_hash)
        block = await source.get_block(receipt.block_number)
        if block is None:
            raise BlockNotFoundError(receipt.block_number)
        logger.info("Found %d logs in transaction %s", len(receipt.logs), tx_hash)

        resolved: list[tuple[RawLog, EventDescriptor]] = []
        for log in receipt.logs:
            descriptor = self._registry.resolve(log.topics[0] if log.topics else None)
            if descriptor is not None:
                resolved.append((log, descriptor))

        # One reader per transaction: token0()/asset() results are shared across its logs
        reader = ContractReader(source)
        results = await asyncio.gather(
            *(self._decoder.decode(log, descriptor, reader) for log, descriptor in resolved)
        )

        actions: list[RebalanceAction] = []
        for action in results:
            if action is None:
                continue
            action = action.model_copy(update={"event_index": len(actions)})
            actions.append(self._tokens.enrich_action(action, chain_id))

        logger.info(
            "Parsed %d actions from %d recognised logs in %s", len(actions), len(resolved), tx_hash
        )
        return ParsedTransaction(
            transaction_hash=receipt.transaction_hash,
            block_number=receipt.block_number,
            timestamp=block.timestamp,
            actions=actions,
            raw_logs=list(receipt.logs) if include_raw_logs else None,
        )
