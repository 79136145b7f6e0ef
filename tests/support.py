"""Shared builders for tests: ABI-encoded logs and an in-memory ChainDataSource."""

from typing import Any

from eth_abi import encode

from txlens.domain.enums import Protocol
from txlens.domain.models import BlockHeader, ParsedTransaction, RawLog, RebalanceAction, TokenAmount, TransactionReceipt
from txlens.exceptions import ContractCallError
from txlens.infra.blockchain.base import ChainDataSource
from txlens.parser.registry import build_default_registry
from txlens.parser.utils.types import EventDescriptor

USDC = "0x833589fcd6edb6e08f4c7c32d4f71b54bda02913"  # Base USDC, 6 decimals
USDT = "0xfde4c96c8593536e31f229ea8f37b2ada2699bb2"  # Base USDT, 6 decimals
WETH = "0x4200000000000000000000000000000000000006"
POOL = "0x" + "aa" * 20
VAULT = "0x" + "bb" * 20
MARKET = "0x" + "cc" * 20
NFT_MANAGER = "0x03a520b32c04bf3beef7beb72e919cf822ed34f1"
WALLET = "0x1111111111111111111111111111111111111111"
TX_HASH = "0x" + "ab" * 32

_REGISTRY = build_default_registry()


def descriptor(protocol: Protocol, name: str) -> EventDescriptor:
    return next(d for d in _REGISTRY.descriptors if d.protocol == protocol and d.name == name)


def encode_address(address: str) -> str:
    return "0x" + encode(["address"], [address]).hex()


def make_log(desc: EventDescriptor, values: dict[str, Any], address: str, log_index: int = 0) -> RawLog:
    """Encode values into a RawLog the way a node would return it."""
    topics = [desc.topic] + [
        "0x" + encode([p.type], [values[p.name]]).hex() for p in desc.indexed_params
    ]
    data_params = desc.data_params
    data = "0x" + encode([p.type for p in data_params], [values[p.name] for p in data_params]).hex()
    return RawLog(address=address, topics=topics, data=data, log_index=log_index)


def pool_mint_log(amount0: int, amount1: int, log_index: int = 0, pool: str = POOL) -> RawLog:
    return make_log(descriptor(Protocol.UNISWAP_V3, "Mint"), {
        "sender": NFT_MANAGER, "owner": NFT_MANAGER, "tickLower": -200, "tickUpper": 200,
        "amount": 10**12, "amount0": amount0, "amount1": amount1,
    }, pool, log_index)


def pool_burn_log(amount0: int, amount1: int, log_index: int = 0, pool: str = POOL) -> RawLog:
    return make_log(descriptor(Protocol.UNISWAP_V3, "Burn"), {
        "owner": NFT_MANAGER, "tickLower": -200, "tickUpper": 200,
        "amount": 10**12, "amount0": amount0, "amount1": amount1,
    }, pool, log_index)


def pool_collect_log(amount0: int, amount1: int, log_index: int = 0, pool: str = POOL) -> RawLog:
    return make_log(descriptor(Protocol.UNISWAP_V3, "Collect"), {
        "owner": NFT_MANAGER, "recipient": WALLET, "tickLower": -200, "tickUpper": 200,
        "amount0": amount0, "amount1": amount1,
    }, pool, log_index)


def increase_liquidity_log(token_id: int, amount0: int, amount1: int, log_index: int = 0) -> RawLog:
    return make_log(descriptor(Protocol.UNISWAP_V3, "IncreaseLiquidity"), {
        "tokenId": token_id, "liquidity": 10**12, "amount0": amount0, "amount1": amount1,
    }, NFT_MANAGER, log_index)


def decrease_liquidity_log(token_id: int, amount0: int, amount1: int, log_index: int = 0) -> RawLog:
    return make_log(descriptor(Protocol.UNISWAP_V3, "DecreaseLiquidity"), {
        "tokenId": token_id, "liquidity": 10**12, "amount0": amount0, "amount1": amount1,
    }, NFT_MANAGER, log_index)


def unknown_log(log_index: int = 0) -> RawLog:
    return RawLog(address=POOL, topics=["0x" + "ff" * 32], data="0x", log_index=log_index)


class FakeDataSource(ChainDataSource):
    """In-memory chain: receipts by hash, blocks by number, eth_call answers by (address, selector)."""

    def __init__(self) -> None:
        self.receipts: dict[str, TransactionReceipt] = {}
        self.blocks: dict[int, BlockHeader] = {}
        self.call_results: dict[tuple[str, str], str] = {}
        self.calls: list[tuple[str, str]] = []

    def add_transaction(self, tx_hash: str, logs: list[RawLog], block_number: int = 100, timestamp: int = 1_700_000_000):
        self.receipts[tx_hash] = TransactionReceipt(transaction_hash=tx_hash, block_number=block_number, logs=logs)
        self.blocks[block_number] = BlockHeader(number=block_number, timestamp=timestamp)

    def set_pool_tokens(self, pool: str, token0: str, token1: str) -> None:
        from txlens.infra.blockchain.evm.contract_reader import TOKEN0, TOKEN1

        self.call_results[(pool.lower(), TOKEN0)] = encode_address(token0)
        self.call_results[(pool.lower(), TOKEN1)] = encode_address(token1)

    def set_address_result(self, contract: str, selector: str, address: str) -> None:
        self.call_results[(contract.lower(), selector)] = encode_address(address)

    async def get_receipt(self, tx_hash: str) -> TransactionReceipt | None:
        return self.receipts.get(tx_hash)

    async def get_block(self, block_number: int) -> BlockHeader | None:
        return self.blocks.get(block_number)

    async def call(self, address: str, data: str) -> str:
        self.calls.append((address.lower(), data))
        result = self.call_results.get((address.lower(), data))
        if result is None:
            raise ContractCallError(f"execution reverted: {address} {data}")
        return result


def make_action(
    action_type,
    amounts: tuple[int, ...],
    event_index: int,
    protocol: Protocol = Protocol.UNISWAP_V3,
    position_id: str | None = None,
    tokens: tuple[str, ...] = (USDC, USDT),
    contract_address: str | None = None,
) -> RebalanceAction:
    return RebalanceAction(
        type=action_type,
        protocol=protocol,
        tokens=[TokenAmount(token=t, amount=str(a)) for t, a in zip(tokens, amounts)],
        event_index=event_index,
        log_index=event_index,
        position_id=position_id,
        contract_address=contract_address,
    )


def make_parsed(
    actions: list[RebalanceAction],
    tx_hash: str = TX_HASH,
    block_number: int = 100,
    timestamp: int | None = 1_700_000_000,
) -> ParsedTransaction:
    return ParsedTransaction(
        transaction_hash=tx_hash, block_number=block_number, timestamp=timestamp, actions=actions
    )
