"""Tests for UniswapV3Decoder: pool events resolve tokens, position manager events use placeholders."""

from support import (
    NFT_MANAGER,
    POOL,
    USDC,
    USDT,
    decrease_liquidity_log,
    descriptor,
    increase_liquidity_log,
    pool_burn_log,
    pool_collect_log,
    pool_mint_log,
)

from txlens.domain.enums import Protocol, RebalanceActionType
from txlens.domain.models import UNKNOWN_TOKEN0, UNKNOWN_TOKEN1
from txlens.infra.blockchain.evm.contract_reader import TOKEN0, TOKEN1
from txlens.parser.decoder import ActionDecoder


class TestPoolEvents:
    async def test_mint_resolves_pool_tokens(self, fake_source, reader):
        fake_source.set_pool_tokens(POOL, USDC, USDT)
        log = pool_mint_log(1_000_000, 2_000_000, log_index=3)

        action = await ActionDecoder().decode(log, descriptor(Protocol.UNISWAP_V3, "Mint"), reader)

        assert action.type == RebalanceActionType.POOL_MINT
        assert action.protocol == Protocol.UNISWAP_V3
        assert [(t.token, t.amount) for t in action.tokens] == [(USDC, "1000000"), (USDT, "2000000")]
        assert action.log_index == 3
        assert action.position_id is None
        assert action.contract_address == POOL
        assert action.metadata["tick_lower"] == -200
        assert action.metadata["tick_upper"] == 200

    async def test_burn_and_collect(self, fake_source, reader):
        fake_source.set_pool_tokens(POOL, USDC, USDT)
        decoder = ActionDecoder()

        burn = await decoder.decode(pool_burn_log(900, 1800), descriptor(Protocol.UNISWAP_V3, "Burn"), reader)
        collect = await decoder.decode(
            pool_collect_log(1000, 2000), descriptor(Protocol.UNISWAP_V3, "Collect"), reader
        )

        assert burn.type == RebalanceActionType.POOL_BURN
        assert [t.amount for t in burn.tokens] == ["900", "1800"]
        assert collect.type == RebalanceActionType.POOL_COLLECT
        assert [t.token for t in collect.tokens] == [USDC, USDT]
        assert collect.metadata["recipient"] == "0x1111111111111111111111111111111111111111"

    async def test_token_lookup_failure_falls_back_to_placeholders(self, reader):
        # fake_source has no token0/token1 answers: calls revert
        action = await ActionDecoder().decode(
            pool_mint_log(5, 6), descriptor(Protocol.UNISWAP_V3, "Mint"), reader
        )
        assert action is not None
        assert [(t.token, t.amount) for t in action.tokens] == [(UNKNOWN_TOKEN0, "5"), (UNKNOWN_TOKEN1, "6")]

    async def test_token_lookup_memoised(self, fake_source, reader):
        fake_source.set_pool_tokens(POOL, USDC, USDT)
        decoder = ActionDecoder()
        await decoder.decode(pool_burn_log(1, 1), descriptor(Protocol.UNISWAP_V3, "Burn"), reader)
        await decoder.decode(pool_collect_log(1, 1), descriptor(Protocol.UNISWAP_V3, "Collect"), reader)

        assert fake_source.calls.count((POOL, TOKEN0)) == 1
        assert fake_source.calls.count((POOL, TOKEN1)) == 1


class TestPositionManagerEvents:
    async def test_increase_liquidity_placeholders_and_id(self, fake_source, reader):
        action = await ActionDecoder().decode(
            increase_liquidity_log(42, 1_000_000, 2_000_000), descriptor(Protocol.UNISWAP_V3, "IncreaseLiquidity"), reader
        )
        assert action.type == RebalanceActionType.ADD_LIQUIDITY
        assert action.position_id == "42"
        assert action.contract_address == NFT_MANAGER
        assert [(t.token, t.amount) for t in action.tokens] == [
            (UNKNOWN_TOKEN0, "1000000"),
            (UNKNOWN_TOKEN1, "2000000"),
        ]
        # No contract calls for position manager events
        assert fake_source.calls == []

    async def test_decrease_liquidity(self, reader):
        action = await ActionDecoder().decode(
            decrease_liquidity_log(7, 10, 20), descriptor(Protocol.UNISWAP_V3, "DecreaseLiquidity"), reader
        )
        assert action.type == RebalanceActionType.REMOVE_LIQUIDITY
        assert action.position_id == "7"
        assert all(t.is_placeholder for t in action.tokens)
