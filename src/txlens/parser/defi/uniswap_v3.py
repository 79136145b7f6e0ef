"""Uniswap V3 decoder: pool-level Mint/Burn/Collect and position manager Increase/DecreaseLiquidity.

Pool events carry tick range and amounts but no token addresses and no NFT id; tokens are read
from the pool's token0()/token1(). Position manager events carry the NFT id but no tokens and
are emitted with placeholder identities. Correlation in accounting.correlation links the two.
"""

import logging
from typing import Any

from txlens.domain.enums import Protocol, RebalanceActionType
from txlens.domain.models import UNKNOWN_TOKEN0, UNKNOWN_TOKEN1, RawLog, TokenAmount
from txlens.exceptions import ContractCallError, ExternalServiceError
from txlens.infra.blockchain.evm.contract_reader import ContractReader
from txlens.parser.generic.base import EventDrivenDecoder, token_amount
from txlens.parser.utils.types import DecodedFlows, EventDescriptor

logger = logging.getLogger(__name__)

UNISWAP_V3_EVENTS = [
    EventDescriptor.from_abi(
        Protocol.UNISWAP_V3, RebalanceActionType.ADD_LIQUIDITY,
        "IncreaseLiquidity(uint256 indexed tokenId,uint128 liquidity,uint256 amount0,uint256 amount1)",
    ),
    EventDescriptor.from_abi(
        Protocol.UNISWAP_V3, RebalanceActionType.REMOVE_LIQUIDITY,
        "DecreaseLiquidity(uint256 indexed tokenId,uint128 liquidity,uint256 amount0,uint256 amount1)",
    ),
    EventDescriptor.from_abi(
        Protocol.UNISWAP_V3, RebalanceActionType.POOL_MINT,
        "Mint(address sender,address indexed owner,int24 indexed tickLower,int24 indexed tickUpper,"
        "uint128 amount,uint256 amount0,uint256 amount1)",
    ),
    EventDescriptor.from_abi(
        Protocol.UNISWAP_V3, RebalanceActionType.POOL_BURN,
        "Burn(address indexed owner,int24 indexed tickLower,int24 indexed tickUpper,"
        "uint128 amount,uint256 amount0,uint256 amount1)",
    ),
    EventDescriptor.from_abi(
        Protocol.UNISWAP_V3, RebalanceActionType.POOL_COLLECT,
        "Collect(address indexed owner,address recipient,int24 indexed tickLower,int24 indexed tickUpper,"
        "uint128 amount0,uint128 amount1)",
    ),
]


def placeholder_pair(amount0: int, amount1: int) -> list[TokenAmount]:
    return [token_amount(UNKNOWN_TOKEN0, amount0), token_amount(UNKNOWN_TOKEN1, amount1)]


class UniswapV3Decoder(EventDrivenDecoder):
    """Handles Uniswap V3 LP events from pools and the NonfungiblePositionManager."""

    PROTOCOL = Protocol.UNISWAP_V3
    EVENTS = UNISWAP_V3_EVENTS
    EVENT_HANDLERS = {
        "IncreaseLiquidity": "_handle_position_liquidity",
        "DecreaseLiquidity": "_handle_position_liquidity",
        "Mint": "_handle_pool_liquidity",
        "Burn": "_handle_pool_liquidity",
        "Collect": "_handle_pool_liquidity",
    }

    async def _handle_position_liquidity(
        self, log: RawLog, descriptor: EventDescriptor, args: dict[str, Any], reader: ContractReader
    ) -> DecodedFlows:
        # Token addresses would need positions(tokenId) on the manager; kept as placeholders
        return DecodedFlows(
            tokens=placeholder_pair(args["amount0"], args["amount1"]),
            metadata={"liquidity": str(args["liquidity"])},
        )

    async def _handle_pool_liquidity(
        self, log: RawLog, descriptor: EventDescriptor, args: dict[str, Any], reader: ContractReader
    ) -> DecodedFlows:
        amount0, amount1 = args["amount0"], args["amount1"]
        try:
            token0, token1 = await reader.token_pair(log.address)
            tokens = [token_amount(token0, amount0), token_amount(token1, amount1)]
        except (ContractCallError, ExternalServiceError) as e:
            logger.warning("token0/token1 lookup failed for pool %s, using placeholders: %s", log.address, e)
            tokens = placeholder_pair(amount0, amount1)

        metadata: dict[str, Any] = {
            "owner": args["owner"],
            "tick_lower": args["tickLower"],
            "tick_upper": args["tickUpper"],
        }
        if "amount" in args:
            metadata["liquidity"] = str(args["amount"])
        if "recipient" in args:
            metadata["recipient"] = args["recipient"]
        return DecodedFlows(tokens=tokens, metadata=metadata)
