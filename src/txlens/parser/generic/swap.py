"""Uniswap V2-style pair Swap events: four legs (in0, in1, out0, out1) against token0/token1."""

import logging
from typing import Any

from txlens.domain.enums import Protocol, RebalanceActionType
from txlens.domain.models import UNKNOWN_TOKEN0, UNKNOWN_TOKEN1, RawLog, TokenAmount
from txlens.exceptions import ContractCallError, ExternalServiceError
from txlens.infra.blockchain.evm.contract_reader import ContractReader
from txlens.parser.generic.base import EventDrivenDecoder, token_amount
from txlens.parser.utils.types import DecodedFlows, EventDescriptor

logger = logging.getLogger(__name__)


class AMMSwapDecoder(EventDrivenDecoder):
    """Emits the non-zero legs in order: amount0In, amount1In, amount0Out, amount1Out.

    token0()/token1() are read from the pair; if that fails the legs use UNKNOWN_TOKEN0/1.
    """

    EVENT_HANDLERS = {"Swap": "_handle_swap"}

    async def _handle_swap(
        self, log: RawLog, descriptor: EventDescriptor, args: dict[str, Any], reader: ContractReader
    ) -> DecodedFlows:
        try:
            token0, token1 = await reader.token_pair(log.address)
        except (ContractCallError, ExternalServiceError) as e:
            logger.warning("token0/token1 lookup failed for pair %s, using placeholders: %s", log.address, e)
            token0, token1 = UNKNOWN_TOKEN0, UNKNOWN_TOKEN1

        legs = [
            (token0, args["amount0In"]),
            (token1, args["amount1In"]),
            (token0, args["amount0Out"]),
            (token1, args["amount1Out"]),
        ]
        tokens: list[TokenAmount] = [token_amount(token, amount) for token, amount in legs if amount > 0]
        return DecodedFlows(tokens=tokens, metadata={"sender": args["sender"], "to": args["to"]})


class UniswapV2SwapDecoder(AMMSwapDecoder):
    PROTOCOL = Protocol.UNISWAP_V2
    EVENTS = [
        EventDescriptor.from_abi(
            Protocol.UNISWAP_V2, RebalanceActionType.SWAP,
            "Swap(address indexed sender,uint256 amount0In,uint256 amount1In,"
            "uint256 amount0Out,uint256 amount1Out,address indexed to)",
        ),
    ]


class AerodromeSwapDecoder(AMMSwapDecoder):
    """Aerodrome/Velodrome pools: same legs, `to` moved up as the second indexed param."""

    PROTOCOL = Protocol.AERODROME
    EVENTS = [
        EventDescriptor.from_abi(
            Protocol.AERODROME, RebalanceActionType.SWAP,
            "Swap(address indexed sender,address indexed to,uint256 amount0In,uint256 amount1In,"
            "uint256 amount0Out,uint256 amount1Out)",
        ),
    ]
