"""DEX aggregator routers that log both tokens and both amounts in a single event."""

from typing import Any

from txlens.domain.enums import Protocol, RebalanceActionType
from txlens.domain.models import RawLog
from txlens.infra.blockchain.evm.contract_reader import ContractReader
from txlens.parser.generic.base import EventDrivenDecoder, token_amount
from txlens.parser.utils.types import DecodedFlows, EventDescriptor


class OKXRouterDecoder(EventDrivenDecoder):
    PROTOCOL = Protocol.OKX_ROUTER
    EVENTS = [
        EventDescriptor.from_abi(
            Protocol.OKX_ROUTER, RebalanceActionType.SWAP,
            "OrderRecord(address fromToken,address toToken,address sender,uint256 fromAmount,uint256 returnAmount)",
        ),
    ]
    EVENT_HANDLERS = {"OrderRecord": "_handle_order_record"}

    async def _handle_order_record(
        self, log: RawLog, descriptor: EventDescriptor, args: dict[str, Any], reader: ContractReader
    ) -> DecodedFlows:
        return DecodedFlows(
            tokens=[
                token_amount(args["fromToken"], args["fromAmount"]),
                token_amount(args["toToken"], args["returnAmount"]),
            ],
            metadata={"sender": args["sender"]},
        )


class KyberSwapRouterDecoder(EventDrivenDecoder):
    PROTOCOL = Protocol.KYBERSWAP_ROUTER
    EVENTS = [
        EventDescriptor.from_abi(
            Protocol.KYBERSWAP_ROUTER, RebalanceActionType.SWAP,
            "Swapped(address sender,address srcToken,address dstToken,address dstReceiver,"
            "uint256 spentAmount,uint256 returnAmount)",
        ),
    ]
    EVENT_HANDLERS = {"Swapped": "_handle_swapped"}

    async def _handle_swapped(
        self, log: RawLog, descriptor: EventDescriptor, args: dict[str, Any], reader: ContractReader
    ) -> DecodedFlows:
        return DecodedFlows(
            tokens=[
                token_amount(args["srcToken"], args["spentAmount"]),
                token_amount(args["dstToken"], args["returnAmount"]),
            ],
            metadata={"sender": args["sender"], "receiver": args["dstReceiver"]},
        )
