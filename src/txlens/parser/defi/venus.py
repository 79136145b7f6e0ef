"""Venus (Compound fork) market decoder. Events are emitted by the vToken market contract."""

import logging
from typing import Any

from txlens.domain.enums import Protocol, RebalanceActionType
from txlens.domain.models import RawLog
from txlens.exceptions import ContractCallError, ExternalServiceError
from txlens.infra.blockchain.evm.contract_reader import ContractReader
from txlens.parser.generic.base import EventDrivenDecoder, token_amount
from txlens.parser.utils.types import DecodedFlows, EventDescriptor

logger = logging.getLogger(__name__)

VENUS_EVENTS = [
    EventDescriptor.from_abi(
        Protocol.VENUS, RebalanceActionType.SUPPLY,
        "Mint(address minter,uint256 mintAmount,uint256 mintTokens)",
    ),
    EventDescriptor.from_abi(
        Protocol.VENUS, RebalanceActionType.WITHDRAW,
        "Redeem(address redeemer,uint256 redeemAmount,uint256 redeemTokens)",
    ),
    EventDescriptor.from_abi(
        Protocol.VENUS, RebalanceActionType.BORROW,
        "Borrow(address borrower,uint256 borrowAmount,uint256 accountBorrows,uint256 totalBorrows)",
    ),
    EventDescriptor.from_abi(
        Protocol.VENUS, RebalanceActionType.REPAY,
        "RepayBorrow(address payer,address borrower,uint256 repayAmount,uint256 accountBorrows,uint256 totalBorrows)",
    ),
]

# Event name -> (amount field, positional index)
VENUS_AMOUNT_FIELDS: dict[str, tuple[str, int]] = {
    "Mint": ("mintAmount", 1),
    "Redeem": ("redeemAmount", 1),
    "Borrow": ("borrowAmount", 1),
    "RepayBorrow": ("repayAmount", 2),
}


class VenusDecoder(EventDrivenDecoder):
    PROTOCOL = Protocol.VENUS
    EVENTS = VENUS_EVENTS
    EVENT_HANDLERS = {name: "_handle_market_event" for name in VENUS_AMOUNT_FIELDS}

    async def _handle_market_event(
        self, log: RawLog, descriptor: EventDescriptor, args: dict[str, Any], reader: ContractReader
    ) -> DecodedFlows:
        try:
            token = await reader.underlying(log.address)
        except (ContractCallError, ExternalServiceError):
            # Native markets (vBNB) have no underlying()
            logger.debug("No underlying() on Venus market %s, using market address", log.address)
            token = log.address

        field, index = VENUS_AMOUNT_FIELDS[descriptor.name]
        amount = args[field] if field in args else list(args.values())[index]
        return DecodedFlows(
            tokens=[token_amount(token, amount)],
            metadata={"market": log.address, "account": args.get("borrower", next(iter(args.values())))},
        )
