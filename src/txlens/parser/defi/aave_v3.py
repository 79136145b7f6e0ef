"""Aave V3 Pool decoder: Supply, Withdraw, Borrow, Repay.

The reserve (underlying asset) is an indexed event argument, so no contract call is needed.
"""

from typing import Any

from txlens.domain.enums import Protocol, RebalanceActionType
from txlens.domain.models import RawLog
from txlens.infra.blockchain.evm.contract_reader import ContractReader
from txlens.parser.generic.base import EventDrivenDecoder, token_amount
from txlens.parser.utils.types import DecodedFlows, EventDescriptor

AAVE_V3_EVENTS = [
    EventDescriptor.from_abi(
        Protocol.AAVE, RebalanceActionType.SUPPLY,
        "Supply(address indexed reserve,address user,address indexed onBehalfOf,uint256 amount,"
        "uint16 indexed referralCode)",
    ),
    EventDescriptor.from_abi(
        Protocol.AAVE, RebalanceActionType.WITHDRAW,
        "Withdraw(address indexed reserve,address indexed user,address indexed to,uint256 amount)",
    ),
    EventDescriptor.from_abi(
        Protocol.AAVE, RebalanceActionType.BORROW,
        "Borrow(address indexed reserve,address user,address indexed onBehalfOf,uint256 amount,"
        "uint8 interestRateMode,uint256 borrowRate,uint16 indexed referralCode)",
    ),
    EventDescriptor.from_abi(
        Protocol.AAVE, RebalanceActionType.REPAY,
        "Repay(address indexed reserve,address indexed user,address indexed repayer,uint256 amount,bool useATokens)",
    ),
]

# Event name -> (amount field, account field)
AAVE_FIELDS: dict[str, tuple[str, str]] = {
    "Supply": ("amount", "onBehalfOf"),
    "Withdraw": ("amount", "to"),
    "Borrow": ("amount", "onBehalfOf"),
    "Repay": ("amount", "user"),
}


class AaveV3Decoder(EventDrivenDecoder):
    PROTOCOL = Protocol.AAVE
    EVENTS = AAVE_V3_EVENTS
    EVENT_HANDLERS = {name: "_handle_reserve_event" for name in AAVE_FIELDS}

    async def _handle_reserve_event(
        self, log: RawLog, descriptor: EventDescriptor, args: dict[str, Any], reader: ContractReader
    ) -> DecodedFlows:
        amount_field, account_field = AAVE_FIELDS[descriptor.name]
        return DecodedFlows(
            tokens=[token_amount(args["reserve"], args[amount_field])],
            metadata={"pool": log.address, "account": args[account_field]},
        )

