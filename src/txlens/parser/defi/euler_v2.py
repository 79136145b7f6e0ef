"""Euler V2 vault decoder (ERC-4626 Deposit/Withdraw)."""

import logging
from typing import Any

from txlens.domain.enums import Protocol, RebalanceActionType
from txlens.domain.models import RawLog
from txlens.exceptions import ContractCallError, DecodeError, ExternalServiceError
from txlens.infra.blockchain.evm.contract_reader import ContractReader
from txlens.parser.generic.base import EventDrivenDecoder, token_amount
from txlens.parser.utils.types import DecodedFlows, EventDescriptor

logger = logging.getLogger(__name__)

EULER_EVENTS = [
    EventDescriptor.from_abi(
        Protocol.EULER, RebalanceActionType.SUPPLY,
        "Deposit(address indexed sender,address indexed owner,uint256 assets,uint256 shares)",
    ),
    EventDescriptor.from_abi(
        Protocol.EULER, RebalanceActionType.WITHDRAW,
        "Withdraw(address indexed sender,address indexed receiver,address indexed owner,"
        "uint256 assets,uint256 shares)",
    ),
]


class EulerVaultDecoder(EventDrivenDecoder):
    """Vault logs name no asset. Resolution order: decoded args, asset() on the vault, the vault itself."""

    PROTOCOL = Protocol.EULER
    EVENTS = EULER_EVENTS
    EVENT_HANDLERS = {
        "Deposit": "_handle_vault_event",
        "Withdraw": "_handle_vault_event",
    }

    async def _handle_vault_event(
        self, log: RawLog, descriptor: EventDescriptor, args: dict[str, Any], reader: ContractReader
    ) -> DecodedFlows:
        token = await self._resolve_asset(log.address, args, reader)
        return DecodedFlows(
            tokens=[token_amount(token, _amount(args))],
            metadata={"vault": log.address, "owner": args.get("owner"), "shares": str(args.get("shares", 0))},
        )

    async def _resolve_asset(self, vault: str, args: dict[str, Any], reader: ContractReader) -> str:
        token = args.get("underlying") or args.get("asset")
        if token:
            return token
        try:
            return await reader.asset(vault)
        except (ContractCallError, ExternalServiceError) as e:
            logger.warning("asset() failed for Euler vault %s, using vault address: %s", vault, e)
            return vault


def _amount(args: dict[str, Any]) -> int:
    for name in ("assets", "amount"):
        if name in args:
            return int(args[name])
    raise DecodeError(f"Euler vault event has no assets/amount field: {sorted(args)}")
