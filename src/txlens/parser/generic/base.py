"""Base decoder interfaces."""

from typing import Any

from txlens.domain.enums import Protocol
from txlens.domain.models import RawLog, TokenAmount
from txlens.exceptions import DecodeError
from txlens.infra.blockchain.evm.contract_reader import ContractReader
from txlens.parser.utils.types import DecodedFlows, EventDescriptor


class EventDrivenDecoder:
    """Declarative event->handler mapping for protocol-specific decoders.

    Subclasses define:
        PROTOCOL: the Protocol whose descriptors this decoder handles
        EVENTS: descriptors contributed to the default registry
        EVENT_HANDLERS: dict mapping event names to handler method names

    Handler method signature:
        async def _handle_xxx(self, log, descriptor, args, reader) -> DecodedFlows
    """

    PROTOCOL: Protocol
    EVENTS: list[EventDescriptor] = []
    EVENT_HANDLERS: dict[str, str] = {}

    async def decode(
        self,
        log: RawLog,
        descriptor: EventDescriptor,
        args: dict[str, Any],
        reader: ContractReader,
    ) -> DecodedFlows:
        handler_name = self.EVENT_HANDLERS.get(descriptor.name)
        if handler_name is None:
            raise DecodeError(f"{type(self).__name__} has no handler for {descriptor.name}")
        handler_func = getattr(self, handler_name)
        return await handler_func(log, descriptor, args, reader)


def token_amount(token: str, amount: int) -> TokenAmount:
    return TokenAmount(token=token.lower() if token.startswith("0x") else token, amount=str(amount))
