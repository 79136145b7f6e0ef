"""ActionDecoder: one raw log + its descriptor -> RebalanceAction, failing soft."""

import logging

from txlens.domain.enums import Protocol
from txlens.domain.models import RawLog, RebalanceAction
from txlens.infra.blockchain.evm.contract_reader import ContractReader
from txlens.parser.generic.base import EventDrivenDecoder
from txlens.parser.utils.abi import decode_event_args
from txlens.parser.utils.types import EventDescriptor

logger = logging.getLogger(__name__)


def build_default_decoders() -> dict[Protocol, EventDrivenDecoder]:
    """One decoder per Protocol, in registry table order."""
    from txlens.parser.defi.aave_v3 import AaveV3Decoder
    from txlens.parser.defi.aggregators import KyberSwapRouterDecoder, OKXRouterDecoder
    from txlens.parser.defi.euler_v2 import EulerVaultDecoder
    from txlens.parser.defi.uniswap_v3 import UniswapV3Decoder
    from txlens.parser.defi.venus import VenusDecoder
    from txlens.parser.generic.swap import AerodromeSwapDecoder, UniswapV2SwapDecoder

    decoders: list[EventDrivenDecoder] = [
        UniswapV3Decoder(),
        OKXRouterDecoder(),
        KyberSwapRouterDecoder(),
        UniswapV2SwapDecoder(),
        AerodromeSwapDecoder(),
        AaveV3Decoder(),
        EulerVaultDecoder(),
        VenusDecoder(),
    ]
    return {d.PROTOCOL: d for d in decoders}


class ActionDecoder:
    """Dispatches a resolved log to its protocol decoder.

    Any failure (malformed data, missing handler, failed token lookup that the
    protocol decoder does not absorb) is logged and yields None.
    """

    def __init__(self, decoders: dict[Protocol, EventDrivenDecoder] | None = None) -> None:
        self._decoders = decoders if decoders is not None else build_default_decoders()

    async def decode(
        self,
        log: RawLog,
        descriptor: EventDescriptor,
        reader: ContractReader,
    ) -> RebalanceAction | None:
        logger.debug("Decoding %s (%s) at log %d", descriptor.name, descriptor.protocol.value, log.log_index)
        try:
            args = decode_event_args(log, descriptor)
            decoder = self._decoders[descriptor.protocol]
            flows = await decoder.decode(log, descriptor, args, reader)
        except Exception as e:
            logger.warning(
                "Failed to decode %s event from %s at log %d: %s",
                descriptor.name, descriptor.protocol.value, log.log_index, e,
            )
            return None

        token_id = args.get("tokenId")
        return RebalanceAction(
            type=descriptor.action_type,
            protocol=descriptor.protocol,
            tokens=flows.tokens,
            metadata=flows.metadata,
            log_index=log.log_index,
            position_id=str(token_id) if token_id is not None else None,
            contract_address=log.address,
        )
