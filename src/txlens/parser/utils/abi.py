"""Decode a raw log against an EventDescriptor with eth_abi."""

from typing import Any

from eth_abi import decode as abi_decode
from eth_abi.exceptions import DecodingError

from txlens.domain.models import RawLog
from txlens.exceptions import DecodeError
from txlens.parser.utils.types import EventDescriptor, EventParam


def hex_to_bytes(value: str) -> bytes:
    return bytes.fromhex(value[2:] if value.startswith("0x") else value)


def _normalize(param: EventParam, value: Any) -> Any:
    if param.type == "address":
        return value.lower()
    return value


def decode_event_args(log: RawLog, descriptor: EventDescriptor) -> dict[str, Any]:
    """Return {param name: value} in descriptor order.

    Indexed params come from topics[1:], the rest from the data payload.
    Raises DecodeError when the log does not fit the descriptor.
    """
    indexed = descriptor.indexed_params
    if len(log.topics) != 1 + len(indexed):
        raise DecodeError(
            f"{descriptor.signature}: expected {1 + len(indexed)} topics, got {len(log.topics)}"
        )

    values: dict[str, Any] = {}
    try:
        for param, topic in zip(indexed, log.topics[1:]):
            (values[param.name],) = abi_decode([param.type], hex_to_bytes(topic))

        data_params = descriptor.data_params
        if data_params:
            decoded = abi_decode([p.type for p in data_params], hex_to_bytes(log.data))
            for param, value in zip(data_params, decoded):
                values[param.name] = value
    except (DecodingError, ValueError) as e:
        raise DecodeError(f"{descriptor.signature}: {e}") from e

    return {p.name: _normalize(p, values[p.name]) for p in descriptor.params}
