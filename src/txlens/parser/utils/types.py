"""Core data types for the decoder engine."""

from typing import Any

from eth_utils import keccak
from pydantic import BaseModel, ConfigDict

from txlens.domain.enums import Protocol, RebalanceActionType
from txlens.domain.models import TokenAmount


class EventParam(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type: str  # canonical ABI type, e.g. "uint256", "address", "int24"
    indexed: bool = False


class EventDescriptor(BaseModel):
    """One recognised event: protocol, action kind and exact argument schema."""

    model_config = ConfigDict(frozen=True)

    protocol: Protocol
    action_type: RebalanceActionType
    name: str
    params: tuple[EventParam, ...]

    @classmethod
    def from_abi(cls, protocol: Protocol, action_type: RebalanceActionType, abi: str) -> "EventDescriptor":
        """Build from a human-readable declaration like "Swapped(address sender,uint256 amount)"."""
        name, _, rest = abi.partition("(")
        params = []
        for decl in rest.rstrip(")").split(","):
            parts = decl.split()
            if not parts:
                continue
            indexed = "indexed" in parts[1:-1]
            params.append(EventParam(name=parts[-1], type=parts[0], indexed=indexed))
        return cls(protocol=protocol, action_type=action_type, name=name.strip(), params=tuple(params))

    @property
    def signature(self) -> str:
        """Canonical signature: name plus ordered param types, indexed flags ignored."""
        return f"{self.name}({','.join(p.type for p in self.params)})"

    @property
    def topic(self) -> str:
        return "0x" + keccak(text=self.signature).hex()

    @property
    def indexed_params(self) -> list[EventParam]:
        return [p for p in self.params if p.indexed]

    @property
    def data_params(self) -> list[EventParam]:
        return [p for p in self.params if not p.indexed]


class DecodedFlows(BaseModel):
    """What a protocol handler extracts from one log, before indices are attached."""

    tokens: list[TokenAmount]
    metadata: dict[str, Any] = {}
