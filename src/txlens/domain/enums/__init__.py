from txlens.domain.enums.action_type import RebalanceActionType
from txlens.domain.enums.chain import Chain
from txlens.domain.enums.protocol import Protocol

__all__ = [
    "Chain",
    "Protocol",
    "RebalanceActionType",
]
