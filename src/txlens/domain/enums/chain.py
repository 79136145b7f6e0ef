from enum import Enum


class Chain(str, Enum):
    """Supported EVM networks. Values are decimal chain ids, matching RPC config keys."""

    ETHEREUM = "1"
    OPTIMISM = "10"
    BSC = "56"
    BASE = "8453"
    ARBITRUM = "42161"
