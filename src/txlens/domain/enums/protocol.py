from enum import Enum


class Protocol(str, Enum):
    """Protocols whose events the decoder understands."""

    # DEX
    UNISWAP_V2 = "UNISWAP_V2"
    UNISWAP_V3 = "UNISWAP_V3"
    AERODROME = "AERODROME"

    # Aggregators
    OKX_ROUTER = "OKX_ROUTER"
    KYBERSWAP_ROUTER = "KYBERSWAP_ROUTER"

    # Lending
    AAVE = "AAVE"
    EULER = "EULER"
    VENUS = "VENUS"
