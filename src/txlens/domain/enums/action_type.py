from enum import Enum


class RebalanceActionType(str, Enum):
    """Classification of decoded actions by DeFi operation."""

    # Position manager (NFT) level
    ADD_LIQUIDITY = "ADD_LIQUIDITY"
    REMOVE_LIQUIDITY = "REMOVE_LIQUIDITY"

    # Pool level
    POOL_MINT = "POOL_MINT"
    POOL_BURN = "POOL_BURN"
    POOL_COLLECT = "POOL_COLLECT"

    SWAP = "SWAP"

    SUPPLY = "SUPPLY"
    WITHDRAW = "WITHDRAW"
    BORROW = "BORROW"
    REPAY = "REPAY"


LP_MINT_TYPES = frozenset({RebalanceActionType.POOL_MINT, RebalanceActionType.ADD_LIQUIDITY})
LP_BURN_TYPES = frozenset({RebalanceActionType.POOL_BURN, RebalanceActionType.REMOVE_LIQUIDITY})
LP_EXIT_TYPES = LP_BURN_TYPES | {RebalanceActionType.POOL_COLLECT}
