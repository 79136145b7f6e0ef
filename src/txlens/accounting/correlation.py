"""Position id correlation between pool-level and position-manager-level Uniswap V3 actions.

Pool Mint/Burn/Collect logs carry no NFT id. Within one transaction each borrows the id of a
nearby position manager action:

    POOL_BURN    -> nearest later REMOVE_LIQUIDITY with an id
    POOL_MINT    -> nearest later ADD_LIQUIDITY with an id
    POOL_COLLECT -> nearest earlier REMOVE_LIQUIDITY with an id, else nearest later one
"""

from pydantic import BaseModel, ConfigDict

from txlens.domain.enums import Protocol, RebalanceActionType
from txlens.domain.models import RebalanceAction


class CorrelatedAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    action: RebalanceAction
    position_id: str | None = None
    # Index of the position manager action a pool mint/burn was matched to
    counterpart_index: int | None = None


def _is_manager_action(action: RebalanceAction, action_type: RebalanceActionType) -> bool:
    return (
        action.protocol == Protocol.UNISWAP_V3
        and action.type == action_type
        and bool(action.position_id)
    )


def _scan_forward(actions: list[RebalanceAction], start: int, action_type: RebalanceActionType) -> int | None:
    for j in range(start + 1, len(actions)):
        if _is_manager_action(actions[j], action_type):
            return j
    return None


def _scan_backward(actions: list[RebalanceAction], start: int, action_type: RebalanceActionType) -> int | None:
    for j in range(start - 1, -1, -1):
        if _is_manager_action(actions[j], action_type):
            return j
    return None


def infer_position_ids(actions: list[RebalanceAction]) -> list[CorrelatedAction]:
    """Resolve a position id for every action of one transaction.

    actions must be in event index order. Pure: inputs are not modified.
    """
    correlated: list[CorrelatedAction] = []

    for i, action in enumerate(actions):
        if action.position_id or action.protocol != Protocol.UNISWAP_V3:
            correlated.append(CorrelatedAction(action=action, position_id=action.position_id))
            continue

        match: int | None = None
        counterpart: int | None = None
        if action.type == RebalanceActionType.POOL_BURN:
            match = counterpart = _scan_forward(actions, i, RebalanceActionType.REMOVE_LIQUIDITY)
        elif action.type == RebalanceActionType.POOL_MINT:
            match = counterpart = _scan_forward(actions, i, RebalanceActionType.ADD_LIQUIDITY)
        elif action.type == RebalanceActionType.POOL_COLLECT:
            match = _scan_backward(actions, i, RebalanceActionType.REMOVE_LIQUIDITY)
            if match is None:
                match = _scan_forward(actions, i, RebalanceActionType.REMOVE_LIQUIDITY)

        correlated.append(CorrelatedAction(
            action=action,
            position_id=actions[match].position_id if match is not None else None,
            counterpart_index=counterpart,
        ))

    return correlated
