"""
行动逻辑模块

计算街下注状态、判断可用行动，并在追加行动前做完整校验.
"""

import logging
from typing import Optional

from ..exceptions import ActionError, ActionErrorCode
from ..history.types import Action, ActionType, HandHistory, Street
from ..projector.stack_projector import StackProjector
from ..state_machine.types import HandPhase, RoundState
from .types import PermissibleActions, StreetState

__all__ = ['compute_street_state', 'determine_permissible_actions', 'validate_action']

logger = logging.getLogger(__name__)


def compute_street_state(history: HandHistory, street: Street,
                         upto: Optional[int] = None,
                         projector: Optional[StackProjector] = None) -> StreetState:
    """
    计算一条街的下注状态

    最小加注幅度从大盲开始；首个主动下注把它设为下注额，之后每次超过当前最高投入
    且幅度更大的加注会更新它。盲注不改变加注幅度。

    Args:
        history: 手牌历史
        street: 街
        upto: 日志前缀长度
        projector: 可复用的投影器

    Returns:
        StreetState: 本街下注状态
    """
    projector = projector or StackProjector(history)
    big_blind = history.blinds.big_blind
    contributions = {position: 0 for position in history.positions}
    last_raise = big_blind
    current_max = 0

    for action in projector.street_actions(street, upto):
        if not action.action_type.commits_chips:
            continue
        new_total = contributions[action.position] + action.amount
        if not action.forced:
            if current_max > 0 and new_total > current_max:
                raise_by = new_total - current_max
                if raise_by > last_raise:
                    last_raise = raise_by
            elif current_max == 0 and action.amount > 0:
                last_raise = max(action.amount, big_blind)
        contributions[action.position] = new_total
        current_max = max(current_max, new_total)

    return StreetState(
        street=street,
        contributions=contributions,
        max_bet=current_max,
        last_raise=last_raise,
        big_blind=big_blind,
    )


def determine_permissible_actions(street_state: StreetState, position: str,
                                  stack: int) -> PermissibleActions:
    """
    确定玩家的可用行动

    弃牌总是可以；不需跟注时可以过牌，否则可以跟注；本街无人投入时可以下注，
    已有投入且筹码多于跟注额时可以加注；有筹码就可以全押。所有金额以筹码为上限。

    Args:
        street_state: 本街下注状态
        position: 玩家位置
        stack: 玩家当前筹码

    Returns:
        PermissibleActions: 可用行动和金额约束
    """
    to_call = street_state.to_call(position)
    available = [ActionType.FOLD]

    if to_call == 0:
        available.append(ActionType.CHECK)
    else:
        available.append(ActionType.CALL)

    min_amount = 0
    if street_state.max_bet == 0:
        if stack > 0:
            available.append(ActionType.BET)
            min_amount = min(street_state.big_blind, stack)
    elif stack > to_call:
        available.append(ActionType.RAISE)
        min_amount = min(street_state.min_raise_amount(position), stack)

    if stack > 0:
        available.append(ActionType.ALL_IN)

    return PermissibleActions(
        position=position,
        available=tuple(available),
        stack=stack,
        to_call=to_call,
        call_amount=min(to_call, stack),
        min_amount=min_amount,
        max_amount=stack,
        min_raise_to=street_state.min_raise_to,
    )


def _reject(message: str, code: ActionErrorCode) -> None:
    logger.warning("拒绝行动: %s (%s)", message, code.value)
    raise ActionError(message, code)


def validate_action(history: HandHistory, round_state: RoundState,
                    street_state: StreetState, action: Action, stack: int,
                    folded: bool) -> None:
    """
    校验一条即将追加的行动

    Args:
        history: 手牌历史
        round_state: 当前日志上的状态机状态
        street_state: 行动所在街的下注状态
        action: 待追加的行动
        stack: 行动者当前筹码
        folded: 行动者是否已弃牌

    Raises:
        ActionError: 任一前置条件不满足时，error_code说明原因
    """
    position = action.position
    if round_state.phase == HandPhase.HAND_COMPLETE:
        _reject("牌局已经结束", ActionErrorCode.HAND_COMPLETE)
    if round_state.phase == HandPhase.ALL_IN_SHOWDOWN:
        _reject("全押摊牌阶段不再接受行动", ActionErrorCode.NO_BETTING_ALLOWED)
    if not history.has_position(position):
        _reject(f"未知位置: {position}", ActionErrorCode.UNKNOWN_POSITION)
    if action.forced:
        _reject("盲注只在开局时自动下", ActionErrorCode.INVALID_SETUP)
    if folded:
        _reject(f"{position} 已经弃牌", ActionErrorCode.PLAYER_FOLDED)
    if action.street != round_state.betting_street:
        _reject(f"当前应在 {round_state.betting_street.value} 行动，实际: {action.street.value}",
                ActionErrorCode.WRONG_STREET)
    if stack <= 0:
        _reject(f"{position} 已没有筹码", ActionErrorCode.NO_CHIPS)
    if position != round_state.next_actor:
        _reject(f"还没轮到 {position}，应由 {round_state.next_actor} 行动",
                ActionErrorCode.OUT_OF_TURN)

    action_type = action.action_type
    amount = action.amount
    to_call = street_state.to_call(position)

    if action_type in (ActionType.FOLD, ActionType.CHECK):
        if amount != 0:
            _reject(f"{action_type.value} 的金额必须为0，实际: {amount}", ActionErrorCode.INVALID_AMOUNT)
        if action_type == ActionType.CHECK and to_call > 0:
            _reject(f"需要跟注 {to_call}，不能过牌", ActionErrorCode.ILLEGAL_CHECK)
        return

    if amount <= 0:
        _reject(f"{action_type.value} 的金额必须大于0", ActionErrorCode.INVALID_AMOUNT)
    if amount > stack:
        _reject(f"金额 {amount} 超过剩余筹码 {stack}", ActionErrorCode.EXCEEDS_STACK)

    if action_type == ActionType.CALL:
        expected = min(to_call, stack)
        if to_call == 0 or amount != expected:
            _reject(f"跟注金额应为 {expected}，实际: {amount}", ActionErrorCode.CALL_AMOUNT_MISMATCH)
    elif action_type == ActionType.BET:
        if street_state.max_bet > 0:
            _reject("本街已有下注，只能加注", ActionErrorCode.ILLEGAL_BET)
        if amount < street_state.big_blind and amount < stack:
            _reject(f"下注至少为 {street_state.big_blind}", ActionErrorCode.BELOW_MIN_RAISE)
    elif action_type == ActionType.RAISE:
        if street_state.max_bet == 0:
            _reject("本街还没有下注，不能加注", ActionErrorCode.ILLEGAL_RAISE)
        if amount <= to_call:
            _reject(f"加注金额必须大于跟注额 {to_call}", ActionErrorCode.ILLEGAL_RAISE)
        raise_to = street_state.contribution(position) + amount
        if raise_to < street_state.min_raise_to and amount < stack:
            _reject(f"最小加注到 {street_state.min_raise_to}，实际: {raise_to}",
                    ActionErrorCode.BELOW_MIN_RAISE)
    elif action_type == ActionType.ALL_IN:
        if amount != stack:
            _reject(f"全押金额应为 {stack}，实际: {amount}", ActionErrorCode.ALL_IN_AMOUNT_MISMATCH)
