"""
下注轮状态机.

没有可变的"当前街"或"当前玩家"字段：每次都从日志前缀重新计算阶段、街和下一位行动者.

一条街关闭需要同时满足:
    1. 每个还有筹码的未弃牌玩家在本街都做过主动行动（盲注不算主动行动，
       所以大盲在翻牌前总有一次选择权）
    2. 每个未弃牌玩家的本街投入等于本街最高投入，或者已经全押
若最多只有一名玩家还有筹码且他不需要面对下注，本街直接关闭.
"""

import logging
from typing import Dict, List, Optional, Set

from ..history.positions import BB, button_position
from ..history.types import HandHistory, Street
from ..projector.stack_projector import StackProjector
from .types import CompletionReason, HandPhase, RoundState

logger = logging.getLogger(__name__)


class BettingRoundStateMachine:
    """
    根据行动日志推导下注轮状态.

    Examples:
        >>> machine = BettingRoundStateMachine(history)
        >>> state = machine.evaluate()
        >>> state.phase, state.next_actor
        (<HandPhase.BETTING: 1>, 'UTG')
    """

    def __init__(self, history: HandHistory, projector: Optional[StackProjector] = None) -> None:
        self._history = history
        self._projector = projector or StackProjector(history)

    @property
    def projector(self) -> StackProjector:
        return self._projector

    def evaluate(self, upto: Optional[int] = None) -> RoundState:
        """
        计算日志前缀上的状态.

        Args:
            upto: 日志前缀长度，None表示整个日志

        Returns:
            RoundState: 阶段、街、下一位行动者等
        """
        projector = self._projector
        street = projector.street_of(upto)
        active = projector.active_positions(upto)
        is_full_log = upto is None or upto >= len(self._history.actions)

        if len(active) <= 1:
            return RoundState(
                phase=HandPhase.HAND_COMPLETE,
                street=street,
                winner=active[0] if active else None,
                reason=CompletionReason.LAST_PLAYER_STANDING,
            )

        if is_full_log and self._history.ended_manually:
            return RoundState(phase=HandPhase.HAND_COMPLETE, street=street,
                              reason=CompletionReason.MANUAL_END)

        if not self.is_street_closed(street, upto):
            return RoundState(
                phase=HandPhase.BETTING,
                street=street,
                next_actor=self.next_actor(street, upto),
            )

        if street == Street.RIVER:
            return RoundState(phase=HandPhase.HAND_COMPLETE, street=street,
                              reason=CompletionReason.RIVER_CLOSED)

        stacks = projector.stacks(upto)
        with_chips = [position for position in active if stacks[position] > 0]
        if len(with_chips) <= 1:
            logger.debug("%s 之后最多一名玩家有筹码，进入全押摊牌", street.value)
            if len(self._history.board) >= Street.RIVER.board_count:
                return RoundState(phase=HandPhase.HAND_COMPLETE, street=street,
                                  reason=CompletionReason.ALL_IN_RUNOUT)
            return RoundState(phase=HandPhase.ALL_IN_SHOWDOWN, street=street)

        next_street = street.next_street
        logger.debug("%s 下注关闭，等待 %s", street.value, next_street.value)
        return RoundState(
            phase=HandPhase.STREET_COMPLETE,
            street=street,
            next_street=next_street,
            next_actor=self.next_actor(next_street, upto),
        )

    def is_street_closed(self, street: Street, upto: Optional[int] = None) -> bool:
        """判断一条街的下注是否已经关闭."""
        projector = self._projector
        contributions = projector.street_contributions(street, upto)
        stacks = projector.stacks(upto)
        active = projector.active_positions(upto)
        max_bet = max(contributions.values(), default=0)

        for position in active:
            if stacks[position] > 0 and contributions[position] != max_bet:
                return False

        live = [position for position in active if stacks[position] > 0]
        if len(live) <= 1:
            return True

        acted = self._voluntary_actors(street, upto)
        return all(position in acted for position in live)

    def next_actor(self, street: Street, upto: Optional[int] = None) -> Optional[str]:
        """
        下一位需要行动的玩家.

        从参照座位顺时针查找第一个未弃牌、有筹码且仍需行动的玩家。参照座位是
        本街最后一个主动行动者；本街还没有主动行动时，翻牌前为大盲，翻牌后为按钮.
        """
        projector = self._projector
        positions = self._history.positions
        street_actions = [action for action in projector.street_actions(street, upto)
                          if not action.forced]

        if street_actions:
            reference = positions.index(street_actions[-1].position)
        elif street == Street.PREFLOP:
            reference = positions.index(BB)
        else:
            reference = positions.index(button_position(positions))

        contributions = projector.street_contributions(street, upto)
        max_bet = max(contributions.values(), default=0)
        stacks = projector.stacks(upto)
        folded = set(projector.folded_positions(upto))
        acted = self._voluntary_actors(street, upto)

        count = len(positions)
        for offset in range(1, count + 1):
            position = positions[(reference + offset) % count]
            if position in folded or stacks[position] <= 0:
                continue
            if position not in acted or contributions[position] < max_bet:
                return position
        return None

    def live_positions(self, upto: Optional[int] = None) -> List[str]:
        """未弃牌且还有筹码的玩家."""
        stacks: Dict[str, int] = self._projector.stacks(upto)
        return [position for position in self._projector.active_positions(upto)
                if stacks[position] > 0]

    def _voluntary_actors(self, street: Street, upto: Optional[int]) -> Set[str]:
        return {action.position for action in self._projector.street_actions(street, upto)
                if not action.forced}
