"""
快照投影器

把(手牌历史, 主动行动索引)映射为不可变的回放快照。筹码、底池和弃牌状态全部来自
StackProjector，这里只负责可见性：哪些行动、哪些公共牌、当前是哪条街。
"""

from typing import Optional, Tuple

from ..history.types import HandHistory, Street
from ..projector.stack_projector import StackProjector
from ..state_machine.betting_round import BettingRoundStateMachine
from .types import PlayerSnapshot, ReplaySnapshot

__all__ = ['SnapshotProjector']


class SnapshotProjector:
    """
    快照投影器

    索引只计算主动行动：盲注总是可见，-1表示只显示盲注，超出范围的索引会被限制在
    [-1, 主动行动数-1]。
    """

    def __init__(self, history: HandHistory,
                 projector: Optional[StackProjector] = None) -> None:
        self._history = history
        self._projector = projector or StackProjector(history)
        self._machine = BettingRoundStateMachine(history, self._projector)

    @property
    def total_actions(self) -> int:
        """主动行动数量."""
        return len(self._history.actions) - self._history.forced_count

    def clamp(self, index: int) -> int:
        return max(-1, min(index, self.total_actions - 1))

    def snapshot(self, index: int) -> ReplaySnapshot:
        """
        计算某个回放位置的快照

        Args:
            index: 主动行动索引，-1表示只显示盲注

        Returns:
            ReplaySnapshot: 不可变快照
        """
        history = self._history
        projector = self._projector
        index = self.clamp(index)
        forced_count = history.forced_count
        upto = forced_count + index + 1
        visible = tuple(projector.prefix(upto))
        is_at_end = index >= self.total_actions - 1

        last_voluntary = visible[-1] if index >= 0 else None
        street = last_voluntary.street if last_voluntary else Street.PREFLOP

        # 日志末尾显示全部已知公共牌（全押发完剩余牌或手动结束）
        board_count = len(history.board)
        if is_at_end and board_count > street.board_count:
            card_count = board_count
            street = Street.for_board_count(board_count)
        else:
            card_count = street.board_count
        board = tuple(history.board[:card_count])

        stacks = projector.stacks(upto)
        folded = set(projector.folded_positions(upto))
        street_bets = projector.street_contributions(street, upto)
        players = tuple(
            PlayerSnapshot(
                position=seat.position,
                stack=stacks[seat.position],
                starting_stack=seat.starting_stack,
                hole_cards=seat.hole_cards,
                is_hero=seat.is_hero,
                is_active=seat.position not in folded,
                street_bet=street_bets[seat.position],
                total_committed=seat.starting_stack - stacks[seat.position],
                name=seat.name,
            )
            for seat in history.players
        )

        active_player_index = -1
        if last_voluntary is not None:
            active_player_index = history.seat_index(last_voluntary.position)

        return ReplaySnapshot(
            action_index=index,
            players=players,
            board=board,
            pot=projector.pot(upto),
            street=street,
            active_player_index=active_player_index,
            visible_actions=visible,
            last_action=visible[-1] if visible else None,
            is_at_end=is_at_end,
            phase=self._machine.evaluate(upto).phase,
        )

    def snapshots(self) -> Tuple[ReplaySnapshot, ...]:
        """整手牌的所有快照，从只显示盲注开始."""
        return tuple(self.snapshot(index) for index in range(-1, self.total_actions))
