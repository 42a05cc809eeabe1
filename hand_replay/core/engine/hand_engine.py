"""
手牌引擎.

对外的两个核心入口是 append(action) 和 snapshot(index)。append要么完整追加一条
合法行动，要么抛出带错误代码的ActionError且不改变任何状态.
"""

import logging
from dataclasses import replace
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..deck.card import Card
from ..exceptions import (
    ActionError, ActionErrorCode, DuplicateCardError, HandSetupError, InvalidBoardError,
)
from ..history.positions import BB, SB, get_positions
from ..history.types import Action, ActionType, Blinds, HandHistory, PlayerSeat, Street
from ..projector.stack_projector import StackProjector
from ..rules.action_logic import compute_street_state, determine_permissible_actions, validate_action
from ..rules.types import PermissibleActions, StreetState
from ..snapshot.snapshot_projector import SnapshotProjector
from ..snapshot.types import ReplaySnapshot
from ..state_machine.betting_round import BettingRoundStateMachine
from ..state_machine.types import RoundState

logger = logging.getLogger(__name__)

StackSpec = Union[int, Mapping[str, int]]
CardSlots = Sequence[Optional[Card]]


class HandEngine:
    """
    一手牌的录入与回放引擎.

    Examples:
        >>> engine = HandEngine.new_hand(6, Blinds(1, 2), stacks=100, hero_position="BTN")
        >>> engine.state.next_actor
        'UTG'
        >>> engine.act(ActionType.RAISE, 6).position
        'UTG'
    """

    def __init__(self, history: HandHistory) -> None:
        self._history = history
        self._projector = StackProjector(history)
        self._machine = BettingRoundStateMachine(history, self._projector)
        self._snapshots = SnapshotProjector(history, self._projector)

    @classmethod
    def new_hand(cls, player_count: int, blinds: Blinds, stacks: StackSpec = 100,
                 hero_position: str = "BTN", names: Optional[Mapping[str, str]] = None,
                 hand_id: Optional[str] = None) -> 'HandEngine':
        """
        开始一手新牌并自动下盲注.

        Args:
            player_count: 人数，2-9
            blinds: 盲注结构
            stacks: 统一的起始筹码，或位置 -> 起始筹码
            hero_position: 英雄位置
            names: 可选的位置 -> 玩家名
            hand_id: 可选的手牌编号

        Returns:
            HandEngine: 盲注已作为日志前两条记录写入

        Raises:
            HandSetupError: 人数、英雄位置或筹码不合法时
        """
        try:
            positions = get_positions(player_count)
        except ValueError as e:
            raise HandSetupError(str(e)) from e
        if hero_position not in positions:
            raise HandSetupError(f"英雄位置 {hero_position} 不在 {player_count} 人桌中")

        names = names or {}
        seats: List[PlayerSeat] = []
        for position in positions:
            stack = stacks if isinstance(stacks, int) else stacks.get(position)
            if stack is None:
                raise HandSetupError(f"缺少 {position} 的起始筹码")
            if stack <= 0:
                raise HandSetupError(f"{position} 的起始筹码必须大于0: {stack}")
            seats.append(PlayerSeat(
                position=position,
                starting_stack=stack,
                is_hero=position == hero_position,
                name=names.get(position, ""),
            ))

        history = HandHistory(blinds=blinds, players=seats)
        if hand_id:
            history.hand_id = hand_id
        for position, blind in ((SB, blinds.small_blind), (BB, blinds.big_blind)):
            posted = min(blind, history.player(position).starting_stack)
            history.actions.append(Action(Street.PREFLOP, position, ActionType.BET, posted, forced=True))

        logger.info("新牌局 %s: %d人, 盲注 %d/%d, 英雄 %s",
                    history.hand_id[:8], player_count, blinds.small_blind,
                    blinds.big_blind, hero_position)
        return cls(history)

    @classmethod
    def rebuild(cls, history: HandHistory) -> 'HandEngine':
        """
        逐条重放一份已有的手牌历史，校验其中每条主动行动.

        Raises:
            HandSetupError: 座位或盲注记录不合法时
            ActionError: 历史中存在非法行动时
            DuplicateCardError: 已知牌有重复时
        """
        cls._check_seats(history)
        cls._check_forced_blinds(history)
        seats = [replace(seat, hole_cards=(None, None)) for seat in history.players]
        fresh = HandHistory(blinds=history.blinds, players=seats,
                            hand_id=history.hand_id, created_at=history.created_at)
        fresh.actions.extend(history.actions[:history.forced_count])
        engine = cls(fresh)
        for action in history.voluntary_actions:
            engine.append(action)
        for seat in history.players:
            if any(card is not None for card in seat.hole_cards):
                engine.set_hole_cards(seat.position, seat.hole_cards)
        engine.set_board(history.board)
        if history.ended_manually:
            engine.end_hand_manually()
        return engine

    @staticmethod
    def _check_seats(history: HandHistory) -> None:
        """座位必须是该人数下的标准位置顺序，且恰好一个英雄."""
        try:
            expected = get_positions(len(history.players))
        except ValueError as e:
            raise HandSetupError(str(e)) from e
        if history.positions != expected:
            raise HandSetupError(
                f"{len(expected)} 人桌的座位必须是 {expected}，实际: {history.positions}")
        heroes = [seat.position for seat in history.players if seat.is_hero]
        if len(heroes) != 1:
            raise HandSetupError(f"必须恰好有一个英雄，实际: {heroes}")
        for seat in history.players:
            if seat.starting_stack <= 0:
                raise HandSetupError(f"{seat.position} 的起始筹码必须大于0: {seat.starting_stack}")

    @staticmethod
    def _check_forced_blinds(history: HandHistory) -> None:
        """日志开头必须依次是小盲和大盲的强制下注，金额为盲注与筹码的较小者."""
        forced = history.actions[:history.forced_count]
        blinds = ((SB, history.blinds.small_blind), (BB, history.blinds.big_blind))
        if len(forced) != len(blinds):
            raise HandSetupError(f"盲注记录必须是 {len(blinds)} 条，实际: {len(forced)}")
        for action, (position, blind) in zip(forced, blinds):
            posted = min(blind, history.player(position).starting_stack)
            if (action.street != Street.PREFLOP or action.position != position
                    or action.action_type != ActionType.BET or action.amount != posted):
                raise HandSetupError(
                    f"{position} 的盲注记录应为翻牌前下注 {posted}，实际: "
                    f"{action.street.value} {action.position} {action.action_type.value} {action.amount}")

    @property
    def history(self) -> HandHistory:
        return self._history

    @property
    def projector(self) -> StackProjector:
        return self._projector

    @property
    def state(self) -> RoundState:
        """整个日志上的状态机状态."""
        return self._machine.evaluate()

    def street_state(self, street: Optional[Street] = None) -> StreetState:
        """当前下注街（或指定街）的下注状态."""
        return compute_street_state(self._history, street or self.state.betting_street,
                                    projector=self._projector)

    def legal_actions(self) -> Optional[PermissibleActions]:
        """下一位行动者的可用行动，不接受行动时为None."""
        state = self.state
        if not state.accepts_actions or state.next_actor is None:
            return None
        street_state = self.street_state(state.betting_street)
        return determine_permissible_actions(street_state, state.next_actor,
                                             self._projector.stack(state.next_actor))

    def append(self, action: Action) -> Action:
        """
        校验并追加一条行动.

        Args:
            action: 待追加的行动

        Returns:
            Action: 追加的行动

        Raises:
            ActionError: 行动不合法时，日志保持不变
        """
        if not isinstance(action, Action):
            raise TypeError(f"action必须是Action类型，实际: {type(action)}")
        state = self.state
        known_position = self._history.has_position(action.position)
        street_state = compute_street_state(self._history, action.street, projector=self._projector)
        validate_action(
            self._history,
            state,
            street_state,
            action,
            stack=self._projector.stack(action.position) if known_position else 0,
            folded=known_position and self._projector.is_folded(action.position),
        )
        self._history.actions.append(action)
        logger.debug("追加行动: %s %s %s %d", action.street.value, action.position,
                     action.action_type.value, action.amount)
        return action

    def act(self, action_type: ActionType, amount: Optional[int] = None) -> Action:
        """
        以当前应行动的玩家和当前街追加一条行动.

        跟注和全押省略金额时自动取应付金额；弃牌和过牌金额为0.

        Raises:
            ActionError: 当前不接受行动或行动不合法时
        """
        state = self.state
        if not state.accepts_actions or state.next_actor is None:
            code = (ActionErrorCode.HAND_COMPLETE if state.is_complete
                    else ActionErrorCode.NO_BETTING_ALLOWED)
            raise ActionError("当前没有玩家需要行动", code)

        position = state.next_actor
        if amount is None:
            street_state = self.street_state(state.betting_street)
            stack = self._projector.stack(position)
            if action_type == ActionType.CALL:
                amount = min(street_state.to_call(position), stack)
            elif action_type == ActionType.ALL_IN:
                amount = stack
            elif action_type in (ActionType.BET, ActionType.RAISE):
                raise ActionError(f"{action_type.value} 必须指定金额", ActionErrorCode.INVALID_AMOUNT)
            else:
                amount = 0
        return self.append(Action(state.betting_street, position, action_type, amount))

    def set_hole_cards(self, position: str, cards: CardSlots) -> None:
        """
        设置某个玩家的手牌，每张都可以为空.

        Raises:
            ActionError: 位置不存在时
            DuplicateCardError: 与其他已知牌重复时
        """
        if not self._history.has_position(position):
            raise ActionError(f"未知位置: {position}", ActionErrorCode.UNKNOWN_POSITION)
        if len(cards) != 2:
            raise HandSetupError(f"手牌必须是两个位置，实际: {len(cards)}")
        slots: Tuple[Optional[Card], Optional[Card]] = (cards[0], cards[1])
        index = self._history.seat_index(position)
        others = [card for seat in self._history.players if seat.position != position
                  for card in seat.known_cards] + list(self._history.board)
        self._check_duplicates([card for card in slots if card is not None], others)
        self._history.players[index] = replace(self._history.players[index], hole_cards=slots)

    def set_hero_cards(self, cards: CardSlots) -> None:
        hero = self._history.hero
        if hero is None:
            raise HandSetupError("本手牌没有英雄")
        self.set_hole_cards(hero.position, cards)

    def set_board(self, cards: Sequence[Card]) -> None:
        """
        设置最终已知的公共牌.

        Raises:
            InvalidBoardError: 超过5张时
            DuplicateCardError: 与手牌或自身重复时
        """
        if len(cards) > Street.RIVER.board_count:
            raise InvalidBoardError(f"公共牌不能超过5张，实际: {len(cards)}")
        others = [card for seat in self._history.players for card in seat.known_cards]
        self._check_duplicates(list(cards), others)
        self._history.board = list(cards)

    def end_hand_manually(self) -> None:
        """手动结束录入，之后不再接受行动，但仍可补充公共牌."""
        self._history.ended_manually = True
        logger.info("牌局 %s 手动结束", self._history.hand_id[:8])

    @property
    def total_actions(self) -> int:
        return self._snapshots.total_actions

    def snapshot(self, index: int) -> ReplaySnapshot:
        return self._snapshots.snapshot(index)

    def snapshots(self) -> Tuple[ReplaySnapshot, ...]:
        return self._snapshots.snapshots()

    def final_snapshot(self) -> ReplaySnapshot:
        return self._snapshots.snapshot(self.total_actions - 1)

    @staticmethod
    def _check_duplicates(cards: List[Card], others: List[Card]) -> None:
        for card in cards:
            if not isinstance(card, Card):
                raise TypeError(f"必须是Card类型，实际: {type(card)}")
        seen: Dict[Card, int] = {}
        for card in cards:
            seen[card] = seen.get(card, 0) + 1
        repeated = [str(card) for card, count in seen.items() if count > 1]
        conflicts = [str(card) for card in cards if card in set(others)]
        if repeated or conflicts:
            raise DuplicateCardError(f"重复的牌: {', '.join(sorted(set(repeated + conflicts)))}")
