"""
手牌历史相关类型定义.

定义街、行动类型、单条行动、座位、盲注结构和手牌历史本身.
手牌历史是只追加的行动日志，所有派生状态（筹码、底池、弃牌、当前街）都从日志前缀计算.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple

from ..deck.card import Card


class Street(Enum):
    """下注街."""

    PREFLOP = "preflop"
    FLOP = "flop"
    TURN = "turn"
    RIVER = "river"

    @property
    def board_count(self) -> int:
        """进入该街时可见的公共牌数量."""
        return STREET_CARD_COUNT[self]

    @property
    def next_street(self) -> Optional['Street']:
        order = list(Street)
        index = order.index(self)
        return order[index + 1] if index + 1 < len(order) else None

    @property
    def order(self) -> int:
        return list(Street).index(self)

    @classmethod
    def for_board_count(cls, count: int) -> 'Street':
        """给定公共牌数量对应的最远街."""
        street = cls.PREFLOP
        for candidate in cls:
            if candidate.board_count <= count:
                street = candidate
        return street


STREET_CARD_COUNT: Dict[Street, int] = {
    Street.PREFLOP: 0,
    Street.FLOP: 3,
    Street.TURN: 4,
    Street.RIVER: 5,
}


class ActionType(Enum):
    """玩家行动类型，金额均为本次行动新投入的筹码（增量）."""

    FOLD = "fold"
    CHECK = "check"
    CALL = "call"
    BET = "bet"
    RAISE = "raise"
    ALL_IN = "all-in"

    @property
    def commits_chips(self) -> bool:
        return self in COMMITTING_ACTIONS

    @property
    def is_aggressive(self) -> bool:
        """下注、加注或全押，会让其他玩家面对下注."""
        return self in (ActionType.BET, ActionType.RAISE, ActionType.ALL_IN)


COMMITTING_ACTIONS = frozenset({ActionType.CALL, ActionType.BET, ActionType.RAISE, ActionType.ALL_IN})


def _new_action_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass(frozen=True)
class Action:
    """
    行动日志中的一条记录.

    Attributes:
        street: 行动所在街
        position: 行动玩家的位置
        action_type: 行动类型
        amount: 本次投入的筹码增量，弃牌/过牌为0
        forced: 是否为开局自动下的盲注
        id: 唯一标识
    """

    street: Street
    position: str
    action_type: ActionType
    amount: int = 0
    forced: bool = False
    id: str = field(default_factory=_new_action_id)

    def __post_init__(self) -> None:
        if not isinstance(self.street, Street):
            raise TypeError(f"street必须是Street类型，实际: {type(self.street)}")
        if not isinstance(self.action_type, ActionType):
            raise TypeError(f"action_type必须是ActionType类型，实际: {type(self.action_type)}")
        if not isinstance(self.amount, int) or isinstance(self.amount, bool):
            raise TypeError(f"amount必须是整数，实际: {type(self.amount)}")
        if self.amount < 0:
            raise ValueError(f"行动金额不能为负数: {self.amount}")
        if not self.position:
            raise ValueError("position不能为空")

    @property
    def committed(self) -> int:
        """本条行动投入底池的筹码."""
        return self.amount if self.action_type.commits_chips else 0


@dataclass(frozen=True)
class Blinds:
    """盲注结构。前注只做展示，不计入底池."""

    small_blind: int
    big_blind: int
    ante: int = 0

    def __post_init__(self) -> None:
        if self.small_blind <= 0:
            raise ValueError(f"小盲必须大于0: {self.small_blind}")
        if self.big_blind < self.small_blind:
            raise ValueError(f"大盲不能小于小盲: {self.big_blind} < {self.small_blind}")
        if self.ante < 0:
            raise ValueError(f"前注不能为负数: {self.ante}")


HoleCards = Tuple[Optional[Card], Optional[Card]]


@dataclass(frozen=True)
class PlayerSeat:
    """
    牌局开始时的座位信息.

    当前筹码不在这里保存，只能由起始筹码减去日志中的投入得到.
    """

    position: str
    starting_stack: int
    hole_cards: HoleCards = (None, None)
    is_hero: bool = False
    name: str = ""

    def __post_init__(self) -> None:
        if self.starting_stack < 0:
            raise ValueError(f"起始筹码不能为负数: {self.starting_stack}")
        if len(self.hole_cards) != 2:
            raise ValueError(f"手牌必须是两个位置，实际: {len(self.hole_cards)}")

    @property
    def known_cards(self) -> List[Card]:
        return [card for card in self.hole_cards if card is not None]

    @property
    def has_full_hand(self) -> bool:
        return all(card is not None for card in self.hole_cards)


@dataclass
class HandHistory:
    """
    一手牌的完整记录.

    行动日志只追加；board保存最终已知的公共牌，可见部分由快照按街切片.
    修改操作统一经由HandEngine完成，以保证日志始终合法.
    """

    blinds: Blinds
    players: List[PlayerSeat]
    actions: List[Action] = field(default_factory=list)
    board: List[Card] = field(default_factory=list)
    hand_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=datetime.now)
    ended_manually: bool = False

    @property
    def positions(self) -> List[str]:
        return [player.position for player in self.players]

    @property
    def hero(self) -> Optional[PlayerSeat]:
        for player in self.players:
            if player.is_hero:
                return player
        return None

    @property
    def hero_position(self) -> Optional[str]:
        hero = self.hero
        return hero.position if hero else None

    @property
    def hero_index(self) -> int:
        hero = self.hero
        return self.seat_index(hero.position) if hero else -1

    def seat_index(self, position: str) -> int:
        """
        获取位置对应的座位索引.

        Raises:
            KeyError: 当位置不在本手牌中时
        """
        for index, player in enumerate(self.players):
            if player.position == position:
                return index
        raise KeyError(position)

    def has_position(self, position: str) -> bool:
        return any(player.position == position for player in self.players)

    def player(self, position: str) -> PlayerSeat:
        return self.players[self.seat_index(position)]

    @property
    def forced_count(self) -> int:
        """日志开头盲注记录的条数."""
        count = 0
        for action in self.actions:
            if not action.forced:
                break
            count += 1
        return count

    @property
    def voluntary_actions(self) -> List[Action]:
        return [action for action in self.actions if not action.forced]

    def known_cards(self) -> List[Card]:
        """所有已知的手牌和公共牌."""
        cards: List[Card] = []
        for player in self.players:
            cards.extend(player.known_cards)
        cards.extend(self.board)
        return cards
