"""
回放快照类型定义

定义某一回放位置上桌面状态的不可变数据结构。
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from ..deck.card import Card
from ..history.types import Action, HoleCards, Street
from ..state_machine.types import HandPhase

__all__ = ['PlayerSnapshot', 'ReplaySnapshot']


@dataclass(frozen=True)
class PlayerSnapshot:
    """玩家状态快照"""
    position: str
    stack: int  # 当前筹码
    starting_stack: int
    hole_cards: HoleCards
    is_hero: bool
    is_active: bool  # 未弃牌（包括全押玩家）
    street_bet: int = 0  # 本街投入
    total_committed: int = 0  # 本手牌总投入
    name: str = ""

    def __post_init__(self):
        """验证玩家快照的有效性"""
        if not self.position:
            raise ValueError("position不能为空")
        if self.stack < 0:
            raise ValueError(f"{self.position} 的筹码不能为负数: {self.stack}")
        if self.street_bet < 0:
            raise ValueError("street_bet不能为负数")
        if self.stack + self.total_committed != self.starting_stack:
            raise ValueError("当前筹码与投入之和必须等于起始筹码")

    @property
    def is_all_in(self) -> bool:
        return self.is_active and self.stack == 0 and self.total_committed > 0

    @property
    def display_name(self) -> str:
        return self.name or self.position


@dataclass(frozen=True)
class ReplaySnapshot:
    """
    回放快照

    Attributes:
        action_index: 主动行动索引，-1表示只显示盲注
        players: 按座位顺序的玩家快照
        board: 可见公共牌
        pot: 底池（含盲注）
        street: 当前街
        active_player_index: 最近一次主动行动的玩家座位，没有时为-1
        visible_actions: 可见行动（盲注加上前action_index+1条主动行动）
        last_action: 最后一条可见行动
        is_at_end: 是否已到日志末尾
        phase: 该前缀上的状态机阶段
    """
    action_index: int
    players: Tuple[PlayerSnapshot, ...]
    board: Tuple[Card, ...]
    pot: int
    street: Street
    active_player_index: int
    visible_actions: Tuple[Action, ...]
    last_action: Optional[Action] = None
    is_at_end: bool = False
    phase: HandPhase = HandPhase.BETTING

    def __post_init__(self):
        """验证快照的有效性"""
        if len(self.board) > 5:
            raise ValueError("公共牌不能超过5张")
        if self.pot < 0:
            raise ValueError("pot不能为负数")
        if not self.players:
            raise ValueError("players不能为空")
        if self.active_player_index < -1 or self.active_player_index >= len(self.players):
            raise ValueError(f"无效的active_player_index: {self.active_player_index}")

    @property
    def hero(self) -> Optional[PlayerSnapshot]:
        for player in self.players:
            if player.is_hero:
                return player
        return None

    @property
    def active_players(self) -> Tuple[PlayerSnapshot, ...]:
        return tuple(player for player in self.players if player.is_active)

    @property
    def active_player(self) -> Optional[PlayerSnapshot]:
        if self.active_player_index < 0:
            return None
        return self.players[self.active_player_index]

    @property
    def is_complete(self) -> bool:
        return self.phase == HandPhase.HAND_COMPLETE

    def player(self, position: str) -> PlayerSnapshot:
        for player in self.players:
            if player.position == position:
                return player
        raise KeyError(position)
