"""
下注轮状态机类型定义.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from ..history.types import Street


class HandPhase(Enum):
    """
    一手牌所处的阶段.

    BETTING: 当前街仍在下注，有明确的下一位行动者
    STREET_COMPLETE: 当前街已关闭，等待下一街的第一条行动
    ALL_IN_SHOWDOWN: 最多一名玩家还有筹码，不再接受行动，只发剩余公共牌
    HAND_COMPLETE: 牌局结束
    """

    BETTING = auto()
    STREET_COMPLETE = auto()
    ALL_IN_SHOWDOWN = auto()
    HAND_COMPLETE = auto()


class CompletionReason(Enum):
    """牌局结束原因."""

    LAST_PLAYER_STANDING = "last_player_standing"
    RIVER_CLOSED = "river_closed"
    ALL_IN_RUNOUT = "all_in_runout"
    MANUAL_END = "manual_end"


@dataclass(frozen=True)
class RoundState:
    """
    某个日志前缀上的下注轮状态.

    Attributes:
        phase: 阶段
        street: 最后一条行动所在的街
        next_street: STREET_COMPLETE时即将开始的街
        next_actor: 下一位应当行动的位置，没有时为None
        winner: 只剩一名未弃牌玩家时的赢家
        reason: 牌局结束原因
    """

    phase: HandPhase
    street: Street
    next_street: Optional[Street] = None
    next_actor: Optional[str] = None
    winner: Optional[str] = None
    reason: Optional[CompletionReason] = None

    @property
    def betting_street(self) -> Street:
        """下一条行动必须所在的街."""
        if self.phase == HandPhase.STREET_COMPLETE and self.next_street is not None:
            return self.next_street
        return self.street

    @property
    def accepts_actions(self) -> bool:
        return self.phase in (HandPhase.BETTING, HandPhase.STREET_COMPLETE)

    @property
    def is_complete(self) -> bool:
        return self.phase == HandPhase.HAND_COMPLETE
