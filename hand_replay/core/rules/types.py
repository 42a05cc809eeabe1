"""
核心规则类型定义

定义单条街的下注状态和玩家可用行动.
"""

from dataclasses import dataclass, field
from typing import Dict, Tuple

from ..history.types import ActionType, Street

__all__ = ['StreetState', 'PermissibleActions']


@dataclass(frozen=True)
class StreetState:
    """
    一条街的下注状态.

    Attributes:
        street: 街
        contributions: 位置 -> 本街投入
        max_bet: 本街最高投入
        last_raise: 最近一次完整加注的幅度，初始为大盲
        big_blind: 大盲金额
    """
    street: Street
    contributions: Dict[str, int] = field(default_factory=dict)
    max_bet: int = 0
    last_raise: int = 0
    big_blind: int = 0

    @property
    def min_raise_to(self) -> int:
        """最小加注到的总额."""
        return self.max_bet + self.last_raise

    def contribution(self, position: str) -> int:
        return self.contributions.get(position, 0)

    def to_call(self, position: str) -> int:
        return max(0, self.max_bet - self.contribution(position))

    def min_raise_amount(self, position: str) -> int:
        """完成最小加注需要投入的增量，至少一个大盲."""
        return max(self.min_raise_to - self.contribution(position), self.big_blind)


@dataclass(frozen=True)
class PermissibleActions:
    """玩家可用行动及金额约束（金额均为增量）"""
    position: str
    available: Tuple[ActionType, ...]
    stack: int
    to_call: int = 0
    call_amount: int = 0
    min_amount: int = 0
    max_amount: int = 0
    min_raise_to: int = 0

    def __post_init__(self):
        if self.stack < 0:
            raise ValueError("stack不能为负数")
        if ActionType.CHECK in self.available and ActionType.CALL in self.available:
            raise ValueError("CHECK和CALL不应同时存在")
        if ActionType.BET in self.available and ActionType.RAISE in self.available:
            raise ValueError("BET和RAISE不应同时存在")

    def can(self, action_type: ActionType) -> bool:
        return action_type in self.available

    def as_strings(self):
        return [action_type.value for action_type in self.available]
