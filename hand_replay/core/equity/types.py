"""
胜率与底池赔率类型定义.
"""

from dataclasses import dataclass
from enum import Enum

__all__ = ['EquityMode', 'EquityResult', 'PotOdds']


class EquityMode(Enum):
    """胜率的计算方式."""

    EXACT = "exact"
    MONTE_CARLO = "monte_carlo"
    TRIVIAL = "trivial"          # 没有对手
    UNAVAILABLE = "unavailable"  # 剩余牌不够发


@dataclass(frozen=True)
class EquityResult:
    """
    英雄胜率结果.

    Attributes:
        hero_equity: 英雄独赢的百分比，保留一位小数
        tie_equity: 平分的百分比，保留一位小数
        opponent_count: 对手数量
        simulations: 实际评估的牌局数，精确枚举时为组合数
        mode: 计算方式
    """

    hero_equity: float
    tie_equity: float
    opponent_count: int
    simulations: int
    mode: EquityMode = EquityMode.MONTE_CARLO

    def __post_init__(self) -> None:
        if not 0 <= self.hero_equity <= 100:
            raise ValueError(f"hero_equity必须在0-100之间: {self.hero_equity}")
        if not 0 <= self.tie_equity <= 100:
            raise ValueError(f"tie_equity必须在0-100之间: {self.tie_equity}")
        if self.opponent_count < 0:
            raise ValueError("opponent_count不能为负数")
        if self.simulations < 0:
            raise ValueError("simulations不能为负数")

    @property
    def is_available(self) -> bool:
        return self.mode != EquityMode.UNAVAILABLE

    @property
    def lose_equity(self) -> float:
        return round(max(0.0, 100 - self.hero_equity - self.tie_equity), 1)

    @classmethod
    def no_opponents(cls) -> 'EquityResult':
        return cls(100.0, 0.0, 0, 0, EquityMode.TRIVIAL)

    @classmethod
    def unavailable(cls, opponent_count: int) -> 'EquityResult':
        """剩余牌不够时的占位结果."""
        return cls(50.0, 0.0, opponent_count, 0, EquityMode.UNAVAILABLE)


@dataclass(frozen=True)
class PotOdds:
    """
    底池赔率.

    percentage = to_call / (pot_size + to_call) * 100，breakeven与之相同.
    """

    pot_size: int
    to_call: int
    percentage: float
    breakeven: float

    @classmethod
    def from_amounts(cls, pot_size: int, to_call: int) -> 'PotOdds':
        if to_call <= 0:
            raise ValueError(f"to_call必须大于0: {to_call}")
        if pot_size < 0:
            raise ValueError(f"pot_size不能为负数: {pot_size}")
        percentage = round(to_call / (pot_size + to_call) * 100, 1)
        return cls(pot_size=pot_size, to_call=to_call, percentage=percentage, breakeven=percentage)
