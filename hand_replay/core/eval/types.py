"""
牌型评估相关类型定义.

定义牌型等级与评估结果。评估结果带有一个整数分数，分数越高牌越大，相同大小的牌分数相等.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Tuple

from ..deck.card import Card
from ..deck.types import Rank

# 分数编码的进制，大于最大点数14
SCORE_BASE = 15
TIEBREAK_SLOTS = 5


class HandRank(IntEnum):
    """
    德州扑克牌型枚举.

    共9种牌型，皇家同花顺只是A高的同花顺，不单独成类.
    """

    HIGH_CARD = 1          # 高牌
    ONE_PAIR = 2           # 一对
    TWO_PAIR = 3           # 两对
    THREE_OF_A_KIND = 4    # 三条
    STRAIGHT = 5           # 顺子
    FLUSH = 6              # 同花
    FULL_HOUSE = 7         # 葫芦
    FOUR_OF_A_KIND = 8     # 四条
    STRAIGHT_FLUSH = 9     # 同花顺


RANK_NAMES = {
    HandRank.HIGH_CARD: "高牌",
    HandRank.ONE_PAIR: "一对",
    HandRank.TWO_PAIR: "两对",
    HandRank.THREE_OF_A_KIND: "三条",
    HandRank.STRAIGHT: "顺子",
    HandRank.FLUSH: "同花",
    HandRank.FULL_HOUSE: "葫芦",
    HandRank.FOUR_OF_A_KIND: "四条",
    HandRank.STRAIGHT_FLUSH: "同花顺",
}


def encode_score(rank: HandRank, tiebreakers: Tuple[int, ...]) -> int:
    """
    把牌型和比牌点数编码为一个整数.

    score = rank * 15^5 + Σ tiebreakers[i] * 15^(4-i)，比牌点数按重要性从高到低排列.

    Args:
        rank: 牌型等级
        tiebreakers: 比牌点数，最多5个

    Returns:
        int: 可直接比较大小的分数
    """
    if len(tiebreakers) > TIEBREAK_SLOTS:
        raise ValueError(f"比牌点数最多{TIEBREAK_SLOTS}个，实际: {len(tiebreakers)}")
    score = int(rank) * SCORE_BASE ** TIEBREAK_SLOTS
    for i, value in enumerate(tiebreakers):
        score += value * SCORE_BASE ** (TIEBREAK_SLOTS - 1 - i)
    return score


@dataclass(frozen=True)
class HandResult:
    """
    牌型评估结果.

    Attributes:
        rank: 牌型等级
        tiebreakers: 比牌点数，按重要性降序。顺子只有最高牌（轮子为5），
            四条为(四条, 踢脚)，葫芦为(三条, 对子)，同花/高牌为5张点数
        cards: 组成该牌型的5张牌
        score: 由rank和tiebreakers编码得到的整数分数

    Examples:
        >>> result = HandResult(HandRank.ONE_PAIR, (14, 13, 12, 11))
        >>> result.primary_value
        14
    """

    rank: HandRank
    tiebreakers: Tuple[int, ...]
    cards: Tuple[Card, ...] = ()
    score: int = field(init=False, compare=False)

    def __post_init__(self) -> None:
        """
        验证评估结果并计算分数.

        Raises:
            TypeError: 当牌型等级类型无效时
            ValueError: 当比牌点数无效时
        """
        if not isinstance(self.rank, HandRank):
            raise TypeError(f"牌型等级必须是HandRank类型，实际: {type(self.rank)}")
        if not self.tiebreakers:
            raise ValueError("比牌点数不能为空")
        for value in self.tiebreakers:
            # 轮子顺子的最高牌是5，A按1计时不会出现在比牌点数里
            if value < 2 or value > 14:
                raise ValueError(f"无效的比牌点数: {value}")
        object.__setattr__(self, 'score', encode_score(self.rank, self.tiebreakers))

    @property
    def primary_value(self) -> int:
        """主要牌值（对子/三条/四条的点数，顺子的最高牌等）."""
        return self.tiebreakers[0]

    @property
    def kickers(self) -> Tuple[int, ...]:
        return self.tiebreakers[1:]

    def compare_to(self, other: 'HandResult') -> int:
        """
        比较两个牌型的强弱.

        Returns:
            int: 1表示当前牌型更强，-1表示更弱，0表示相等

        Raises:
            TypeError: 当other不是HandResult类型时
        """
        if not isinstance(other, HandResult):
            raise TypeError(f"比较对象必须是HandResult类型，实际: {type(other)}")
        if self.score == other.score:
            return 0
        return 1 if self.score > other.score else -1

    def describe(self) -> str:
        """返回中文牌型描述，如"葫芦(K带7)"."""
        name = RANK_NAMES[self.rank]
        first = Rank(self.primary_value).display
        if self.rank in (HandRank.ONE_PAIR, HandRank.THREE_OF_A_KIND, HandRank.FOUR_OF_A_KIND):
            return f"{name}({first})"
        if self.rank == HandRank.TWO_PAIR:
            return f"{name}({first}和{Rank(self.tiebreakers[1]).display})"
        if self.rank == HandRank.FULL_HOUSE:
            return f"{name}({first}带{Rank(self.tiebreakers[1]).display})"
        if self.rank in (HandRank.STRAIGHT, HandRank.STRAIGHT_FLUSH, HandRank.FLUSH, HandRank.HIGH_CARD):
            return f"{name}({first}高)"
        return name

    def __str__(self) -> str:
        return self.describe()
