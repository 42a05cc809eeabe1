"""
德州扑克牌型评估器.

5张牌直接识别牌型；6-7张牌通过惰性生成的5张组合取最大值.
"""

from collections import Counter
from itertools import combinations
from typing import Iterator, List, Optional, Sequence, Tuple

from ..deck.card import Card
from .types import HandRank, HandResult

WHEEL_RANKS = (14, 5, 4, 3, 2)


def _validate_cards(cards: Sequence[Card], minimum: int, maximum: int) -> None:
    if len(cards) < minimum or len(cards) > maximum:
        if minimum == maximum:
            raise ValueError(f"必须是{minimum}张牌，实际: {len(cards)}")
        raise ValueError(f"牌数必须在{minimum}到{maximum}张之间，实际: {len(cards)}")
    for i, card in enumerate(cards):
        if not isinstance(card, Card):
            raise TypeError(f"第{i}张牌必须是Card类型，实际: {type(card)}")


def _straight_high(ranks_desc: Sequence[int]) -> Optional[int]:
    """5个互不相同的点数（降序）组成顺子时返回最高牌，轮子返回5."""
    if len(set(ranks_desc)) != 5:
        return None
    if ranks_desc[0] - ranks_desc[4] == 4:
        return ranks_desc[0]
    if tuple(ranks_desc) == WHEEL_RANKS:
        return 5
    return None


def evaluate5(cards: Sequence[Card]) -> HandResult:
    """
    评估恰好5张牌的牌型.

    Args:
        cards: 5张牌

    Returns:
        HandResult: 牌型与分数

    Raises:
        ValueError: 当牌数不是5时
        TypeError: 当包含非Card对象时
    """
    _validate_cards(cards, 5, 5)

    ranks_desc = sorted((card.rank.value for card in cards), reverse=True)
    is_flush = len({card.suit for card in cards}) == 1
    straight_high = _straight_high(ranks_desc)
    best_five = tuple(cards)

    if is_flush and straight_high is not None:
        return HandResult(HandRank.STRAIGHT_FLUSH, (straight_high,), best_five)

    # 按(张数降序, 点数降序)分组
    groups: List[Tuple[int, int]] = sorted(
        ((count, rank) for rank, count in Counter(ranks_desc).items()),
        reverse=True,
    )
    counts = [count for count, _ in groups]
    grouped_ranks = tuple(rank for _, rank in groups)

    if counts[0] == 4:
        return HandResult(HandRank.FOUR_OF_A_KIND, grouped_ranks, best_five)
    if counts == [3, 2]:
        return HandResult(HandRank.FULL_HOUSE, grouped_ranks, best_five)
    if is_flush:
        return HandResult(HandRank.FLUSH, tuple(ranks_desc), best_five)
    if straight_high is not None:
        return HandResult(HandRank.STRAIGHT, (straight_high,), best_five)
    if counts[0] == 3:
        return HandResult(HandRank.THREE_OF_A_KIND, grouped_ranks, best_five)
    if counts[:2] == [2, 2]:
        return HandResult(HandRank.TWO_PAIR, grouped_ranks, best_five)
    if counts[0] == 2:
        return HandResult(HandRank.ONE_PAIR, grouped_ranks, best_five)
    return HandResult(HandRank.HIGH_CARD, tuple(ranks_desc), best_five)


def five_card_subsets(cards: Sequence[Card]) -> Iterator[Tuple[Card, ...]]:
    """惰性枚举所有5张组合，7张牌共21个."""
    return combinations(cards, 5)


def evaluate7(cards: Sequence[Card]) -> HandResult:
    """
    评估5到7张牌中最佳的5张组合.

    Args:
        cards: 5-7张牌（通常是2张手牌加3-5张公共牌）

    Returns:
        HandResult: 所有5张组合中分数最高的结果

    Raises:
        ValueError: 当牌数少于5或多于7时
    """
    _validate_cards(cards, 5, 7)
    return max((evaluate5(subset) for subset in five_card_subsets(cards)),
               key=lambda result: result.score)


def compare_scores(a: int, b: int) -> int:
    """比较两个分数，返回-1/0/1."""
    if a == b:
        return 0
    return 1 if a > b else -1


class HandEvaluator:
    """
    面向手牌+公共牌的评估入口.

    Examples:
        >>> evaluator = HandEvaluator()
        >>> str(evaluator.evaluate_hand(parse_cards("As Ah"), parse_cards("Ks Qd 7c")))
        '一对(A)'
    """

    def evaluate_hand(self, hole_cards: List[Card], community_cards: List[Card]) -> HandResult:
        """
        评估手牌和公共牌组成的最佳牌型.

        Args:
            hole_cards: 玩家手牌（必须是2张）
            community_cards: 公共牌（3-5张）

        Returns:
            HandResult: 最佳牌型

        Raises:
            ValueError: 当牌数不符合要求或有重复牌时
        """
        if len(hole_cards) != 2:
            raise ValueError(f"手牌必须是2张，实际: {len(hole_cards)}")
        if len(community_cards) > 5:
            raise ValueError(f"公共牌不能超过5张，实际: {len(community_cards)}")
        all_cards = list(hole_cards) + list(community_cards)
        if len(set(all_cards)) != len(all_cards):
            raise ValueError("手牌与公共牌中存在重复牌")
        return evaluate7(all_cards)

    def compare_hands(self, hand1: HandResult, hand2: HandResult) -> int:
        """比较两个牌型，1表示hand1更强，-1表示更弱，0表示相等."""
        return hand1.compare_to(hand2)
