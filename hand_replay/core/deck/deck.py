"""
扑克牌组管理.

提供完整牌组、排除已知牌后的剩余牌组，以及支持确定性随机数的Deck类.
"""

import random
from typing import Iterable, List, Optional, Tuple

from .card import Card
from .types import get_all_ranks, get_all_suits

# 完整的52张牌只构建一次，调用方拿到的都是副本
_FULL_DECK: tuple = tuple(
    Card(rank, suit)
    for suit in get_all_suits()
    for rank in get_all_ranks()
)


def full_deck() -> List[Card]:
    """
    获取完整的52张牌.

    Returns:
        List[Card]: 新列表，修改它不会影响其他调用方
    """
    return list(_FULL_DECK)


def remaining_deck(known: Iterable[Card]) -> List[Card]:
    """
    获取排除已知牌后的剩余牌.

    Args:
        known: 已知的牌（手牌、公共牌等）

    Returns:
        List[Card]: 不包含任何已知牌的牌列表，顺序与完整牌组一致

    Raises:
        TypeError: 当已知牌中有非Card对象时
        ValueError: 当已知牌中有重复牌时
    """
    known_list = list(known)
    for card in known_list:
        if not isinstance(card, Card):
            raise TypeError(f"已知牌必须是Card类型，实际: {type(card)}")
    known_set = set(known_list)
    if len(known_set) != len(known_list):
        raise ValueError(f"已知牌中存在重复: {[str(c) for c in known_list]}")
    return [card for card in _FULL_DECK if card not in known_set]


class Deck:
    """
    可洗牌、发牌的牌组，从牌堆顶（列表末尾）发牌.

    构造时排除已知牌并缓存结果，reset()只复制缓存，胜率模拟每次试验都会调用它.

    Examples:
        >>> deck = Deck(random.Random(42), exclude=parse_cards("Ah Kh"))
        >>> deck.shuffle()
        >>> board = deck.deal_cards(5)
        >>> len(deck)
        45
    """

    def __init__(self, rng: Optional[random.Random] = None,
                 exclude: Optional[Iterable[Card]] = None) -> None:
        """
        Args:
            rng: 随机数生成器，固定种子即可复现发牌顺序
            exclude: 不进入牌组的已知牌
        """
        self._rng = rng or random.Random()
        self._base: Tuple[Card, ...] = tuple(remaining_deck(exclude or ()))
        self._cards: List[Card] = list(self._base)

    def shuffle(self) -> None:
        self._rng.shuffle(self._cards)

    def deal_card(self) -> Card:
        """
        Raises:
            IndexError: 牌组已空
        """
        if not self._cards:
            raise IndexError("牌组已空，无法发牌")
        return self._cards.pop()

    def deal_cards(self, count: int) -> List[Card]:
        """
        一次发出count张牌.

        Raises:
            ValueError: count为负数
            IndexError: 剩余牌不足count张，此时牌组不变
        """
        if count < 0:
            raise ValueError(f"发牌数量不能为负数: {count}")
        if count > len(self._cards):
            raise IndexError(f"需要{count}张牌，牌组只剩{len(self._cards)}张")
        dealt = self._cards[-count:] if count else []
        del self._cards[len(self._cards) - count:]
        dealt.reverse()
        return dealt

    def peek_top(self) -> Optional[Card]:
        return self._cards[-1] if self._cards else None

    def reset(self) -> None:
        """恢复为排除已知牌后的完整牌组，不洗牌."""
        self._cards = list(self._base)

    @property
    def cards_remaining(self) -> int:
        return len(self._cards)

    @property
    def is_empty(self) -> bool:
        return not self._cards

    def __len__(self) -> int:
        return len(self._cards)

    def __repr__(self) -> str:
        return f"Deck(remaining={len(self._cards)}, excluded={52 - len(self._base)})"
