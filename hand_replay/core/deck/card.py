"""
扑克牌数据结构.

定义不可变的Card类，结构相等、可哈希，支持短记法和显示记法的解析与输出.
"""

from dataclasses import dataclass
from typing import Iterable, List

from .types import Rank, Suit, RANK_PARSE_MAP, SUIT_PARSE_MAP


@dataclass(frozen=True)
class Card:
    """
    表示一张扑克牌.

    两张牌当且仅当点数和花色都相同时相等，因此可以直接放入集合做去重和排除.

    Attributes:
        rank: 点数
        suit: 花色

    Examples:
        >>> card = Card(Rank.ACE, Suit.SPADES)
        >>> str(card)
        'As'
        >>> card.display
        'A♠'
    """

    rank: Rank
    suit: Suit

    def __post_init__(self) -> None:
        """
        验证扑克牌数据的有效性.

        Raises:
            TypeError: 当花色或点数类型无效时
        """
        if not isinstance(self.rank, Rank):
            raise TypeError(f"点数必须是Rank类型，实际: {type(self.rank)}")
        if not isinstance(self.suit, Suit):
            raise TypeError(f"花色必须是Suit类型，实际: {type(self.suit)}")

    def __str__(self) -> str:
        """短记法，如"As"、"Td"."""
        return f"{self.rank.symbol}{self.suit.letter}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def display(self) -> str:
        """显示记法，如"A♠"、"10♦"."""
        return f"{self.rank.display}{self.suit.value}"

    @classmethod
    def from_str(cls, card_str: str) -> 'Card':
        """
        从字符串创建扑克牌对象.

        Args:
            card_str: 扑克牌字符串，如"As"、"Td"、"10h"、"K♠"

        Returns:
            Card: 对应的扑克牌对象

        Raises:
            TypeError: 当输入不是字符串时
            ValueError: 当字符串格式无效时
        """
        if not isinstance(card_str, str):
            raise TypeError(f"输入必须是字符串，实际: {type(card_str)}")

        text = card_str.strip()
        if len(text) < 2:
            raise ValueError(f"卡牌字符串格式错误: {card_str}")

        # 处理10的特殊情况
        if text.startswith("10"):
            rank_str, suit_str = "10", text[2:]
        else:
            rank_str, suit_str = text[0], text[1:]

        if rank_str not in RANK_PARSE_MAP:
            raise ValueError(f"无效的点数: {rank_str}")
        if suit_str not in SUIT_PARSE_MAP:
            raise ValueError(f"无效的花色: {suit_str}")

        return cls(RANK_PARSE_MAP[rank_str], SUIT_PARSE_MAP[suit_str])

    def __lt__(self, other: 'Card') -> bool:
        """按点数比较，点数相同时按花色枚举顺序，保证排序稳定."""
        if not isinstance(other, Card):
            return NotImplemented
        suits = list(Suit)
        return (self.rank, -suits.index(self.suit)) < (other.rank, -suits.index(other.suit))


def parse_cards(text: str) -> List[Card]:
    """
    解析以空白或逗号分隔的多张牌.

    Args:
        text: 如"As Kh"、"Ah,Kd,Qc"

    Returns:
        List[Card]: 按输入顺序的牌列表
    """
    tokens = text.replace(",", " ").split()
    return [Card.from_str(token) for token in tokens]


def format_cards(cards: Iterable[Card]) -> str:
    """以短记法输出多张牌，空格分隔."""
    return " ".join(str(card) for card in cards)
