"""
扑克牌基础类型定义.

定义扑克牌的花色、点数枚举以及两种记谱方式（短记法"As"、显示记法"A♠"）使用的字符映射.
"""

from enum import Enum, IntEnum
from typing import Dict, List


class Suit(Enum):
    """
    扑克牌花色枚举.

    使用Unicode符号作为值，顺序为黑桃、红桃、方块、梅花.
    """

    SPADES = "♠"      # 黑桃
    HEARTS = "♥"      # 红桃
    DIAMONDS = "♦"    # 方块
    CLUBS = "♣"       # 梅花

    @property
    def letter(self) -> str:
        """短记法中使用的小写花色字母."""
        return _SUIT_LETTERS[self]


class Rank(IntEnum):
    """
    扑克牌点数枚举.

    数值越大点数越大，A为14。轮子顺子A-2-3-4-5中A按1处理，由评估器负责.
    """

    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    @property
    def symbol(self) -> str:
        """单字符点数符号，10记为T."""
        return RANK_SYMBOLS[self]

    @property
    def display(self) -> str:
        """显示用点数，10记为"10"."""
        return "10" if self is Rank.TEN else RANK_SYMBOLS[self]


RANK_SYMBOLS: Dict[Rank, str] = {
    Rank.TWO: "2", Rank.THREE: "3", Rank.FOUR: "4", Rank.FIVE: "5",
    Rank.SIX: "6", Rank.SEVEN: "7", Rank.EIGHT: "8", Rank.NINE: "9",
    Rank.TEN: "T", Rank.JACK: "J", Rank.QUEEN: "Q",
    Rank.KING: "K", Rank.ACE: "A",
}

_SUIT_LETTERS: Dict[Suit, str] = {
    Suit.SPADES: "s", Suit.HEARTS: "h",
    Suit.DIAMONDS: "d", Suit.CLUBS: "c",
}

# 解析时接受的点数写法
RANK_PARSE_MAP: Dict[str, Rank] = {
    **{symbol: rank for rank, symbol in RANK_SYMBOLS.items()},
    "10": Rank.TEN, "t": Rank.TEN, "j": Rank.JACK, "q": Rank.QUEEN,
    "k": Rank.KING, "a": Rank.ACE,
}

# 解析时接受的花色写法（字母大小写均可，也接受Unicode符号）
SUIT_PARSE_MAP: Dict[str, Suit] = {
    **{letter: suit for suit, letter in _SUIT_LETTERS.items()},
    **{letter.upper(): suit for suit, letter in _SUIT_LETTERS.items()},
    **{suit.value: suit for suit in Suit},
}


def get_all_suits() -> List[Suit]:
    """
    获取所有花色.

    Returns:
        List[Suit]: 四种花色，按枚举顺序
    """
    return list(Suit)


def get_all_ranks() -> List[Rank]:
    """
    获取所有点数.

    Returns:
        List[Rank]: 13种点数，从2到A
    """
    return list(Rank)
