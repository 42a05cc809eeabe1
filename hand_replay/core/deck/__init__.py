"""
扑克牌组模块.

Classes:
    Card: 不可变扑克牌
    Deck: 可洗牌、可发牌的牌组
    Suit, Rank: 花色与点数枚举

Functions:
    full_deck: 完整52张牌
    remaining_deck: 排除已知牌后的剩余牌
    parse_cards, format_cards: 多张牌的解析与输出
"""

from .types import Suit, Rank
from .card import Card, parse_cards, format_cards
from .deck import Deck, full_deck, remaining_deck

__all__ = [
    'Suit', 'Rank', 'Card', 'Deck',
    'full_deck', 'remaining_deck', 'parse_cards', 'format_cards',
]
