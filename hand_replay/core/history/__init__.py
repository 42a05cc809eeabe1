"""
手牌历史（行动日志）模块.

Classes:
    Street, ActionType, Action, Blinds, PlayerSeat, HandHistory

Functions:
    get_positions, button_position

JSON序列化位于 hand_replay.core.history.serializer.
"""

from .types import (
    Street, STREET_CARD_COUNT, ActionType, COMMITTING_ACTIONS,
    Action, Blinds, PlayerSeat, HandHistory,
)
from .positions import (
    SB, BB, BTN, ALL_POSITIONS, MIN_PLAYERS, MAX_PLAYERS,
    get_positions, button_position,
)

__all__ = [
    'Street', 'STREET_CARD_COUNT', 'ActionType', 'COMMITTING_ACTIONS',
    'Action', 'Blinds', 'PlayerSeat', 'HandHistory',
    'SB', 'BB', 'BTN', 'ALL_POSITIONS', 'MIN_PLAYERS', 'MAX_PLAYERS',
    'get_positions', 'button_position',
]
