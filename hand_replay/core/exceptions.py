"""
手牌复盘引擎的异常体系.

核心层只抛出这里定义的类型化异常，应用层负责把它们转换为带error_code的结果对象.
"""

from enum import Enum
from typing import Optional


class ActionErrorCode(Enum):
    """行动被拒绝的原因代码."""

    HAND_COMPLETE = "HAND_COMPLETE"
    NO_BETTING_ALLOWED = "NO_BETTING_ALLOWED"
    UNKNOWN_POSITION = "UNKNOWN_POSITION"
    PLAYER_FOLDED = "PLAYER_FOLDED"
    OUT_OF_TURN = "OUT_OF_TURN"
    WRONG_STREET = "WRONG_STREET"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    EXCEEDS_STACK = "EXCEEDS_STACK"
    NO_CHIPS = "NO_CHIPS"
    ILLEGAL_CHECK = "ILLEGAL_CHECK"
    ILLEGAL_BET = "ILLEGAL_BET"
    ILLEGAL_RAISE = "ILLEGAL_RAISE"
    CALL_AMOUNT_MISMATCH = "CALL_AMOUNT_MISMATCH"
    BELOW_MIN_RAISE = "BELOW_MIN_RAISE"
    ALL_IN_AMOUNT_MISMATCH = "ALL_IN_AMOUNT_MISMATCH"
    DUPLICATE_CARD = "DUPLICATE_CARD"
    INVALID_BOARD = "INVALID_BOARD"
    INVALID_SETUP = "INVALID_SETUP"


class HandReplayError(Exception):
    """引擎异常基类."""

    def __init__(self, message: str, code: Optional[ActionErrorCode] = None):
        super().__init__(message)
        self.message = message
        self.code = code

    @property
    def error_code(self) -> Optional[str]:
        """字符串形式的错误代码，供应用层结果对象使用."""
        return self.code.value if self.code is not None else None


class ActionError(HandReplayError):
    """追加行动时的前置条件违反."""

    def __init__(self, message: str, code: ActionErrorCode):
        super().__init__(message, code)


class DuplicateCardError(HandReplayError):
    """同一张牌在手牌/公共牌中出现多次."""

    def __init__(self, message: str):
        super().__init__(message, ActionErrorCode.DUPLICATE_CARD)


class InvalidBoardError(HandReplayError):
    """公共牌数量或内容非法."""

    def __init__(self, message: str):
        super().__init__(message, ActionErrorCode.INVALID_BOARD)


class HandSetupError(HandReplayError):
    """牌局初始化参数非法（人数、盲注、筹码等）."""

    def __init__(self, message: str):
        super().__init__(message, ActionErrorCode.INVALID_SETUP)


__all__ = [
    'ActionErrorCode',
    'HandReplayError',
    'ActionError',
    'DuplicateCardError',
    'InvalidBoardError',
    'HandSetupError',
]
