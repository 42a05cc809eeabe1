"""
下注轮状态机模块.

Classes:
    HandPhase: 阶段枚举
    CompletionReason: 结束原因
    RoundState: 某个日志前缀上的状态
    BettingRoundStateMachine: 状态推导
"""

from .types import HandPhase, CompletionReason, RoundState
from .betting_round import BettingRoundStateMachine

__all__ = ['HandPhase', 'CompletionReason', 'RoundState', 'BettingRoundStateMachine']
