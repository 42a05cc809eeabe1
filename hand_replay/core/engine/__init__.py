"""
手牌引擎模块.

Classes:
    HandEngine: append(action) / snapshot(index)
"""

from .hand_engine import HandEngine

__all__ = ['HandEngine']
