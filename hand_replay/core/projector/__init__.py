"""
筹码投影模块.

Classes:
    StackProjector: 唯一的筹码/底池/弃牌投影器

Functions:
    derive_starting_stacks: 由行动后筹码反推起始筹码
"""

from .stack_projector import StackProjector, derive_starting_stacks

__all__ = ['StackProjector', 'derive_starting_stacks']
