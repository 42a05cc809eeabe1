"""
回放快照模块

Classes:
    PlayerSnapshot, ReplaySnapshot: 不可变快照
    SnapshotProjector: (手牌历史, 索引) -> 快照
"""

from .types import PlayerSnapshot, ReplaySnapshot
from .snapshot_projector import SnapshotProjector

__all__ = ['PlayerSnapshot', 'ReplaySnapshot', 'SnapshotProjector']
