"""
底池赔率.

只读取快照中的本街投入和底池，不做任何独立的筹码计算.
"""

from typing import Optional

from ..snapshot.types import ReplaySnapshot
from .types import PotOdds


def calculate_pot_odds(snapshot: ReplaySnapshot) -> Optional[PotOdds]:
    """
    计算英雄面对下注时的底池赔率.

    仅当英雄未弃牌、最后一条行动是其他玩家的下注/加注/全押、并且英雄需要跟注时返回结果.
    跟注额 = 本街最高投入 - 英雄本街投入，以英雄剩余筹码为上限.

    Args:
        snapshot: 回放快照

    Returns:
        Optional[PotOdds]: 不满足条件时为None
    """
    hero = snapshot.hero
    last_action = snapshot.last_action
    if hero is None or not hero.is_active or last_action is None:
        return None
    if not last_action.action_type.is_aggressive or last_action.position == hero.position:
        return None

    max_bet = max(player.street_bet for player in snapshot.players)
    to_call = min(max_bet - hero.street_bet, hero.stack)
    if to_call <= 0:
        return None
    return PotOdds.from_amounts(snapshot.pot, to_call)
