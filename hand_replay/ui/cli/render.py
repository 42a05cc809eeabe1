"""手牌回放CLI渲染模块.

把回放快照、胜率和底池赔率渲染为命令行文本。
所有渲染方法都是纯函数，仅依赖传入的数据。
"""

from typing import List, Optional

from hand_replay.core.equity.types import EquityResult, PotOdds
from hand_replay.core.snapshot.types import PlayerSnapshot, ReplaySnapshot


class ReplayRenderer:
    """回放渲染器."""

    @staticmethod
    def render_cards(cards) -> str:
        shown = [card.display if card is not None else "??" for card in cards]
        return " ".join(shown) if shown else "-"

    @staticmethod
    def render_player(player: PlayerSnapshot, is_last_actor: bool) -> str:
        """渲染单个玩家一行.

        Args:
            player: 玩家快照
            is_last_actor: 是否为最近一次主动行动的玩家

        Returns:
            格式化的玩家信息
        """
        marker = ">" if is_last_actor else " "
        status = "弃牌" if not player.is_active else ("全押" if player.is_all_in else "")
        hero = " [HERO]" if player.is_hero else ""
        cards = ReplayRenderer.render_cards(player.hole_cards) if any(player.hole_cards) else ""
        line = f"{marker} {player.display_name:<6} 筹码: {player.stack:<6} 本街: {player.street_bet:<5}"
        extras = " ".join(part for part in (cards, status) if part)
        return f"{line}{hero} {extras}".rstrip()

    @staticmethod
    def render_snapshot(snapshot: ReplaySnapshot) -> str:
        """渲染完整快照."""
        lines: List[str] = [
            f"--- 第 {snapshot.action_index + 1} 步 | {snapshot.street.value.upper()} | 底池: {snapshot.pot} ---",
            f"公共牌: {ReplayRenderer.render_cards(snapshot.board)}",
        ]
        for index, player in enumerate(snapshot.players):
            lines.append(ReplayRenderer.render_player(player, index == snapshot.active_player_index))
        if snapshot.last_action is not None:
            action = snapshot.last_action
            amount = f" {action.amount}" if action.amount else ""
            lines.append(f"最后行动: {action.position} {action.action_type.value}{amount}")
        if snapshot.is_complete:
            lines.append("牌局结束")
        return "\n".join(lines)

    @staticmethod
    def render_equity(equity: EquityResult, pot_odds: Optional[PotOdds] = None) -> str:
        """渲染胜率和底池赔率."""
        if not equity.is_available:
            return "胜率: 剩余牌不足，无法计算"
        lines = [
            f"胜率: {equity.hero_equity}% | 平分: {equity.tie_equity}% | "
            f"对手: {equity.opponent_count} | 样本: {equity.simulations} ({equity.mode.value})"
        ]
        if pot_odds is not None:
            verdict = "可以跟注" if equity.hero_equity + equity.tie_equity / 2 >= pot_odds.breakeven else "胜率不足"
            lines.append(
                f"底池赔率: 跟注 {pot_odds.to_call} 进 {pot_odds.pot_size} 底池，"
                f"需要 {pot_odds.breakeven}% ({verdict})"
            )
        return "\n".join(lines)
