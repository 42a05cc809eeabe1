"""
文本手牌记录导出

把一手牌格式化为可分享的纯文本。只读取HandHistory和StackProjector，不产生任何状态。
金额以大盲为单位输出，可选附加美元金额和占底池百分比。
"""

from typing import List, Optional

from .config_service import ExportConfig
from ..core.deck.card import format_cards
from ..core.history.types import Action, ActionType, HandHistory, Street
from ..core.projector.stack_projector import StackProjector
from ..core.state_machine.betting_round import BettingRoundStateMachine

__all__ = ['format_hand_history']

ACTION_VERBS = {
    ActionType.FOLD: 'folds',
    ActionType.CHECK: 'checks',
    ActionType.CALL: 'calls',
    ActionType.BET: 'bets',
    ActionType.RAISE: 'raises to',
    ActionType.ALL_IN: 'all-in',
}


def _number(value: float) -> str:
    return f"{value:g}" if value != int(value) else str(int(value))


class _Formatter:
    """单次导出用的格式化器"""

    def __init__(self, history: HandHistory, options: ExportConfig):
        self.history = history
        self.options = options
        self.projector = StackProjector(history)
        self.big_blind = history.blinds.big_blind

    def bb(self, chips: int) -> str:
        return f"{_number(round(chips / self.big_blind, 2))}bb"

    def dollars(self, chips: int) -> str:
        return f"${chips / self.big_blind * self.options.dollar_per_bb:.0f}"

    def header(self) -> List[str]:
        blinds = self.history.blinds
        if self.options.show_dollar_amounts and self.options.dollar_per_bb:
            sb = blinds.small_blind / blinds.big_blind * self.options.dollar_per_bb
            stakes = f"${_number(sb)}/${_number(self.options.dollar_per_bb)}"
        else:
            stakes = f"{blinds.small_blind}/{blinds.big_blind}"
        line = f"NL Hold'em {stakes}"
        if blinds.ante:
            line += f" ({blinds.ante} ante)"
        line += f" | {len(self.history.players)}-max"
        date = self.history.created_at.strftime("%Y-%m-%d %H:%M")
        return ['=== POKER HAND ===', line, f"Hand #{self.history.hand_id[:8]} | {date}", '']

    def roster(self) -> List[str]:
        lines = ['--- PLAYERS ---']
        for seat in self.history.players:
            label = f"{seat.position} ({seat.name})" if seat.name else seat.position
            line = f"{label}: {self.bb(seat.starting_stack)}"
            if seat.is_hero:
                line += ' [HERO]'
            lines.append(line)

        active = set(self.projector.active_positions())
        effective = min(seat.starting_stack for seat in self.history.players
                        if seat.position in active or seat.is_hero)
        lines += ['', f"Effective stack: {self.bb(effective)}", '']
        return lines

    def hero_cards(self) -> List[str]:
        hero = self.history.hero
        if hero is None or not hero.has_full_hand:
            return []
        return ['--- HERO CARDS ---', f"[{format_cards(hero.known_cards)}]", '']

    def street_header(self, street: Street) -> str:
        board = self.history.board
        title = f"=== {street.value.upper()} ==="
        if street == Street.PREFLOP or len(board) < street.board_count:
            return title
        parts = [f"[{format_cards(board[:3])}]"]
        parts += [f"[{card}]" for card in board[3:street.board_count]]
        return f"{title} {' '.join(parts)}"

    def action_line(self, action: Action, pot_before: int, street_total: int) -> str:
        line = f"{action.position}: {ACTION_VERBS[action.action_type]}"
        if action.committed <= 0:
            return line
        # 加注显示加注到的本街总额，其余显示本次投入
        shown = street_total if action.action_type == ActionType.RAISE else action.amount
        line += f" {self.bb(shown)}"
        if self.options.show_dollar_amounts and self.options.dollar_per_bb:
            line += f" ({self.dollars(shown)})"
        if (self.options.show_pot_percentages and pot_before > 0
                and action.action_type in (ActionType.BET, ActionType.RAISE)):
            line += f" ({round(action.amount / pot_before * 100)}% pot)"
        return line

    def streets(self) -> List[str]:
        lines: List[str] = []
        for street in Street:
            actions = [action for action in self.history.actions if action.street == street]
            if not actions:
                continue
            lines.append(self.street_header(street))
            pot = self.projector.pot_at_street_start(street)
            if street != Street.PREFLOP:
                lines.append(f"Pot: {self.bb(pot)}")
            totals = {position: 0 for position in self.history.positions}
            for action in actions:
                totals[action.position] += action.committed
                lines.append(self.action_line(action, pot, totals[action.position]))
                pot += action.committed
            lines.append('')
        return lines

    def showdown(self) -> List[str]:
        active = self.projector.active_positions()
        if len(active) <= 1:
            return []
        lines = ['=== SHOWDOWN ===']
        for position in active:
            seat = self.history.player(position)
            cards = format_cards(seat.known_cards) if seat.has_full_hand else '** **'
            lines.append(f"{position}: [{cards}]")
        lines.append('')
        return lines

    def result(self) -> List[str]:
        final_pot = self.projector.pot()
        lines = ['=== RESULT ===', f"Final pot: {self.bb(final_pot)}"]
        winner = BettingRoundStateMachine(self.history, self.projector).evaluate().winner
        if winner:
            lines.append(f"{winner} wins {self.bb(final_pot)}")
        return lines


def format_hand_history(history: HandHistory, options: Optional[ExportConfig] = None) -> str:
    """
    把手牌历史格式化为纯文本

    Args:
        history: 手牌历史
        options: 导出选项，默认不显示美元金额和底池百分比

    Returns:
        str: 多行文本
    """
    formatter = _Formatter(history, options or ExportConfig())
    lines: List[str] = []
    lines += formatter.header()
    lines += formatter.roster()
    lines += formatter.hero_cards()
    lines += formatter.streets()
    lines += formatter.showdown()
    lines += formatter.result()
    return '\n'.join(lines)
