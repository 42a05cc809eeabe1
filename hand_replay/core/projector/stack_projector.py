"""
筹码投影器.

整个引擎中唯一计算筹码、底池和弃牌状态的地方。快照、状态机、规则校验、
文本导出和底池赔率都只读取这里的结果.

所有方法的upto参数表示日志前缀长度（包含前upto条记录），None表示整个日志.
"""

from typing import Dict, Iterable, List, Mapping, Optional

from ..history.types import Action, ActionType, HandHistory, Street


def derive_starting_stacks(current_stacks: Mapping[str, int],
                           actions: Iterable[Action]) -> Dict[str, int]:
    """
    由行动后的筹码反推起始筹码.

    起始筹码 = 当前筹码 + 日志中该位置投入的总额.

    Args:
        current_stacks: 位置 -> 全部行动之后的筹码
        actions: 完整行动日志

    Returns:
        Dict[str, int]: 位置 -> 起始筹码
    """
    starting = dict(current_stacks)
    for action in actions:
        if action.position in starting:
            starting[action.position] += action.committed
    return starting


class StackProjector:
    """
    从行动日志前缀投影出筹码、底池和弃牌状态.

    Examples:
        >>> projector = StackProjector(history)
        >>> projector.pot()
        3
        >>> projector.stack("BB", upto=2)
        98
    """

    def __init__(self, history: HandHistory) -> None:
        self._history = history

    @property
    def history(self) -> HandHistory:
        return self._history

    def prefix(self, upto: Optional[int] = None) -> List[Action]:
        """日志前缀，upto会被限制在[0, 日志长度]."""
        actions = self._history.actions
        if upto is None:
            return list(actions)
        return list(actions[:max(0, min(upto, len(actions)))])

    def committed(self, position: str, upto: Optional[int] = None) -> int:
        """前缀中该位置投入的总筹码（下注、加注、跟注、全押）."""
        return sum(action.committed for action in self.prefix(upto)
                   if action.position == position)

    def stack(self, position: str, upto: Optional[int] = None) -> int:
        """当前筹码 = 起始筹码 - 已投入."""
        return self._history.player(position).starting_stack - self.committed(position, upto)

    def stacks(self, upto: Optional[int] = None) -> Dict[str, int]:
        committed: Dict[str, int] = {player.position: 0 for player in self._history.players}
        for action in self.prefix(upto):
            if action.position in committed:
                committed[action.position] += action.committed
        return {
            player.position: player.starting_stack - committed[player.position]
            for player in self._history.players
        }

    def pot(self, upto: Optional[int] = None) -> int:
        """底池 = 前缀中所有投入之和，包含盲注."""
        return sum(action.committed for action in self.prefix(upto))

    def folded_positions(self, upto: Optional[int] = None) -> List[str]:
        """前缀中已弃牌的位置。弃牌一旦出现，之后所有前缀都保持弃牌."""
        folded = {action.position for action in self.prefix(upto)
                  if action.action_type == ActionType.FOLD}
        return [position for position in self._history.positions if position in folded]

    def is_folded(self, position: str, upto: Optional[int] = None) -> bool:
        return position in self.folded_positions(upto)

    def active_positions(self, upto: Optional[int] = None) -> List[str]:
        """未弃牌的位置，按座位顺序."""
        folded = set(self.folded_positions(upto))
        return [position for position in self._history.positions if position not in folded]

    def street_actions(self, street: Street, upto: Optional[int] = None) -> List[Action]:
        return [action for action in self.prefix(upto) if action.street == street]

    def street_contributions(self, street: Street, upto: Optional[int] = None) -> Dict[str, int]:
        """该街每个位置的投入，没有投入的位置为0."""
        contributions: Dict[str, int] = {position: 0 for position in self._history.positions}
        for action in self.street_actions(street, upto):
            if action.position in contributions:
                contributions[action.position] += action.committed
        return contributions

    def street_of(self, upto: Optional[int] = None) -> Street:
        """前缀中最后一条行动所在的街，空前缀为翻牌前."""
        actions = self.prefix(upto)
        return actions[-1].street if actions else Street.PREFLOP

    def pot_at_street_start(self, street: Street) -> int:
        """进入该街之前的底池."""
        return sum(action.committed for action in self._history.actions
                   if action.street.order < street.order)

    def total_starting_chips(self) -> int:
        return sum(player.starting_stack for player in self._history.players)
