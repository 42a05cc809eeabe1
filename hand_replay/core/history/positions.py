"""
桌面位置.

座位索引顺序就是这里给出的标准顺序：盲注在前、按钮在最后.
"""

from typing import Dict, List, Sequence

SB = "SB"
BB = "BB"
BTN = "BTN"

ALL_POSITIONS = ("SB", "BB", "UTG", "UTG+1", "MP", "MP+1", "HJ", "CO", "BTN")

MIN_PLAYERS = 2
MAX_PLAYERS = 9

POSITIONS_BY_COUNT: Dict[int, tuple] = {
    2: ("SB", "BB"),
    3: ("SB", "BB", "BTN"),
    4: ("SB", "BB", "CO", "BTN"),
    5: ("SB", "BB", "MP", "CO", "BTN"),
    6: ("SB", "BB", "UTG", "MP", "CO", "BTN"),
    7: ("SB", "BB", "MP", "MP+1", "HJ", "CO", "BTN"),
    8: ("SB", "BB", "UTG+1", "MP", "MP+1", "HJ", "CO", "BTN"),
    9: ALL_POSITIONS,
}


def get_positions(player_count: int) -> List[str]:
    """
    获取给定人数下的标准位置顺序.

    Args:
        player_count: 玩家人数，2-9

    Returns:
        List[str]: 按座位索引排列的位置

    Raises:
        ValueError: 当人数超出范围时
    """
    if player_count not in POSITIONS_BY_COUNT:
        raise ValueError(f"玩家人数必须在{MIN_PLAYERS}到{MAX_PLAYERS}之间，实际: {player_count}")
    return list(POSITIONS_BY_COUNT[player_count])


def button_position(positions: Sequence[str]) -> str:
    """按钮位。单挑时小盲就是按钮."""
    return BTN if BTN in positions else SB
