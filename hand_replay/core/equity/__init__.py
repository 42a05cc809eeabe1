"""
胜率模块.

Classes:
    EquityMode, EquityResult, PotOdds
    EquitySimulator: 精确枚举/蒙特卡洛胜率

Functions:
    calculate_pot_odds
"""

from .types import EquityMode, EquityResult, PotOdds
from .simulator import EquitySimulator, DEFAULT_SIMULATIONS
from .pot_odds import calculate_pot_odds

__all__ = [
    'EquityMode', 'EquityResult', 'PotOdds',
    'EquitySimulator', 'DEFAULT_SIMULATIONS', 'calculate_pot_odds',
]
