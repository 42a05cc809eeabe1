"""
下注规则模块.

Classes:
    StreetState: 单街下注状态
    PermissibleActions: 可用行动

Functions:
    compute_street_state, determine_permissible_actions, validate_action
"""

from .types import StreetState, PermissibleActions
from .action_logic import compute_street_state, determine_permissible_actions, validate_action

__all__ = [
    'StreetState', 'PermissibleActions',
    'compute_street_state', 'determine_permissible_actions', 'validate_action',
]
