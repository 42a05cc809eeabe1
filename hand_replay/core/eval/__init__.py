"""
牌型评估模块.

Classes:
    HandRank: 9种牌型等级
    HandResult: 评估结果（含整数分数）
    HandEvaluator: 手牌+公共牌评估入口

Functions:
    evaluate5, evaluate7, compare_scores
"""

from .types import HandRank, HandResult, encode_score
from .evaluator import HandEvaluator, evaluate5, evaluate7, compare_scores, five_card_subsets

__all__ = [
    'HandRank', 'HandResult', 'encode_score',
    'HandEvaluator', 'evaluate5', 'evaluate7', 'compare_scores', 'five_card_subsets',
]
