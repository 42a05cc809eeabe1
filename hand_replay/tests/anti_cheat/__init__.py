"""
Anti-Cheat System - 反作弊系统

Modules:
    core_usage_checker.py: 核心模块使用检查器
    test_core_boundaries.py: 核心层分层检查
"""

from .core_usage_checker import CoreUsageChecker

__all__ = ['CoreUsageChecker']
