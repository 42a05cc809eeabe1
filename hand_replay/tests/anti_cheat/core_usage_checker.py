"""
Core Usage Checker - 核心模块使用检查器

确保测试真正使用hand_replay的核心对象而不是mock数据。

Classes:
    CoreUsageChecker: 核心使用检查器
"""

import sys
from typing import Any, List

PACKAGE_PREFIX = 'hand_replay.'

_MOCK_INDICATORS = ('Mock', 'MagicMock', 'AsyncMock', 'NonCallableMock', 'Stub', 'Fake')
_MOCK_ATTRIBUTES = ('call_count', 'call_args', 'return_value', 'side_effect',
                    '_mock_name', '_mock_parent', '_mock_methods', '_spec_class')


class CoreUsageChecker:
    """核心模块使用检查器"""

    @staticmethod
    def verify_real_objects(obj: Any, expected_type_name: str) -> None:
        """验证对象是真实的核心对象

        Args:
            obj: 要检查的对象
            expected_type_name: 期望的类型名称

        Raises:
            AssertionError: 如果对象不是期望的真实类型
        """
        actual_type_name = type(obj).__name__
        assert actual_type_name == expected_type_name, \
            f"必须使用真实的{expected_type_name}，当前类型: {actual_type_name}"

        assert not _is_mock_object(obj), \
            f"禁止使用mock对象，必须使用真实的{expected_type_name}"

        module_name = type(obj).__module__
        assert module_name.startswith(PACKAGE_PREFIX), \
            f"对象必须来自hand_replay模块，当前模块: {module_name}"

    @staticmethod
    def verify_chip_conservation(initial_total: int, final_total: int) -> None:
        """验证筹码守恒

        Raises:
            AssertionError: 如果筹码不守恒
        """
        assert isinstance(initial_total, int) and initial_total >= 0, \
            f"初始筹码必须是非负整数: {initial_total}"
        assert isinstance(final_total, int) and final_total >= 0, \
            f"最终筹码必须是非负整数: {final_total}"
        assert initial_total == final_total, \
            f"筹码必须守恒: 初始{initial_total}, 最终{final_total}, 差异{final_total - initial_total}"

    @staticmethod
    def verify_snapshot_conservation(snapshot: Any) -> None:
        """验证快照上 所有玩家筹码 + 底池 == 起始筹码总和"""
        starting = sum(player.starting_stack for player in snapshot.players)
        current = sum(player.stack for player in snapshot.players) + snapshot.pot
        CoreUsageChecker.verify_chip_conservation(starting, current)

    @staticmethod
    def verify_module_boundaries(obj: Any, allowed_modules: List[str]) -> None:
        """验证对象来自允许的模块

        Raises:
            AssertionError: 如果对象来自不允许的模块
        """
        module_name = type(obj).__module__
        for allowed_module in allowed_modules:
            if module_name.startswith(allowed_module):
                return
        raise AssertionError(
            f"对象来自不允许的模块: {module_name}, 允许的模块: {allowed_modules}"
        )

    @staticmethod
    def verify_no_external_dependencies(module_name: str) -> None:
        """验证核心模块没有引用应用层、界面层或测试代码

        Raises:
            AssertionError: 如果核心模块引用了上层模块
        """
        if not module_name.startswith('hand_replay.core.'):
            return
        module = sys.modules.get(module_name)
        if module is None:
            return

        forbidden = []
        for name, value in vars(module).items():
            source = getattr(value, '__module__', None) or getattr(value, '__name__', '')
            if not isinstance(source, str):
                continue
            if source.startswith(('hand_replay.application', 'hand_replay.ui', 'hand_replay.tests')):
                forbidden.append(f"{name} ({source})")
        assert not forbidden, f"核心模块 {module_name} 不能导入: {forbidden}"


def _is_mock_object(obj: Any) -> bool:
    """按类型名、模块名和mock特有属性检测mock对象"""
    obj_type = type(obj)
    if obj_type.__module__ == 'builtins':
        return False
    for cls in obj_type.__mro__:
        if any(indicator in cls.__name__ for indicator in _MOCK_INDICATORS):
            return True
    if 'mock' in obj_type.__module__.lower():
        return True
    mock_attr_count = sum(1 for attr in _MOCK_ATTRIBUTES if attr in getattr(obj, '__dict__', {}))
    return mock_attr_count >= 2
