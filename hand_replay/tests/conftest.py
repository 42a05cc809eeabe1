"""
Hand Replay Test Configuration - pytest配置文件

提供通用fixture:
- 新开的6人桌和单挑牌局
- 一手完整录入的参考手牌
- 独立的配置服务
- 反作弊检查器

所有测试都会自动加载这些配置。
"""

import pytest

from hand_replay.application.config_service import ConfigService, PlaybackConfig
from hand_replay.core.deck.card import parse_cards
from hand_replay.core.engine.hand_engine import HandEngine
from hand_replay.core.equity.simulator import EquitySimulator
from hand_replay.core.history.types import ActionType, Blinds
from hand_replay.tests.anti_cheat.core_usage_checker import CoreUsageChecker


def play_reference_hand(engine: HandEngine) -> HandEngine:
    """
    6人桌参考手牌，盲注1/2，起始筹码100，英雄BTN

    翻牌前: UTG弃牌, MP加注到6, CO弃牌, BTN加注到18, SB/BB弃牌, MP跟注12 -> 底池39
    翻牌: MP过牌, BTN下注22, MP跟注 -> 底池83
    转牌: MP过牌, BTN下注55, MP弃牌 -> 底池138, BTN获胜
    """
    script = [
        (ActionType.FOLD, None),
        (ActionType.RAISE, 6),
        (ActionType.FOLD, None),
        (ActionType.RAISE, 18),
        (ActionType.FOLD, None),
        (ActionType.FOLD, None),
        (ActionType.CALL, None),
        (ActionType.CHECK, None),
        (ActionType.BET, 22),
        (ActionType.CALL, None),
        (ActionType.CHECK, None),
        (ActionType.BET, 55),
        (ActionType.FOLD, None),
    ]
    for action_type, amount in script:
        engine.act(action_type, amount)
    engine.set_hero_cards(parse_cards("Ah Kh"))
    engine.set_hole_cards("MP", parse_cards("Qc Qd"))
    engine.set_board(parse_cards("Kd 7c 2h 9s"))
    return engine


@pytest.fixture
def six_max_engine():
    """新开的6人桌: 盲注1/2，每人100，英雄BTN"""
    return HandEngine.new_hand(6, Blinds(1, 2), stacks=100, hero_position="BTN")


@pytest.fixture
def heads_up_engine():
    """单挑: 盲注1/2，每人50，英雄SB（也是按钮）"""
    return HandEngine.new_hand(2, Blinds(1, 2), stacks=50, hero_position="SB")


@pytest.fixture
def reference_engine(six_max_engine):
    """录入完毕的参考手牌"""
    return play_reference_hand(six_max_engine)


@pytest.fixture
def config_service():
    """独立的配置服务，避免修改全局单例"""
    return ConfigService()


@pytest.fixture
def instant_playback():
    """没有延迟的回放配置"""
    return PlaybackConfig(hold_delay=0.0, reveal_delay=0.0, absorb_delay=0.0)


@pytest.fixture
def fast_simulator():
    """固定种子的小样本胜率计算器"""
    return EquitySimulator(simulations=2000, seed=7)


@pytest.fixture
def core_usage_checker():
    """核心使用检查器fixture"""
    return CoreUsageChecker()


@pytest.fixture
def mock_detector():
    """Mock对象检测器fixture"""
    def _detect_mocks(*objects):
        """检测对象中是否包含mock"""
        for obj in objects:
            if hasattr(obj, '_mock_name') or hasattr(obj, 'call_count'):
                pytest.fail(f"检测到mock对象: {obj}, 测试必须使用真实对象")
    return _detect_mocks


def pytest_configure(config):
    """pytest配置"""
    config.addinivalue_line(
        "markers", "anti_cheat: 标记需要反作弊检查的测试"
    )
    config.addinivalue_line(
        "markers", "property_test: 标记基于属性的测试"
    )
    config.addinivalue_line(
        "markers", "integration: 标记集成测试"
    )
    config.addinivalue_line(
        "markers", "performance: 标记性能测试"
    )
