"""
Property-based Tests - 属性测试

用hypothesis生成随机的合法行动序列和随机牌面，验证:
- 任意前缀上筹码守恒、筹码不为负
- 牌局总会结束
- 7张牌的评估结果不弱于其中任意5张
- 牌型比较反对称
- 单挑胜率对称，河牌精确枚举时三种结果合计100%
"""

from itertools import combinations

import pytest
from hypothesis import given, settings, strategies as st

from hand_replay.core.deck import full_deck, remaining_deck
from hand_replay.core.engine.hand_engine import HandEngine
from hand_replay.core.equity.simulator import EquitySimulator
from hand_replay.core.equity.types import EquityMode
from hand_replay.core.eval.evaluator import evaluate5, evaluate7, five_card_subsets
from hand_replay.core.history.positions import get_positions
from hand_replay.core.history.types import ActionType, Blinds
from hand_replay.tests.anti_cheat.core_usage_checker import CoreUsageChecker

DECK = full_deck()
MAX_ACTIONS = 2000

stack_strategy = st.integers(min_value=2, max_value=300)
player_count_strategy = st.integers(min_value=2, max_value=9)


def distinct_cards(count: int):
    return st.lists(st.sampled_from(DECK), min_size=count, max_size=count, unique=True)


def play_random_hand(data, player_count: int) -> HandEngine:
    """按可用行动随机推进一手牌直到不再接受行动"""
    positions = get_positions(player_count)
    stacks = {position: data.draw(stack_strategy, label=f"stack {position}") for position in positions}
    engine = HandEngine.new_hand(player_count, Blinds(1, 2), stacks=stacks)

    for _ in range(MAX_ACTIONS):
        legal = engine.legal_actions()
        if legal is None:
            break
        action_type = data.draw(st.sampled_from(legal.available), label="action")
        amount = None
        if action_type in (ActionType.BET, ActionType.RAISE):
            amount = data.draw(st.integers(min_value=legal.min_amount, max_value=legal.max_amount),
                               label="amount")
        engine.act(action_type, amount)
    return engine


@pytest.mark.property_test
@pytest.mark.anti_cheat
@settings(max_examples=60, deadline=None)
@given(st.data(), player_count_strategy)
def test_random_hands_conserve_chips(data, player_count):
    """任意合法行动序列的每个快照都满足筹码守恒"""
    engine = play_random_hand(data, player_count)

    assert engine.legal_actions() is None
    assert not engine.state.accepts_actions
    for snapshot in engine.snapshots():
        CoreUsageChecker.verify_snapshot_conservation(snapshot)
        assert all(player.stack >= 0 for player in snapshot.players)
        assert snapshot.pot >= 0


@pytest.mark.property_test
@settings(max_examples=40, deadline=None)
@given(st.data(), player_count_strategy)
def test_rebuild_reproduces_random_hand(data, player_count):
    """重放同一份日志得到相同的最终快照"""
    engine = play_random_hand(data, player_count)
    rebuilt = HandEngine.rebuild(engine.history)
    assert rebuilt.final_snapshot() == engine.final_snapshot()


@pytest.mark.property_test
@given(distinct_cards(7))
def test_best_of_seven_dominates_subsets(cards):
    best = evaluate7(cards)
    scores = [evaluate5(subset).score for subset in five_card_subsets(cards)]
    assert best.score == max(scores)


@pytest.mark.property_test
@given(distinct_cards(10))
def test_compare_is_antisymmetric(cards):
    first = evaluate5(cards[:5])
    second = evaluate5(cards[5:])
    assert first.compare_to(second) == -second.compare_to(first)
    assert first.compare_to(first) == 0


@pytest.mark.property_test
@settings(max_examples=10, deadline=None)
@given(distinct_cards(8))
def test_heads_up_equity_is_symmetric(cards):
    """两手牌互换位置后胜负对调"""
    simulator = EquitySimulator(simulations=100, seed=0)
    hero, villain, board = cards[:2], cards[2:4], cards[4:8]
    forward = simulator.matchup(hero, villain, board)
    backward = simulator.matchup(villain, hero, board)
    assert abs(forward.hero_equity - backward.lose_equity) <= 0.2
    assert abs(forward.tie_equity - backward.tie_equity) <= 0.2


@pytest.mark.property_test
@settings(max_examples=10, deadline=None)
@given(distinct_cards(7))
def test_exact_river_equity_partitions_outcomes(cards):
    """河牌单个对手精确枚举：英雄、对手、平分合计100%，对手胜率与逐一比较一致"""
    hero, board = cards[:2], cards[2:]
    result = EquitySimulator(seed=0).calculate(hero, board, 1)
    assert result.mode == EquityMode.EXACT
    assert result.simulations == 990

    hero_score = evaluate7(hero + board).score
    opponent_wins = sum(
        1 for opponent in combinations(remaining_deck(hero + board), 2)
        if evaluate7(list(opponent) + board).score > hero_score
    )
    opponent_equity = opponent_wins * 100 / 990
    assert abs(result.hero_equity + result.tie_equity + opponent_equity - 100) <= 0.15
    assert abs(result.lose_equity - opponent_equity) <= 0.15
