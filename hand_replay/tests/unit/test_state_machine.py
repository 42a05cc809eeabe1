"""
下注轮状态机单元测试

覆盖行动顺序、大盲选择权、街关闭、全押摊牌和各种结束原因。
"""

import pytest

from hand_replay.core.deck import parse_cards
from hand_replay.core.exceptions import ActionError, ActionErrorCode
from hand_replay.core.history.types import ActionType, Street
from hand_replay.core.state_machine import BettingRoundStateMachine, CompletionReason, HandPhase
from hand_replay.tests.anti_cheat.core_usage_checker import CoreUsageChecker


class TestPreflopOrder:
    """翻牌前行动顺序"""

    def test_utg_acts_first(self, six_max_engine):
        state = six_max_engine.state
        CoreUsageChecker.verify_real_objects(state, "RoundState")
        assert state.phase == HandPhase.BETTING
        assert state.street == Street.PREFLOP
        assert state.next_actor == "UTG"

    def test_order_follows_seats(self, six_max_engine):
        seen = []
        for _ in range(4):
            seen.append(six_max_engine.state.next_actor)
            six_max_engine.act(ActionType.CALL)
        seen.append(six_max_engine.state.next_actor)
        assert seen == ["UTG", "MP", "CO", "BTN", "SB"]

    def test_big_blind_option(self, six_max_engine):
        """所有人平跟后大盲仍然有一次行动机会"""
        for _ in range(5):
            six_max_engine.act(ActionType.CALL)

        state = six_max_engine.state
        assert state.phase == HandPhase.BETTING
        assert state.next_actor == "BB"
        assert six_max_engine.legal_actions().can(ActionType.CHECK)

    def test_big_blind_check_closes_preflop(self, six_max_engine):
        for _ in range(5):
            six_max_engine.act(ActionType.CALL)
        six_max_engine.act(ActionType.CHECK)

        state = six_max_engine.state
        assert state.phase == HandPhase.STREET_COMPLETE
        assert state.next_street == Street.FLOP
        assert state.betting_street == Street.FLOP
        assert state.next_actor == "SB"

    def test_raise_reopens_action(self, six_max_engine):
        six_max_engine.act(ActionType.CALL)       # UTG
        six_max_engine.act(ActionType.RAISE, 8)   # MP
        for _ in range(4):                        # CO, BTN, SB, BB
            six_max_engine.act(ActionType.FOLD)
        assert six_max_engine.state.next_actor == "UTG"


class TestStreetTransitions:
    """翻牌后行动顺序与结束原因"""

    def test_heads_up_big_blind_acts_first_postflop(self, heads_up_engine):
        assert heads_up_engine.state.next_actor == "SB"
        heads_up_engine.act(ActionType.CALL)
        assert heads_up_engine.state.next_actor == "BB"
        heads_up_engine.act(ActionType.CHECK)

        state = heads_up_engine.state
        assert state.phase == HandPhase.STREET_COMPLETE
        assert state.next_actor == "BB"

    def test_river_closed(self, heads_up_engine):
        heads_up_engine.act(ActionType.CALL)
        heads_up_engine.act(ActionType.CHECK)
        for _ in range(6):
            heads_up_engine.act(ActionType.CHECK)

        state = heads_up_engine.state
        assert state.phase == HandPhase.HAND_COMPLETE
        assert state.street == Street.RIVER
        assert state.reason == CompletionReason.RIVER_CLOSED
        assert state.winner is None

    def test_everyone_folds_to_big_blind(self, six_max_engine):
        for _ in range(5):
            six_max_engine.act(ActionType.FOLD)

        state = six_max_engine.state
        assert state.phase == HandPhase.HAND_COMPLETE
        assert state.reason == CompletionReason.LAST_PLAYER_STANDING
        assert state.winner == "BB"

        with pytest.raises(ActionError) as exc_info:
            six_max_engine.act(ActionType.CHECK)
        assert exc_info.value.code == ActionErrorCode.HAND_COMPLETE

    def test_all_in_showdown(self, heads_up_engine):
        heads_up_engine.act(ActionType.ALL_IN)
        assert heads_up_engine.state.next_actor == "BB"
        heads_up_engine.act(ActionType.CALL)

        state = heads_up_engine.state
        assert state.phase == HandPhase.ALL_IN_SHOWDOWN
        assert not state.accepts_actions
        assert heads_up_engine.legal_actions() is None
        with pytest.raises(ActionError) as exc_info:
            heads_up_engine.act(ActionType.CHECK)
        assert exc_info.value.code == ActionErrorCode.NO_BETTING_ALLOWED

        heads_up_engine.set_board(parse_cards("2c 7d 9h Js 3d"))
        state = heads_up_engine.state
        assert state.phase == HandPhase.HAND_COMPLETE
        assert state.reason == CompletionReason.ALL_IN_RUNOUT

    def test_short_all_in_call_still_needs_other_players(self, six_max_engine):
        """一名玩家全押后，其他仍有筹码的玩家继续行动"""
        six_max_engine.act(ActionType.ALL_IN)   # UTG 100
        state = six_max_engine.state
        assert state.phase == HandPhase.BETTING
        assert state.next_actor == "MP"

    def test_manual_end(self, heads_up_engine):
        heads_up_engine.act(ActionType.CALL)
        heads_up_engine.end_hand_manually()

        state = heads_up_engine.state
        assert state.phase == HandPhase.HAND_COMPLETE
        assert state.reason == CompletionReason.MANUAL_END
        # 手动结束只影响整个日志，之前的前缀仍在下注中
        assert heads_up_engine.snapshot(-1).phase == HandPhase.BETTING


class TestStateMachineDirect:
    """直接使用状态机"""

    def test_evaluate_prefix(self, reference_engine):
        history = reference_engine.history
        machine = BettingRoundStateMachine(history)
        forced = history.forced_count

        assert machine.evaluate(forced).next_actor == "UTG"
        after_preflop = machine.evaluate(forced + 7)
        assert after_preflop.phase == HandPhase.STREET_COMPLETE
        assert after_preflop.next_actor == "MP"
        assert machine.evaluate().winner == "BTN"

    def test_is_street_closed(self, reference_engine):
        machine = BettingRoundStateMachine(reference_engine.history)
        forced = reference_engine.history.forced_count
        assert not machine.is_street_closed(Street.PREFLOP, forced + 6)
        assert machine.is_street_closed(Street.PREFLOP, forced + 7)

    def test_live_positions(self, reference_engine):
        machine = BettingRoundStateMachine(reference_engine.history)
        assert machine.live_positions() == ["BTN"]
