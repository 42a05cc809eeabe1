"""
完整手牌流程集成测试

通过命令服务录入一手牌，再经查询服务、序列化和重建验证结果一致。
"""

import pytest

from hand_replay.application import (
    ActionRequest, ConfigService, HandCommandService, HandQueryService, format_hand_history,
)
from hand_replay.core.engine.hand_engine import HandEngine
from hand_replay.core.equity.simulator import EquitySimulator
from hand_replay.core.exceptions import HandSetupError
from hand_replay.core.history.serializer import HandHistorySerializer
from hand_replay.tests.anti_cheat.core_usage_checker import CoreUsageChecker

REFERENCE_SCRIPT = [
    ("UTG", 'fold', None),
    ("MP", 'raise', 6),
    ("CO", 'fold', None),
    ("BTN", 'raise', 18),
    ("SB", 'fold', None),
    ("BB", 'fold', None),
    ("MP", 'call', None),
    ("MP", 'check', None),
    ("BTN", 'bet', 22),
    ("MP", 'call', None),
    ("MP", 'check', None),
    ("BTN", 'bet', 55),
    ("MP", 'fold', None),
]


@pytest.fixture
def services():
    config_service = ConfigService()
    commands = HandCommandService(config_service)
    queries = HandQueryService(commands, config_service, EquitySimulator(simulations=1000, seed=2))
    return commands, queries


@pytest.mark.integration
class TestFullHandFlow:
    """从录入到导出的完整流程"""

    def test_record_and_replay(self, services):
        commands, queries = services
        hand_id = commands.create_hand(6, hero_position="BTN", hand_id="integration-hand").data['hand_id']
        assert commands.set_hero_cards(hand_id, "Ah Kh").success

        for position, action_type, amount in REFERENCE_SCRIPT:
            legal = queries.get_legal_actions(hand_id).data
            assert legal.position == position
            assert action_type in legal.as_strings()
            result = commands.submit_action(hand_id, ActionRequest(action_type, amount))
            assert result.success, result.message
            assert result.data['position'] == position
            if result.data['street'] == "preflop" and action_type == 'call':
                assert commands.set_board(hand_id, "Kd 7c 2h").success
            if result.data['street'] == "flop" and action_type == 'call':
                assert commands.set_board(hand_id, "Kd 7c 2h 9s").success

        info = queries.get_round_state(hand_id).data
        assert info.phase == "HAND_COMPLETE"
        assert info.winner == "BTN"
        assert info.pot == 138

        snapshots = queries.get_snapshots(hand_id).data
        assert len(snapshots) == 14
        for snapshot in snapshots:
            CoreUsageChecker.verify_real_objects(snapshot, "ReplaySnapshot")
            CoreUsageChecker.verify_snapshot_conservation(snapshot)

        flop = queries.get_snapshot(hand_id, 7).data
        assert flop.pot == 39
        assert len(flop.board) == 3
        equity = queries.get_equity(hand_id, 7).data
        assert equity.opponent_count == 1
        assert queries.get_pot_odds(hand_id, 8).data is None

        text = queries.export_text(hand_id).data
        assert "BTN wins 69bb" in text

    def test_serialize_and_reload(self, services, reference_engine, tmp_path):
        commands, queries = services
        path = tmp_path / "reference.json"
        HandHistorySerializer.serialize_to_file(reference_engine.history, str(path))

        history = HandHistorySerializer.deserialize_from_file(str(path))
        result = commands.load_hand(history)
        assert result.success
        assert result.data['total_actions'] == 13

        reloaded = queries.get_snapshots(history.hand_id).data
        assert reloaded == list(reference_engine.snapshots())
        assert queries.export_text(history.hand_id).data == format_hand_history(reference_engine.history)

    def test_rebuild_matches_recorded_hand(self, reference_engine):
        rebuilt = HandEngine.rebuild(reference_engine.history)
        CoreUsageChecker.verify_real_objects(rebuilt, "HandEngine")
        assert rebuilt.final_snapshot() == reference_engine.final_snapshot()
        assert rebuilt.projector.stacks() == reference_engine.projector.stacks()
        assert rebuilt.history.board == reference_engine.history.board

    def test_tampered_history_rejected(self, services, reference_engine):
        commands, _ = services
        data = HandHistorySerializer.to_dict(reference_engine.history)
        # MP的加注改成3，低于最小加注
        assert data['actions'][3]['position'] == "MP"
        data['actions'][3]['amount'] = 3
        history = HandHistorySerializer.from_dict(data)

        result = commands.load_hand(history)
        assert not result.success
        assert result.error_code == "BELOW_MIN_RAISE"
        assert commands.get_active_hands() == []

        unchecked = commands.load_hand(history, validate=False)
        assert unchecked.success

    def test_oversized_blind_rejected(self, services, reference_engine):
        commands, _ = services
        data = HandHistorySerializer.to_dict(reference_engine.history)
        assert data['actions'][1]['position'] == "BB"
        data['actions'][1]['amount'] = 500
        history = HandHistorySerializer.from_dict(data)

        result = commands.load_hand(history)
        assert not result.success
        assert result.error_code == "INVALID_SETUP"
        assert commands.get_active_hands() == []

    def test_missing_blind_rejected(self, reference_engine):
        data = HandHistorySerializer.to_dict(reference_engine.history)
        data['actions'][0]['forced'] = False
        history = HandHistorySerializer.from_dict(data)
        with pytest.raises(HandSetupError):
            HandEngine.rebuild(history)

    def test_two_heroes_rejected(self, services, reference_engine):
        commands, _ = services
        data = HandHistorySerializer.to_dict(reference_engine.history)
        data['players'][0]['is_hero'] = True
        result = commands.load_hand(HandHistorySerializer.from_dict(data))
        assert not result.success
        assert result.error_code == "INVALID_SETUP"

    def test_non_standard_seats_rejected(self, services, reference_engine):
        commands, _ = services
        data = HandHistorySerializer.to_dict(reference_engine.history)
        data['players'] = [seat for seat in data['players'] if seat['position'] in ("SB", "BTN")]
        data['players'][0]['is_hero'] = True
        result = commands.load_hand(HandHistorySerializer.from_dict(data))
        assert not result.success
        assert result.error_code == "INVALID_SETUP"
        assert commands.get_active_hands() == []

    def test_manual_end_midway(self, services):
        commands, queries = services
        hand_id = commands.create_hand(3, hero_position="BTN").data['hand_id']
        commands.submit_action(hand_id, ActionRequest('raise', 6))
        assert commands.end_hand(hand_id).success

        info = queries.get_round_state(hand_id).data
        assert info.phase == "HAND_COMPLETE"
        assert info.reason == "manual_end"
        rejected = commands.submit_action(hand_id, ActionRequest('fold'))
        assert not rejected.success
