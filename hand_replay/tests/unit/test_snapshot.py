"""
筹码投影器和回放快照的单元测试.
"""

import dataclasses

import pytest

from hand_replay.core.deck import parse_cards
from hand_replay.core.history.types import ActionType, Street
from hand_replay.core.projector import StackProjector
from hand_replay.core.state_machine import HandPhase
from hand_replay.tests.anti_cheat.core_usage_checker import CoreUsageChecker


class TestStackProjector:
    """筹码投影器"""

    def test_blinds_only(self, six_max_engine):
        projector = six_max_engine.projector
        CoreUsageChecker.verify_real_objects(projector, "StackProjector")
        assert projector.pot() == 3
        assert projector.stack("SB") == 99
        assert projector.stack("BB") == 98
        assert projector.stack("BTN") == 100

    def test_final_stacks(self, reference_engine):
        stacks = reference_engine.projector.stacks()
        assert stacks == {"SB": 99, "BB": 98, "UTG": 100, "MP": 60, "CO": 100, "BTN": 5}
        assert reference_engine.projector.pot() == 138

    def test_pot_at_street_start(self, reference_engine):
        projector = StackProjector(reference_engine.history)
        assert projector.pot_at_street_start(Street.PREFLOP) == 0
        assert projector.pot_at_street_start(Street.FLOP) == 39
        assert projector.pot_at_street_start(Street.TURN) == 83

    def test_street_contributions(self, reference_engine):
        projector = reference_engine.projector
        turn = projector.street_contributions(Street.TURN)
        assert turn["BTN"] == 55
        assert turn["MP"] == 0

    def test_folded_positions_in_seat_order(self, reference_engine):
        projector = reference_engine.projector
        assert projector.folded_positions() == ["SB", "BB", "UTG", "MP", "CO"]
        assert projector.active_positions() == ["BTN"]
        # 前缀里还没有弃牌
        assert projector.folded_positions(upto=2) == []

    def test_conservation(self, reference_engine):
        projector = reference_engine.projector
        total = projector.total_starting_chips()
        for upto in range(len(reference_engine.history.actions) + 1):
            assert sum(projector.stacks(upto).values()) + projector.pot(upto) == total


class TestReplaySnapshot:
    """回放快照"""

    def test_blinds_only_snapshot(self, reference_engine):
        snapshot = reference_engine.snapshot(-1)
        CoreUsageChecker.verify_real_objects(snapshot, "ReplaySnapshot")
        assert snapshot.action_index == -1
        assert snapshot.pot == 3
        assert snapshot.street == Street.PREFLOP
        assert snapshot.board == ()
        assert len(snapshot.visible_actions) == 2
        assert snapshot.last_action.position == "BB"
        assert snapshot.active_player_index == -1
        assert snapshot.phase == HandPhase.BETTING

    def test_first_raise(self, reference_engine):
        snapshot = reference_engine.snapshot(1)
        assert snapshot.pot == 9
        assert snapshot.player("MP").street_bet == 6
        assert snapshot.player("UTG").is_active is False
        assert snapshot.active_player_index == 3

    def test_end_of_preflop(self, reference_engine):
        snapshot = reference_engine.snapshot(6)
        assert snapshot.pot == 39
        assert snapshot.street == Street.PREFLOP
        assert snapshot.board == ()
        assert snapshot.phase == HandPhase.STREET_COMPLETE

    def test_flop_reveals_three_cards(self, reference_engine):
        snapshot = reference_engine.snapshot(7)
        assert snapshot.street == Street.FLOP
        assert snapshot.board == tuple(parse_cards("Kd 7c 2h"))
        assert snapshot.pot == 39
        assert all(player.street_bet == 0 for player in snapshot.players)

    def test_final_snapshot(self, reference_engine):
        snapshot = reference_engine.final_snapshot()
        assert snapshot.is_at_end
        assert snapshot.is_complete
        assert snapshot.pot == 138
        assert snapshot.street == Street.TURN
        assert len(snapshot.board) == 4
        assert snapshot.player("BTN").stack == 5
        assert snapshot.player("BTN").total_committed == 95
        assert snapshot.active_players == (snapshot.player("BTN"),)

    def test_hero(self, reference_engine):
        hero = reference_engine.snapshot(0).hero
        assert hero.position == "BTN"
        assert hero.hole_cards == tuple(parse_cards("Ah Kh"))

    def test_index_is_clamped(self, reference_engine):
        assert reference_engine.snapshot(99).action_index == 12
        assert reference_engine.snapshot(-7).action_index == -1

    def test_snapshots_cover_every_index(self, reference_engine):
        snapshots = reference_engine.snapshots()
        assert len(snapshots) == reference_engine.total_actions + 1 == 14
        assert [snapshot.action_index for snapshot in snapshots] == list(range(-1, 13))
        for snapshot in snapshots:
            CoreUsageChecker.verify_snapshot_conservation(snapshot)

    def test_snapshot_is_deterministic(self, reference_engine):
        assert reference_engine.snapshot(8) == reference_engine.snapshot(8)

    def test_snapshot_is_immutable(self, reference_engine):
        snapshot = reference_engine.snapshot(0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            snapshot.pot = 0

    def test_all_in_runout_shows_full_board(self, heads_up_engine):
        heads_up_engine.act(ActionType.ALL_IN)
        heads_up_engine.act(ActionType.CALL)
        heads_up_engine.set_board(parse_cards("2c 7d 9h Js 3d"))

        final = heads_up_engine.final_snapshot()
        assert final.street == Street.RIVER
        assert len(final.board) == 5
        assert final.pot == 100
        assert all(player.is_all_in for player in final.players)
        # 之前的快照仍然只显示翻牌前
        assert heads_up_engine.snapshot(0).board == ()
