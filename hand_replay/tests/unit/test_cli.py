"""
命令行入口的单元测试
"""

import logging

import pytest

from hand_replay.application import get_config_service
from hand_replay.core.history.serializer import HandHistorySerializer
from hand_replay.ui.cli import ReplayRenderer, build_parser, main


@pytest.fixture(autouse=True)
def detach_cli_logging():
    """CLI会安装自己的handler，测试结束后卸下"""
    root = logging.getLogger()
    original_level = root.level
    yield
    for handler in root.handlers[:]:
        if getattr(handler, '_hand_replay_handler', False):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(original_level)


@pytest.fixture
def hand_file(tmp_path, reference_engine):
    path = tmp_path / "hand.json"
    HandHistorySerializer.serialize_to_file(reference_engine.history, str(path))
    return str(path)


class TestParser:
    """参数解析"""

    def test_subcommand_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_speed_choices(self):
        args = build_parser().parse_args(["play", "hand.json", "--speed", "2"])
        assert args.speed == 2.0
        with pytest.raises(SystemExit):
            build_parser().parse_args(["play", "hand.json", "--speed", "3"])


class TestCommands:
    """子命令输出"""

    def test_show_final_snapshot(self, hand_file, capsys):
        assert main(["show", hand_file]) == 0
        out = capsys.readouterr().out
        assert "--- 第 13 步 | TURN | 底池: 138 ---" in out
        assert "最后行动: MP fold" in out
        assert "牌局结束" in out

    def test_show_blinds_only(self, hand_file, capsys):
        assert main(["show", hand_file, "--index", "-1"]) == 0
        out = capsys.readouterr().out
        assert "--- 第 0 步 | PREFLOP | 底池: 3 ---" in out
        assert "公共牌: -" in out

    def test_export_with_pot_percentages(self, hand_file, capsys):
        assert main(["export", hand_file, "--pot-pct"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("=== POKER HAND ===")
        assert "BTN: bets 11bb (56% pot)" in out
        # 全局导出配置不受影响
        assert not get_config_service().get_export_config().data.show_pot_percentages

    def test_export_with_dollars(self, hand_file, capsys):
        assert main(["export", hand_file, "--dollars", "0.5"]) == 0
        out = capsys.readouterr().out
        assert "NL Hold'em $0.25/$0.5 | 6-max" in out

    def test_equity(self, hand_file, capsys):
        code = main(["equity", hand_file, "--index", "7", "--simulations", "200", "--seed", "1"])
        assert code == 0
        out = capsys.readouterr().out
        assert out.startswith("胜率: ")
        assert "对手: 1" in out

    def test_play(self, hand_file, capsys, monkeypatch):
        playback = get_config_service().get_playback_config().data
        for name in ("hold_delay", "reveal_delay", "absorb_delay"):
            monkeypatch.setattr(playback, name, 0.0)
        assert main(["play", hand_file, "--speed", "2.0"]) == 0
        out = capsys.readouterr().out
        # 初始盲注快照加上13条行动
        assert out.count("--- 第 ") == 14
        assert out.rstrip().endswith("牌局结束")

    def test_missing_file(self, tmp_path, capsys):
        assert main(["show", str(tmp_path / "missing.json")]) == 1
        assert "错误: " in capsys.readouterr().err

    def test_invalid_json(self, tmp_path, capsys):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        assert main(["export", str(path)]) == 1


class TestRenderer:
    """渲染细节"""

    def test_render_cards(self, reference_engine):
        hero = reference_engine.snapshot(0).hero
        assert ReplayRenderer.render_cards(hero.hole_cards) == "A♥ K♥"
        assert ReplayRenderer.render_cards([None, None]) == "?? ??"
        assert ReplayRenderer.render_cards([]) == "-"

    def test_last_actor_marker(self, reference_engine):
        text = ReplayRenderer.render_snapshot(reference_engine.snapshot(1))
        mp_line = next(line for line in text.splitlines() if " MP " in line)
        assert mp_line.startswith(">")
