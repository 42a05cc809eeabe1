"""手牌回放命令行入口.

子命令:
    show    显示某一步的快照
    play    按回放节奏逐步输出
    export  导出纯文本手牌记录
    equity  计算英雄在某一步的胜率和底池赔率
"""

import argparse
import asyncio
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from hand_replay.application import (
    ApplicationError, HandCommandService, HandQueryService, PlaybackController,
    get_config_service, setup_logging,
)
from hand_replay.core.equity.simulator import EquitySimulator
from hand_replay.core.history.serializer import DeserializationError, HandHistorySerializer
from hand_replay.ui.cli.render import ReplayRenderer

logger = logging.getLogger(__name__)


class ReplayCLI:
    """手牌回放CLI."""

    def __init__(self, simulations: Optional[int] = None, seed: Optional[int] = None,
                 workers: Optional[int] = None):
        config_service = get_config_service()
        equity_config = config_service.get_equity_config().data
        simulator = EquitySimulator(
            simulations=simulations or equity_config.display_simulations,
            workers=workers or equity_config.workers,
            seed=seed if seed is not None else equity_config.seed,
        )
        self.commands = HandCommandService(config_service)
        self.queries = HandQueryService(self.commands, config_service, simulator)

    def load(self, path: str) -> str:
        """读取手牌文件并导入，返回手牌编号.

        Raises:
            ApplicationError: 文件无法读取或手牌记录不合法时
        """
        try:
            history = HandHistorySerializer.deserialize_from_file(path)
        except DeserializationError as e:
            raise ApplicationError(str(e), "LOAD_FAILED") from e
        result = self.commands.load_hand(history)
        if not result.success:
            raise ApplicationError(result.message, result.error_code)
        return history.hand_id

    def show(self, hand_id: str, index: Optional[int]) -> str:
        snapshot = self._unwrap(self.queries.get_snapshot(hand_id, index))
        return ReplayRenderer.render_snapshot(snapshot)

    def equity(self, hand_id: str, index: Optional[int]) -> str:
        equity = self._unwrap(self.queries.get_equity(hand_id, index))
        pot_odds = self._unwrap(self.queries.get_pot_odds(hand_id, index))
        return ReplayRenderer.render_equity(equity, pot_odds)

    def export(self, hand_id: str, dollars: Optional[float], pot_pct: bool) -> str:
        options = get_config_service().get_export_config().data
        if dollars is not None:
            options = replace(options, show_dollar_amounts=True, dollar_per_bb=dollars)
        if pot_pct:
            options = replace(options, show_pot_percentages=True)
        return self._unwrap(self.queries.export_text(hand_id, options))

    async def play(self, hand_id: str, speed: float) -> None:
        engine = self.commands.get_engine(hand_id)
        if engine is None:
            raise ApplicationError(f"手牌 {hand_id} 不存在", "HAND_NOT_FOUND")
        controller = PlaybackController(
            engine,
            on_snapshot=lambda snapshot: print(ReplayRenderer.render_snapshot(snapshot) + "\n"),
        )
        controller.set_speed(speed)
        print(ReplayRenderer.render_snapshot(controller.snapshot) + "\n")
        controller.play()
        await controller.wait_idle()

    @staticmethod
    def _unwrap(result):
        if not result.success:
            raise ApplicationError(result.message, result.error_code)
        return result.data


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hand-replay", description="无限注德州扑克手牌复盘")
    parser.add_argument("--log-level", default=None, help="日志级别（DEBUG/INFO/WARNING）")
    subparsers = parser.add_subparsers(dest="command", required=True)

    show = subparsers.add_parser("show", help="显示某一步的快照")
    show.add_argument("file", help="手牌JSON文件")
    show.add_argument("--index", type=int, default=None, help="主动行动索引，-1为只显示盲注")

    play = subparsers.add_parser("play", help="按回放节奏逐步输出")
    play.add_argument("file", help="手牌JSON文件")
    play.add_argument("--speed", type=float, default=1.0, choices=[0.5, 1.0, 1.5, 2.0])

    export = subparsers.add_parser("export", help="导出纯文本手牌记录")
    export.add_argument("file", help="手牌JSON文件")
    export.add_argument("--dollars", type=float, default=None, help="每个大盲对应的美元金额")
    export.add_argument("--pot-pct", action="store_true", help="显示下注占底池百分比")

    equity = subparsers.add_parser("equity", help="计算英雄胜率")
    equity.add_argument("file", help="手牌JSON文件")
    equity.add_argument("--index", type=int, default=None, help="主动行动索引")
    equity.add_argument("--simulations", type=int, default=None, help="蒙特卡洛模拟次数")
    equity.add_argument("--seed", type=int, default=None, help="随机种子")
    equity.add_argument("--workers", type=int, default=None, help="并行进程数")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI主入口."""
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level)

    cli = ReplayCLI(
        simulations=getattr(args, "simulations", None),
        seed=getattr(args, "seed", None),
        workers=getattr(args, "workers", None),
    )
    try:
        hand_id = cli.load(args.file)
        if args.command == "show":
            print(cli.show(hand_id, args.index))
        elif args.command == "play":
            asyncio.run(cli.play(hand_id, args.speed))
        elif args.command == "export":
            print(cli.export(hand_id, args.dollars, args.pot_pct))
        elif args.command == "equity":
            print(cli.equity(hand_id, args.index))
    except ApplicationError as e:
        logger.error("命令失败: %s (%s)", e.message, e.error_code)
        print(f"错误: {e.message}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\n回放被中断")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
