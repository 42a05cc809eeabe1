"""
Hand Query Service - 手牌查询服务

处理所有只读操作，遵循CQRS模式。
查询服务负责：
- 回放快照
- 下注轮状态与可用行动
- 英雄胜率与底池赔率
- 文本导出
"""

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from .command_service import HandCommandService
from .config_service import ConfigService, ExportConfig, get_config_service
from .text_export import format_hand_history
from .types import QueryResult
from ..core.engine.hand_engine import HandEngine
from ..core.equity.pot_odds import calculate_pot_odds
from ..core.equity.simulator import EquitySimulator
from ..core.equity.types import EquityResult, PotOdds
from ..core.rules.types import PermissibleActions
from ..core.snapshot.types import ReplaySnapshot
from ..core.state_machine.types import RoundState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoundInfo:
    """下注轮信息"""
    phase: str
    street: str
    betting_street: str
    next_actor: Optional[str]
    winner: Optional[str]
    reason: Optional[str]
    pot: int
    max_bet: int
    min_raise_to: int

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式"""
        return asdict(self)


class HandQueryService:
    """手牌查询服务"""

    def __init__(self, command_service: HandCommandService,
                 config_service: Optional[ConfigService] = None,
                 simulator: Optional[EquitySimulator] = None):
        """
        初始化查询服务

        Args:
            command_service: 命令服务实例，用于访问手牌会话
            config_service: 配置服务
            simulator: 胜率计算器，默认按胜率配置创建
        """
        self._command_service = command_service
        self._config_service = config_service or get_config_service()
        if simulator is None:
            equity_config = self._config_service.get_equity_config().data
            simulator = EquitySimulator(
                simulations=equity_config.simulations,
                workers=equity_config.workers,
                seed=equity_config.seed,
            )
        self._simulator = simulator

    def _engine(self, hand_id: str) -> Optional[HandEngine]:
        return self._command_service.get_engine(hand_id)

    def _not_found(self, hand_id: str) -> QueryResult:
        return QueryResult.failure_result(f"手牌 {hand_id} 不存在", error_code="HAND_NOT_FOUND")

    def get_snapshot(self, hand_id: str, index: Optional[int] = None) -> QueryResult[ReplaySnapshot]:
        """
        获取回放快照

        Args:
            hand_id: 手牌编号
            index: 主动行动索引，None表示最后一条
        """
        engine = self._engine(hand_id)
        if engine is None:
            return self._not_found(hand_id)
        if index is None:
            index = engine.total_actions - 1
        return QueryResult.success_result(engine.snapshot(index))

    def get_snapshots(self, hand_id: str) -> QueryResult[List[ReplaySnapshot]]:
        """获取整手牌的所有快照"""
        engine = self._engine(hand_id)
        if engine is None:
            return self._not_found(hand_id)
        return QueryResult.success_result(list(engine.snapshots()))

    def get_round_state(self, hand_id: str) -> QueryResult[RoundInfo]:
        """获取当前下注轮信息"""
        engine = self._engine(hand_id)
        if engine is None:
            return self._not_found(hand_id)
        state: RoundState = engine.state
        street_state = engine.street_state(state.betting_street)
        return QueryResult.success_result(RoundInfo(
            phase=state.phase.name,
            street=state.street.value,
            betting_street=state.betting_street.value,
            next_actor=state.next_actor,
            winner=state.winner,
            reason=state.reason.value if state.reason else None,
            pot=engine.projector.pot(),
            max_bet=street_state.max_bet,
            min_raise_to=street_state.min_raise_to,
        ))

    def get_legal_actions(self, hand_id: str) -> QueryResult[PermissibleActions]:
        """获取下一位行动者的可用行动"""
        engine = self._engine(hand_id)
        if engine is None:
            return self._not_found(hand_id)
        actions = engine.legal_actions()
        if actions is None:
            return QueryResult.failure_result(
                f"当前阶段 {engine.state.phase.name} 没有玩家需要行动",
                error_code="NO_ACTOR"
            )
        return QueryResult.success_result(actions)

    def get_equity(self, hand_id: str, index: Optional[int] = None) -> QueryResult[EquityResult]:
        """
        获取快照上英雄的胜率

        英雄手牌未知或英雄已弃牌时返回失败结果。
        """
        snapshot_result = self.get_snapshot(hand_id, index)
        if not snapshot_result.success:
            return snapshot_result
        try:
            equity = self._simulator.equity_for_snapshot(snapshot_result.data)
        except ValueError as e:
            logger.error(f"计算胜率失败: {e}", exc_info=True)
            return QueryResult.failure_result(f"计算胜率失败: {e}", error_code="EQUITY_FAILED")
        if equity is None:
            return QueryResult.failure_result("英雄手牌未知或已弃牌", error_code="EQUITY_UNAVAILABLE")
        return QueryResult.success_result(equity)

    def get_pot_odds(self, hand_id: str, index: Optional[int] = None) -> QueryResult[Optional[PotOdds]]:
        """获取快照上英雄面对下注时的底池赔率，不适用时data为None"""
        snapshot_result = self.get_snapshot(hand_id, index)
        if not snapshot_result.success:
            return snapshot_result
        return QueryResult.success_result(calculate_pot_odds(snapshot_result.data))

    def export_text(self, hand_id: str, options: Optional[ExportConfig] = None) -> QueryResult[str]:
        """导出纯文本手牌记录"""
        engine = self._engine(hand_id)
        if engine is None:
            return self._not_found(hand_id)
        options = options or self._config_service.get_export_config().data
        return QueryResult.success_result(format_hand_history(engine.history, options))

    def get_hand_list(self) -> QueryResult[List[str]]:
        """获取手牌列表"""
        return QueryResult.success_result(self._command_service.get_active_hands())
