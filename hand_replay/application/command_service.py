"""
Hand Command Service - 手牌命令服务

处理所有会改变手牌记录的操作，遵循CQRS模式。
命令服务负责：
- 创建新手牌并下盲注
- 追加玩家行动
- 设置手牌与公共牌
- 手动结束录入
- 导入已有手牌记录
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Union

from .config_service import ConfigService, get_config_service
from .types import ActionRequest, CommandResult
from ..core.deck.card import Card, parse_cards
from ..core.engine.hand_engine import HandEngine
from ..core.exceptions import HandReplayError
from ..core.history.types import Action, Blinds, HandHistory, Street

logger = logging.getLogger(__name__)

CardInput = Union[str, Sequence[Union[Card, str, None]]]


@dataclass
class HandSession:
    """手牌会话"""
    hand_id: str
    engine: HandEngine
    created_at: float = field(default_factory=time.time)
    last_updated: float = field(default_factory=time.time)

    def update_timestamp(self) -> None:
        """更新最后修改时间"""
        self.last_updated = time.time()


def _coerce_cards(cards: CardInput) -> List[Optional[Card]]:
    """把"As Kh"、["As", None]或Card列表统一转换为Card列表"""
    if isinstance(cards, str):
        return list(parse_cards(cards))
    result: List[Optional[Card]] = []
    for card in cards:
        if card is None or isinstance(card, Card):
            result.append(card)
        else:
            result.append(Card.from_str(str(card)))
    return result


class HandCommandService:
    """手牌命令服务"""

    def __init__(self, config_service: Optional[ConfigService] = None):
        """
        初始化命令服务

        Args:
            config_service: 配置服务，默认使用全局单例
        """
        self._sessions: Dict[str, HandSession] = {}
        self._config_service = config_service or get_config_service()

    def create_hand(self, player_count: int, hero_position: str = "BTN",
                    stacks: Union[int, Mapping[str, int], None] = None,
                    small_blind: Optional[int] = None, big_blind: Optional[int] = None,
                    ante: Optional[int] = None, names: Optional[Mapping[str, str]] = None,
                    hand_id: Optional[str] = None) -> CommandResult:
        """
        创建新手牌

        未指定的盲注和筹码取自牌桌配置。

        Args:
            player_count: 人数
            hero_position: 英雄位置
            stacks: 统一起始筹码或位置 -> 起始筹码
            small_blind, big_blind, ante: 盲注结构
            names: 位置 -> 玩家名
            hand_id: 手牌编号，为None时自动生成

        Returns:
            命令执行结果，data中包含hand_id
        """
        table_config = self._config_service.get_table_config().data
        if player_count < table_config.min_players or player_count > table_config.max_players:
            return CommandResult.validation_error(
                f"玩家数量必须在{table_config.min_players}-{table_config.max_players}之间，当前: {player_count}",
                error_code="INVALID_PLAYER_COUNT"
            )
        if hand_id is not None and hand_id in self._sessions:
            return CommandResult.validation_error(
                f"手牌 {hand_id} 已存在",
                error_code="HAND_ALREADY_EXISTS"
            )

        try:
            blinds = Blinds(
                small_blind=small_blind if small_blind is not None else table_config.small_blind,
                big_blind=big_blind if big_blind is not None else table_config.big_blind,
                ante=ante if ante is not None else table_config.ante,
            )
            engine = HandEngine.new_hand(
                player_count,
                blinds,
                stacks=stacks if stacks is not None else table_config.default_stack,
                hero_position=hero_position,
                names=names,
                hand_id=hand_id,
            )
        except HandReplayError as e:
            return CommandResult.from_error(e)
        except ValueError as e:
            return CommandResult.validation_error(str(e), "INVALID_SETUP")

        session = HandSession(hand_id=engine.history.hand_id, engine=engine)
        self._sessions[session.hand_id] = session
        return CommandResult.success_result(
            message=f"手牌 {session.hand_id[:8]} 创建成功",
            data={
                'hand_id': session.hand_id,
                'positions': engine.history.positions,
                'next_actor': engine.state.next_actor,
            }
        )

    def load_hand(self, history: HandHistory, validate: bool = True) -> CommandResult:
        """
        导入已有的手牌记录

        Args:
            history: 手牌历史
            validate: 是否逐条重放校验行动
        """
        if history.hand_id in self._sessions:
            return CommandResult.validation_error(
                f"手牌 {history.hand_id} 已存在",
                error_code="HAND_ALREADY_EXISTS"
            )
        try:
            engine = HandEngine.rebuild(history) if validate else HandEngine(history)
        except HandReplayError as e:
            logger.warning(f"导入手牌 {history.hand_id[:8]} 失败: {e.message}")
            return CommandResult.validation_error(f"手牌记录无效: {e.message}", e.error_code)

        self._sessions[history.hand_id] = HandSession(hand_id=history.hand_id, engine=engine)
        return CommandResult.success_result(
            message=f"手牌 {history.hand_id[:8]} 导入成功",
            data={'hand_id': history.hand_id, 'total_actions': engine.total_actions}
        )

    def submit_action(self, hand_id: str, request: ActionRequest) -> CommandResult:
        """
        追加玩家行动

        Args:
            hand_id: 手牌编号
            request: 行动请求；省略位置和街时按当前状态补全

        Returns:
            命令执行结果；行动不合法时error_code为拒绝原因
        """
        session = self._sessions.get(hand_id)
        if session is None:
            return CommandResult.validation_error(f"手牌 {hand_id} 不存在", error_code="HAND_NOT_FOUND")

        try:
            action_type = request.parsed_type()
        except ValueError:
            return CommandResult.validation_error(
                f"未知的行动类型: {request.action_type}",
                error_code="UNKNOWN_ACTION_TYPE"
            )

        engine = session.engine
        try:
            if request.fills_from_state:
                action = engine.act(action_type, request.amount)
            else:
                state = engine.state
                action = engine.append(Action(
                    street=Street(request.street) if request.street else state.betting_street,
                    position=request.position or state.next_actor or "",
                    action_type=action_type,
                    amount=request.amount or 0,
                ))
        except HandReplayError as e:
            return CommandResult.from_error(e)
        except ValueError as e:
            return CommandResult.validation_error(str(e), "INVALID_ACTION")

        session.update_timestamp()
        state = engine.state
        return CommandResult.success_result(
            message=f"{action.position} {action.action_type.value} 成功",
            data={
                'action_id': action.id,
                'street': action.street.value,
                'position': action.position,
                'action_type': action.action_type.value,
                'amount': action.amount,
                'phase': state.phase.name,
                'next_actor': state.next_actor,
            }
        )

    def set_hole_cards(self, hand_id: str, position: str, cards: CardInput) -> CommandResult:
        """设置某个玩家的手牌"""
        return self._update_cards(hand_id, lambda engine, parsed: engine.set_hole_cards(position, parsed),
                                  cards, f"{position} 手牌已更新")

    def set_hero_cards(self, hand_id: str, cards: CardInput) -> CommandResult:
        """设置英雄手牌"""
        return self._update_cards(hand_id, lambda engine, parsed: engine.set_hero_cards(parsed),
                                  cards, "英雄手牌已更新")

    def set_board(self, hand_id: str, cards: CardInput) -> CommandResult:
        """设置最终公共牌"""
        return self._update_cards(hand_id, lambda engine, parsed: engine.set_board(parsed),
                                  cards, "公共牌已更新")

    def _update_cards(self, hand_id: str, apply, cards: CardInput, message: str) -> CommandResult:
        session = self._sessions.get(hand_id)
        if session is None:
            return CommandResult.validation_error(f"手牌 {hand_id} 不存在", error_code="HAND_NOT_FOUND")
        try:
            parsed = _coerce_cards(cards)
            apply(session.engine, parsed)
        except HandReplayError as e:
            return CommandResult.from_error(e)
        except (ValueError, TypeError) as e:
            return CommandResult.validation_error(str(e), "INVALID_CARD")
        session.update_timestamp()
        return CommandResult.success_result(message=message)

    def end_hand(self, hand_id: str) -> CommandResult:
        """手动结束录入"""
        session = self._sessions.get(hand_id)
        if session is None:
            return CommandResult.validation_error(f"手牌 {hand_id} 不存在", error_code="HAND_NOT_FOUND")
        if session.engine.state.is_complete:
            return CommandResult.business_rule_violation("牌局已经结束", error_code="HAND_COMPLETE")
        session.engine.end_hand_manually()
        session.update_timestamp()
        return CommandResult.success_result(message=f"手牌 {hand_id[:8]} 已手动结束")

    def remove_hand(self, hand_id: str) -> CommandResult:
        """移除手牌"""
        if hand_id not in self._sessions:
            return CommandResult.validation_error(f"手牌 {hand_id} 不存在", error_code="HAND_NOT_FOUND")
        del self._sessions[hand_id]
        return CommandResult.success_result(message=f"手牌 {hand_id[:8]} 已移除")

    def get_engine(self, hand_id: str) -> Optional[HandEngine]:
        """供查询服务读取引擎，不存在时为None"""
        session = self._sessions.get(hand_id)
        return session.engine if session else None

    def get_active_hands(self) -> List[str]:
        """获取所有手牌编号"""
        return list(self._sessions.keys())
