"""
手牌历史序列化器

实现手牌历史的JSON序列化和反序列化。
读取时同时接受本项目的格式和早期导出的驼峰格式（玩家stack为全部行动之后的筹码，
起始筹码通过日志反推）。
"""

import json
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..deck.card import Card
from ..projector.stack_projector import derive_starting_stacks
from .positions import BB, SB
from .types import Action, ActionType, Blinds, HandHistory, PlayerSeat, Street

__all__ = ['HandHistorySerializer', 'SerializationError', 'DeserializationError', 'FORMAT_VERSION']

FORMAT_VERSION = "1.0"


class SerializationError(Exception):
    """序列化错误"""
    pass


class DeserializationError(Exception):
    """反序列化错误"""
    pass


class HandHistorySerializer:
    """
    手牌历史序列化器

    Examples:
        >>> text = HandHistorySerializer.serialize(history)
        >>> HandHistorySerializer.deserialize(text).hand_id == history.hand_id
        True
    """

    @staticmethod
    def serialize(history: HandHistory) -> str:
        """
        将手牌历史序列化为JSON字符串

        Raises:
            SerializationError: 序列化失败时抛出
        """
        try:
            return json.dumps(HandHistorySerializer.to_dict(history), ensure_ascii=False, indent=2)
        except (TypeError, ValueError, AttributeError) as e:
            raise SerializationError(f"手牌历史序列化失败: {str(e)}") from e

    @staticmethod
    def deserialize(json_str: str) -> HandHistory:
        """
        从JSON字符串反序列化手牌历史

        Raises:
            DeserializationError: 反序列化失败时抛出
        """
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise DeserializationError(f"JSON格式错误: {str(e)}") from e
        return HandHistorySerializer.from_dict(data)

    @staticmethod
    def serialize_to_file(history: HandHistory, file_path: str) -> None:
        """
        将手牌历史保存到文件

        Raises:
            SerializationError: 序列化或文件写入失败时抛出
        """
        json_str = HandHistorySerializer.serialize(history)
        try:
            with open(file_path, 'w', encoding='utf-8') as f:
                f.write(json_str)
        except OSError as e:
            raise SerializationError(f"手牌历史保存到文件失败: {str(e)}") from e

    @staticmethod
    def deserialize_from_file(file_path: str) -> HandHistory:
        """
        从文件读取手牌历史

        Raises:
            DeserializationError: 文件读取或反序列化失败时抛出
        """
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                json_str = f.read()
        except OSError as e:
            raise DeserializationError(f"从文件读取手牌历史失败: {str(e)}") from e
        return HandHistorySerializer.deserialize(json_str)

    @staticmethod
    def to_dict(history: HandHistory) -> Dict[str, Any]:
        return {
            'version': FORMAT_VERSION,
            'id': history.hand_id,
            'date': history.created_at.isoformat(),
            'blinds': {
                'sb': history.blinds.small_blind,
                'bb': history.blinds.big_blind,
                'ante': history.blinds.ante,
            },
            'hero_position': history.hero_position,
            'players': [
                {
                    'position': seat.position,
                    'starting_stack': seat.starting_stack,
                    'cards': [str(card) if card else None for card in seat.hole_cards],
                    'name': seat.name,
                    'is_hero': seat.is_hero,
                }
                for seat in history.players
            ],
            'community_cards': [str(card) for card in history.board],
            'actions': [
                {
                    'id': action.id,
                    'street': action.street.value,
                    'position': action.position,
                    'type': action.action_type.value,
                    'amount': action.amount,
                    'forced': action.forced,
                }
                for action in history.actions
            ],
            'ended_manually': history.ended_manually,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> HandHistory:
        """
        从字典构建手牌历史

        Raises:
            DeserializationError: 缺少字段或字段值非法时抛出
        """
        try:
            blinds_data = data['blinds']
            blinds = Blinds(
                small_blind=int(blinds_data['sb']),
                big_blind=int(blinds_data['bb']),
                ante=int(blinds_data.get('ante') or 0),
            )
            actions = HandHistorySerializer._parse_actions(data.get('actions', []))
            hero_position = data.get('hero_position', data.get('heroPosition'))
            players = HandHistorySerializer._parse_players(data['players'], actions, hero_position)
            board = [HandHistorySerializer._parse_card(card)
                     for card in data.get('community_cards', data.get('communityCards', []))]
            history = HandHistory(
                blinds=blinds,
                players=players,
                actions=actions,
                board=board,
                ended_manually=bool(data.get('ended_manually', False)),
            )
            if data.get('id'):
                history.hand_id = str(data['id'])
            if data.get('date'):
                history.created_at = HandHistorySerializer._parse_date(data['date'])
            return history
        except (KeyError, TypeError, ValueError) as e:
            raise DeserializationError(f"手牌历史数据无效: {str(e)}") from e

    @staticmethod
    def _parse_actions(items: List[Dict[str, Any]]) -> List[Action]:
        has_forced_flag = any('forced' in item for item in items)
        actions: List[Action] = []
        blinds_seen = 0
        for item in items:
            street = Street(item['street'])
            position = item.get('position', item.get('playerPosition'))
            action_type = ActionType(item['type'])
            if has_forced_flag:
                forced = bool(item.get('forced', False))
            else:
                # 早期格式没有forced字段：日志开头的SB/BB下注就是盲注
                forced = (blinds_seen < 2 and len(actions) == blinds_seen
                          and street == Street.PREFLOP and action_type == ActionType.BET
                          and position in (SB, BB))
                if forced:
                    blinds_seen += 1
            kwargs = {'id': str(item['id'])} if item.get('id') else {}
            actions.append(Action(street, position, action_type, int(item.get('amount', 0)),
                                  forced=forced, **kwargs))
        return actions

    @staticmethod
    def _parse_players(items: List[Dict[str, Any]], actions: List[Action],
                       hero_position: Optional[str]) -> List[PlayerSeat]:
        if all('starting_stack' in item for item in items):
            starting = {item['position']: int(item['starting_stack']) for item in items}
        else:
            current = {item['position']: int(item['stack']) for item in items}
            starting = derive_starting_stacks(current, actions)

        players = []
        for item in items:
            position = item['position']
            cards = list(item.get('cards') or [None, None])
            cards += [None] * (2 - len(cards))
            is_hero = bool(item.get('is_hero', item.get('isHero', position == hero_position)))
            players.append(PlayerSeat(
                position=position,
                starting_stack=starting[position],
                hole_cards=(HandHistorySerializer._parse_card(cards[0]),
                            HandHistorySerializer._parse_card(cards[1])),
                is_hero=is_hero,
                name=item.get('name') or "",
            ))
        return players

    @staticmethod
    def _parse_card(value: Any) -> Optional[Card]:
        if value is None:
            return None
        if isinstance(value, dict):
            return Card.from_str(f"{value['rank']}{value['suit']}")
        return Card.from_str(str(value))

    @staticmethod
    def _parse_date(value: str) -> datetime:
        # 兼容末尾带Z的ISO时间
        return datetime.fromisoformat(value.replace('Z', '+00:00'))
