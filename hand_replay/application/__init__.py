"""
Application Layer - 应用服务层

在核心领域层之上提供CQRS风格的服务接口：
- HandCommandService: 创建手牌、追加行动、设置牌面
- HandQueryService: 快照、状态、可用行动、胜率、底池赔率、文本导出
- ConfigService: 配置管理
- PlaybackController: 自动回放驱动
"""

from .types import CommandResult, QueryResult, ResultStatus, ActionRequest, ApplicationError
from .config_service import (
    ConfigService, ConfigType, TableConfig, EquityConfig, PlaybackConfig, ExportConfig,
    LoggingConfig, get_config_service, setup_logging,
)
from .command_service import HandCommandService, HandSession
from .query_service import HandQueryService, RoundInfo
from .playback_service import PlaybackController
from .text_export import format_hand_history

__all__ = [
    'CommandResult', 'QueryResult', 'ResultStatus', 'ActionRequest', 'ApplicationError',
    'ConfigService', 'ConfigType', 'TableConfig', 'EquityConfig', 'PlaybackConfig',
    'ExportConfig', 'LoggingConfig', 'get_config_service', 'setup_logging',
    'HandCommandService', 'HandSession',
    'HandQueryService', 'RoundInfo',
    'PlaybackController',
    'format_hand_history',
]
