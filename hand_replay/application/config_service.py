"""
ConfigService - 配置管理服务

集中管理手牌复盘用到的所有配置：
- 牌桌默认值（盲注、筹码、人数）
- 胜率计算
- 回放节奏
- 文本导出
- 日志

每类配置都是dataclass，按命名profile存放，通过QueryResult返回。
"""

import logging
import logging.handlers
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from .types import QueryResult


class ConfigType(Enum):
    """配置类型枚举"""
    TABLE = "table"
    EQUITY = "equity"
    PLAYBACK = "playback"
    EXPORT = "export"
    LOGGING = "logging"


@dataclass
class TableConfig:
    """牌桌默认配置"""
    small_blind: int = 1
    big_blind: int = 2
    ante: int = 0
    default_stack: int = 100
    min_players: int = 2
    max_players: int = 9

    def __post_init__(self):
        if self.small_blind <= 0 or self.big_blind < self.small_blind:
            raise ValueError(f"盲注配置无效: {self.small_blind}/{self.big_blind}")


@dataclass
class EquityConfig:
    """胜率计算配置"""
    simulations: int = 10000
    display_simulations: int = 5000  # 回放界面实时显示时使用的较小次数
    workers: int = 1
    seed: Optional[int] = None

    def __post_init__(self):
        if self.simulations <= 0 or self.display_simulations <= 0:
            raise ValueError("模拟次数必须大于0")
        if self.workers <= 0:
            raise ValueError("workers必须大于0")


@dataclass
class PlaybackConfig:
    """回放节奏配置（秒，按1倍速）"""
    hold_delay: float = 1.5
    reveal_delay: float = 0.5
    absorb_delay: float = 0.7
    default_speed: float = 1.0
    allowed_speeds: Tuple[float, ...] = (0.5, 1.0, 1.5, 2.0)

    def __post_init__(self):
        if self.default_speed not in self.allowed_speeds:
            raise ValueError(f"默认速度 {self.default_speed} 不在允许范围 {self.allowed_speeds}")


@dataclass
class ExportConfig:
    """文本导出配置"""
    show_dollar_amounts: bool = False
    dollar_per_bb: float = 1.0
    show_pot_percentages: bool = False


@dataclass
class LoggingConfig:
    """日志配置"""
    log_level: str = 'INFO'
    enable_file_logging: bool = False
    log_file_path: str = "hand_replay.log"
    enable_console_logging: bool = True
    log_format: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    max_log_file_size_mb: int = 10
    backup_count: int = 5


class ConfigService:
    """配置管理服务"""

    def __init__(self):
        """初始化配置服务"""
        self.logger = logging.getLogger(__name__)
        self._configs: Dict[ConfigType, Dict[str, Any]] = {}
        self._load_default_configs()

    def _load_default_configs(self):
        """加载默认配置"""
        self._configs[ConfigType.TABLE] = {
            'default': TableConfig(),
            'deep': TableConfig(default_stack=200),
            'live_2_5': TableConfig(small_blind=2, big_blind=5, default_stack=500),
        }
        self._configs[ConfigType.EQUITY] = {
            'default': EquityConfig(),
            'fast': EquityConfig(simulations=1000, display_simulations=1000),
            'parallel': EquityConfig(simulations=40000, workers=4),
        }
        self._configs[ConfigType.PLAYBACK] = {
            'default': PlaybackConfig(),
            'instant': PlaybackConfig(hold_delay=0.0, reveal_delay=0.0, absorb_delay=0.0),
        }
        self._configs[ConfigType.EXPORT] = {
            'default': ExportConfig(),
            'detailed': ExportConfig(show_pot_percentages=True),
        }
        self._configs[ConfigType.LOGGING] = {
            'default': LoggingConfig(),
            'debug': LoggingConfig(log_level='DEBUG', enable_file_logging=True),
            'quiet': LoggingConfig(log_level='WARNING'),
        }
        self.logger.debug("默认配置加载完成")

    def _get_config(self, config_type: ConfigType, profile: str,
                    default_factory: Callable[[], Any]) -> QueryResult[Any]:
        config_profiles = self._configs.get(config_type, {})
        if profile not in config_profiles:
            self.logger.warning(f"未找到{config_type.value}配置 '{profile}'，使用默认配置")
            profile = "default"
        return QueryResult.success_result(config_profiles.get(profile) or default_factory())

    def get_table_config(self, profile: str = "default") -> QueryResult[TableConfig]:
        """获取牌桌配置"""
        return self._get_config(ConfigType.TABLE, profile, TableConfig)

    def get_equity_config(self, profile: str = "default") -> QueryResult[EquityConfig]:
        """
        获取胜率配置

        Args:
            profile: 配置名 (default, fast, parallel)
        """
        return self._get_config(ConfigType.EQUITY, profile, EquityConfig)

    def get_playback_config(self, profile: str = "default") -> QueryResult[PlaybackConfig]:
        """获取回放配置"""
        return self._get_config(ConfigType.PLAYBACK, profile, PlaybackConfig)

    def get_export_config(self, profile: str = "default") -> QueryResult[ExportConfig]:
        """获取文本导出配置"""
        return self._get_config(ConfigType.EXPORT, profile, ExportConfig)

    def get_logging_config(self, profile: str = "default") -> QueryResult[LoggingConfig]:
        """获取日志配置"""
        return self._get_config(ConfigType.LOGGING, profile, LoggingConfig)

    def update_config(self, config_type: ConfigType, profile: str, updates: Dict[str, Any]) -> QueryResult[bool]:
        """
        更新配置

        Args:
            config_type: 配置类型
            profile: 配置名
            updates: 更新的配置项

        Returns:
            查询结果，包含更新是否成功
        """
        config_profiles = self._configs.get(config_type)
        if config_profiles is None:
            return QueryResult.failure_result(
                f"配置类型 {config_type} 不存在",
                error_code="CONFIG_TYPE_NOT_FOUND"
            )
        if profile not in config_profiles:
            return QueryResult.failure_result(
                f"配置 {profile} 不存在",
                error_code="CONFIG_PROFILE_NOT_FOUND"
            )

        current_config = config_profiles[profile]
        known = {f.name for f in fields(current_config)}
        for key, value in updates.items():
            if key in known:
                setattr(current_config, key, value)
            else:
                self.logger.warning(f"配置项 {key} 不存在于 {config_type.value}.{profile} 中")

        self.logger.info(f"配置 {config_type.value}.{profile} 更新成功")
        return QueryResult.success_result(True)

    def list_available_profiles(self, config_type: ConfigType) -> QueryResult[List[str]]:
        """列出可用的配置名"""
        if config_type not in self._configs:
            return QueryResult.failure_result(
                f"配置类型 {config_type} 不存在",
                error_code="CONFIG_TYPE_NOT_FOUND"
            )
        return QueryResult.success_result(list(self._configs[config_type].keys()))


def setup_logging(config: Optional[LoggingConfig] = None, level: Optional[str] = None) -> None:
    """
    按日志配置初始化根日志记录器

    Args:
        config: 日志配置，默认使用ConfigService的default配置
        level: 覆盖配置中的日志级别
    """
    config = config or get_config_service().get_logging_config().data
    log_level = getattr(logging, (level or config.log_level).upper(), logging.INFO)
    formatter = logging.Formatter(config.log_format, datefmt='%H:%M:%S')

    root_logger = logging.getLogger()
    # 移除之前由本函数添加的handler，避免重复输出
    for handler in root_logger.handlers[:]:
        if getattr(handler, '_hand_replay_handler', False):
            root_logger.removeHandler(handler)
            handler.close()

    handlers: List[logging.Handler] = []
    if config.enable_console_logging:
        handlers.append(logging.StreamHandler())
    if config.enable_file_logging:
        handlers.append(logging.handlers.RotatingFileHandler(
            config.log_file_path,
            maxBytes=config.max_log_file_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
            encoding='utf-8',
        ))

    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        handler._hand_replay_handler = True
        root_logger.addHandler(handler)
    root_logger.setLevel(log_level)


# 全局单例
_config_service_instance: Optional[ConfigService] = None


def get_config_service() -> ConfigService:
    """
    获取配置服务的全局单例

    Returns:
        ConfigService: 配置服务实例
    """
    global _config_service_instance
    if _config_service_instance is None:
        _config_service_instance = ConfigService()
    return _config_service_instance
