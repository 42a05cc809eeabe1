"""
Application Layer Types - 应用层类型定义

命令和查询统一返回结果对象而不是抛出异常；核心层的HandReplayError
在这里被翻译成带error_code的失败结果。
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict, Generic, Optional, TypeVar

from ..core.exceptions import ActionErrorCode, HandReplayError
from ..core.history.types import ActionType

T = TypeVar('T')

# 这些拒绝原因说明牌局状态不允许操作，而不是请求本身写错了
_STATE_ERROR_CODES = frozenset({
    ActionErrorCode.HAND_COMPLETE.value,
    ActionErrorCode.NO_BETTING_ALLOWED.value,
})


class ResultStatus(Enum):
    """操作结果状态"""
    SUCCESS = auto()
    FAILURE = auto()
    VALIDATION_ERROR = auto()
    BUSINESS_RULE_VIOLATION = auto()


@dataclass(frozen=True)
class CommandResult:
    """
    命令执行结果

    Attributes:
        success: 是否成功
        status: 结果状态
        message: 面向用户的说明
        error_code: 失败时的错误代码，与ActionErrorCode的取值一致
        data: 成功时附带的数据
    """
    success: bool
    status: ResultStatus
    message: str = ""
    error_code: Optional[str] = None
    data: Optional[Dict[str, Any]] = None

    @classmethod
    def success_result(cls, message: str = "操作成功", data: Optional[Dict[str, Any]] = None) -> 'CommandResult':
        return cls(True, ResultStatus.SUCCESS, message, data=data)

    @classmethod
    def failure_result(cls, message: str, error_code: Optional[str] = None,
                       status: ResultStatus = ResultStatus.FAILURE) -> 'CommandResult':
        return cls(False, status, message, error_code)

    @classmethod
    def validation_error(cls, message: str, error_code: Optional[str] = None) -> 'CommandResult':
        return cls.failure_result(message, error_code, ResultStatus.VALIDATION_ERROR)

    @classmethod
    def business_rule_violation(cls, message: str, error_code: Optional[str] = None) -> 'CommandResult':
        return cls.failure_result(message, error_code, ResultStatus.BUSINESS_RULE_VIOLATION)

    @classmethod
    def from_error(cls, error: HandReplayError) -> 'CommandResult':
        """把核心层异常转换为失败结果；牌局已结束之类的拒绝归为业务规则违反"""
        if error.error_code in _STATE_ERROR_CODES:
            return cls.business_rule_violation(error.message, error.error_code)
        return cls.validation_error(error.message, error.error_code)


@dataclass(frozen=True)
class QueryResult(Generic[T]):
    """查询结果，data的类型由具体查询决定"""
    success: bool
    status: ResultStatus
    data: Optional[T] = None
    message: str = ""
    error_code: Optional[str] = None

    @classmethod
    def success_result(cls, data: T, message: str = "查询成功") -> 'QueryResult[T]':
        return cls(True, ResultStatus.SUCCESS, data, message)

    @classmethod
    def failure_result(cls, message: str, error_code: Optional[str] = None,
                       status: ResultStatus = ResultStatus.FAILURE) -> 'QueryResult[T]':
        return cls(False, status, None, message, error_code)


@dataclass(frozen=True)
class ActionRequest:
    """
    外部提交的行动请求

    street和position省略时由引擎按当前状态补全；amount省略时跟注和全押自动取应付金额。
    """
    action_type: str
    amount: Optional[int] = None
    position: Optional[str] = None
    street: Optional[str] = None

    def parsed_type(self) -> ActionType:
        """
        Raises:
            ValueError: 行动类型不是fold/check/call/bet/raise/all-in之一时
        """
        return ActionType(self.action_type.strip().lower())

    @property
    def fills_from_state(self) -> bool:
        return self.position is None and self.street is None


class ApplicationError(Exception):
    """应用层异常，CLI等外层入口用它携带失败结果的错误代码"""

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
