"""核心数据模型

纯数据模型，不包含业务逻辑。
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from core.exceptions import RequestError

# 同时进行中的请求数上限（固定常量）
MAX_CONCURRENCY = 20


class TransportKind(Enum):
    """传输方式枚举（按默认优先级排列）"""

    SESSION = "session"
    LEGACY = "legacy"
    FETCH = "fetch"


@dataclass
class RequestResult:
    """统一的请求结果

    error 与 body 有且只有一个被设置。
    ttl 为 None 表示新鲜度未知，为 0 表示不可缓存。
    """

    error: Optional[RequestError] = None
    body: Any = None
    raw_response: Any = None
    ttl: Optional[int] = None

    @classmethod
    def success(
        cls, body: Any, raw_response: Any = None, ttl: Optional[int] = None
    ) -> "RequestResult":
        return cls(error=None, body=body, raw_response=raw_response, ttl=ttl)

    @classmethod
    def failure(cls, error: RequestError, raw_response: Any = None) -> "RequestResult":
        return cls(error=error, body=None, raw_response=raw_response, ttl=None)

    @property
    def ok(self) -> bool:
        """是否成功"""
        return self.error is None

    @property
    def status_code(self) -> Optional[int]:
        """错误状态码（成功或无状态码时为 None）"""
        return self.error.status_code if self.error else None

    def as_callback_args(self) -> tuple:
        """转换为回调参数 (error, body, raw_response, ttl)"""
        return self.error, self.body, self.raw_response, self.ttl


# 完成回调: callback(error, body, raw_response, ttl)
CompletionCallback = Callable[
    [Optional[RequestError], Any, Any, Optional[int]], None
]


@dataclass
class PendingRequest:
    """等待调度的请求"""

    url: str
    completion: CompletionCallback
