"""核心接口定义

使用 Protocol 定义接口，支持鸭子类型和依赖注入。
"""

from typing import Protocol, runtime_checkable

from core.models import CompletionCallback


@runtime_checkable
class Transport(Protocol):
    """请求传输接口

    perform 必须异步执行，回调恰好调用一次，且不能在 perform 内同步调用。
    """

    def perform(self, url: str, callback: CompletionCallback) -> None:
        """发送 GET 请求，完成后调用 callback(error, body, raw_response, ttl)"""
        ...

    def close(self) -> None:
        """释放底层连接和线程池"""
        ...
