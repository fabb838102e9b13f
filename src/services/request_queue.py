"""请求调度队列

限制同时进行中的请求数量不超过 MAX_CONCURRENCY，其余请求按 FIFO 排队。
每个请求完成后释放名额，并立即尝试放行下一个等待中的请求。
"""

import logging
from collections import deque
from concurrent.futures import Future
from functools import partial
from threading import Lock
from typing import Any, Optional

from config.settings import RequestConfig
from core.exceptions import RequestError
from core.interfaces import Transport
from core.models import (
    MAX_CONCURRENCY,
    CompletionCallback,
    PendingRequest,
    RequestResult,
)
from services.transport_selector import select_transport

# 旧名称
MAX_CONNECTIONS = MAX_CONCURRENCY


class RequestQueue:
    """并发受限的请求队列"""

    def __init__(
        self,
        transport: Optional[Transport] = None,
        config: Optional[RequestConfig] = None,
    ):
        """初始化请求队列

        Args:
            transport: 传输方式（可选，依赖注入；默认首次使用时自动选择）
            config: 请求配置（可选）
        """
        self.config = config
        self._transport = transport
        self._pending: deque[PendingRequest] = deque()
        self._in_flight = 0
        self._lock = Lock()

    @property
    def transport(self) -> Transport:
        """当前传输方式，首次访问时选择

        Raises:
            ConfigurationError: 没有可用的传输方式
        """
        with self._lock:
            if self._transport is None:
                self._transport = select_transport(self.config)
            return self._transport

    @property
    def in_flight(self) -> int:
        """进行中的请求数"""
        with self._lock:
            return self._in_flight

    @property
    def pending(self) -> int:
        """等待中的请求数"""
        with self._lock:
            return len(self._pending)

    def submit(self, url: str, completion: CompletionCallback) -> None:
        """提交请求，不阻塞调用方

        Args:
            url: 请求 URL
            completion: 完成回调 completion(error, body, raw_response, ttl)

        Raises:
            ConfigurationError: 没有可用的传输方式
        """
        transport = self.transport
        with self._lock:
            self._pending.append(PendingRequest(url=url, completion=completion))
        self._admit(transport)

    def fetch(self, url: str) -> "Future[RequestResult]":
        """提交请求并返回 Future"""
        future: Future = Future()

        def on_complete(
            error: Optional[RequestError],
            body: Any,
            raw_response: Any,
            ttl: Optional[int] = None,
        ) -> None:
            future.set_result(RequestResult(error, body, raw_response, ttl))

        self.submit(url, on_complete)
        return future

    def _admit(self, transport: Transport) -> None:
        """放行等待中的请求，直到队列为空或达到并发上限"""
        with self._lock:
            admitted = []
            while self._pending and self._in_flight < MAX_CONCURRENCY:
                self._in_flight += 1
                admitted.append(self._pending.popleft())

        for i, pending in enumerate(admitted):
            logging.debug(f"Dispatching {pending.url}")
            try:
                transport.perform(pending.url, partial(self._complete, transport, pending))
            except Exception:
                # 未能发出的请求放回队首并归还名额
                rest = admitted[i:]
                with self._lock:
                    self._in_flight -= len(rest)
                    self._pending.extendleft(reversed(rest))
                raise

    def _complete(
        self,
        transport: Transport,
        pending: PendingRequest,
        error: Optional[RequestError],
        body: Any,
        raw_response: Any,
        ttl: Optional[int] = None,
    ) -> None:
        with self._lock:
            self._in_flight -= 1
        try:
            pending.completion(error, body, raw_response, ttl)
        finally:
            self._admit(transport)

    def close(self) -> None:
        """关闭传输方式"""
        with self._lock:
            transport, self._transport = self._transport, None
        if transport is not None:
            transport.close()


_default_queue: Optional[RequestQueue] = None
_default_lock = Lock()


def get_default_queue() -> RequestQueue:
    """获取进程级默认队列"""
    global _default_queue
    with _default_lock:
        if _default_queue is None:
            _default_queue = RequestQueue()
        return _default_queue


def request(url: str, callback: CompletionCallback) -> None:
    """通过默认队列发送 GET 请求

    Args:
        url: 请求 URL
        callback: 完成回调 callback(error, body, raw_response, ttl)，恰好调用一次
    """
    get_default_queue().submit(url, callback)
