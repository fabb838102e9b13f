"""传输方式基类和注册表

每种传输方式放在独立模块里，按需导入；依赖库缺失时导入失败，
该传输方式即视为不可用。
"""

from abc import ABC, abstractmethod
import importlib
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from config.settings import RequestConfig
from core.exceptions import RequestError, TransportError
from core.models import (
    MAX_CONCURRENCY,
    CompletionCallback,
    RequestResult,
    TransportKind,
)

# 传输方式注册表
TRANSPORT_REGISTRY: dict[TransportKind, type["BaseTransport"]] = {}


class BaseTransport(ABC):
    """传输方式基类

    perform 把请求提交到线程池，回调总是在工作线程中调用，恰好一次。
    """

    kind: TransportKind

    def __init__(self, config: Optional[RequestConfig] = None):
        self.config = config or RequestConfig()
        self.executor = ThreadPoolExecutor(
            max_workers=MAX_CONCURRENCY,
            thread_name_prefix=f"transport-{self.kind.value}",
        )
        self._worker = threading.local()

    def perform(self, url: str, callback: CompletionCallback) -> None:
        """异步发送 GET 请求

        Args:
            url: 请求 URL
            callback: 完成回调 callback(error, body, raw_response, ttl)
        """
        self.executor.submit(self._run, url, callback)

    def _run(self, url: str, callback: CompletionCallback) -> None:
        self._worker.active = True
        result = self._safe_fetch(url)
        try:
            callback(*result.as_callback_args())
        except Exception:
            logging.exception(f"Completion callback failed for {url}")

    def _safe_fetch(self, url: str) -> RequestResult:
        """执行请求，任何异常都转换为错误结果"""
        try:
            return self._fetch(url)
        except RequestError as e:
            return RequestResult.failure(e)
        except Exception as e:
            return RequestResult.failure(
                TransportError(f"Request failed on URL {url}: {e}", url)
            )

    @abstractmethod
    def _fetch(self, url: str) -> RequestResult:
        """同步执行一次 GET 请求（子类实现）

        Returns:
            RequestResult
        """
        raise NotImplementedError

    def close(self) -> None:
        """关闭线程池

        在工作线程（例如完成回调）中调用时不等待，线程无法 join 自身。
        """
        on_worker = getattr(self._worker, "active", False)
        self.executor.shutdown(wait=not on_worker)


def ignore_progress(received: int) -> None:
    """空的进度回调"""


# -------------------- 传输方式注册表 -------------------- #


def register_transport(cls: type[BaseTransport]):
    """注册传输方式

    Args:
        cls: 传输方式类

    Returns:
        传输方式类（用于装饰器）
    """
    kind = cls.kind
    if kind in TRANSPORT_REGISTRY:
        raise ValueError(f"Transport {kind.value} already registered")
    TRANSPORT_REGISTRY[kind] = cls
    return cls


def load_transport(kind: TransportKind) -> Optional[type[BaseTransport]]:
    """导入并返回指定的传输方式类

    Args:
        kind: 传输方式

    Returns:
        传输方式类；依赖库不可用时返回 None
    """
    if kind not in TRANSPORT_REGISTRY:
        try:
            importlib.import_module(f"transports.{kind.value}")
        except ImportError as e:
            logging.debug(f"Transport {kind.value} unavailable: {e}")
            return None
    return TRANSPORT_REGISTRY.get(kind)


def list_transports() -> list[TransportKind]:
    """列出所有传输方式（按默认优先级）"""
    return list(TransportKind)
