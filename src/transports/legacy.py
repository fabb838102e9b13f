"""基于 urllib3 连接池的精简传输方式

只区分 load / error / timeout 三种信号：不上报状态码，也不读取响应头，
因此 TTL 固定为 0（不可缓存）。响应体分块读取，每块都经过进度回调，
空闲的长轮询连接在单次读取超时内保持活跃。
"""

import json
from typing import Callable, Optional

import urllib3

from config.settings import RequestConfig
from core.exceptions import DecodeError, TransportError
from core.models import MAX_CONCURRENCY, RequestResult, TransportKind
from transports.base import BaseTransport, ignore_progress, register_transport


@register_transport
class LegacyTransport(BaseTransport):
    """urllib3 精简传输"""

    kind = TransportKind.LEGACY
    chunk_size = 8192

    def __init__(
        self,
        config: Optional[RequestConfig] = None,
        pool: Optional[urllib3.PoolManager] = None,
        on_progress: Optional[Callable[[int], None]] = None,
    ):
        super().__init__(config)
        self.pool = pool or self._create_pool()
        self.on_progress = on_progress or ignore_progress

    def _create_pool(self) -> urllib3.PoolManager:
        """创建连接池"""
        # 只在禁用 SSL 验证时才禁用警告
        if not self.config.verify_ssl:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
        return urllib3.PoolManager(
            maxsize=MAX_CONCURRENCY,
            cert_reqs="CERT_REQUIRED" if self.config.verify_ssl else "CERT_NONE",
            headers={"Accept": "application/json"},
        )

    def _fetch(self, url: str) -> RequestResult:
        try:
            resp = self.pool.request(
                "GET",
                url,
                timeout=urllib3.Timeout(
                    connect=self.config.timeout, read=self.config.timeout
                ),
                retries=False,
                preload_content=False,
            )
        except urllib3.exceptions.HTTPError as e:
            return RequestResult.failure(self._classify(e, url))

        try:
            if not 200 <= resp.status < 300:
                # 丢弃未读的响应体，连接才能回到连接池
                resp.drain_conn()
                return RequestResult.failure(
                    TransportError(f"Unexpected status code on URL {url}", url), resp
                )
            data = self._read_body(resp)
        except urllib3.exceptions.HTTPError as e:
            return RequestResult.failure(self._classify(e, url), resp)
        finally:
            resp.release_conn()

        try:
            body = json.loads(data)
        except ValueError as e:
            return RequestResult.failure(
                DecodeError(f"Invalid JSON on URL {url}: {e}", url=url), resp
            )
        return RequestResult.success(body, resp, ttl=0)

    def _read_body(self, resp) -> bytes:
        """分块读取响应体"""
        chunks = []
        for chunk in resp.stream(self.chunk_size):
            self.on_progress(len(chunk))
            chunks.append(chunk)
        return b"".join(chunks)

    @staticmethod
    def _classify(error: urllib3.exceptions.HTTPError, url: str) -> TransportError:
        """把 urllib3 异常归类为超时或通用错误"""
        if isinstance(error, urllib3.exceptions.TimeoutError):
            return TransportError("Request timeout", url)
        return TransportError(f"Unexpected status code on URL {url}", url)

    def close(self) -> None:
        try:
            super().close()
        finally:
            self.pool.clear()
