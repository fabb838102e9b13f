"""基于 httpx 的通用传输方式

2xx 以外的状态码在读取响应体之前直接返回错误。
"""

from typing import Optional

import httpx

from config.settings import RequestConfig
from core.exceptions import DecodeError, HttpStatusError, TransportError
from core.models import MAX_CONCURRENCY, RequestResult, TransportKind
from transports.base import BaseTransport, register_transport
from utils.cache_control import parse_max_age


@register_transport
class FetchTransport(BaseTransport):
    """httpx 客户端传输"""

    kind = TransportKind.FETCH

    def __init__(
        self,
        config: Optional[RequestConfig] = None,
        client: Optional[httpx.Client] = None,
    ):
        super().__init__(config)
        self.client = client or self._create_client()

    def _create_client(self) -> httpx.Client:
        """创建 HTTP 客户端"""
        return httpx.Client(
            timeout=self.config.timeout,
            verify=self.config.verify_ssl,
            limits=httpx.Limits(max_connections=MAX_CONCURRENCY),
            headers={
                "Accept": "application/json",
                "User-Agent": self.config.user_agent,
            },
        )

    @property
    def request_headers(self) -> dict[str, str]:
        """每个请求都携带的请求头（外部传入的 client 也适用）"""
        return {"Accept": "application/json", "User-Agent": self.config.user_agent}

    def _fetch(self, url: str) -> RequestResult:
        try:
            with self.client.stream("GET", url, headers=self.request_headers) as resp:
                # 先判断状态码，再读取响应体
                if not 200 <= resp.status_code < 300:
                    return RequestResult.failure(
                        HttpStatusError(resp.status_code, url), resp
                    )
                resp.read()
        except httpx.TimeoutException:
            return RequestResult.failure(TransportError("Request timeout", url))
        except httpx.HTTPError as e:
            return RequestResult.failure(
                TransportError(f"Request failed on URL {url}: {e}", url)
            )

        try:
            body = resp.json()
        except ValueError as e:
            return RequestResult.failure(
                DecodeError(f"Invalid JSON on URL {url}: {e}", resp.status_code, url),
                resp,
            )

        ttl = parse_max_age(resp.headers.get("cache-control"))
        return RequestResult.success(body, resp, ttl)

    def close(self) -> None:
        try:
            super().close()
        finally:
            self.client.close()
