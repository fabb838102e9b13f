"""基于 requests.Session 的传输方式

会话保存 Cookie，跨请求携带凭据。只有状态码 200 视为成功。
"""

from typing import Optional

import requests

from config.settings import RequestConfig
from core.exceptions import DecodeError, HttpStatusError, TransportError
from core.models import RequestResult, TransportKind
from transports.base import BaseTransport, register_transport
from utils.cache_control import parse_max_age


@register_transport
class SessionTransport(BaseTransport):
    """requests 会话传输"""

    kind = TransportKind.SESSION

    def __init__(
        self,
        config: Optional[RequestConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        super().__init__(config)
        self.session = session or self._create_session()

    def _create_session(self) -> requests.Session:
        """创建 HTTP 会话"""
        session = requests.Session()
        session.verify = self.config.verify_ssl
        session.headers.update({"Accept": "application/json"})
        return session

    def _fetch(self, url: str) -> RequestResult:
        try:
            resp = self.session.get(
                url,
                headers={"Accept": "application/json"},
                timeout=self.config.timeout,
            )
        except requests.Timeout:
            return RequestResult.failure(TransportError("Request timeout", url))
        except requests.RequestException as e:
            return RequestResult.failure(
                TransportError(f"Request failed on URL {url}: {e}", url)
            )

        if resp.status_code != 200:
            return RequestResult.failure(HttpStatusError(resp.status_code, url), resp)

        try:
            body = resp.json()
        except ValueError as e:
            return RequestResult.failure(
                DecodeError(f"Invalid JSON on URL {url}: {e}", resp.status_code, url),
                resp,
            )

        ttl = parse_max_age(resp.headers.get("Cache-Control"))
        return RequestResult.success(body, resp, ttl)

    def close(self) -> None:
        try:
            super().close()
        finally:
            self.session.close()
