"""自定义异常类

RequestError 即回调中传递的错误对象（状态码 + 描述信息）。
"""


class RequestError(Exception):
    """请求基础异常"""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        url: str | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class HttpStatusError(RequestError):
    """非 2xx 响应"""

    def __init__(self, status_code: int, url: str):
        super().__init__(
            f"Unexpected status code [{status_code}] on URL {url}",
            status_code=status_code,
            url=url,
        )


class TransportError(RequestError):
    """网络异常（连接失败、中断、超时），没有状态码"""

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message, url=url)


class DecodeError(RequestError):
    """响应体不是合法的 JSON"""


class ConfigurationError(Exception):
    """没有可用的请求传输方式，无法继续"""
