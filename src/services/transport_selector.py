"""传输方式选择

按配置的优先级选出第一个可用的传输方式。
"""

import logging
from typing import Optional

from config.settings import RequestConfig
from core.exceptions import ConfigurationError
from core.interfaces import Transport
from transports.base import load_transport


def select_transport(config: Optional[RequestConfig] = None) -> Transport:
    """选择传输方式

    Args:
        config: 请求配置（默认从环境变量读取）

    Returns:
        传输方式实例

    Raises:
        ConfigurationError: 没有任何可用的传输方式
    """
    config = config or RequestConfig()

    for kind in config.transports:
        transport_cls = load_transport(kind)
        if transport_cls is None:
            logging.info(f"Transport {kind.value} unavailable, trying next")
            continue
        logging.info(f"Using transport: {kind.value}")
        return transport_cls(config)

    tried = ", ".join(kind.value for kind in config.transports)
    raise ConfigurationError(f"No request handler available (tried {tried})")
