from transports.base import (
    TRANSPORT_REGISTRY,
    BaseTransport,
    list_transports,
    load_transport,
    register_transport,
)

# 具体传输方式由 load_transport 按需导入

__all__ = [
    "TRANSPORT_REGISTRY",
    "BaseTransport",
    "list_transports",
    "load_transport",
    "register_transport",
]
