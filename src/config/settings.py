"""配置管理模块 - 使用 Pydantic

集中管理所有配置项，支持环境变量、.env 文件和配置验证。
最大并发数 MAX_CONCURRENCY 是固定常量，不在这里配置。
"""

import platform

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.models import TransportKind

VERSION = "0.1.0"


def default_user_agent() -> str:
    """生成客户端标识"""
    return f"api-request-queue/{VERSION} Python/{platform.python_version()}"


class RequestConfig(BaseSettings):
    """请求配置"""

    model_config = SettingsConfigDict(
        env_prefix="REQUEST_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # 传输方式优先级，第一个可用的生效
    transports: list[TransportKind] = Field(
        default_factory=lambda: [
            TransportKind.SESSION,
            TransportKind.LEGACY,
            TransportKind.FETCH,
        ],
        description="传输方式优先级",
    )

    # 请求超时（秒）
    timeout: float = Field(default=30, ge=1, le=300, description="请求超时时间（秒）")

    # SSL 验证
    verify_ssl: bool = Field(default=True, description="是否验证 SSL 证书")

    # 客户端标识
    user_agent: str = Field(
        default_factory=default_user_agent, description="User-Agent 请求头"
    )

    @field_validator("transports", mode="after")
    @classmethod
    def check_transports(cls, v: list[TransportKind]) -> list[TransportKind]:
        """去重并保证至少有一个传输方式"""
        if not v:
            raise ValueError("At least one transport must be configured")
        return list(dict.fromkeys(v))


class Config(BaseSettings):
    """全局配置"""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    request: RequestConfig = Field(default_factory=RequestConfig)
