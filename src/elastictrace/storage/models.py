"""存储组件数据模型定义模块.

提供存储组件相关的数据模型，包括：
- StorageConfig: 存储配置
- CheckResult: 健康检查结果
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from ..connection import ConnectionConfig, ConnectionConfigError, parse_endpoints
from ..core.constants import (
    DEFAULT_HOSTS,
    DEFAULT_INDEX,
    DEFAULT_INDEX_REPLICAS,
    DEFAULT_INDEX_SHARDS,
    DEFAULT_MAX_REQUESTS,
    DEFAULT_REQUEST_TIMEOUT,
)
from .exceptions import StorageConfigError


@dataclass
class StorageConfig:
    """存储配置模型.

    Attributes:
        hosts: ES 节点地址列表，http://host:port 或 https://host:port 格式，
            须共享协议和端口，多个节点时只支持 http，默认 ["http://localhost:9200"]
        index: 按天生成索引名时使用的前缀，默认 "zipkin"
        index_shards: 新建日索引的主分片数，默认 5
        index_replicas: 新建日索引的副本数，默认 1，不建议设为 0
        pipeline: ingest pipeline 名称（仅 ES 5.x），默认不设置
        flush_on_writes: 每次批量写入后是否 flush，仅用于测试，默认 False
        max_requests: 进程内对任意 ES 节点的最大并发请求数，默认 64
        strict_trace_id: traceId 是否精确匹配，默认 True
        request_timeout: 单次请求超时时间（秒），默认 10

    Raises:
        StorageConfigError: 当参数不合法时抛出

    Examples:
        >>> config = StorageConfig(
        ...     hosts=["http://10.0.0.1:9200", "http://10.0.0.2:9200"],
        ...     index="traces",
        ... )
    """

    hosts: list[str] = field(default_factory=lambda: list(DEFAULT_HOSTS))
    index: str = DEFAULT_INDEX
    index_shards: int = DEFAULT_INDEX_SHARDS
    index_replicas: int = DEFAULT_INDEX_REPLICAS
    pipeline: str | None = None
    flush_on_writes: bool = False
    max_requests: int = DEFAULT_MAX_REQUESTS
    strict_trace_id: bool = True
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    def __post_init__(self) -> None:
        """校验存储配置参数合法性."""
        if isinstance(self.hosts, str):
            self.hosts = [self.hosts]
        try:
            parse_endpoints(self.hosts)
        except ConnectionConfigError as e:
            raise StorageConfigError(str(e)) from e
        if not self.index:
            raise StorageConfigError("index 不能为空")
        if self.index_shards < 1:
            raise StorageConfigError(
                f"index_shards 必须 >= 1，当前值: {self.index_shards}"
            )
        if self.index_replicas < 0:
            raise StorageConfigError(
                f"index_replicas 必须 >= 0，当前值: {self.index_replicas}"
            )
        try:
            self.connection_config()
        except ConnectionConfigError as e:
            raise StorageConfigError(str(e)) from e

    def connection_config(self) -> ConnectionConfig:
        return ConnectionConfig(
            max_requests=self.max_requests,
            request_timeout=self.request_timeout,
        )


@dataclass(frozen=True)
class CheckResult:
    """健康检查结果.

    Attributes:
        ok: 是否健康
        error: 不健康的原因
    """

    ok: bool
    error: Exception | None = None

    OK: ClassVar[CheckResult]

    @classmethod
    def failed(cls, error: Exception) -> CheckResult:
        return cls(ok=False, error=error)


CheckResult.OK = CheckResult(ok=True)
