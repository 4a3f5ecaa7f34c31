"""HTTP 调用工厂数据模型定义模块.

提供调用工厂相关的数据模型，包括：
- Endpoint: 单个集群节点地址
- HttpRequest: 一次 HTTP 请求
- ConnectionConfig: 连接池配置
- Callback: 异步调用回调协议
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Protocol, TypeVar
from urllib.parse import quote, urlencode

from ..core.constants import (
    APPLICATION_JSON,
    DEFAULT_MAX_REQUESTS,
    DEFAULT_REQUEST_TIMEOUT,
)
from .exceptions import ConnectionConfigError

T = TypeVar("T")
T_contra = TypeVar("T_contra", contravariant=True)


@dataclass(frozen=True)
class Endpoint:
    """集群节点地址.

    Attributes:
        scheme: 协议，http 或 https
        host: 主机名或 IP 地址字面量
        port: 端口，未显式指定时取协议默认端口
        path_prefix: URL 路径前缀，例如反向代理下的 /es
    """

    scheme: str
    host: str
    port: int
    path_prefix: str = ""

    @property
    def url(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{self.scheme}://{host}:{self.port}{self.path_prefix}"


@dataclass(frozen=True)
class HttpRequest:
    """一次 HTTP 请求.

    path 为已编码的路径，params 按给定顺序输出到查询字符串。

    Attributes:
        method: HTTP 方法
        path: 以 / 开头的已编码路径
        tag: 请求标签，出现在所有错误信息中
        params: 有序查询参数
        body: 请求体
        content_type: 请求体类型

    Examples:
        >>> request = HttpRequest.build("GET", "_template", "zipkin_template", tag="get-template")
        >>> request.target
        '/_template/zipkin_template'
    """

    method: str
    path: str
    tag: str
    params: tuple[tuple[str, str], ...] = ()
    body: bytes | None = None
    content_type: str = APPLICATION_JSON

    @classmethod
    def build(
        cls,
        method: str,
        *segments: str,
        tag: str,
        params: tuple[tuple[str, str], ...] | list[tuple[str, str]] = (),
        body: bytes | str | None = None,
        content_type: str = APPLICATION_JSON,
    ) -> HttpRequest:
        """按路径段构建请求，每段单独编码（保留逗号和通配符）."""
        path = "/" + "/".join(quote(segment, safe=",*") for segment in segments)
        if isinstance(body, str):
            body = body.encode("utf-8")
        return cls(
            method=method,
            path=path,
            tag=tag,
            params=tuple(params),
            body=body,
            content_type=content_type,
        )

    @property
    def target(self) -> str:
        """路径加查询字符串."""
        if not self.params:
            return self.path
        return f"{self.path}?{urlencode(self.params)}"

    def query_parameter_names(self) -> list[str]:
        return [name for name, _ in self.params]


@dataclass
class ConnectionConfig:
    """连接池配置模型.

    Attributes:
        max_requests: 全局最大并发请求数，默认 64，必须 >= 1
        request_timeout: 单次请求超时时间（秒），默认 10，必须 > 0
        http_compress: 是否启用 HTTP 压缩，默认 False
        sniff_on_node_failure: 多节点时节点失败后是否重新解析主机名，默认 True

    Raises:
        ConnectionConfigError: 当参数不合法时抛出

    Examples:
        >>> config = ConnectionConfig(max_requests=16, request_timeout=5)
    """

    max_requests: int = DEFAULT_MAX_REQUESTS
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    http_compress: bool = False
    sniff_on_node_failure: bool = True

    def __post_init__(self) -> None:
        """校验连接池配置参数合法性."""
        if self.max_requests < 1:
            raise ConnectionConfigError(
                f"max_requests 必须 >= 1，当前值: {self.max_requests}"
            )
        if self.request_timeout <= 0:
            raise ConnectionConfigError(
                f"request_timeout 必须 > 0，当前值: {self.request_timeout}"
            )


class Callback(Protocol[T_contra]):
    """异步调用回调协议.

    每次调用恰好触发 on_success 或 on_error 其中之一，且只触发一次。
    """

    def on_success(self, value: T_contra) -> None: ...

    def on_error(self, error: Exception) -> None: ...


@dataclass
class CallbackCaptor(Generic[T]):
    """记录回调结果的简单回调实现，主要用于测试和同步等待场景."""

    values: list[T] = field(default_factory=list)
    errors: list[Exception] = field(default_factory=list)

    def on_success(self, value: T) -> None:
        self.values.append(value)

    def on_error(self, error: Exception) -> None:
        self.errors.append(error)

    @property
    def call_count(self) -> int:
        return len(self.values) + len(self.errors)
