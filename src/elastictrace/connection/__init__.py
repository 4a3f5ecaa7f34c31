"""HTTP 调用工厂模块 - 把一组集群节点合并为一个逻辑地址并统一管理出站请求.

主要组件:
    - CallFactory: 调用工厂，同步执行或异步提交请求
    - HostResolver: 伪 DNS 解析器，合并 IP 字面量和主机名解析结果
    - HttpRequest: HTTP 请求模型
    - ConnectionConfig: 连接池配置模型

使用示例:
    from elastictrace.connection import CallFactory, ConnectionConfig

    http = CallFactory.create(
        ["http://10.0.0.1:9200", "http://10.0.0.2:9200"],
        ConnectionConfig(max_requests=32),
    )
"""

from .exceptions import (
    CallFactoryError,
    ConnectionConfigError,
    HostResolutionError,
    HttpCallError,
    HttpNotFoundError,
    HttpTimeoutError,
    ResponseDecodeError,
)
from .models import Callback, CallbackCaptor, ConnectionConfig, Endpoint, HttpRequest
from .resolver import HostResolver, parse_endpoint, parse_endpoints, system_resolver
from .tool import CallFactory, RawJsonSerializer

__all__ = [
    # 工厂
    "CallFactory",
    "RawJsonSerializer",
    # 解析
    "HostResolver",
    "parse_endpoint",
    "parse_endpoints",
    "system_resolver",
    # 模型
    "Callback",
    "CallbackCaptor",
    "ConnectionConfig",
    "Endpoint",
    "HttpRequest",
    # 异常
    "CallFactoryError",
    "ConnectionConfigError",
    "HostResolutionError",
    "HttpCallError",
    "HttpNotFoundError",
    "HttpTimeoutError",
    "ResponseDecodeError",
]
