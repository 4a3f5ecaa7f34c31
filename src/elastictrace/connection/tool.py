"""HTTP 调用工厂工具模块.

提供 CallFactory 类，作为访问逻辑集群地址的唯一出口：持有一个带连接池的
elastic_transport Transport，同步执行请求或提交到受并发上限约束的线程池异步执行。

使用示例:
    from elastictrace.connection import CallFactory, HttpRequest

    with CallFactory.create(["http://localhost:9200"]) as http:
        request = HttpRequest.build("GET", "", tag="get-node")
        body = http.execute(request, lambda b: b)
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, TypeVar

from elastic_transport import (
    ConnectionTimeout,
    JsonSerializer,
    NodeConfig,
    Transport,
    TransportError,
)

from ..core.constants import APPLICATION_JSON, APPLICATION_NDJSON
from ..exceptions import ElasticTraceError
from ..typing import BodyConverter
from .exceptions import (
    CallFactoryError,
    HttpCallError,
    HttpNotFoundError,
    HttpTimeoutError,
    ResponseDecodeError,
)
from .models import Callback, ConnectionConfig, Endpoint, HttpRequest
from .resolver import HostResolver, Resolver, parse_endpoints

logger = logging.getLogger(__name__)

T = TypeVar("T")

# 错误信息中保留的响应体长度
_BODY_PREVIEW_LIMIT = 512


class RawJsonSerializer(JsonSerializer):
    """透传序列化器.

    请求体为 bytes/str 时原样发送；响应体不做解析，保持原始字节，
    交给调用方的转换函数按需流式解码。
    """

    def loads(self, data: bytes) -> bytes:
        return data

    def dumps(self, data: Any) -> bytes:
        if isinstance(data, bytes):
            return data
        if isinstance(data, str):
            return data.encode("utf-8")
        return super().dumps(data)


def _as_bytes(body: Any) -> bytes:
    if body is None:
        return b""
    if isinstance(body, str):
        return body.encode("utf-8")
    return bytes(body)


def _preview(body: bytes) -> str:
    text = body[:_BODY_PREVIEW_LIMIT].decode("utf-8", errors="replace")
    if len(body) > _BODY_PREVIEW_LIMIT:
        text += "..."
    return text


class CallFactory:
    """HTTP 调用工厂.

    所有发往集群的请求都经过这里。全局并发上限对同步和异步调用统一生效，
    不区分目标节点。不做重试，不缓存响应。

    Attributes:
        base_url: 逻辑集群地址，即第一个配置的节点
        config: 连接池配置

    Examples:
        >>> http = CallFactory.create(["http://10.0.0.1:9200", "http://10.0.0.2:9200"])
        >>> future = http.submit(request, converter)
        >>> future.result()
    """

    def __init__(
        self,
        transport: Transport,
        base_url: str,
        config: ConnectionConfig | None = None,
    ) -> None:
        """初始化调用工厂.

        Args:
            transport: 已配置节点的 Transport 实例
            base_url: 逻辑集群地址
            config: 连接池配置，默认使用 ConnectionConfig 的默认值
        """
        self._transport = transport
        self.base_url = base_url
        self.config = config or ConnectionConfig()
        self._slots = threading.BoundedSemaphore(self.config.max_requests)
        self._executor = ThreadPoolExecutor(
            max_workers=self.config.max_requests,
            thread_name_prefix="elastictrace-http",
        )
        self._closed = False
        self._transport_closed = False

    @classmethod
    def create(
        cls,
        hosts: list[str],
        config: ConnectionConfig | None = None,
        fallback: Resolver | None = None,
    ) -> CallFactory:
        """根据节点地址列表创建调用工厂.

        单个节点时直接连接该地址；多个节点时通过 HostResolver 把全部节点合并为
        一个逻辑主机，每个解析出的地址对应连接池中的一个节点，节点失败后重新解析主机名。

        Args:
            hosts: 节点 URL 列表，须共享协议和端口，多个节点时只支持 http
            config: 连接池配置
            fallback: 主机名后备解析器，默认使用系统 DNS

        Returns:
            CallFactory 实例

        Raises:
            ConnectionConfigError: 节点列表不合法时抛出
            HostResolutionError: 主机名解析失败时抛出
        """
        config = config or ConnectionConfig()
        endpoints = parse_endpoints(hosts)
        base = endpoints[0]

        transport_kwargs: dict[str, Any] = {}
        if len(endpoints) == 1:
            node_configs = [cls._node_config(base, base.host, config)]
        else:
            resolver = HostResolver(hosts, fallback)

            def resolve_nodes(*_: Any) -> list[NodeConfig]:
                # 连接池不接受重复节点，IP 字面量和主机名可能解析到同一地址
                addresses = dict.fromkeys(resolver.resolve(base.host))
                return [cls._node_config(base, address, config) for address in addresses]

            node_configs = resolve_nodes()
            if config.sniff_on_node_failure and not resolver.is_static():
                transport_kwargs["sniff_on_node_failure"] = True
                transport_kwargs["sniff_callback"] = resolve_nodes

        serializer = RawJsonSerializer()
        transport = Transport(
            node_configs,
            serializers={
                APPLICATION_JSON: serializer,
                APPLICATION_NDJSON: serializer,
                "text/*": serializer,
            },
            default_mimetype=APPLICATION_JSON,
            max_retries=0,
            retry_on_status=(),
            retry_on_timeout=False,
            meta_header=False,
            **transport_kwargs,
        )
        logger.info(
            f"创建调用工厂: base_url={base.url}, nodes={len(node_configs)}, "
            f"max_requests={config.max_requests}"
        )
        return cls(transport, base.url, config)

    @staticmethod
    def _node_config(
        endpoint: Endpoint, host: str, config: ConnectionConfig
    ) -> NodeConfig:
        return NodeConfig(
            scheme=endpoint.scheme,
            host=host,
            port=endpoint.port,
            path_prefix=endpoint.path_prefix,
            connections_per_node=config.max_requests,
            request_timeout=config.request_timeout,
            http_compress=config.http_compress,
        )

    # ============================================================
    # 请求执行
    # ============================================================

    def execute(self, request: HttpRequest, converter: BodyConverter[T]) -> T:
        """同步执行请求并解码响应体.

        仅用于可以阻塞的场景（初始化、管理操作、测试）。

        Args:
            request: HTTP 请求
            converter: 响应体转换函数，入参为原始响应字节

        Returns:
            转换函数的返回值

        Raises:
            HttpCallError: 传输失败或状态码非 2xx
            HttpNotFoundError: 状态码为 404
            HttpTimeoutError: 请求超时
            ResponseDecodeError: 转换函数失败
        """
        body = self._perform(request)
        try:
            return converter(body)
        except ElasticTraceError:
            raise
        except Exception as e:
            raise ResponseDecodeError(f"{request.tag} 响应解析失败: {e}") from e

    def submit(
        self,
        request: HttpRequest,
        converter: BodyConverter[T],
        callback: Callback[T] | None = None,
    ) -> Future[T]:
        """异步执行请求.

        请求在线程池中执行，回调在工作线程中恰好触发一次 on_success 或 on_error。
        两次提交之间不保证顺序。

        Args:
            request: HTTP 请求
            converter: 响应体转换函数
            callback: 可选回调

        Returns:
            完成时持有转换结果或异常的 Future
        """
        if self._closed:
            raise CallFactoryError(f"调用工厂已关闭，无法提交 {request.tag}")
        return self._executor.submit(self._run, request, converter, callback)

    def _run(
        self,
        request: HttpRequest,
        converter: BodyConverter[T],
        callback: Callback[T] | None,
    ) -> T:
        try:
            value = self.execute(request, converter)
        except Exception as e:
            logger.debug(f"{request.tag} 异步请求失败: {e}")
            if callback is not None:
                callback.on_error(e)
            raise
        if callback is not None:
            callback.on_success(value)
        return value

    def _perform(self, request: HttpRequest) -> bytes:
        """发送请求，返回 2xx 响应的原始字节.

        并发槽位只在网络调用期间持有，转换函数执行时已释放。
        """
        if self._transport_closed:
            raise CallFactoryError(f"调用工厂已关闭，无法执行 {request.tag}")

        headers = {"accept": APPLICATION_JSON}
        if request.body is not None:
            headers["content-type"] = request.content_type

        logger.debug(f"{request.tag}: {request.method} {request.target}")
        with self._slots:
            try:
                response = self._transport.perform_request(
                    request.method,
                    request.target,
                    body=request.body,
                    headers=headers,
                    request_timeout=self.config.request_timeout,
                )
            except ConnectionTimeout as e:
                raise HttpTimeoutError(
                    f"{request.tag} 请求超时: {e}", tag=request.tag
                ) from e
            except TransportError as e:
                raise HttpCallError(
                    f"{request.tag} 请求失败: {e}", tag=request.tag
                ) from e

        status = response.meta.status
        body = _as_bytes(response.body)
        if not 200 <= status < 300:
            error_class = HttpNotFoundError if status == 404 else HttpCallError
            raise error_class(
                f"{request.tag} 请求失败: HTTP {status} {_preview(body)}",
                tag=request.tag,
                status=status,
                body=body,
            )
        return body

    # ============================================================
    # 生命周期管理
    # ============================================================

    def __enter__(self) -> CallFactory:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """关闭线程池和连接池.

        关闭后不再接受新的提交；阻塞等待已提交的请求执行完毕，再关闭连接池。
        不能在回调中调用。
        """
        if self._closed:
            return
        self._closed = True
        self._executor.shutdown(wait=True)
        self._transport_closed = True
        self._transport.close()
        logger.info(f"调用工厂已关闭: {self.base_url}")

    def __repr__(self) -> str:
        return f"CallFactory({self.base_url})"
