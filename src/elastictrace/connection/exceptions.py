"""HTTP 调用工厂异常定义模块."""

from ..exceptions import ConfigurationError, ElasticTraceError


class CallFactoryError(ElasticTraceError):
    """调用工厂基础异常类.

    所有 HTTP 调用相关异常的基类，继承自 ElasticTraceError。
    """

    pass


class ConnectionConfigError(CallFactoryError, ConfigurationError):
    """连接配置校验异常.

    当节点地址列表为空、协议或端口不一致、地址无法解析为 URL 时抛出。
    """

    pass


class HostResolutionError(CallFactoryError):
    """主机名解析异常."""

    pass


class HttpCallError(CallFactoryError):
    """HTTP 调用异常.

    传输层失败（连接拒绝、超时）或响应状态码非 2xx 时抛出。

    Attributes:
        tag: 请求标签，标识失败的操作
        status: HTTP 状态码，传输层失败时为 None
        body: 响应体原文，传输层失败时为 None
    """

    def __init__(
        self,
        message: str,
        tag: str,
        status: int | None = None,
        body: bytes | None = None,
    ) -> None:
        super().__init__(message)
        self.tag = tag
        self.status = status
        self.body = body


class HttpNotFoundError(HttpCallError):
    """HTTP 404 异常."""

    pass


class HttpTimeoutError(HttpCallError):
    """请求超时异常."""

    pass


class ResponseDecodeError(CallFactoryError):
    """响应体解码异常."""

    pass
