"""elastictrace 异常定义模块."""


class ElasticTraceError(Exception):
    """elastictrace 基础异常类."""

    pass


class ConfigurationError(ElasticTraceError):
    """配置异常.

    配置不合法时在初始化阶段同步抛出，不会重试。
    """

    pass
