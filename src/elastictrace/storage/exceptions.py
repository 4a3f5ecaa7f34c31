"""存储组件异常定义模块."""

from ..exceptions import ConfigurationError, ElasticTraceError


class StorageConfigError(ConfigurationError):
    """存储配置校验异常."""

    pass


class ClusterHealthError(ElasticTraceError):
    """集群健康状态异常（状态无法读取或为 RED）."""

    pass
