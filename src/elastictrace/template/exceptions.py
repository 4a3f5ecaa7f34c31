"""索引模板初始化异常定义模块."""

from ..exceptions import ConfigurationError, ElasticTraceError


class TemplateError(ElasticTraceError):
    """索引模板基础异常类."""

    pass


class UnsupportedVersionError(TemplateError, ConfigurationError):
    """集群版本不受支持异常.

    只支持 Elasticsearch 2.x 和 5.x，其他主版本视为配置不匹配，不会重试。
    """

    pass


class TemplateInstallError(TemplateError):
    """索引模板检查或安装失败异常."""

    pass
