"""索引模板初始化模块.

在任何写入之前确保集群中存在与版本兼容的索引模板：
- 按集群主版本（2.x / 5.x）选择模板分支
- 模板不存在时安装，已存在时不做修改
- 每个进程只检查一次

示例用法:
    >>> from elastictrace.template import IndexTemplateRenderer, SchemaBootstrapper
    >>> renderer = IndexTemplateRenderer("zipkin", shards=5, replicas=1)
    >>> bootstrapper = SchemaBootstrapper(lambda: http, renderer)
    >>> bootstrapper.ensure()
"""

from .exceptions import TemplateError, TemplateInstallError, UnsupportedVersionError
from .models import TemplateBranch
from .renderer import IndexTemplateRenderer
from .tool import SchemaBootstrapper

__all__ = [
    "IndexTemplateRenderer",
    "SchemaBootstrapper",
    "TemplateBranch",
    "TemplateError",
    "TemplateInstallError",
    "UnsupportedVersionError",
]
