"""存储组件模块.

把调用工厂、索引模板初始化、批量写入和查询组合为一个存储组件:
- HttpStorage: 存储组件，首次读写前完成索引模板初始化
- StorageConfig: 存储配置
- CheckResult: 健康检查结果

示例用法:
    >>> from elastictrace.storage import HttpStorage, StorageConfig
    >>> storage = HttpStorage(StorageConfig(index="traces"))
    >>> storage.check().ok
    True
"""

from .exceptions import ClusterHealthError, StorageConfigError
from .models import CheckResult, StorageConfig
from .tool import HttpStorage

__all__ = [
    "HttpStorage",
    "StorageConfig",
    "CheckResult",
    "ClusterHealthError",
    "StorageConfigError",
]
