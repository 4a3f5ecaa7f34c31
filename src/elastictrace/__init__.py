"""elastictrace - 基于 HTTP 的 Elasticsearch 链路数据存储组件.

把一组 Elasticsearch 节点当作一个逻辑集群访问，负责链路数据的批量写入、
索引模板初始化和查询结果的流式解码。支持 Elasticsearch 2.x 和 5.x。

主要功能:
    - HttpStorage: 存储组件，组合以下全部功能
    - CallFactory: HTTP 调用工厂，统一的全局并发上限
    - HostResolver: 伪 DNS，把多个节点合并为一个逻辑主机
    - BulkWriter: NDJSON 批量写入
    - SchemaBootstrapper: 按集群版本安装索引模板，每个进程一次
    - SearchDecoder: 流式解码 hits.hits[*]._source

使用示例:
    from elastictrace import HttpStorage, SearchDecoder, SearchRequest, StorageConfig

    with HttpStorage(StorageConfig(hosts=["http://localhost:9200"])) as storage:
        request = SearchRequest.for_indices_and_type(["zipkin-2016-10-01"], "span")
        spans = storage.search().execute(request.term("traceId", "a"), SearchDecoder())
"""

__version__ = "0.1.0"

# 导出存储组件
from elastictrace.storage import CheckResult, HttpStorage, StorageConfig

# 导出 HTTP 调用
from elastictrace.connection import (
    CallFactory,
    Callback,
    CallbackCaptor,
    ConnectionConfig,
    HostResolver,
    HttpRequest,
)

# 导出批量写入和模板
from elastictrace.bulk import BulkResult, BulkWriter
from elastictrace.template import IndexTemplateRenderer, SchemaBootstrapper, TemplateBranch

# 导出查询和解析
from elastictrace.parsers import BucketKeyDecoder, SearchDecoder
from elastictrace.search import Aggregation, Filters, SearchCallFactory, SearchRequest

# 导出核心组件
from elastictrace.core import IndexNameFormatter, InitState, Lazy

# 导出异常
from elastictrace.exceptions import ConfigurationError, ElasticTraceError
from elastictrace.connection import (
    HostResolutionError,
    HttpCallError,
    HttpNotFoundError,
    HttpTimeoutError,
)
from elastictrace.parsers import SearchDecodeError
from elastictrace.template import UnsupportedVersionError

__all__ = [
    # 版本
    "__version__",
    # 存储组件
    "HttpStorage",
    "StorageConfig",
    "CheckResult",
    # HTTP 调用
    "CallFactory",
    "Callback",
    "CallbackCaptor",
    "ConnectionConfig",
    "HostResolver",
    "HttpRequest",
    # 批量写入和模板
    "BulkWriter",
    "BulkResult",
    "IndexTemplateRenderer",
    "SchemaBootstrapper",
    "TemplateBranch",
    # 查询和解析
    "SearchDecoder",
    "BucketKeyDecoder",
    "SearchRequest",
    "SearchCallFactory",
    "Filters",
    "Aggregation",
    # 核心组件
    "IndexNameFormatter",
    "InitState",
    "Lazy",
    # 异常
    "ElasticTraceError",
    "ConfigurationError",
    "HostResolutionError",
    "HttpCallError",
    "HttpNotFoundError",
    "HttpTimeoutError",
    "SearchDecodeError",
    "UnsupportedVersionError",
]
