"""存储组件工具模块.

提供 HttpStorage 类，把调用工厂、索引模板初始化、批量写入和查询组装在一起。
调用工厂在首次使用时创建；任何读写请求构建之前都先完成索引模板初始化。

使用示例:
    from elastictrace.storage import HttpStorage, StorageConfig

    with HttpStorage(StorageConfig(hosts=["http://localhost:9200"])) as storage:
        writer = storage.bulk_writer("span")
        writer.add("zipkin-2016-10-01", {"traceId": "a"})
        writer.execute()
"""

from __future__ import annotations

import logging

from ..bulk import BulkWriter
from ..bulk.tool import flush as flush_index
from ..connection import CallFactory, HttpRequest
from ..core.index_name import IndexNameFormatter
from ..core.lazy import Lazy
from ..exceptions import ElasticTraceError
from ..parsers import read_path
from ..search import SearchCallFactory
from ..template import IndexTemplateRenderer, SchemaBootstrapper
from ..typing import DocumentSerializer
from .exceptions import ClusterHealthError
from .models import CheckResult, StorageConfig

logger = logging.getLogger(__name__)


class HttpStorage:
    """基于 HTTP 的 Elasticsearch 存储组件.

    Attributes:
        config: 存储配置
        index_name_formatter: 按天分区的索引名格式化器
        ensure_template: 索引模板初始化器

    Examples:
        >>> storage = HttpStorage(StorageConfig(index="traces"))
        >>> storage.check()
        CheckResult(ok=True, error=None)
    """

    def __init__(self, config: StorageConfig | None = None) -> None:
        """初始化存储组件，不发起任何网络请求.

        Args:
            config: 存储配置，默认使用 StorageConfig 的默认值
        """
        self.config = config or StorageConfig()
        self.index_name_formatter = IndexNameFormatter(self.config.index)
        self._lazy_http: Lazy[CallFactory] = Lazy(
            self._create_call_factory, name="call-factory"
        )
        self.ensure_template = SchemaBootstrapper(
            self._lazy_http.get,
            IndexTemplateRenderer(
                self.config.index,
                shards=self.config.index_shards,
                replicas=self.config.index_replicas,
                strict_trace_id=self.config.strict_trace_id,
            ),
        )

    def _create_call_factory(self) -> CallFactory:
        return CallFactory.create(self.config.hosts, self.config.connection_config())

    def http(self) -> CallFactory:
        """获取调用工厂，首次调用时阻塞直到索引模板初始化完成."""
        self.ensure_template.ensure()
        return self._lazy_http.get()

    def bulk_writer(
        self,
        type_name: str,
        serializer: DocumentSerializer | None = None,
    ) -> BulkWriter:
        """创建一个批量写入器，继承配置中的 pipeline 和 flush_on_writes."""
        return BulkWriter(
            self.http(),
            type_name,
            pipeline=self.config.pipeline,
            flush_on_writes=self.config.flush_on_writes,
            serializer=serializer,
        )

    def search(self) -> SearchCallFactory:
        return SearchCallFactory(self.http())

    # ============================================================
    # 管理操作（阻塞）
    # ============================================================

    def flush(self, index: str) -> None:
        """对指定索引执行 flush."""
        flush_index(self._lazy_http.get(), index)

    def clear(self) -> None:
        """删除当前前缀下的全部索引，仅用于测试."""
        index = self.index_name_formatter.all_indices()
        http = self._lazy_http.get()

        request = HttpRequest.build("DELETE", index, tag="delete-index")
        http.execute(request, lambda body: None)
        logger.info(f"已删除索引 '{index}'")

        flush_index(http, index)

    def check(self) -> CheckResult:
        """检查集群健康状态.

        读取 /_cluster/health/{index}-* 的 status，RED 视为不健康。
        通信失败或状态无法读取也视为不健康，错误放在结果中返回。

        Returns:
            健康检查结果
        """
        index = self.index_name_formatter.all_indices()
        request = HttpRequest.build(
            "GET", "_cluster", "health", index, tag="get-cluster-health"
        )

        def convert(body: bytes) -> CheckResult:
            status = read_path(body, "status")
            if not isinstance(status, str):
                raise ClusterHealthError(
                    f"无法读取健康状态: {body.decode('utf-8', errors='replace')}"
                )
            if status.upper() == "RED":
                raise ClusterHealthError("健康状态为 RED")
            return CheckResult.OK

        try:
            return self._lazy_http.get().execute(request, convert)
        except ElasticTraceError as e:
            logger.warning(f"集群健康检查失败: {e}")
            return CheckResult.failed(e)

    # ============================================================
    # 生命周期管理
    # ============================================================

    def __enter__(self) -> HttpStorage:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """关闭已创建的调用工厂，未创建时不做任何事."""
        if self._lazy_http.is_ready():
            self._lazy_http.get().close()

    def __repr__(self) -> str:
        return f"HttpStorage({self.config.hosts[0]}, index={self.config.index!r})"
