"""批量写入核心工具类."""

from __future__ import annotations

import json
import logging
from concurrent.futures import Future
from typing import Any

from ..connection import CallFactory, Callback, HttpRequest
from ..core.constants import APPLICATION_NDJSON
from ..typing import DocumentSerializer
from .exceptions import BulkValidationError
from .models import BulkIndexAction, BulkResult

logger = logging.getLogger(__name__)


def json_serializer(document: Any) -> bytes:
    """默认文档序列化：bytes/str 原样使用，其他对象编码为紧凑 JSON."""
    if isinstance(document, bytes):
        return document
    if isinstance(document, str):
        return document.encode("utf-8")
    return json.dumps(document, ensure_ascii=False, separators=(",", ":")).encode(
        "utf-8"
    )


def _metadata_line(action: BulkIndexAction) -> bytes:
    return json.dumps(action.metadata(), separators=(",", ":")).encode("utf-8")


def flush(http: CallFactory, index: str) -> None:
    """对指定索引（可逗号分隔多个）执行 flush，阻塞调用."""
    request = HttpRequest.build("POST", index, "_flush", tag="flush-index", body=b"")
    http.execute(request, lambda body: None)


class BulkWriter:
    """批量写入核心工具类.

    把一批文档编码为一次 bulk 请求，每个文档写两行：action/metadata 行指明目标索引、
    类型和可选ID，随后是文档内容，每行以换行结尾。整个批次作为一次 POST 发送，
    成功或失败都针对整个批次，不解析响应中逐条文档的结果。

    Args:
        http: HTTP 调用工厂
        type_name: 文档类型，同时决定请求标签 index-<type_name>
        pipeline: ingest pipeline 名称，对整批文档统一生效（仅 ES 5.x）
        flush_on_writes: 写入成功后是否对涉及的索引执行一次 flush，用于测试
        serializer: 文档序列化函数，默认编码为紧凑 JSON
    """

    def __init__(
        self,
        http: CallFactory,
        type_name: str,
        pipeline: str | None = None,
        flush_on_writes: bool = False,
        serializer: DocumentSerializer | None = None,
    ) -> None:
        if not type_name:
            raise BulkValidationError("type_name 不能为空")
        self.http = http
        self.type_name = type_name
        self.tag = f"index-{type_name}"
        self.pipeline = pipeline
        self.flush_on_writes = flush_on_writes
        self._serializer = serializer or json_serializer

        self._body = bytearray()
        self._actions: list[BulkIndexAction] = []
        self._indices: dict[str, None] = {}

    def add(
        self,
        index_name: str,
        document: Any,
        doc_id: str | None = None,
    ) -> BulkWriter:
        """追加一个文档到批次.

        Args:
            index_name: 目标索引名
            document: 文档内容
            doc_id: 文档ID，不指定则由 ES 生成

        Returns:
            写入器自身（支持链式调用）
        """
        if not index_name:
            raise BulkValidationError("index_name 不能为空")

        action = BulkIndexAction(
            index_name=index_name,
            type_name=self.type_name,
            document=document,
            doc_id=doc_id,
        )
        self._body += _metadata_line(action)
        self._body += b"\n"
        self._body += self._serializer(document)
        self._body += b"\n"

        self._actions.append(action)
        self._indices[index_name] = None
        return self

    @property
    def actions(self) -> list[BulkIndexAction]:
        return list(self._actions)

    @property
    def indices(self) -> list[str]:
        """批次涉及的索引，按首次出现顺序去重."""
        return list(self._indices)

    def __len__(self) -> int:
        return len(self._actions)

    def build_request(self) -> HttpRequest:
        """构建 bulk 请求.

        Returns:
            POST /_bulk 请求，配置了 pipeline 时带 pipeline 查询参数

        Raises:
            BulkValidationError: 批次为空时抛出
        """
        if not self._actions:
            raise BulkValidationError(f"{self.tag}: 批次为空，没有可写入的文档")

        params = [("pipeline", self.pipeline)] if self.pipeline else []
        return HttpRequest.build(
            "POST",
            "_bulk",
            tag=self.tag,
            params=params,
            body=bytes(self._body),
            content_type=APPLICATION_NDJSON,
        )

    def execute(self) -> BulkResult:
        """同步执行批量写入.

        Returns:
            批量写入结果

        Raises:
            HttpCallError: bulk 或 flush 请求失败
        """
        return self.http.execute(self.build_request(), self._on_response)

    def submit(self, callback: Callback[BulkResult] | None = None) -> Future[BulkResult]:
        """异步执行批量写入.

        Args:
            callback: 可选回调，恰好触发一次

        Returns:
            持有 BulkResult 或异常的 Future
        """
        return self.http.submit(self.build_request(), self._on_response, callback)

    def _on_response(self, body: bytes) -> BulkResult:
        result = BulkResult(
            total=len(self._actions),
            indices=self.indices,
            response=body,
        )
        logger.info(
            f"{self.tag}: 写入 {result.total} 个文档到 {len(result.indices)} 个索引"
        )

        if self.flush_on_writes and result.indices:
            flush(self.http, ",".join(result.indices))
            result.flushed = True
        return result

    def __repr__(self) -> str:
        return f"BulkWriter(type={self.type_name!r}, size={len(self)})"
