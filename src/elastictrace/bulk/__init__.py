"""批量写入模块.

把一批可能发往不同索引的文档编码为一次 bulk 请求：
- 每个文档一行 action/metadata 加一行文档内容
- 可选 ingest pipeline，对整批文档统一生效
- 可选写入后 flush，便于测试和校验

示例用法:
    >>> from elastictrace.bulk import BulkWriter
    >>> writer = BulkWriter(http, "span")
    >>> writer.add("zipkin-2016-10-01", {"traceId": "a"})
    >>> writer.add("zipkin-2016-10-02", {"traceId": "b"}, doc_id="b")
    >>> result = writer.execute()
"""

from .exceptions import BulkOperationError, BulkValidationError
from .models import BulkIndexAction, BulkResult
from .tool import BulkWriter, json_serializer

__all__ = [
    "BulkIndexAction",
    "BulkResult",
    "BulkWriter",
    "json_serializer",
    "BulkOperationError",
    "BulkValidationError",
]
