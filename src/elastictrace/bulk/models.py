"""批量写入数据模型定义模块."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class BulkIndexAction:
    """批量写入中的单个索引动作.

    Attributes:
        index_name: 目标索引名
        type_name: 文档类型
        document: 文档内容
        doc_id: 文档ID（可选，不指定则由 ES 自动生成）
    """

    index_name: str
    type_name: str
    document: Any
    doc_id: str | None = None

    def metadata(self) -> dict[str, Any]:
        """生成 bulk 协议中的 action/metadata 行内容."""
        meta: dict[str, Any] = {"_index": self.index_name, "_type": self.type_name}
        if self.doc_id is not None:
            meta["_id"] = self.doc_id
        return {"index": meta}


@dataclass
class BulkResult:
    """批量写入结果数据类.

    结果只反映整个批次的传输层成功与否，响应中逐条文档的结果不做解析。
    需要时调用方可以自行检查 response。

    Attributes:
        total: 批次内文档数
        indices: 批次涉及的索引，按首次出现顺序
        flushed: 写入后是否执行了 flush
        response: bulk 接口的原始响应
    """

    total: int = 0
    indices: list[str] = field(default_factory=list)
    flushed: bool = False
    response: bytes = b""
