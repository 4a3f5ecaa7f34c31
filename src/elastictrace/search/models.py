"""查询请求数据模型定义模块.

查询条件使用 elasticsearch.dsl 的 Q/A 对象构建，序列化时转换为 DSL 字典。
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from elasticsearch.dsl import A, Q
from elasticsearch.dsl.query import Query

from ..core.constants import MAX_RESULT_WINDOW


def _service_name_query(service_name: str) -> Query:
    """服务名出现在 annotations 或 binaryAnnotations 的 endpoint 中即匹配."""
    return Q(
        "bool",
        should=[
            Q(
                "nested",
                path="annotations",
                query=Q(
                    "bool",
                    must=[Q("term", **{"annotations.endpoint.serviceName": service_name})],
                ),
            ),
            Q(
                "nested",
                path="binaryAnnotations",
                query=Q(
                    "bool",
                    must=[
                        Q(
                            "term",
                            **{"binaryAnnotations.endpoint.serviceName": service_name},
                        )
                    ],
                ),
            ),
        ],
    )


class Filters(list):
    """过滤条件列表，整体以 bool.must 组合.

    示例:
        filters = (
            Filters()
            .add_range("timestamp_millis", begin, end)
            .add_service_name("frontend")
        )
    """

    def add_range(self, field: str, from_: int, to: int | None = None) -> Filters:
        """闭区间范围条件，to 为 None 表示不设上限."""
        bounds: dict[str, Any] = {"gte": from_}
        if to is not None:
            bounds["lte"] = to
        self.append(Q("range", **{field: bounds}))
        return self

    def add_service_name(self, service_name: str) -> Filters:
        self.append(_service_name_query(service_name.lower()))
        return self

    def add_term(self, field: str, value: str) -> Filters:
        self.append(Q("term", **{field: value}))
        return self

    def add_nested_terms(self, nested_terms: dict[str, str]) -> Filters:
        """同一 nested 路径下的多个 term 条件，必须全部满足.

        nested 路径取最后一个字段名的第一段，例如
        binaryAnnotations.key -> binaryAnnotations。
        """
        if not nested_terms:
            raise ValueError("nested_terms 不能为空")
        terms = [Q("term", **{field: value}) for field, value in nested_terms.items()]
        path = list(nested_terms)[-1].split(".", 1)[0]
        self.append(Q("nested", path=path, query=Q("bool", must=terms)))
        return self


@dataclass
class Aggregation:
    """简单的 terms 分桶聚合.

    Attributes:
        field: 分桶字段，同时作为聚合名
        size: 返回的桶数量上限
        nested_path: 字段位于 nested 对象中时的路径
    """

    field: str
    size: int = MAX_RESULT_WINDOW
    nested_path: str | None = None

    def to_dict(self) -> dict[str, Any]:
        terms = A("terms", field=self.field, size=self.size)
        if self.nested_path is None:
            return terms.to_dict()
        nested = A("nested", path=self.nested_path)
        nested.bucket(self.field, terms)
        return nested.to_dict()


class SearchRequest:
    """查询请求.

    indices 和 type_name 决定请求路径，不进入请求体。

    Attributes:
        indices: 目标索引列表
        type_name: 文档类型
        size: 返回文档数，聚合查询时为 None
        source: 是否返回 _source，None 表示不设置
        query: 查询条件
        aggs: 聚合，按聚合名索引
    """

    def __init__(self, indices: list[str], type_name: str) -> None:
        self.indices = list(indices)
        self.type_name = type_name
        self.size: int | None = MAX_RESULT_WINDOW
        self.source: bool | None = None
        self.query: Query | None = None
        self.aggs: dict[str, Aggregation] | None = None

    @classmethod
    def for_indices_and_type(cls, indices: list[str], type_name: str) -> SearchRequest:
        return cls(indices, type_name)

    def tag(self) -> str:
        return "aggregation" if self.aggs is not None else "search"

    def filters(self, filters: Filters) -> SearchRequest:
        return self._filter(Q("bool", must=list(filters)))

    def service_name(self, service_name: str) -> SearchRequest:
        return self._filter(_service_name_query(service_name.lower()))

    def term(self, field: str, value: str) -> SearchRequest:
        return self._filter(Q("term", **{field: value}))

    def terms(self, field: str, values: list[str]) -> SearchRequest:
        return self._filter(Q("terms", **{field: list(values)}))

    def _filter(self, clause: Query) -> SearchRequest:
        self.query = Q("bool", filter=[clause])
        return self

    def add_aggregation(self, aggregation: Aggregation) -> SearchRequest:
        """添加聚合，返回聚合结果而非文档."""
        self.size = None
        self.source = False
        if self.aggs is None:
            self.aggs = {}
        self.aggs[aggregation.field] = aggregation
        return self

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if self.size is not None:
            body["size"] = self.size
        if self.source is not None:
            body["_source"] = self.source
        if self.query is not None:
            body["query"] = self.query.to_dict()
        if self.aggs is not None:
            body["aggs"] = {name: agg.to_dict() for name, agg in self.aggs.items()}
        return body

    def to_json(self) -> bytes:
        return json.dumps(self.to_dict(), separators=(",", ":")).encode("utf-8")

    def __repr__(self) -> str:
        return f"SearchRequest({','.join(self.indices)}/{self.type_name}, {self.tag()})"
