"""查询调用工具模块."""

from __future__ import annotations

import logging
from concurrent.futures import Future
from typing import TypeVar

from ..connection import CallFactory, Callback, HttpRequest
from ..core.constants import LENIENT_SEARCH_PARAMS
from ..typing import BodyConverter
from .models import SearchRequest

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SearchCallFactory:
    """查询调用工厂.

    把 SearchRequest 转换为宽松模式的 _search 请求：索引不存在、被关闭或通配符
    未匹配时不报错，返回空结果。

    Args:
        http: HTTP 调用工厂

    Examples:
        >>> search = SearchCallFactory(http)
        >>> request = SearchRequest.for_indices_and_type(["zipkin-2016-10-01"], "span")
        >>> spans = search.execute(request.term("traceId", "a"), SearchDecoder())
    """

    def __init__(self, http: CallFactory) -> None:
        self.http = http

    def lenient_search(
        self,
        indices: list[str],
        type_name: str,
        tag: str = "search",
        body: bytes | None = None,
    ) -> HttpRequest:
        """构建宽松查询请求.

        查询参数固定按字母序输出：allow_no_indices、expand_wildcards、
        ignore_unavailable，便于下游做请求签名。

        Raises:
            ValueError: 索引列表为空时抛出
        """
        if not indices:
            raise ValueError("indices 不能为空")
        return HttpRequest.build(
            "POST",
            ",".join(indices),
            type_name,
            "_search",
            tag=tag,
            params=LENIENT_SEARCH_PARAMS,
            body=body,
        )

    def new_request(self, search: SearchRequest) -> HttpRequest:
        return self.lenient_search(
            search.indices, search.type_name, tag=search.tag(), body=search.to_json()
        )

    def execute(self, search: SearchRequest, converter: BodyConverter[T]) -> T:
        """同步执行查询."""
        return self.http.execute(self.new_request(search), converter)

    def submit(
        self,
        search: SearchRequest,
        converter: BodyConverter[T],
        callback: Callback[T] | None = None,
    ) -> Future[T]:
        """异步执行查询."""
        request = self.new_request(search)
        logger.debug(f"提交查询: {search!r}")
        return self.http.submit(request, converter, callback)
