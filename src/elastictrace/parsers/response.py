"""
ES 查询结果流式解析器.

直接定位到需要的字段逐个解码，不把整个响应构建为内存中的 JSON 树.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Iterator
from typing import Any, Generic, TypeVar

import ijson

from elastictrace.parsers.exceptions import ResponseParseError, SearchDecodeError
from elastictrace.typing import DocumentDecoder

# 模块级别日志记录器
logger = logging.getLogger(__name__)

T = TypeVar("T")

# hits.hits 数组中每个元素的 _source 字段
_SOURCE_PREFIX = "hits.hits.item._source"


def _is_blank(body: bytes) -> bool:
    return not body or not body.strip()


def read_path(body: bytes, *path: str) -> Any | None:
    """
    流式读取响应中指定路径的值.

    Args:
        body: 原始响应字节
        path: 逐级字段名，例如 ("version", "number")

    Returns:
        路径上的值，路径不存在或响应体为空时返回 None

    Raises:
        ResponseParseError: 响应体不是合法 JSON

    示例:
        version = read_path(body, "version", "number")
    """
    if _is_blank(body):
        return None
    prefix = ".".join(path)
    try:
        for value in ijson.items(io.BytesIO(body), prefix, use_float=True):
            return value
    except ijson.JSONError as e:
        raise ResponseParseError(f"读取 .{prefix} 失败: {e}") from e
    return None


class SearchDecoder(Generic[T]):
    """
    查询结果解码器.

    流式定位 hits.hits 数组，逐个解码其中的 _source 文档。

    特性:
    - 流式解析：不解析与命中文档无关的字段
    - 跳过缺失：没有 _source 的命中直接跳过
    - 默认值可选：空结果返回空列表，或调用 default_to_none() 后返回 None，
      便于调用方区分"没有匹配"和"响应异常"

    使用示例:
        decoder = SearchDecoder(Span.from_dict)
        spans = http.execute(request, decoder)

        # 空结果返回 None
        decoder = SearchDecoder(Span.from_dict).default_to_none()
    """

    def __init__(self, document_decoder: DocumentDecoder | None = None) -> None:
        """
        初始化解码器.

        Args:
            document_decoder: 文档解码函数，将 _source 字典转换为业务对象，
                默认原样返回字典
        """
        self._document_decoder = document_decoder
        self._default_to_none = False

    def default_to_none(self) -> SearchDecoder[T]:
        """结果为空时返回 None 而不是空列表."""
        self._default_to_none = True
        return self

    @property
    def default_value(self) -> list[T] | None:
        return None if self._default_to_none else []

    def iter_documents(self, body: bytes) -> Iterator[T]:
        """
        按响应顺序惰性产出解码后的文档.

        Args:
            body: 原始响应字节

        Yields:
            解码后的文档

        Raises:
            SearchDecodeError: 响应不是合法 JSON 或某个文档解码失败
        """
        if _is_blank(body):
            return
        sources = ijson.items(io.BytesIO(body), _SOURCE_PREFIX, use_float=True)
        while True:
            try:
                source = next(sources)
            except StopIteration:
                return
            except ijson.JSONError as e:
                raise SearchDecodeError(f"查询结果不是合法 JSON: {e}") from e
            if source is None:
                continue
            yield self._decode_document(source)

    def decode(self, body: bytes) -> list[T] | None:
        """
        解码全部命中文档.

        hits.hits 不存在、不是数组或没有任何带 _source 的命中时返回默认值。

        Args:
            body: 原始响应字节

        Returns:
            文档列表或默认值
        """
        result = list(self.iter_documents(body))
        if not result:
            return self.default_value
        logger.debug(f"解码得到 {len(result)} 个文档")
        return result

    __call__ = decode

    def _decode_document(self, source: Any) -> T:
        if self._document_decoder is None:
            return source
        try:
            return self._document_decoder(source)
        except Exception as e:
            raise SearchDecodeError(f"文档解码失败: {e}") from e


class BucketKeyDecoder:
    """
    terms 聚合桶键解码器.

    流式读取 aggregations.<name>.buckets[*].key，nested 聚合时多一层同名子聚合.

    使用示例:
        decoder = BucketKeyDecoder("annotations.endpoint.serviceName", nested=True)
        names = http.execute(request, decoder)
    """

    def __init__(self, name: str, nested: bool = False) -> None:
        path = f"aggregations.{name}.{name}" if nested else f"aggregations.{name}"
        self._prefix = f"{path}.buckets.item.key"

    def __call__(self, body: bytes) -> list[Any]:
        if _is_blank(body):
            return []
        try:
            return list(ijson.items(io.BytesIO(body), self._prefix, use_float=True))
        except ijson.JSONError as e:
            raise ResponseParseError(f"聚合结果不是合法 JSON: {e}") from e
