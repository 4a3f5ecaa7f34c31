"""响应解析异常定义模块."""

from ..exceptions import ElasticTraceError


class ResponseParseError(ElasticTraceError):
    """响应解析基础异常类.

    响应体不是合法 JSON 时抛出。
    """

    pass


class SearchDecodeError(ResponseParseError):
    """查询结果解码异常.

    命中文档无法解码为目标类型时抛出，说明索引中的数据与期望的结构不一致，
    整次调用失败。
    """

    pass
