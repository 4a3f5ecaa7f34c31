"""结果解析器模块.

提供 ES 响应的流式解析功能.
"""

from elastictrace.parsers.exceptions import ResponseParseError, SearchDecodeError
from elastictrace.parsers.response import BucketKeyDecoder, SearchDecoder, read_path

__all__ = [
    "BucketKeyDecoder",
    "SearchDecoder",
    "read_path",
    "ResponseParseError",
    "SearchDecodeError",
]
