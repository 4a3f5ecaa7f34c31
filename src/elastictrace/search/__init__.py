"""查询请求模块.

提供查询请求构建（基于 elasticsearch.dsl）和宽松模式的查询调用.
"""

from .models import Aggregation, Filters, SearchRequest
from .tool import SearchCallFactory

__all__ = [
    "Aggregation",
    "Filters",
    "SearchRequest",
    "SearchCallFactory",
]
