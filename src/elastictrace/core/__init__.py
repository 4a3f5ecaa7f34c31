"""核心组件模块."""

from elastictrace.core.index_name import IndexNameFormatter
from elastictrace.core.lazy import InitState, Lazy

__all__ = [
    "IndexNameFormatter",
    "InitState",
    "Lazy",
]
