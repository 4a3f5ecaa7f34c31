"""elastictrace 类型定义模块."""

from collections.abc import Callable
from typing import Any, TypeVar

T = TypeVar("T")

# 响应体转换函数类型
# 格式: 原始响应字节 -> 解码结果
BodyConverter = Callable[[bytes], T]

# 文档字典类型
DocumentDict = dict[str, Any]

# 文档解码函数类型
# 格式: _source 字典 -> 业务对象
DocumentDecoder = Callable[[DocumentDict], Any]

# 文档序列化函数类型
DocumentSerializer = Callable[[Any], bytes]
