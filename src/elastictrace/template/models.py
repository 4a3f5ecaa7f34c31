"""索引模板数据模型定义模块."""

from __future__ import annotations

from enum import Enum

from .exceptions import UnsupportedVersionError


class TemplateBranch(Enum):
    """模板渲染分支枚举.

    按集群主版本号选择，两个分支只在精确匹配字符串字段的映射方式上不同。

    Attributes:
        V2: Elasticsearch 2.x，使用 string + not_analyzed
        V5: Elasticsearch 5.x，使用 keyword
    """

    V2 = "2"
    V5 = "5"

    @classmethod
    def from_version(cls, version: str) -> TemplateBranch:
        """根据集群版本号选择分支.

        Args:
            version: 集群自报的版本号，例如 "5.6.0"

        Returns:
            对应的模板分支

        Raises:
            UnsupportedVersionError: 主版本不是 2 或 5 时抛出
        """
        major = (version or "").strip().split(".", 1)[0]
        try:
            return cls(major)
        except ValueError:
            raise UnsupportedVersionError(
                f"只支持 Elasticsearch 2.x 和 5.x，当前版本: {version}"
            ) from None
