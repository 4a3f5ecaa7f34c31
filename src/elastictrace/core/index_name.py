"""按天分区的索引名格式化模块."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from .constants import DATE_FORMAT

_ONE_DAY = timedelta(days=1)


class IndexNameFormatter:
    """按天分区的索引名格式化器.

    索引名格式为 ``{index}-yyyy-MM-dd``，日期统一按 UTC 计算。

    Args:
        index: 索引名前缀

    Examples:
        >>> formatter = IndexNameFormatter("zipkin")
        >>> formatter.all_indices()
        'zipkin-*'
        >>> formatter.index_name_for_timestamp(1475280000000)
        'zipkin-2016-10-01'
    """

    def __init__(self, index: str) -> None:
        if not index:
            raise ValueError("index 前缀不能为空")
        self.index = index

    def all_indices(self) -> str:
        """匹配该前缀下全部索引的通配符."""
        return f"{self.index}-*"

    def index_name_for_timestamp(self, timestamp_millis: int) -> str:
        """返回时间戳（毫秒）所在日期的索引名."""
        day = datetime.fromtimestamp(timestamp_millis / 1000, tz=UTC)
        return f"{self.index}-{day.strftime(DATE_FORMAT)}"

    def indices_for_range(self, begin_millis: int, end_millis: int) -> list[str]:
        """返回覆盖 [begin, end] 时间范围的全部日索引名，按日期升序.

        Args:
            begin_millis: 起始时间戳（毫秒）
            end_millis: 结束时间戳（毫秒）

        Returns:
            索引名列表，begin > end 时返回空列表
        """
        begin = datetime.fromtimestamp(begin_millis / 1000, tz=UTC).date()
        end = datetime.fromtimestamp(end_millis / 1000, tz=UTC).date()

        indices: list[str] = []
        current = begin
        while current <= end:
            indices.append(f"{self.index}-{current.strftime(DATE_FORMAT)}")
            current += _ONE_DAY
        return indices

    def parse_date(self, date_string: str) -> int:
        """将 yyyy-MM-dd 解析为当日 0 点（UTC）的毫秒时间戳."""
        parsed = datetime.strptime(date_string, DATE_FORMAT).replace(tzinfo=UTC)
        return int(parsed.timestamp() * 1000)

    def __repr__(self) -> str:
        return f"IndexNameFormatter(index={self.index!r})"
