"""按天分区索引名格式化单元测试."""

import pytest

from elastictrace.core import IndexNameFormatter

# 2016-10-01T00:00:00Z
DAY_START = 1475280000000
ONE_DAY = 86400000


class TestIndexNameFormatter:
    """IndexNameFormatter 单元测试."""

    def test_all_indices(self):
        """测试通配符."""
        assert IndexNameFormatter("zipkin").all_indices() == "zipkin-*"

    def test_index_name_for_timestamp(self):
        """测试时间戳对应的日索引."""
        formatter = IndexNameFormatter("zipkin")
        assert formatter.index_name_for_timestamp(DAY_START) == "zipkin-2016-10-01"
        assert (
            formatter.index_name_for_timestamp(DAY_START + ONE_DAY - 1)
            == "zipkin-2016-10-01"
        )
        assert (
            formatter.index_name_for_timestamp(DAY_START + ONE_DAY)
            == "zipkin-2016-10-02"
        )

    def test_indices_for_range(self):
        """测试跨天范围."""
        formatter = IndexNameFormatter("traces")
        assert formatter.indices_for_range(DAY_START + 1000, DAY_START + 2 * ONE_DAY) == [
            "traces-2016-10-01",
            "traces-2016-10-02",
            "traces-2016-10-03",
        ]

    def test_indices_for_range_same_day(self):
        """测试同一天内的范围."""
        formatter = IndexNameFormatter("zipkin")
        assert formatter.indices_for_range(DAY_START, DAY_START + 10) == [
            "zipkin-2016-10-01"
        ]

    def test_indices_for_reversed_range(self):
        """测试起始大于结束时返回空列表."""
        formatter = IndexNameFormatter("zipkin")
        assert formatter.indices_for_range(DAY_START + ONE_DAY, DAY_START) == []

    def test_parse_date(self):
        """测试日期解析为 UTC 毫秒."""
        assert IndexNameFormatter("zipkin").parse_date("2016-10-01") == DAY_START

    def test_empty_index_rejected(self):
        """测试空前缀."""
        with pytest.raises(ValueError):
            IndexNameFormatter("")
