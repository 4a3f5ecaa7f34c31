"""链路存储组件使用示例.

本文件展示了如何使用 HttpStorage 写入和查询链路数据。
运行前需要一个可访问的 Elasticsearch 2.x 或 5.x 集群。
"""

import logging
import time

from elastictrace import (
    Aggregation,
    BucketKeyDecoder,
    CallbackCaptor,
    Filters,
    HttpStorage,
    SearchDecoder,
    SearchRequest,
    StorageConfig,
)

logging.basicConfig(level=logging.INFO)

# 创建存储组件，首次使用时才会连接集群
storage = HttpStorage(
    StorageConfig(
        hosts=["http://localhost:9200"],
        index="zipkin",
        index_replicas=0,  # 单节点测试集群
        flush_on_writes=True,  # 写入后立即可查
    )
)


# ==================== 示例1：健康检查 ====================
def example_check():
    """检查集群健康状态."""
    result = storage.check()
    print(f"集群健康: {result.ok}")
    if not result.ok:
        print(f"  原因: {result.error}")


# ==================== 示例2：批量写入 ====================
def example_bulk_write():
    """把几个 span 写入当天的索引."""
    now = int(time.time() * 1000)
    index = storage.index_name_formatter.index_name_for_timestamp(now)

    spans = [
        {"traceId": "a1", "id": "a1", "name": "get", "timestamp_millis": now},
        {"traceId": "a1", "id": "b2", "name": "query", "timestamp_millis": now},
    ]

    # 获取写入器时会先完成索引模板初始化
    writer = storage.bulk_writer("span")
    for span in spans:
        writer.add(index, span, doc_id=span["id"])

    result = writer.execute()
    print(f"写入 {result.total} 个文档到 {result.indices}，flushed={result.flushed}")


# ==================== 示例3：查询 ====================
def example_search():
    """按 traceId 查询 span."""
    now = int(time.time() * 1000)
    indices = storage.index_name_formatter.indices_for_range(now - 86400000, now)

    request = SearchRequest.for_indices_and_type(indices, "span").term("traceId", "a1")
    spans = storage.search().execute(request, SearchDecoder())
    print(f"查询到 {len(spans)} 个 span")

    # 区分"没有匹配"和"响应异常"
    missing = SearchRequest.for_indices_and_type(indices, "span").term("traceId", "zz")
    print(storage.search().execute(missing, SearchDecoder().default_to_none()))


# ==================== 示例4：异步查询和聚合 ====================
def example_async_aggregation():
    """异步查询一段时间内出现过的 span 名称."""
    now = int(time.time() * 1000)
    indices = storage.index_name_formatter.indices_for_range(now - 86400000, now)

    request = (
        SearchRequest.for_indices_and_type(indices, "span")
        .filters(Filters().add_range("timestamp_millis", now - 86400000, now))
        .add_aggregation(Aggregation("name"))
    )
    captor = CallbackCaptor()
    future = storage.search().submit(request, BucketKeyDecoder("name"), captor)
    print(f"span 名称: {future.result(timeout=10)}")
    print(f"回调次数: {captor.call_count}")


def main():
    """运行所有示例."""
    print("=" * 50)
    print("HttpStorage 使用示例")
    print("=" * 50)

    try:
        print("\n1. 健康检查")
        example_check()

        print("\n2. 批量写入")
        example_bulk_write()

        print("\n3. 查询")
        example_search()

        print("\n4. 异步聚合")
        example_async_aggregation()
    finally:
        storage.close()


if __name__ == "__main__":
    main()
