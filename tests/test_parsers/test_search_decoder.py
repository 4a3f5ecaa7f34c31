"""查询结果流式解码单元测试."""

import json

import pytest

from elastictrace.parsers import (
    BucketKeyDecoder,
    ResponseParseError,
    SearchDecodeError,
    SearchDecoder,
    read_path,
)


def _search_response(*hits) -> bytes:
    return json.dumps(
        {"took": 1, "hits": {"total": len(hits), "hits": list(hits)}}
    ).encode("utf-8")


class TestSearchDecoder:
    """SearchDecoder 单元测试."""

    @pytest.mark.parametrize(
        "body",
        [
            b'{"took":1}',
            b'{"hits":{"total":0}}',
            b'{"hits":{"hits":{"_source":{"a":1}}}}',
            b"",
            _search_response(),
        ],
    )
    def test_default_value(self, body):
        """测试 hits.hits 缺失、不是数组或为空时返回默认值."""
        assert SearchDecoder().decode(body) == []
        assert SearchDecoder().default_to_none().decode(body) is None

    def test_skips_hits_without_source(self):
        """测试缺少 _source 的命中被跳过，顺序与响应一致."""
        body = _search_response(
            {"_id": "1", "_source": {"traceId": "a"}},
            {"_id": "2"},
            {"_id": "3", "_source": {"traceId": "c"}},
        )

        assert SearchDecoder()(body) == [{"traceId": "a"}, {"traceId": "c"}]

    def test_document_decoder(self):
        body = _search_response({"_source": {"name": "get"}}, {"_source": {"name": "post"}})

        decoder = SearchDecoder(lambda source: source["name"].upper())

        assert decoder(body) == ["GET", "POST"]

    def test_ignores_unrelated_fields(self):
        body = (
            b'{"_shards":{"failed":0},"hits":{"max_score":1.5,'
            b'"hits":[{"_score":1.5,"_source":{"duration":1.25}}]},"timed_out":false}'
        )
        assert SearchDecoder().decode(body) == [{"duration": 1.25}]

    def test_document_failure_fails_whole_call(self):
        body = _search_response({"_source": {"name": "ok"}}, {"_source": {}})

        with pytest.raises(SearchDecodeError, match="name"):
            SearchDecoder(lambda source: source["name"]).decode(body)

    def test_malformed_json(self):
        with pytest.raises(SearchDecodeError):
            SearchDecoder().decode(b'{"hits":{"hits":[{"_source":')

    def test_iter_documents_is_lazy(self):
        body = _search_response({"_source": {"n": 1}}, {"_source": {"n": 2}})
        documents = SearchDecoder().iter_documents(body)
        assert next(documents) == {"n": 1}
        assert next(documents) == {"n": 2}

    def test_null_source_skipped(self):
        body = _search_response({"_source": None}, {"_source": {"n": 1}})
        assert SearchDecoder().decode(body) == [{"n": 1}]


class TestReadPath:
    """read_path 单元测试."""

    def test_reads_nested_value(self):
        assert read_path(b'{"version":{"number":"5.6.0"}}', "version", "number") == "5.6.0"

    def test_missing_path(self):
        assert read_path(b'{"name":"node"}', "version", "number") is None
        assert read_path(b"", "status") is None

    def test_malformed(self):
        with pytest.raises(ResponseParseError):
            read_path(b"not json", "status")


class TestBucketKeyDecoder:
    """BucketKeyDecoder 单元测试."""

    def test_terms_buckets(self):
        body = (
            b'{"aggregations":{"name":{"buckets":'
            b'[{"key":"get","doc_count":2},{"key":"post","doc_count":1}]}}}'
        )
        assert BucketKeyDecoder("name")(body) == ["get", "post"]

    def test_nested_buckets(self):
        body = json.dumps(
            {
                "aggregations": {
                    "annotations.endpoint.serviceName": {
                        "annotations.endpoint.serviceName": {
                            "buckets": [{"key": "frontend"}, {"key": "backend"}]
                        }
                    }
                }
            }
        ).encode()
        decoder = BucketKeyDecoder("annotations.endpoint.serviceName", nested=True)
        assert decoder(body) == ["frontend", "backend"]

    def test_missing_aggregation(self):
        assert BucketKeyDecoder("name")(b'{"hits":{"hits":[]}}') == []
