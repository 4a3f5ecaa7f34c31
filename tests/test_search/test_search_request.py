"""查询请求构建单元测试."""

import json

import pytest

from elastictrace.parsers import SearchDecoder
from elastictrace.search import Aggregation, Filters, SearchCallFactory, SearchRequest

LENIENT_QUERY = "allow_no_indices=true&expand_wildcards=open&ignore_unavailable=true"


class TestLenientSearch:
    """宽松查询请求单元测试."""

    def test_parameter_order(self, http):
        """测试查询参数始终按字母序输出."""
        search = SearchCallFactory(http)
        request = search.lenient_search(["zipkin-2016-10-01", "zipkin-2016-10-02"], "span")

        assert request.method == "POST"
        assert request.target == (
            f"/zipkin-2016-10-01,zipkin-2016-10-02/span/_search?{LENIENT_QUERY}"
        )
        assert request.query_parameter_names() == [
            "allow_no_indices",
            "expand_wildcards",
            "ignore_unavailable",
        ]

    def test_parameter_order_from_every_call_site(self, http):
        search = SearchCallFactory(http)
        request = SearchRequest.for_indices_and_type(["zipkin-*"], "span")
        aggregation = SearchRequest.for_indices_and_type(["zipkin-*"], "span").add_aggregation(
            Aggregation("name")
        )

        for http_request in (search.new_request(request), search.new_request(aggregation)):
            assert http_request.target.endswith(f"?{LENIENT_QUERY}")

    def test_empty_indices(self, http):
        with pytest.raises(ValueError):
            SearchCallFactory(http).lenient_search([], "span")

    def test_execute(self, http, transport, make_response):
        transport.perform_request.return_value = make_response(
            body=b'{"hits":{"hits":[{"_source":{"traceId":"a"}}]}}'
        )
        request = SearchRequest.for_indices_and_type(["zipkin-2016-10-01"], "span")

        spans = SearchCallFactory(http).execute(request.term("traceId", "a"), SearchDecoder())

        assert spans == [{"traceId": "a"}]
        args, kwargs = transport.perform_request.call_args
        assert args[1].startswith("/zipkin-2016-10-01/span/_search?")
        assert json.loads(kwargs["body"]) == {
            "size": 10000,
            "query": {"bool": {"filter": [{"term": {"traceId": "a"}}]}},
        }

    def test_submit(self, http):
        request = SearchRequest.for_indices_and_type(["zipkin-2016-10-01"], "span")
        future = SearchCallFactory(http).submit(request, SearchDecoder().default_to_none())
        assert future.result(timeout=5) is None


class TestSearchRequest:
    """SearchRequest 单元测试."""

    def test_default_body(self):
        request = SearchRequest.for_indices_and_type(["a"], "span")
        assert request.to_dict() == {"size": 10000}
        assert request.tag() == "search"

    def test_terms(self):
        request = SearchRequest.for_indices_and_type(["a"], "span").terms(
            "traceId", ["a", "b"]
        )
        assert request.to_dict()["query"] == {
            "bool": {"filter": [{"terms": {"traceId": ["a", "b"]}}]}
        }

    def test_service_name_lowercased(self):
        body = SearchRequest.for_indices_and_type(["a"], "span").service_name("Frontend").to_dict()
        should = body["query"]["bool"]["filter"][0]["bool"]["should"]
        assert should[0]["nested"]["path"] == "annotations"
        assert should[0]["nested"]["query"] == {
            "bool": {"must": [{"term": {"annotations.endpoint.serviceName": "frontend"}}]}
        }
        assert should[1]["nested"]["path"] == "binaryAnnotations"

    def test_filters(self):
        filters = (
            Filters()
            .add_range("timestamp_millis", 1, 2)
            .add_term("name", "get")
            .add_nested_terms({"binaryAnnotations.key": "http.path", "binaryAnnotations.value": "/"})
        )
        body = SearchRequest.for_indices_and_type(["a"], "span").filters(filters).to_dict()

        must = body["query"]["bool"]["filter"][0]["bool"]["must"]
        assert must[0] == {"range": {"timestamp_millis": {"gte": 1, "lte": 2}}}
        assert must[1] == {"term": {"name": "get"}}
        assert must[2]["nested"]["path"] == "binaryAnnotations"
        assert len(must[2]["nested"]["query"]["bool"]["must"]) == 2

    def test_open_ended_range(self):
        filters = Filters().add_range("timestamp_millis", 5)
        assert filters[0].to_dict() == {"range": {"timestamp_millis": {"gte": 5}}}

    def test_empty_nested_terms(self):
        with pytest.raises(ValueError):
            Filters().add_nested_terms({})

    def test_aggregation_mode(self):
        request = SearchRequest.for_indices_and_type(["a"], "span").add_aggregation(
            Aggregation("annotations.endpoint.serviceName", nested_path="annotations")
        )

        body = request.to_dict()

        assert request.tag() == "aggregation"
        assert "size" not in body
        assert body["_source"] is False
        assert body["aggs"] == {
            "annotations.endpoint.serviceName": {
                "nested": {"path": "annotations"},
                "aggs": {
                    "annotations.endpoint.serviceName": {
                        "terms": {"field": "annotations.endpoint.serviceName", "size": 10000}
                    }
                },
            }
        }

    def test_flat_aggregation(self):
        assert Aggregation("name", size=10).to_dict() == {
            "terms": {"field": "name", "size": 10}
        }
