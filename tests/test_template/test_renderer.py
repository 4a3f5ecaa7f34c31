"""索引模板渲染单元测试."""

import json

import pytest

from elastictrace.exceptions import ConfigurationError
from elastictrace.template import (
    IndexTemplateRenderer,
    TemplateBranch,
    UnsupportedVersionError,
)


class TestTemplateBranch:
    """TemplateBranch.from_version 单元测试."""

    @pytest.mark.parametrize(
        "version,branch",
        [
            ("2.4.1", TemplateBranch.V2),
            ("2.0.0-beta1", TemplateBranch.V2),
            ("5.6.0", TemplateBranch.V5),
            ("5.0.0-alpha5", TemplateBranch.V5),
        ],
    )
    def test_supported(self, version, branch):
        assert TemplateBranch.from_version(version) is branch

    @pytest.mark.parametrize("version", ["1.7.0", "6.0.0", "50.1.0", "", "x.y"])
    def test_unsupported(self, version):
        with pytest.raises(UnsupportedVersionError) as exc_info:
            TemplateBranch.from_version(version)
        assert isinstance(exc_info.value, ConfigurationError)


class TestIndexTemplateRenderer:
    """IndexTemplateRenderer 单元测试."""

    def test_branches_differ_only_in_keyword_fragment(self):
        """测试 2.x 和 5.x 模板只在精确匹配字段映射片段上不同."""
        renderer = IndexTemplateRenderer("zipkin")
        v2 = json.dumps(renderer.render(TemplateBranch.V2))
        v5 = json.dumps(renderer.render(TemplateBranch.V5))

        assert v2 != v5
        assert (
            v5.replace('"type": "keyword"', '"type": "string", "index": "not_analyzed"')
            == v2
        )

    def test_settings(self):
        template = IndexTemplateRenderer("traces", shards=3, replicas=0).render(
            TemplateBranch.V5
        )
        assert template["template"] == "traces-*"
        assert template["settings"]["index.number_of_shards"] == 3
        assert template["settings"]["index.number_of_replicas"] == 0

    def test_strict_trace_id(self):
        template = IndexTemplateRenderer("zipkin").render(TemplateBranch.V5)
        assert template["mappings"]["span"]["properties"]["traceId"] == {
            "type": "keyword"
        }

    def test_lenient_trace_id(self):
        """测试非严格模式下 traceId 使用分析器，5.x 额外开启 fielddata."""
        renderer = IndexTemplateRenderer("zipkin", strict_trace_id=False)

        v2 = renderer.render(TemplateBranch.V2)["mappings"]["span"]["properties"]
        v5 = renderer.render(TemplateBranch.V5)["mappings"]["span"]["properties"]

        assert v2["traceId"] == {"type": "string", "analyzer": "traceId_analyzer"}
        assert v5["traceId"] == {
            "type": "string",
            "fielddata": "true",
            "analyzer": "traceId_analyzer",
        }

    def test_render_json_is_valid_json(self):
        renderer = IndexTemplateRenderer("zipkin")
        body = renderer.render_json(TemplateBranch.V2)
        assert json.loads(body) == renderer.render(TemplateBranch.V2)

    def test_unknown_branch_rejected(self):
        with pytest.raises(UnsupportedVersionError):
            IndexTemplateRenderer("zipkin").render("6")
