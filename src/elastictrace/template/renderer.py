"""按集群版本渲染索引模板."""

from __future__ import annotations

import json
from typing import Any

from .exceptions import UnsupportedVersionError
from .models import TemplateBranch

# 精确匹配（不分词）字符串字段的映射片段
_KEYWORD_MAPPINGS: dict[TemplateBranch, dict[str, Any]] = {
    TemplateBranch.V2: {"type": "string", "index": "not_analyzed"},
    TemplateBranch.V5: {"type": "keyword"},
}

# 非严格 traceId 模式下，5.x 需要为分词字段额外开启 fielddata
_TRACE_ID_FIELDDATA: dict[TemplateBranch, bool] = {
    TemplateBranch.V2: False,
    TemplateBranch.V5: True,
}


class IndexTemplateRenderer:
    """索引模板渲染器.

    模板以 Python 结构构建，按分支替换字段映射片段后序列化为 JSON。

    Args:
        index: 索引名前缀，模板匹配 {index}-*
        shards: 主分片数
        replicas: 副本数
        strict_trace_id: 为 True 时 traceId 精确匹配；为 False 时使用
            traceId_analyzer 同时匹配 64 位和 128 位 traceId 的低 64 位

    Examples:
        >>> renderer = IndexTemplateRenderer("zipkin", shards=5, replicas=1)
        >>> body = renderer.render_json(TemplateBranch.V5)
    """

    def __init__(
        self,
        index: str,
        shards: int = 5,
        replicas: int = 1,
        strict_trace_id: bool = True,
    ) -> None:
        self.index = index
        self.shards = shards
        self.replicas = replicas
        self.strict_trace_id = strict_trace_id

    def render(self, branch: TemplateBranch) -> dict[str, Any]:
        """渲染指定分支的模板.

        Raises:
            UnsupportedVersionError: 分支不在支持列表中
        """
        if branch not in _KEYWORD_MAPPINGS:
            raise UnsupportedVersionError(f"不支持的模板分支: {branch}")
        keyword = _KEYWORD_MAPPINGS[branch]

        return {
            "template": f"{self.index}-*",
            "settings": {
                "index.number_of_shards": self.shards,
                "index.number_of_replicas": self.replicas,
                "index.requests.cache.enable": True,
                "analysis": {
                    "analyzer": {
                        "traceId_analyzer": {
                            "type": "custom",
                            "tokenizer": "keyword",
                            "filter": "traceId_filter",
                        }
                    },
                    "filter": {
                        "traceId_filter": {
                            "type": "pattern_capture",
                            "patterns": ["([0-9a-f]{1,16})$"],
                            "preserve_original": True,
                        }
                    },
                },
            },
            "mappings": {
                "_default_": {
                    "dynamic_templates": [
                        {
                            "strings": {
                                "mapping": {**keyword, "ignore_above": 256},
                                "match_mapping_type": "string",
                                "match": "*",
                            }
                        },
                        {
                            "value": {
                                "match": "value",
                                "mapping": {
                                    "match_mapping_type": "string",
                                    **keyword,
                                    "ignore_above": 256,
                                    "ignore_malformed": True,
                                },
                            }
                        },
                        {
                            "annotations": {
                                "match": "annotations",
                                "mapping": {"type": "nested"},
                            }
                        },
                        {
                            "binaryAnnotations": {
                                "match": "binaryAnnotations",
                                "mapping": {"type": "nested"},
                            }
                        },
                    ],
                    "_all": {"enabled": False},
                },
                "span": {
                    "properties": {
                        "traceId": self._trace_id_mapping(branch),
                        "timestamp_millis": {
                            "type": "date",
                            "format": "epoch_millis",
                        },
                        "annotations": {"type": "nested"},
                        "binaryAnnotations": {"type": "nested"},
                    }
                },
            },
        }

    def render_json(self, branch: TemplateBranch) -> str:
        return json.dumps(self.render(branch), indent=2)

    def _trace_id_mapping(self, branch: TemplateBranch) -> dict[str, Any]:
        if self.strict_trace_id:
            return dict(_KEYWORD_MAPPINGS[branch])

        mapping: dict[str, Any] = {"type": "string"}
        if _TRACE_ID_FIELDDATA[branch]:
            mapping["fielddata"] = "true"
        mapping["analyzer"] = "traceId_analyzer"
        return mapping
