"""公共测试 fixtures.

Transport 使用 MagicMock 代替，perform_request 返回与 elastic_transport
ApiResponse 结构相同的 (meta, body) 对象。
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from elastictrace.connection import CallFactory, ConnectionConfig


def _response(status: int = 200, body: bytes = b"{}") -> SimpleNamespace:
    return SimpleNamespace(meta=SimpleNamespace(status=status), body=body)


@pytest.fixture
def make_response():
    """构造 Transport 响应的工厂函数."""
    return _response


@pytest.fixture
def transport() -> MagicMock:
    """默认返回 200 {} 的 Transport mock."""
    mock = MagicMock()
    mock.perform_request.return_value = _response()
    return mock


@pytest.fixture
def http(transport):
    """基于 mock Transport 的调用工厂."""
    factory = CallFactory(
        transport, "http://localhost:9200", ConnectionConfig(max_requests=4)
    )
    yield factory
    factory.close()
