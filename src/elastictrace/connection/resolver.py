"""伪 DNS 解析模块.

将一组集群节点 URL 合并为一个逻辑主机：IP 地址字面量直接返回，主机名在每次解析时
通过后备解析器实时解析，结果取并集。HTTP 客户端据此把 N 个节点当作一个虚拟主机，
实现基于 DNS 的简单轮询负载均衡。
"""

from __future__ import annotations

import ipaddress
import logging
import socket
from collections.abc import Callable, Iterable
from urllib.parse import urlsplit

from .exceptions import ConnectionConfigError, HostResolutionError
from .models import Endpoint

logger = logging.getLogger(__name__)

_DEFAULT_PORTS = {"http": 80, "https": 443}

# 主机名 -> 地址列表
Resolver = Callable[[str], list[str]]


def system_resolver(hostname: str) -> list[str]:
    """通过系统 DNS 解析主机名，按返回顺序去重."""
    try:
        infos = socket.getaddrinfo(hostname, None, type=socket.SOCK_STREAM)
    except OSError as e:
        raise HostResolutionError(f"无法解析主机名 '{hostname}': {e}") from e
    return list(dict.fromkeys(info[4][0] for info in infos))


def parse_endpoint(url: str) -> Endpoint:
    """解析单个节点 URL.

    Args:
        url: http://host:port 或 https://host:port 格式的地址

    Returns:
        Endpoint 实例

    Raises:
        ConnectionConfigError: URL 缺少协议或主机，或协议不受支持
    """
    parts = urlsplit(url.strip())
    scheme = parts.scheme.lower()
    if scheme not in _DEFAULT_PORTS:
        raise ConnectionConfigError(f"不支持的协议 '{parts.scheme}'，地址: {url}")
    if not parts.hostname:
        raise ConnectionConfigError(f"地址中缺少主机: {url}")
    try:
        port = parts.port
    except ValueError as e:
        raise ConnectionConfigError(f"端口不合法: {url}") from e

    return Endpoint(
        scheme=scheme,
        host=parts.hostname,
        port=port if port is not None else _DEFAULT_PORTS[scheme],
        path_prefix=parts.path.rstrip("/"),
    )


def parse_endpoints(urls: Iterable[str]) -> list[Endpoint]:
    """解析并校验节点 URL 列表.

    所有地址必须使用同一协议和同一端口，多个节点时只支持 http。
    重复地址只保留第一次出现。

    Args:
        urls: 节点 URL 列表

    Returns:
        按配置顺序排列的 Endpoint 列表

    Raises:
        ConnectionConfigError: 列表为空、协议或端口不一致、多节点使用 https 时抛出
    """
    urls = [urls] if isinstance(urls, str) else list(urls)
    endpoints = list(dict.fromkeys(parse_endpoint(url) for url in urls))
    if not endpoints:
        raise ConnectionConfigError("hosts 不能为空，请提供至少一个 ES 节点地址")

    schemes = {endpoint.scheme for endpoint in endpoints}
    if len(schemes) != 1:
        raise ConnectionConfigError(f"多个节点只支持同一种协议: {urls}")
    ports = {endpoint.port for endpoint in endpoints}
    if len(ports) != 1:
        raise ConnectionConfigError(f"多个节点只支持同一个端口: {urls}")
    # 多节点时连接池按解析出的 IP 建立连接，https 证书的主机名校验无法通过
    if len(endpoints) > 1 and schemes != {"http"}:
        raise ConnectionConfigError(f"多个节点只支持 http 协议: {urls}")

    return endpoints


def _parse_ip(host: str) -> str | None:
    """不做任何网络请求，将 IP 字面量规范化，非 IP 返回 None."""
    try:
        return str(ipaddress.ip_address(host))
    except ValueError:
        return None


class HostResolver:
    """伪 DNS 解析器.

    将节点列表划分为 IP 地址字面量和主机名两部分。任意查询都返回全部 IP 地址，
    再拼接每个主机名通过后备解析器实时解析的结果。

    Args:
        urls: 节点 URL 列表，须共享协议和端口
        fallback: 主机名后备解析器，默认使用系统 DNS

    Raises:
        ConnectionConfigError: 节点列表不合法时抛出

    Examples:
        >>> resolver = HostResolver(["http://10.0.0.1:9200", "http://10.0.0.2:9200"])
        >>> resolver.resolve()
        ['10.0.0.1', '10.0.0.2']
    """

    def __init__(
        self,
        urls: Iterable[str],
        fallback: Resolver | None = None,
    ) -> None:
        self.endpoints = parse_endpoints(urls)
        self.scheme = self.endpoints[0].scheme
        self.port = self.endpoints[0].port
        self._fallback = fallback or system_resolver

        addresses: dict[str, None] = {}
        hostnames: dict[str, None] = {}
        for endpoint in self.endpoints:
            address = _parse_ip(endpoint.host)
            if address is not None:
                addresses[address] = None
            else:
                hostnames[endpoint.host] = None
        self.addresses = list(addresses)
        self.hostnames = list(hostnames)

    def resolve(self, hostname: str | None = None) -> list[str]:
        """解析逻辑主机.

        Args:
            hostname: 查询的主机名，不影响结果，所有查询返回同一组地址

        Returns:
            IP 地址字面量加主机名实时解析结果

        Raises:
            HostResolutionError: 某个主机名解析失败或没有得到任何地址
        """
        result = list(self.addresses)
        for host in self.hostnames:
            resolved = self._fallback(host)
            if not resolved:
                raise HostResolutionError(f"主机名 '{host}' 没有解析到任何地址")
            result.extend(resolved)

        logger.debug(f"解析 {hostname or '逻辑主机'} 得到地址: {result}")
        return result

    __call__ = resolve

    def is_static(self) -> bool:
        """是否只包含 IP 字面量（解析结果固定不变）."""
        return not self.hostnames

    def __repr__(self) -> str:
        if self.is_static():
            return f"HostResolver(static={self.addresses})"
        return f"HostResolver(addresses={self.addresses}, hostnames={self.hostnames})"
