"""
Client address resolution from proxy headers and connection info.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Sequence, Union

from starlette.requests import Request

PROXY_HEADERS: tuple[str, ...] = (
    "x-forwarded-for",
    "x-real-ip",
    "cf-connecting-ip",
    "true-client-ip",
    "x-client-ip",
)

IPV4_MAPPED_PREFIX = "::ffff:"
IPV4_LOOPBACK = "127.0.0.1"
IPV6_LOOPBACK = "::1"

HeaderValue = Union[str, Sequence[str], None]


@dataclass(frozen=True)
class IpInfo:
    ipv4: str
    ipv6: str
    display: str


def _split(value: HeaderValue) -> list[str]:
    if not value:
        return []
    values = [value] if isinstance(value, str) else list(value)
    return [ip.strip() for raw in values for ip in str(raw).split(",")]


def resolve_client_ip(
    headers: Mapping[str, HeaderValue],
    remote_address: Optional[str] = None,
    resolved_address: Optional[str] = None,
) -> IpInfo:
    """
    Pick the first IPv4 and first IPv6 address seen across proxy headers,
    the framework-resolved address and the raw connection address.
    """
    lowered = {str(k).lower(): v for k, v in headers.items()}
    candidates: dict[str, None] = {}
    for header in PROXY_HEADERS:
        for ip in _split(lowered.get(header)):
            candidates.setdefault(ip, None)
    for address in (resolved_address, remote_address):
        if address:
            candidates.setdefault(address.strip(), None)

    ipv4 = ""
    ipv6 = ""
    for ip in candidates:
        if ip.startswith(IPV4_MAPPED_PREFIX):
            if not ipv4:
                ipv4 = ip[len(IPV4_MAPPED_PREFIX):]
            continue
        if ":" in ip:
            if not ipv6:
                ipv6 = ip
        elif "." in ip:
            if not ipv4:
                ipv4 = ip

    if ipv6 == IPV6_LOOPBACK and not ipv4:
        ipv4 = IPV4_LOOPBACK
    if ipv4 == IPV4_LOOPBACK and not ipv6:
        ipv6 = IPV6_LOOPBACK

    parts = []
    if ipv6:
        parts.append(f"IPv6: {ipv6}")
    if ipv4:
        parts.append(f"IPv4: {ipv4}")

    return IpInfo(ipv4=ipv4, ipv6=ipv6, display="\n ".join(parts) if parts else "unknown")


def get_client_ip_info(request: Request) -> IpInfo:
    headers = {name: request.headers.getlist(name) for name in PROXY_HEADERS}
    client = request.scope.get("client")
    remote = client[0] if client else None
    resolved = request.client.host if request.client else None
    return resolve_client_ip(headers, remote_address=remote, resolved_address=resolved)
