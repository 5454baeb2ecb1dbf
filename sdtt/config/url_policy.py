"""Target URL policy for URL inputs.

A URL input is rendered by a real browser, so it is checked before any
navigation: the scheme must be allowed, local hostnames are refused, and
hostnames that resolve to non-global addresses are refused.
"""

from __future__ import annotations

import ipaddress
import socket
from dataclasses import dataclass
from urllib.parse import urlparse

from sdtt.config.settings import URLPolicyConfig


@dataclass(frozen=True)
class URLValidationResult:
    allowed: bool
    reason: str


def looks_like_url(value: str) -> bool:
    """True when an input string should be treated as a URL rather than a path."""
    try:
        parsed = urlparse(value.strip())
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


def _is_blocked_ip(address: ipaddress.IPv4Address | ipaddress.IPv6Address) -> bool:
    # Anything not globally routable: private, loopback, link-local, reserved.
    return not address.is_global


def _parse_ip(hostname: str) -> ipaddress.IPv4Address | ipaddress.IPv6Address | None:
    try:
        return ipaddress.ip_address(hostname)
    except ValueError:
        return None


def validate_target_url(url: str, policy: URLPolicyConfig) -> URLValidationResult:
    """Check a URL input against the policy."""
    try:
        parsed = urlparse(url)
    except ValueError as exc:
        return URLValidationResult(allowed=False, reason=f"Malformed URL: {exc}")

    if parsed.scheme.lower() not in policy.allowed_schemes:
        return URLValidationResult(
            allowed=False,
            reason=f"Scheme '{parsed.scheme}' not allowed",
        )

    hostname = (parsed.hostname or "").lower().rstrip(".")
    if not hostname:
        return URLValidationResult(allowed=False, reason="No hostname in URL")

    if policy.block_local_hostnames and (
        hostname == "localhost" or hostname.endswith(".local")
    ):
        return URLValidationResult(allowed=False, reason=f"Hostname '{hostname}' is blocked")

    if not policy.block_private_ips:
        return URLValidationResult(allowed=True, reason="OK")

    literal = _parse_ip(hostname)
    if literal is not None:
        if _is_blocked_ip(literal):
            return URLValidationResult(
                allowed=False, reason=f"IP {literal} is not a public address"
            )
        return URLValidationResult(allowed=True, reason="OK")

    try:
        infos = socket.getaddrinfo(hostname, None)
    except socket.gaierror:
        return URLValidationResult(
            allowed=False, reason=f"Cannot resolve hostname '{hostname}'"
        )
    for info in infos:
        addr = ipaddress.ip_address(info[4][0])
        if _is_blocked_ip(addr):
            return URLValidationResult(
                allowed=False, reason=f"Hostname '{hostname}' resolves to {addr}"
            )

    return URLValidationResult(allowed=True, reason="OK")
