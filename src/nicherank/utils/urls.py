"""URL helpers."""

from __future__ import annotations

import re
from urllib.parse import quote

import httpx

# One or more dot-separated LDH labels, optionally with a trailing root dot
_HOST_RE = re.compile(
    r"^(?:[a-z0-9_](?:[a-z0-9_-]{0,61}[a-z0-9_])?\.)*[a-z0-9_](?:[a-z0-9_-]{0,61}[a-z0-9_])?\.?$"
)
_DEFAULT_PORTS = {"http": 80, "https": 443}


def parse_origin(url: str) -> tuple[str, str] | None:
    """Return ``(origin, hostname)`` for a well-formed http(s) URL, else ``None``.

    The origin is ``scheme://host[:port]`` with scheme and host lowercased; default ports are
    dropped. Internationalized hosts come back in their ASCII (punycode) form. Hosts with
    whitespace or other characters outside a DNS name are rejected.
    """

    try:
        parsed = httpx.URL(url.strip())
        host = parsed.raw_host.decode("ascii")
        port = parsed.port
    except (httpx.InvalidURL, UnicodeError, ValueError):
        return None

    scheme = parsed.scheme.lower()
    if scheme not in _DEFAULT_PORTS or not _HOST_RE.match(host):
        return None

    if port is None or port == _DEFAULT_PORTS[scheme]:
        return f"{scheme}://{host}", host
    return f"{scheme}://{host}:{port}", host


def bare_host(hostname: str) -> str:
    """Lowercase a hostname and strip one leading ``www.``."""

    host = hostname.lower()
    return host[4:] if host.startswith("www.") else host


def hostname_of(url: str) -> str:
    parsed = parse_origin(url)
    return parsed[1] if parsed else ""


def favicon_url(hostname: str) -> str:
    return f"https://www.google.com/s2/favicons?domain={quote(hostname)}&sz=64"
