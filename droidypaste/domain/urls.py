"""
Server address normalization.

Every address is forced onto https: a leading http:// is rewritten and a
bare host gets https:// prepended. Plain-http servers are therefore never
reachable through this client, even when configured explicitly.
"""

from __future__ import annotations
from urllib.parse import unquote, urlsplit

from .app_constants import DEFAULT_SCHEME, INSECURE_SCHEME, DEFAULT_FILE_NAME


def normalize_server_url(server_url: str) -> str:
    url = server_url
    if url.startswith(INSECURE_SCHEME):
        url = DEFAULT_SCHEME + url[len(INSECURE_SCHEME):]
    if not url.startswith(DEFAULT_SCHEME):
        url = DEFAULT_SCHEME + url
    return url


def join_path(server_url: str, segment: str) -> str:
    return f"{normalize_server_url(server_url).rstrip('/')}/{segment}"


def is_valid_server_url(server_url: str) -> bool:
    """Loose check used before saving settings: scheme optional, host required."""
    if not server_url or not server_url.strip():
        return False
    parts = urlsplit(normalize_server_url(server_url))
    return bool(parts.netloc) and " " not in parts.netloc


def filename_from_source(source: str) -> str:
    """Last path segment of a path or URI, or "file" when there is none."""
    path = unquote(urlsplit(source).path) if "://" in source else source
    name = path.replace("\\", "/").rsplit("/", 1)[-1]
    return name or DEFAULT_FILE_NAME
