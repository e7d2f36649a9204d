"""Serialization of endpoint lists to the registry's JSON array representation"""

from __future__ import annotations

import json
from typing import Iterable, List, Optional
from urllib.parse import urlparse

from rpc_gateway.errors import RegistryDataError


def encode_endpoints(endpoints: Iterable[str]) -> str:
    return json.dumps(list(endpoints), separators=(",", ":"))


def decode_endpoints(raw: Optional[str | bytes], key: str = "") -> List[str]:
    """
    Parse a stored JSON array of endpoint URLs.

    A missing value decodes to an empty list. Anything that is not an array of
    strings raises RegistryDataError so callers never act on a half-understood list.
    """

    if raw is None:
        return []
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")
    try:
        payload = json.loads(raw)
    except ValueError as exc:
        raise RegistryDataError(f"Registry key {key!r} is not valid JSON: {exc}") from exc

    if not isinstance(payload, list) or not all(isinstance(item, str) for item in payload):
        raise RegistryDataError(f"Registry key {key!r} must hold a JSON array of strings")
    return payload


def _normalize_url(url: str) -> str:
    return url.strip().rstrip("/")


def normalize_endpoints(urls: Iterable[str]) -> List[str]:
    """
    Strip trailing slashes and drop blanks and duplicates while preserving the
    original ordering.
    """

    seen = set()
    unique: List[str] = []
    for url in urls:
        norm = _normalize_url(url)
        if not norm or norm in seen:
            continue
        seen.add(norm)
        unique.append(norm)
    return unique


def require_http_urls(urls: Iterable[str]) -> List[str]:
    """Raise ValueError on the first URL that is not an absolute http(s) URL."""

    urls = list(urls)
    for url in urls:
        parsed = urlparse(url.strip())
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"not an http(s) URL: {url!r}")
    return urls
