"""Permissive CORS headers applied to every proxied response"""

from typing import Dict, List, Tuple

ALLOW_ORIGIN = "Access-Control-Allow-Origin"

PREFLIGHT_HEADERS: Dict[str, str] = {
    ALLOW_ORIGIN: "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def with_allow_origin(headers: List[Tuple[str, str]]) -> List[Tuple[str, str]]:
    """Return headers with any upstream allow-origin replaced by ``*``."""
    kept = [(name, value) for name, value in headers if name.lower() != ALLOW_ORIGIN.lower()]
    kept.append((ALLOW_ORIGIN, "*"))
    return kept
