"""WebSocket URL helpers for client scripts."""

from __future__ import annotations

from urllib.parse import urlparse, parse_qsl, urlencode, urlunparse

WS_ENDPOINT_PATH = "/ws"


def ws_url(server: str, secure: bool, *, path: str = WS_ENDPOINT_PATH) -> str:
    """Build the bridge WebSocket URL from host:port, an http(s) URL or a ws(s) URL."""
    server = (server or "").strip()
    if server.startswith(("ws://", "wss://", "http://", "https://")):
        parsed = urlparse(server)
        if parsed.scheme in ("ws", "wss"):
            scheme = parsed.scheme
        else:
            scheme = "wss" if (parsed.scheme == "https" or secure) else "ws"
        base_path = parsed.path.rstrip("/")
        if not base_path.endswith(path):
            base_path = f"{base_path}{path}"
        return urlunparse((scheme, parsed.netloc, base_path, "", parsed.query, ""))
    scheme = "wss" if secure else "ws"
    return f"{scheme}://{server.rstrip('/')}{path}"


def append_auth_query(url: str, api_key: str) -> str:
    parsed = urlparse(url)
    query_params = dict(parse_qsl(parsed.query, keep_blank_values=True))
    query_params["api_key"] = api_key
    return urlunparse((parsed.scheme, parsed.netloc, parsed.path, parsed.params, urlencode(query_params), ""))


__all__ = ["WS_ENDPOINT_PATH", "append_auth_query", "ws_url"]
