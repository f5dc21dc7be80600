"""Network helpers for CLI commands."""

from __future__ import annotations

import errno
import json
import socket
from typing import Any
from urllib import error, request


def is_port_in_use(host: str, port: int) -> bool:
    """Return True if the port is already bound (e.g. by another process)."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        try:
            s.bind((host, port))
            return False
        except OSError as e:
            if e.errno == errno.EADDRINUSE:
                return True
            raise


def post_envelope(url: str, envelope: dict[str, Any], timeout: float = 5.0) -> dict[str, Any]:
    """POST one request envelope and return the decoded response envelope."""
    body = json.dumps(envelope).encode("utf-8")
    req = request.Request(
        url=url,
        data=body,
        method="POST",
        headers={"Content-Type": "application/json", "Accept": "application/json"},
    )
    try:
        with request.urlopen(req, timeout=timeout) as response:
            text = response.read().decode("utf-8", errors="replace")
    except error.HTTPError as exc:
        raise RuntimeError(f"{exc.code} {exc.reason}") from exc
    except error.URLError as exc:
        raise RuntimeError(f"Server unavailable: {exc.reason}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise RuntimeError(f"Server returned non-JSON body: {text[:200]!r}") from exc


def parse_param(raw: str) -> Any:
    """Interpret a CLI argument as JSON, falling back to a plain string."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw
